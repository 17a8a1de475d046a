"""Typed input sources and output writing for contact data.

Callers pass either an in-memory DataFrame or an explicit file source
(CsvSource, ParquetSource). The file kind is part of the type, so the core
transforms never inspect file names to decide how to read them.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import pandas as pd

from ..models import OutputFormat
from ..rules.criteria import TEXT_COLUMNS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileSource(ABC):
    """A contact table stored in a file."""
    path: Path

    def __post_init__(self):
        object.__setattr__(self, "path", Path(self.path))

    @abstractmethod
    def load(self) -> pd.DataFrame:
        """Read the file into a DataFrame."""

    def output_path(self, output: OutputFormat) -> Path:
        """Sibling file for the augmented table: <stem>_out.<format>."""
        return self.path.with_name(f"{self.path.stem}_out.{output.value}")


@dataclass(frozen=True)
class CsvSource(FileSource):
    """CSV export of the DNPR3 contact table."""

    def load(self) -> pd.DataFrame:
        header = pd.read_csv(self.path, nrows=0).columns
        dtypes = {name: "string" for name in TEXT_COLUMNS if name in header}
        frame = pd.read_csv(self.path, dtype=dtypes)
        logger.debug(f"Read {len(frame)} rows from {self.path}")
        return frame


@dataclass(frozen=True)
class ParquetSource(FileSource):
    """Parquet export of the DNPR3 contact table."""

    def load(self) -> pd.DataFrame:
        frame = pd.read_parquet(self.path)
        logger.debug(f"Read {len(frame)} rows from {self.path}")
        return frame


ContactSource = Union[pd.DataFrame, FileSource]


def load_source(source: ContactSource) -> pd.DataFrame:
    """Materialize a contact source as a DataFrame.

    DataFrames are returned as-is; callers copy before modifying.

    Raises:
        TypeError: If source is neither a DataFrame nor a FileSource.
    """
    if isinstance(source, pd.DataFrame):
        return source
    if isinstance(source, FileSource):
        return source.load()
    raise TypeError(
        f"Unsupported contact source {type(source).__name__}; "
        "pass a pandas DataFrame, CsvSource or ParquetSource"
    )


def write_output(
    frame: pd.DataFrame,
    source: ContactSource,
    output: OutputFormat,
) -> pd.DataFrame | Path:
    """Return frame, or write it next to the source file.

    Args:
        frame: The augmented contact table.
        source: The source the table was read from.
        output: FRAME to return the DataFrame, CSV/PARQUET to write a file.

    Returns:
        The DataFrame for FRAME output, otherwise the written file's path.

    Raises:
        ValueError: If file output is requested for an in-memory source.
    """
    if output is OutputFormat.FRAME:
        return frame

    if not isinstance(source, FileSource):
        raise ValueError(
            f"Output format '{output.value}' needs a file source to name the "
            "output file; use output='frame' for in-memory data"
        )

    path = source.output_path(output)
    if output is OutputFormat.CSV:
        frame.to_csv(path, index=False)
    else:
        frame.to_parquet(path, index=False)

    logger.info(f"Wrote {len(frame)} rows to {path}")
    return path


_SUFFIX_SOURCES = {
    ".csv": CsvSource,
    ".parquet": ParquetSource,
}


def source_from_path(path: str | Path) -> FileSource:
    """Build the FileSource for a path from its extension.

    Only the command-line runner needs this; library callers construct
    CsvSource/ParquetSource directly.

    Raises:
        ValueError: If the extension is not .csv or .parquet.
    """
    path = Path(path)
    source_cls = _SUFFIX_SOURCES.get(path.suffix.lower())
    if source_cls is None:
        raise ValueError(f"Unsupported file format: {path.suffix or path.name}")
    return source_cls(path)
