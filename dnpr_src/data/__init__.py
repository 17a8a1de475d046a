"""Contact data sources and derived variables."""

from .sources import (
    FileSource,
    CsvSource,
    ParquetSource,
    load_source,
    write_output,
    source_from_path,
)
from .duration import add_duration, derive_duration
from .indicators import derive_elective, derive_overnight, derive_over24h
from .department import add_department_overnight_share, department_overnight_share

__all__ = [
    "FileSource",
    "CsvSource",
    "ParquetSource",
    "load_source",
    "write_output",
    "source_from_path",
    "add_duration",
    "derive_duration",
    "derive_elective",
    "derive_overnight",
    "derive_over24h",
    "add_department_overnight_share",
    "department_overnight_share",
]
