"""Contact duration for DNPR3 contacts.

This module computes elapsed contact time from the raw start/end date and
time-of-day text of the contact table:

    dato_start + tidspunkt_start  ->  start timestamp
    dato_slut  + tidspunkt_slut   ->  end timestamp
    end - start                   ->  duration_<unit>

Unparsable dates or times are not an error; the affected rows get a missing
duration. So do contacts whose end precedes their start. Make sure the data covers the intended time period before
deriving durations.
"""

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from ..config import Config
from ..models import DurationUnit, MissingColumnsError, OutputFormat, coerce_enum
from ..rules.criteria import (
    DATE_END,
    DATE_START,
    TIME_END,
    TIME_FORMATS,
    TIME_START,
    TIMESTAMP_COLUMNS,
)
from .sources import ContactSource, load_source, write_output

logger = logging.getLogger(__name__)


def check_timestamp_columns(columns) -> None:
    """Raise MissingColumnsError unless all raw timestamp columns are present."""
    missing = [name for name in TIMESTAMP_COLUMNS if name not in columns]
    if missing:
        raise MissingColumnsError(TIMESTAMP_COLUMNS, missing)


def parse_dates(values: pd.Series, date_format: str | None = None) -> pd.Series:
    """Parse date text, unparsable values become NaT."""
    text = values.astype("string").str.strip()
    return pd.to_datetime(text, format=date_format or Config.DATE_FORMAT, errors="coerce")


def parse_times(values: pd.Series) -> pd.Series:
    """Parse time-of-day text into offsets from midnight.

    Formats in TIME_FORMATS are tried in order. Unparsable values become NaT.
    """
    text = values.astype("string").str.strip()
    parsed = pd.to_datetime(text, format=TIME_FORMATS[0], errors="coerce")
    for time_format in TIME_FORMATS[1:]:
        parsed = parsed.fillna(pd.to_datetime(text, format=time_format, errors="coerce"))
    return parsed - parsed.dt.normalize()


def to_whole_units(elapsed: pd.Series, unit: DurationUnit) -> pd.Series:
    """Convert a timedelta Series to whole units, truncating toward zero."""
    seconds = elapsed.dt.total_seconds()
    return np.trunc(seconds / unit.seconds).astype("Int64")


def add_duration(
    frame: pd.DataFrame,
    unit: DurationUnit | str = DurationUnit.HOURS,
    date_format: str | None = None,
) -> pd.DataFrame:
    """Return a copy of frame with a duration column and duplicates removed.

    Args:
        frame: Contact data with dato_start, tidspunkt_start, dato_slut and
            tidspunkt_slut as text.
        unit: Duration unit; the new column is duration_s, duration_m,
            duration_h or duration_d.
        date_format: strptime format of the date columns. Defaults to
            Config.DATE_FORMAT (month/day/year).

    Returns:
        The original columns plus the duration column, with exact duplicate
        rows dropped (first occurrence kept, index preserved).

    Raises:
        MissingColumnsError: If any raw timestamp column is absent.
    """
    unit = coerce_enum(DurationUnit, unit)
    check_timestamp_columns(frame.columns)

    start = parse_dates(frame[DATE_START], date_format) + parse_times(frame[TIME_START])
    end = parse_dates(frame[DATE_END], date_format) + parse_times(frame[TIME_END])

    elapsed = end - start
    unparsed = int(elapsed.isna().sum())
    if unparsed:
        logger.debug(f"{unparsed} of {len(frame)} contacts have unparsable start or end time")

    # Contacts ending before they start get no duration
    negative = elapsed < pd.Timedelta(0)
    if negative.any():
        logger.warning(
            f"{int(negative.sum())} of {len(frame)} contacts end before they start; "
            f"{unit.column} set to missing"
        )
        elapsed = elapsed.mask(negative)

    result = frame.copy()
    result[unit.column] = to_whole_units(elapsed, unit)

    before = len(result)
    result = result.drop_duplicates()
    if len(result) < before:
        logger.debug(f"Dropped {before - len(result)} duplicate contacts")

    return result


def derive_duration(
    source: ContactSource,
    unit: DurationUnit | str | None = None,
    output: OutputFormat | str = OutputFormat.FRAME,
) -> pd.DataFrame | Path:
    """Compute contact duration for a contact table.

    Args:
        source: A DataFrame, CsvSource or ParquetSource.
        unit: seconds, minutes, hours or days. Defaults to Config.DEFAULT_UNIT.
        output: frame to return the table, csv/parquet to write
            <stem>_out.<format> next to the source file.

    Returns:
        The table with the added duration column, or the written file path.

    Example:
        df = derive_duration(contacts, unit="minutes")
        derive_duration(CsvSource("kontakter.csv"), output="parquet")
    """
    unit = coerce_enum(DurationUnit, unit or Config.DEFAULT_UNIT)
    output = coerce_enum(OutputFormat, output)

    frame = load_source(source)
    result = add_duration(frame, unit)
    logger.info(f"Derived {unit.column} for {len(result)} contacts")

    return write_output(result, source, output)
