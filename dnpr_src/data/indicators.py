"""Binary indicator variables used by the patient type algorithms.

Each derivation returns a 0/1 integer Series aligned with the input frame.
Missing inputs give 0.
"""

import pandas as pd

from ..rules.criteria import (
    DATE_END,
    DATE_START,
    DURATION_H,
    ELECTIVE_PRIORITY_PREFIX,
    OVER24H_HOURS,
    PRIORITY,
)


def _as_indicator(condition: pd.Series) -> pd.Series:
    return condition.fillna(False).astype(bool).astype(int)


def derive_elective(frame: pd.DataFrame) -> pd.Series:
    """1 when prioritet starts with the elective (ATA3) prefix."""
    priority = frame[PRIORITY].astype("string")
    return _as_indicator(priority.str.startswith(ELECTIVE_PRIORITY_PREFIX))


def derive_overnight(frame: pd.DataFrame) -> pd.Series:
    """1 when the contact ends on a different date than it started."""
    start = frame[DATE_START].astype("string")
    end = frame[DATE_END].astype("string")
    return _as_indicator(start != end)


def derive_over24h(frame: pd.DataFrame) -> pd.Series:
    """1 when duration_h is 24 hours or more."""
    duration = pd.to_numeric(frame[DURATION_H], errors="coerce").astype("Float64")
    return _as_indicator(duration >= OVER24H_HOURS)
