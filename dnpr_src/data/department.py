"""Department-level overnight share for the hybrid department algorithm.

The hybrid_dep patient type algorithm classifies a contact by the share of
overnight contacts (p_overnight) in its organizational unit rather than by
the contact's own duration. This module aggregates that share.
"""

import logging

import pandas as pd

from ..models import MissingColumnsError
from ..rules.criteria import DATE_END, DATE_START, OVERNIGHT, P_OVERNIGHT
from .indicators import derive_overnight

logger = logging.getLogger(__name__)


def _overnight(frame: pd.DataFrame) -> pd.Series:
    if OVERNIGHT in frame.columns:
        return frame[OVERNIGHT]
    missing = [name for name in (DATE_START, DATE_END) if name not in frame.columns]
    if missing:
        raise MissingColumnsError([DATE_START, DATE_END], missing, alternative=OVERNIGHT)
    return derive_overnight(frame)


def department_overnight_share(frame: pd.DataFrame, department: str) -> pd.DataFrame:
    """Share of overnight contacts per department.

    Args:
        frame: Contact data with the department column and either overnight
            or dato_start/dato_slut.
        department: Name of the organizational unit column.

    Returns:
        DataFrame with columns [department, p_overnight, contacts].
        Contacts with no department are left out.
    """
    if department not in frame.columns:
        raise MissingColumnsError([department], [department])

    work = pd.DataFrame({
        department: frame[department],
        OVERNIGHT: pd.to_numeric(_overnight(frame), errors="coerce"),
    })
    share = (
        work.groupby(department)[OVERNIGHT]
        .agg(["mean", "size"])
        .rename(columns={"mean": P_OVERNIGHT, "size": "contacts"})
        .reset_index()
    )
    logger.debug(f"Computed {P_OVERNIGHT} for {len(share)} departments")
    return share


def add_department_overnight_share(frame: pd.DataFrame, department: str) -> pd.DataFrame:
    """Return a copy of frame with each contact's department p_overnight.

    An existing p_overnight column is left unchanged.
    """
    if P_OVERNIGHT in frame.columns:
        return frame.copy()

    share = department_overnight_share(frame, department)
    lookup = share.set_index(department)[P_OVERNIGHT]

    result = frame.copy()
    result[P_OVERNIGHT] = result[department].map(lookup)
    return result
