"""Configuration for DNPR patient type classification."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Find and load .env file
_env_candidates = [
    Path(__file__).parent.parent / ".env",
    Path(__file__).parent.parent / ".env.template",
]

for env_path in _env_candidates:
    if env_path.exists():
        load_dotenv(env_path)
        break


class Config:
    """DNPR patient type configuration."""

    # --- Defaults ---
    # Patient type algorithm used when the caller does not pick one
    DEFAULT_METHOD: str = os.getenv("DNPR_DEFAULT_METHOD", "cluster")  # cluster, hybrid, hybrid_dep
    # Unit for derived duration when the caller does not pick one
    DEFAULT_UNIT: str = os.getenv("DNPR_DEFAULT_UNIT", "hours")  # seconds, minutes, hours, days

    # --- Parsing ---
    # Textual format of dato_start/dato_slut in DNPR3 extracts
    DATE_FORMAT: str = os.getenv("DNPR_DATE_FORMAT", "%m/%d/%Y")

    # --- Reporting ---
    # Log a warning when rows match no patient type rule
    WARN_UNMATCHED: bool = os.getenv("DNPR_WARN_UNMATCHED", "true").lower() == "true"

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("DNPR_LOG_LEVEL", "INFO")
