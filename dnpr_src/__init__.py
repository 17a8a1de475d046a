"""DNPR patient type classification.

Derives contact duration and patient type (Inpatient, Acute Outpatient,
Elective Outpatient) for contacts from the Danish National Patient Registry
(DNPR3).
"""

from .models import (
    PatientType,
    ClassificationMethod,
    DurationUnit,
    OutputFormat,
    DNPRError,
    MissingColumnsError,
)
from .data import CsvSource, ParquetSource, derive_duration, department_overnight_share
from .classifier import ClassificationSummary, PatientTypeClassifier, classify_patient_type

__all__ = [
    "PatientType",
    "ClassificationMethod",
    "DurationUnit",
    "OutputFormat",
    "DNPRError",
    "MissingColumnsError",
    "CsvSource",
    "ParquetSource",
    "derive_duration",
    "department_overnight_share",
    "ClassificationSummary",
    "PatientTypeClassifier",
    "classify_patient_type",
]
