"""Domain models for DNPR patient type classification.

Enums and exceptions shared by the duration deriver, the rules engine and
the classifier. All models follow the dataclass/Enum patterns used across
the package.
"""

from enum import Enum


class PatientType(str, Enum):
    """Three-way patient type label assigned to a hospital contact."""
    INPATIENT = "Inpatient"
    ACUTE_OUTPATIENT = "Acute Outpatient"
    ELECTIVE_OUTPATIENT = "Elective Outpatient"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ClassificationMethod(str, Enum):
    """Patient type algorithm used for classification."""
    CLUSTER = "cluster"          # Cluster-derived thresholds (default)
    HYBRID = "hybrid"            # Hybrid thresholds
    HYBRID_DEP = "hybrid_dep"    # Hybrid, department-aggregated p_overnight


class DurationUnit(str, Enum):
    """Unit for derived contact duration."""
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @property
    def column(self) -> str:
        """Name of the duration column produced for this unit."""
        return f"duration_{self.value[0]}"

    @property
    def seconds(self) -> int:
        return _UNIT_SECONDS[self]


_UNIT_SECONDS = {
    DurationUnit.SECONDS: 1,
    DurationUnit.MINUTES: 60,
    DurationUnit.HOURS: 3600,
    DurationUnit.DAYS: 86400,
}


class OutputFormat(str, Enum):
    """Where the augmented dataset goes."""
    FRAME = "frame"      # Return a pandas DataFrame
    CSV = "csv"          # Write <stem>_out.csv next to the input file
    PARQUET = "parquet"  # Write <stem>_out.parquet next to the input file


def coerce_enum(enum_cls, value):
    """Convert a string (or enum member) to a member of enum_cls.

    Raises:
        ValueError: If value is not one of the enum's values.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        raise ValueError(
            f"Invalid {enum_cls.__name__} '{value}'. Possible values are: {valid}"
        ) from None


# ============================================================================
# Exceptions
# ============================================================================

class DNPRError(Exception):
    """Base class for errors raised by this package."""


class MissingColumnsError(DNPRError):
    """Input data lacks columns required by an operation.

    Attributes:
        required: The column names the operation needs.
        missing: The subset of required columns absent from the input.
    """

    def __init__(self, required: list[str], missing: list[str], alternative: str | None = None):
        self.required = list(required)
        self.missing = list(missing)
        self.alternative = alternative

        message = (
            "Input data must contain all the following variables: "
            + ", ".join(self.required)
        )
        if alternative:
            message += f" or the variable {alternative}"
        message += f" (missing: {', '.join(self.missing)})"
        super().__init__(message)
