"""Tests for DNPR data models."""

import pytest

from dnpr_src.models import (
    ClassificationMethod,
    DNPRError,
    DurationUnit,
    MissingColumnsError,
    OutputFormat,
    PatientType,
    coerce_enum,
)


class TestEnums:
    """Test enum definitions."""

    def test_patient_type_values(self):
        """Test patient type labels."""
        assert PatientType.INPATIENT.value == "Inpatient"
        assert PatientType.ACUTE_OUTPATIENT.value == "Acute Outpatient"
        assert PatientType.ELECTIVE_OUTPATIENT.value == "Elective Outpatient"
        assert PatientType.values() == [
            "Inpatient", "Acute Outpatient", "Elective Outpatient",
        ]

    def test_classification_method_values(self):
        """Test classification method values."""
        assert ClassificationMethod.CLUSTER.value == "cluster"
        assert ClassificationMethod.HYBRID.value == "hybrid"
        assert ClassificationMethod.HYBRID_DEP.value == "hybrid_dep"

    def test_duration_unit_columns(self):
        """Test duration column name per unit."""
        assert DurationUnit.SECONDS.column == "duration_s"
        assert DurationUnit.MINUTES.column == "duration_m"
        assert DurationUnit.HOURS.column == "duration_h"
        assert DurationUnit.DAYS.column == "duration_d"

    def test_duration_unit_seconds(self):
        """Test seconds per unit."""
        assert DurationUnit.SECONDS.seconds == 1
        assert DurationUnit.MINUTES.seconds == 60
        assert DurationUnit.HOURS.seconds == 3600
        assert DurationUnit.DAYS.seconds == 86400


class TestCoerceEnum:
    """Tests for string-to-enum conversion."""

    def test_accepts_value_string(self):
        assert coerce_enum(ClassificationMethod, "hybrid") is ClassificationMethod.HYBRID
        assert coerce_enum(OutputFormat, "parquet") is OutputFormat.PARQUET

    def test_accepts_member(self):
        assert coerce_enum(DurationUnit, DurationUnit.DAYS) is DurationUnit.DAYS

    def test_rejects_unknown_value(self):
        """Test unknown value lists the valid ones."""
        with pytest.raises(ValueError) as excinfo:
            coerce_enum(DurationUnit, "weeks")

        message = str(excinfo.value)
        assert "weeks" in message
        assert "seconds, minutes, hours, days" in message


class TestMissingColumnsError:
    """Tests for MissingColumnsError."""

    def test_message_enumerates_columns(self):
        error = MissingColumnsError(
            ["tidspunkt_start", "tidspunkt_slut", "dato_start", "dato_slut"],
            ["dato_slut"],
        )

        assert "tidspunkt_start, tidspunkt_slut, dato_start, dato_slut" in str(error)
        assert "missing: dato_slut" in str(error)
        assert error.missing == ["dato_slut"]

    def test_message_names_alternative(self):
        error = MissingColumnsError(["prioritet"], ["prioritet"], alternative="elective")

        assert "prioritet or the variable elective" in str(error)

    def test_is_package_error(self):
        assert issubclass(MissingColumnsError, DNPRError)
