"""Tests for contact duration derivation."""

import logging

import pandas as pd
import pytest

from dnpr_src.data.duration import (
    add_duration,
    derive_duration,
    parse_dates,
    parse_times,
)
from dnpr_src.models import DurationUnit, MissingColumnsError


def make_contacts(*rows) -> pd.DataFrame:
    """Build a contact table from (dato_start, tidspunkt_start, dato_slut, tidspunkt_slut) rows."""
    return pd.DataFrame(
        [
            {
                "DW_EK_KONTAKT": f"K{i}",
                "dato_start": row[0],
                "tidspunkt_start": row[1],
                "dato_slut": row[2],
                "tidspunkt_slut": row[3],
            }
            for i, row in enumerate(rows)
        ]
    )


@pytest.fixture
def two_and_a_half_hours():
    """2024-01-01 10:00:00 to 2024-01-01 12:30:00."""
    return make_contacts(("01/01/2024", "10:00:00", "01/01/2024", "12:30:00"))


class TestParsing:
    """Test non-strict date and time parsing."""

    def test_parse_dates_month_day_year(self):
        parsed = parse_dates(pd.Series(["01/31/2024", "12/01/2023"]))

        assert parsed.iloc[0] == pd.Timestamp(2024, 1, 31)
        assert parsed.iloc[1] == pd.Timestamp(2023, 12, 1)

    def test_parse_dates_invalid_is_missing(self):
        parsed = parse_dates(pd.Series(["31/01/2024", "not a date", None]))

        assert parsed.isna().all()

    def test_parse_times_with_and_without_seconds(self):
        parsed = parse_times(pd.Series(["10:15:30", "07:45", "23:59:59"]))

        assert parsed.iloc[0] == pd.Timedelta(hours=10, minutes=15, seconds=30)
        assert parsed.iloc[1] == pd.Timedelta(hours=7, minutes=45)
        assert parsed.iloc[2] == pd.Timedelta(hours=23, minutes=59, seconds=59)

    def test_parse_times_fractional_seconds(self):
        parsed = parse_times(pd.Series(["10:00:00.500", "08:15:30.25"]))

        assert parsed.iloc[0] == pd.Timedelta(hours=10, milliseconds=500)
        assert parsed.iloc[1] == pd.Timedelta(hours=8, minutes=15, seconds=30, milliseconds=250)

    def test_parse_times_invalid_is_missing(self):
        parsed = parse_times(pd.Series(["25:00:00", "noon", None]))

        assert parsed.isna().all()


class TestAddDuration:
    """Test duration computation."""

    @pytest.mark.parametrize("unit,column,expected", [
        (DurationUnit.SECONDS, "duration_s", 9000),
        (DurationUnit.MINUTES, "duration_m", 150),
        (DurationUnit.HOURS, "duration_h", 2),
        (DurationUnit.DAYS, "duration_d", 0),
    ])
    def test_units(self, two_and_a_half_hours, unit, column, expected):
        """Test whole units, truncated (2.5 hours -> 2)."""
        result = add_duration(two_and_a_half_hours, unit)

        assert result[column].iloc[0] == expected

    def test_unit_as_string(self, two_and_a_half_hours):
        result = add_duration(two_and_a_half_hours, "minutes")

        assert result["duration_m"].iloc[0] == 150

    def test_overnight_contact(self):
        contacts = make_contacts(("01/01/2024", "22:00:00", "01/02/2024", "06:30:00"))

        result = add_duration(contacts, DurationUnit.MINUTES)

        assert result["duration_m"].iloc[0] == 510

    def test_multi_day_contact(self):
        contacts = make_contacts(("02/28/2024", "08:00", "03/01/2024", "20:00"))

        result = add_duration(contacts, DurationUnit.DAYS)

        # 2024 is a leap year: 2 days 12 hours
        assert result["duration_d"].iloc[0] == 2

    def test_end_before_start_gives_missing_duration(self, caplog):
        """Test a contact ending before it starts gets no duration."""
        contacts = make_contacts(
            ("01/01/2024", "12:00:00", "01/01/2024", "10:00:00"),
            ("01/01/2024", "10:00:00", "01/01/2024", "12:00:00"),
        )

        with caplog.at_level(logging.WARNING, logger="dnpr_src.data.duration"):
            result = add_duration(contacts, DurationUnit.HOURS)

        assert pd.isna(result["duration_h"].iloc[0])
        assert result["duration_h"].iloc[1] == 2
        assert "1 of 2 contacts end before they start" in caplog.text

    def test_zero_duration_kept(self):
        contacts = make_contacts(("01/01/2024", "10:00:00", "01/01/2024", "10:00:00"))

        result = add_duration(contacts, DurationUnit.SECONDS)

        assert result["duration_s"].iloc[0] == 0

    def test_fractional_seconds(self):
        contacts = make_contacts(("01/01/2024", "10:00:00.500", "01/01/2024", "12:30:00"))

        result = add_duration(contacts, DurationUnit.MINUTES)

        assert result["duration_m"].iloc[0] == 149

    def test_unparsable_gives_missing_duration(self):
        contacts = make_contacts(
            ("01/01/2024", "10:00:00", "01/01/2024", "12:00:00"),
            ("2024-01-01", "10:00:00", "01/01/2024", "12:00:00"),
            ("01/01/2024", "xx:yy", "01/01/2024", "12:00:00"),
        )

        result = add_duration(contacts, DurationUnit.HOURS)

        assert result["duration_h"].iloc[0] == 2
        assert pd.isna(result["duration_h"].iloc[1])
        assert pd.isna(result["duration_h"].iloc[2])

    def test_nullable_integer_dtype(self, two_and_a_half_hours):
        result = add_duration(two_and_a_half_hours, DurationUnit.HOURS)

        assert str(result["duration_h"].dtype) == "Int64"

    def test_only_duration_column_added(self, two_and_a_half_hours):
        result = add_duration(two_and_a_half_hours, DurationUnit.HOURS)

        assert list(result.columns) == list(two_and_a_half_hours.columns) + ["duration_h"]

    def test_input_not_modified(self, two_and_a_half_hours):
        columns = list(two_and_a_half_hours.columns)

        add_duration(two_and_a_half_hours, DurationUnit.HOURS)

        assert list(two_and_a_half_hours.columns) == columns

    def test_duplicates_dropped(self):
        contacts = make_contacts(
            ("01/01/2024", "10:00:00", "01/01/2024", "12:00:00"),
            ("01/02/2024", "10:00:00", "01/02/2024", "11:00:00"),
        )
        contacts = pd.concat([contacts, contacts.iloc[[0]]], ignore_index=True)

        result = add_duration(contacts, DurationUnit.HOURS)

        assert len(result) == 2
        assert list(result.index) == [0, 1]

    def test_missing_columns(self, two_and_a_half_hours):
        contacts = two_and_a_half_hours.drop(columns=["tidspunkt_slut"])

        with pytest.raises(MissingColumnsError) as excinfo:
            add_duration(contacts, DurationUnit.HOURS)

        assert excinfo.value.missing == ["tidspunkt_slut"]
        assert "tidspunkt_start, tidspunkt_slut, dato_start, dato_slut" in str(excinfo.value)

    def test_custom_date_format(self):
        contacts = make_contacts(("2024-01-01", "10:00", "2024-01-01", "13:00"))

        result = add_duration(contacts, DurationUnit.HOURS, date_format="%Y-%m-%d")

        assert result["duration_h"].iloc[0] == 3


class TestDeriveDuration:
    """Test the source-level entry point."""

    def test_default_unit_is_hours(self, two_and_a_half_hours):
        result = derive_duration(two_and_a_half_hours)

        assert "duration_h" in result.columns

    def test_invalid_unit(self, two_and_a_half_hours):
        with pytest.raises(ValueError):
            derive_duration(two_and_a_half_hours, unit="weeks")

    def test_file_output_needs_file_source(self, two_and_a_half_hours):
        with pytest.raises(ValueError):
            derive_duration(two_and_a_half_hours, output="csv")
