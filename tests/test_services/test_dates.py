"""Tests for release date normalization."""

import time
from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from artist_hub.services.dates import normalize_release_date, parse_release_date
from artist_hub.services.errors import ReleaseValidationError


class TestNormalizeReleaseDate:
    """Tests for normalize_release_date."""

    @pytest.mark.parametrize(
        "value",
        [
            "2024-03-15",
            " 2024-03-15 ",
            "2024-03-15T00:00:00",
            "2024-03-15T00:00:00Z",
            "2024-03-15T00:00:00.000+00:00",
            date(2024, 3, 15),
            datetime(2024, 3, 15, 23, 30),
        ],
    )
    def test_accepted_forms(self, value) -> None:
        """Test the accepted date-like inputs."""
        assert normalize_release_date(value) == "2024-03-15"

    def test_aware_datetime_converted_to_utc(self) -> None:
        """Test an aware datetime is taken in UTC before dropping the time."""
        eastern = timezone(timedelta(hours=-5))
        assert normalize_release_date(datetime(2024, 3, 14, 20, 0, tzinfo=eastern)) == "2024-03-15"
        assert normalize_release_date("2024-03-15T01:00:00+02:00") == "2024-03-14"

    @pytest.mark.parametrize("value", ["", "   ", "not-a-date", "2024-02-30", "15/03/2024"])
    def test_invalid(self, value) -> None:
        """Test unparseable dates are rejected instead of replaced."""
        with pytest.raises(ReleaseValidationError):
            normalize_release_date(value)

    def test_wrong_type(self) -> None:
        """Test non date-like values are rejected."""
        with pytest.raises(ReleaseValidationError):
            normalize_release_date(20240315)  # type: ignore[arg-type]


class TestParseReleaseDate:
    """Tests for parse_release_date."""

    def test_utc_midnight(self) -> None:
        """Test stored dates read back as UTC midnight."""
        parsed = parse_release_date("2024-03-15")
        assert parsed == datetime(2024, 3, 15, tzinfo=UTC)
        assert parsed.utcoffset() == timedelta(0)

    @pytest.mark.parametrize("tz", ["America/Los_Angeles", "Pacific/Auckland"])
    def test_independent_of_local_timezone(self, monkeypatch, tz) -> None:
        """Test the calendar day never shifts with the process timezone."""
        if not hasattr(time, "tzset"):
            pytest.skip("time.tzset is not available on this platform")
        monkeypatch.setenv("TZ", tz)
        time.tzset()
        try:
            stored = normalize_release_date("2024-03-15")
            assert stored == "2024-03-15"
            assert parse_release_date(stored).date() == date(2024, 3, 15)
        finally:
            monkeypatch.undo()
            time.tzset()
