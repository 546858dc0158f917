"""Release date normalization.

Release dates are calendar dates with no time component. They are persisted
as ``YYYY-MM-DD`` strings and always read back as UTC midnight, so a date
never shifts by a day because of the reader's timezone.
"""

from datetime import UTC, date, datetime, time

from artist_hub.services.errors import ReleaseValidationError


def normalize_release_date(value: date | datetime | str) -> str:
    """Normalize a date-like value to the canonical ``YYYY-MM-DD`` form.

    Aware datetimes are converted to UTC before the date is taken; naive
    datetimes are taken at face value.

    Raises:
        ReleaseValidationError: If the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date().isoformat()

    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ReleaseValidationError("A release date is required.")
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            pass
        try:
            return normalize_release_date(datetime.fromisoformat(text))
        except ValueError:
            raise ReleaseValidationError(f"Invalid release date: {value!r}") from None

    raise ReleaseValidationError(f"Invalid release date: {value!r}")


def parse_release_date(value: str) -> datetime:
    """Parse a stored ``YYYY-MM-DD`` string as UTC midnight."""
    return datetime.combine(date.fromisoformat(value), time.min, tzinfo=UTC)
