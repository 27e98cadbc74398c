"""Date parsing helpers shared by the filter, sort and statistics code.

Record dates are stored as ISO-8601 strings.  ``retirementDate`` is a bare
calendar date (``2031-04-01``); ``createdAt``/``updatedAt`` are UTC
timestamps (``2026-10-19T08:15:02.120Z``).  Nothing here raises on bad
input: unparseable values come back as ``None`` and the caller decides.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

# Sort key used for dates that cannot be parsed
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_iso_date(value: str | date | None) -> date | None:
    """Parse a calendar date, accepting a full timestamp as well.

    Examples:
        parse_iso_date("2031-04-01") -> date(2031, 4, 1)
        parse_iso_date("2031-04-01T10:00:00Z") -> date(2031, 4, 1)
        parse_iso_date("01/04/2031") -> None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_instant(value: str | None) -> datetime | None:
    """Parse a date or timestamp into a timezone-aware instant.

    Bare dates map to midnight UTC and naive timestamps are taken as UTC,
    so values of one field always compare against each other.
    """
    if not value:
        return None
    try:
        moment = datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def is_valid_date(value: str | None) -> bool:
    """Check whether *value* parses as a calendar date."""
    return parse_iso_date(value) is not None
