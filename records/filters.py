"""
Filter engine — derive the visible subset of records.

``filter_teachers`` is pure and keeps the input order.  A record matches
when the text, date-range and status checks all pass:

- text: the lower-cased search string is a substring of the name, NIP,
  position, school, status value or Indonesian status label;
- dates: ``retirementDate`` falls on or after ``start_date`` and on or
  before ``end_date`` (day granularity, both ends inclusive);
- status: ``"all"`` or an exact status match.

Text search looks at both the stored English status value and the
Indonesian label shown in reports, so "approved" and "disetujui" both
find an approved record.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from records.models import FilterCriteria, ProgressStatus, TeacherRecord
from utils.config import KnownValues
from utils.dates import parse_iso_date
from utils.strings import fold


def make_criteria(
    search_text: str = "",
    start_date: str | date | None = None,
    end_date: str | date | None = None,
    progress_status: str = KnownValues.ALL_STATUSES,
) -> FilterCriteria:
    """Build FilterCriteria from raw UI/CLI values.

    Empty strings mean "no bound".  Status may be a canonical value, an
    Indonesian label or ``"all"``.

    Raises:
        ValueError: for an unparseable date or unknown status
    """
    return FilterCriteria(
        search_text=search_text or "",
        start_date=_parse_bound(start_date, "start_date"),
        end_date=_parse_bound(end_date, "end_date"),
        progress_status=_parse_status(progress_status),
    )


def _parse_bound(value: str | date | None, name: str) -> date | None:
    if value is None or value == "":
        return None
    day = parse_iso_date(value)
    if day is None:
        raise ValueError(f"Invalid {name}: {value!r}")
    return day


def _parse_status(value: str | ProgressStatus | None) -> ProgressStatus | str:
    if value is None or value == "" or value == KnownValues.ALL_STATUSES:
        return KnownValues.ALL_STATUSES
    return ProgressStatus.coerce(value)


def matches_text(record: TeacherRecord, search_text: str) -> bool:
    needle = search_text.lower()
    if not needle:
        return True
    return (needle in fold(record.name)
            or needle in record.nip
            or needle in fold(record.position)
            or needle in fold(record.school)
            or needle in fold(record.progress_status.value)
            or needle in fold(record.progress_status.label))


def matches_dates(record: TeacherRecord, start: date | None, end: date | None) -> bool:
    if start is None and end is None:
        return True
    retirement = parse_iso_date(record.retirement_date)
    if retirement is None:
        return False
    if start is not None and retirement < start:
        return False
    if end is not None and retirement > end:
        return False
    return True


def matches_status(record: TeacherRecord, status: ProgressStatus | str) -> bool:
    if status == KnownValues.ALL_STATUSES:
        return True
    return record.progress_status == status


def filter_teachers(records: Iterable[TeacherRecord],
                    criteria: FilterCriteria) -> list[TeacherRecord]:
    """Return the records matching every active criterion, in input order."""
    return [
        r for r in records
        if matches_text(r, criteria.search_text)
        and matches_dates(r, criteria.start_date, criteria.end_date)
        and matches_status(r, criteria.progress_status)
    ]


def describe_filters(criteria: FilterCriteria) -> str:
    """One-line summary of the active criteria, ``"none"`` when default.

    Examples:
        "search='budi'; from=2030-01-01; status=Approved"
    """
    parts: list[str] = []
    if criteria.search_text:
        parts.append(f"search={criteria.search_text!r}")
    if criteria.start_date is not None:
        parts.append(f"from={criteria.start_date.isoformat()}")
    if criteria.end_date is not None:
        parts.append(f"to={criteria.end_date.isoformat()}")
    if criteria.progress_status != KnownValues.ALL_STATUSES:
        parts.append(f"status={ProgressStatus.coerce(criteria.progress_status).value}")
    return "; ".join(parts) if parts else "none"
