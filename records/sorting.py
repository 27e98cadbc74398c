"""
Sort engine — stable, non-mutating ordering of records.

The comparison is picked by field kind rather than by the runtime type of
the values: the three date fields compare as parsed instants, everything
else as case-insensitive text.  Descending order flips the comparison
(``sorted(..., reverse=True)``), which keeps equal keys in their input order
in both directions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable

from records.models import ProgressStatus, SortCriteria, TeacherRecord, resolve_field
from utils.dates import EARLIEST, parse_instant
from utils.strings import fold

DATE_FIELDS = frozenset({"retirement_date", "created_at", "updated_at"})

DIRECTIONS = ("asc", "desc")


def _instant_key(attr: str) -> Callable[[TeacherRecord], datetime]:
    def key(record: TeacherRecord) -> datetime:
        return parse_instant(getattr(record, attr)) or EARLIEST
    return key


def _text_key(attr: str) -> Callable[[TeacherRecord], str]:
    def key(record: TeacherRecord) -> str:
        value = getattr(record, attr)
        if isinstance(value, ProgressStatus):
            value = value.value
        return fold(value)
    return key


def sort_key(field: str) -> Callable[[TeacherRecord], object]:
    """Key function for *field* (camelCase or snake_case name).

    Raises:
        ValueError: if *field* is not a record field
    """
    try:
        attr = resolve_field(field)
    except KeyError as e:
        raise ValueError(str(e)) from None
    if attr in DATE_FIELDS:
        return _instant_key(attr)
    return _text_key(attr)


def sort_teachers(records: Iterable[TeacherRecord], field: str,
                  direction: str = "asc") -> list[TeacherRecord]:
    """Return a new list of *records* ordered by *field*.

    Unparseable dates sort as the earliest possible instant.

    Raises:
        ValueError: for an unknown field or direction
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Invalid sort direction: {direction!r}")
    return sorted(records, key=sort_key(field), reverse=(direction == "desc"))


def toggle_sort(current: SortCriteria, field: str) -> SortCriteria:
    """Column-header click: same column ascending flips to descending,
    anything else sorts ascending by *field*."""
    sort_key(field)  # validate early
    if current.key == field and current.direction == "asc":
        return SortCriteria(key=field, direction="desc")
    return SortCriteria(key=field, direction="asc")
