"""Summary counts over the full record set."""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Iterable

from records.models import Statistics, TeacherRecord
from utils.dates import parse_iso_date


def count_by_status(records: Iterable[TeacherRecord]) -> dict[str, int]:
    """Occurrences per status value, in the order statuses first appear.

    Statuses with no records are absent rather than zero.
    """
    counts: Counter[str] = Counter()
    for record in records:
        counts[record.progress_status.value] += 1
    return dict(counts)


def count_retiring_in_year(records: Iterable[TeacherRecord], year: int) -> int:
    total = 0
    for record in records:
        retirement = parse_iso_date(record.retirement_date)
        if retirement is not None and retirement.year == year:
            total += 1
    return total


def compute_statistics(records: Iterable[TeacherRecord], filtered_count: int = 0,
                       today: date | None = None) -> Statistics:
    """Totals for the dashboard cards.

    Args:
        records: The full record set (not the filtered view)
        filtered_count: Size of the current filtered view, supplied by the caller
        today: Reference date for "retiring this year"; defaults to today
    """
    records = list(records)
    today = today or date.today()
    return Statistics(
        total=len(records),
        status_counts=count_by_status(records),
        retiring_this_year=count_retiring_in_year(records, today.year),
        filtered=filtered_count,
    )
