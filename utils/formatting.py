"""Output formatting utilities for the retirement records tools.

Provides reusable functions for:
- Indonesian-locale date and timestamp display
- Export file names
- Tabular and sectioned terminal output
"""

from datetime import date, datetime
from typing import Optional, List, Dict, Any

from utils.common import sanitize_filename
from utils.config import KnownValues
from utils.dates import parse_instant, parse_iso_date

INVALID_DATE = "Invalid Date"


def format_date(value: Optional[str]) -> str:
    """Format a calendar date as ``dd MMMM yyyy`` with Indonesian months.

    Examples:
        format_date("2031-05-01") -> "01 Mei 2031"
        format_date("garbage") -> "Invalid Date"
    """
    day = parse_iso_date(value)
    if day is None:
        return INVALID_DATE
    return f"{day.day:02d} {KnownValues.MONTHS_ID[day.month - 1]} {day.year}"


def format_timestamp(value: Optional[str]) -> str:
    """Format an ISO timestamp as ``dd/MM/yyyy HH:mm``.

    The time is rendered in the offset it was stored with (UTC for
    timestamps written by the record store).

    Examples:
        format_timestamp("2026-10-19T08:15:02.120Z") -> "19/10/2026 08:15"
    """
    moment = parse_instant(value)
    if moment is None:
        return INVALID_DATE
    return moment.strftime("%d/%m/%Y %H:%M")


def format_month_year(value: Optional[str]) -> str:
    """Format the month of a date as ``MMMM yyyy``, e.g. "Mei 2031"."""
    day = parse_iso_date(value)
    if day is None:
        return INVALID_DATE
    return f"{KnownValues.MONTHS_ID[day.month - 1]} {day.year}"


def format_generated_at(moment: datetime) -> str:
    """Report footer timestamp, ``dd MMMM yyyy HH:mm``."""
    return (f"{moment.day:02d} {KnownValues.MONTHS_ID[moment.month - 1]} "
            f"{moment.year} {moment:%H:%M}")


def format_date_for_input(value: Optional[str]) -> str:
    """Normalize a date to ``yyyy-MM-dd``, or "" if it can't be parsed."""
    day = parse_iso_date(value)
    return day.isoformat() if isinstance(day, date) else ""


def generate_export_filename(prefix: str = "data_pensiun_guru",
                             now: Optional[datetime] = None) -> str:
    """Build a timestamped export file name.

    Examples:
        generate_export_filename() -> "data_pensiun_guru_2026-10-19_14-30-00.xlsx"
    """
    now = now or datetime.now()
    return sanitize_filename(f"{prefix}_{now:%Y-%m-%d_%H-%M-%S}.xlsx")


def truncate_text(text: str, max_length: int = 40, suffix: str = "...") -> str:
    """Truncate text to maximum length with ellipsis.

    Examples:
        truncate_text("SMA Negeri 3 Yogyakarta", 10) -> "SMA Neg..."
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


class TableFormatter:
    """Formats rows as aligned tabular output."""

    def __init__(self, columns: List[str], max_width: int = 40):
        """Initialize table formatter.

        Args:
            columns: List of column headers
            max_width: Cells longer than this are truncated
        """
        self.columns = columns
        self.max_width = max_width
        self.column_widths = [len(col) for col in columns]
        self.rows: List[List[str]] = []

    def add_row(self, values: List[Any]) -> None:
        """Add a row to the table.

        Raises:
            ValueError: If value count doesn't match column count
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")

        str_values = []
        for i, val in enumerate(values):
            str_val = truncate_text(str(val) if val is not None else "-", self.max_width)
            str_values.append(str_val)
            if len(str_val) > self.column_widths[i]:
                self.column_widths[i] = len(str_val)
        self.rows.append(str_values)

    def _format_row(self, values: List[str]) -> str:
        return "  ".join(val.ljust(self.column_widths[i])
                         for i, val in enumerate(values)).rstrip()

    def to_string(self) -> str:
        """Format table as multi-line string with a header separator."""
        lines = [self._format_row(self.columns),
                 "  ".join("-" * w for w in self.column_widths)]
        lines.extend(self._format_row(row) for row in self.rows)
        return "\n".join(lines)


class ReportFormatter:
    """Formats data as a titled report with sections."""

    def __init__(self, title: str = ""):
        self.title = title
        self.sections: List[Dict[str, Any]] = []

    def add_section(self, heading: str, content: Any) -> None:
        """Add a section; content may be a string, list or dict."""
        self.sections.append({"heading": heading, "content": content})

    @staticmethod
    def _format_content(content: Any) -> List[str]:
        if isinstance(content, str):
            return [f"  {content}"]
        if isinstance(content, (list, tuple)):
            return [f"  • {item}" for item in content]
        if isinstance(content, dict):
            return [f"  {key}: {value}" for key, value in content.items()]
        return [f"  {content}"]

    def to_string(self) -> str:
        lines = []
        if self.title:
            lines.append(self.title)
            lines.append("=" * len(self.title))
            lines.append("")
        for section in self.sections:
            lines.append(section["heading"])
            lines.append("-" * len(section["heading"]))
            lines.extend(self._format_content(section["content"]))
            lines.append("")
        return "\n".join(lines).rstrip() + "\n"
