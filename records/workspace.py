"""
Record workspace — the state container behind the records screen.

Owns a RecordStore plus the ephemeral view state (filter criteria, sort
criteria, selected ids) and exposes the callbacks the presentation layer
drives: form submission, inline update, delete, filter/sort changes,
selection, statistics and export.  Construct one per session (or per test);
there is no module-level instance.

Failures come back as result objects:

- SubmissionResult for form submissions (validation errors never raise);
- ExportResult for spreadsheet exports (errors are logged, partial files
  removed, and a generic notice returned).
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from records.excel_export import ExportOptions, TeacherExcelExporter
from records.filters import describe_filters, filter_teachers, make_criteria
from records.forms import (
    ADD_FAILED,
    DUPLICATE_NIP,
    PhotoEncodingError,
    SubmissionResult,
    check_form,
    encode_photo,
    record_fields_from_form,
)
from records.models import (
    FilterCriteria,
    SortCriteria,
    Statistics,
    TeacherFormData,
    TeacherRecord,
)
from records.sorting import sort_teachers, toggle_sort
from records.statistics import compute_statistics
from records.store import RecordStore
from utils.config import ExportConfig

logger = logging.getLogger(__name__)

EXPORT_FAILED = "Gagal mengekspor data ke Excel. Silakan coba lagi."


@dataclass
class ExportResult:
    success: bool
    path: Path | None = None
    count: int = 0
    error: str | None = None


class RecordWorkspace:
    """Store + view state + the callbacks the UI layer calls.

    Args:
        store: The record store (owns persistence)
        export_config: Export directory and file-name defaults
        clock: "Now" for export file names and report footers
    """

    def __init__(self, store: RecordStore | None = None,
                 export_config: ExportConfig | None = None,
                 clock: Callable[[], datetime] | None = None) -> None:
        self.store = store if store is not None else RecordStore()
        self.export_config = export_config or ExportConfig()
        self._clock = clock
        self.filters = FilterCriteria()
        self.sort = SortCriteria()
        self._selected: list[str] = []

    # ── records ───────────────────────────────────────────────────────────

    @property
    def teachers(self) -> tuple[TeacherRecord, ...]:
        return self.store.records()

    def submit_form(self, form: TeacherFormData) -> SubmissionResult:
        """Validate *form*, encode its photo and add the record.

        A NIP already used by another record produces a warning, not an
        error; the record is still created.
        """
        validation = check_form(form)
        if not validation.is_valid():
            logger.info("Form rejected\n%s", validation.summary_text())
            return SubmissionResult(success=False, errors=validation.errors,
                                    error=next(iter(validation.errors.values())))

        try:
            photo_uri = encode_photo(form.photo)
            fields = record_fields_from_form(form, photo_uri)
            if self.store.exists(fields["nip"]):
                validation.add_warning("nip", DUPLICATE_NIP)
                logger.warning("NIP %s is already registered", fields["nip"],
                               extra={"nip": fields["nip"]})
            record = self.store.add(fields)
        except (PhotoEncodingError, ValidationError) as e:
            logger.error("Error adding teacher: %s", e)
            return SubmissionResult(success=False, error=ADD_FAILED)

        return SubmissionResult(success=True, record=record,
                                warnings=validation.warnings)

    def update(self, record_id: str, fields: Mapping[str, Any]) -> TeacherRecord | None:
        return self.store.update(record_id, fields)

    def update_many(self, record_ids: Iterable[str], fields: Mapping[str, Any]) -> int:
        return self.store.update_many(record_ids, fields)

    def delete(self, record_id: str) -> bool:
        """Delete one record and drop it from the selection."""
        removed = self.store.remove(record_id)
        self._selected = [i for i in self._selected if i != record_id]
        return removed

    def delete_many(self, record_ids: Iterable[str]) -> int:
        """Delete several records and clear the selection."""
        removed = self.store.remove_many(record_ids)
        self._selected = []
        return removed

    def nip_exists(self, nip: str, excluding_id: str | None = None) -> bool:
        return self.store.exists(nip, excluding_id)

    # ── view state ────────────────────────────────────────────────────────

    def update_filters(self, **changes: Any) -> FilterCriteria:
        """Merge *changes* into the current filters.

        Accepts the FilterCriteria field names; dates may be ISO strings.

        Raises:
            ValueError: for an unparseable date or unknown status
            TypeError: for an unknown criteria field
        """
        merged = dataclasses.asdict(self.filters)
        unknown = set(changes) - set(merged)
        if unknown:
            raise TypeError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")
        merged.update(changes)
        self.filters = make_criteria(**merged)
        return self.filters

    def clear_filters(self) -> None:
        self.filters = FilterCriteria()

    def request_sort(self, field: str) -> SortCriteria:
        self.sort = toggle_sort(self.sort, field)
        return self.sort

    def view(self) -> list[TeacherRecord]:
        """The records as the table shows them: filtered, then sorted."""
        result = filter_teachers(self.store.records(), self.filters)
        if self.sort.key:
            result = sort_teachers(result, self.sort.key, self.sort.direction)
        return result

    # ── selection ─────────────────────────────────────────────────────────

    @property
    def selected(self) -> tuple[str, ...]:
        return tuple(self._selected)

    def toggle_selection(self, record_id: str) -> None:
        if record_id in self._selected:
            self._selected.remove(record_id)
        else:
            self._selected.append(record_id)

    def select_all(self) -> None:
        """Select every record in the current view."""
        self._selected = [r.id for r in self.view()]

    def clear_selection(self) -> None:
        self._selected = []

    # ── reporting ─────────────────────────────────────────────────────────

    def statistics(self, today: date | None = None) -> Statistics:
        return compute_statistics(self.store.records(),
                                  filtered_count=len(self.view()), today=today)

    def export(self, filename: str | None = None,
               include_document_links: bool | None = None,
               filtered: bool = False) -> ExportResult:
        """Write the spreadsheet report; never raises.

        Args:
            filename: Output name (default: timestamped)
            include_document_links: Add the "Link Berkas" column
            filtered: Export the current view instead of every record
        """
        config = self.export_config
        if include_document_links is None:
            include_document_links = config.include_document_links
        records = self.view() if filtered else list(self.store.records())
        prefix = config.filtered_filename_prefix if filtered else config.filename_prefix
        exporter = TeacherExcelExporter(clock=self._clock, filename_prefix=prefix)
        options = ExportOptions(include_document_links=include_document_links,
                                filename=filename or exporter.generate_filename())
        path = Path(config.export_dir) / options.filename

        if filtered:
            logger.info("Exporting filtered view (%s)", describe_filters(self.filters),
                        extra={"filters": describe_filters(self.filters)})
        try:
            exporter.export(records, options, directory=config.export_dir)
        except Exception:
            logger.exception("Error exporting to Excel", extra={"path": str(path)})
            return ExportResult(success=False, error=EXPORT_FAILED)
        return ExportResult(success=True, path=path, count=len(records))
