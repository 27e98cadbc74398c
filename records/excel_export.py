"""
Spreadsheet export of teacher retirement records (openpyxl).

Builds a three-sheet workbook:

    Data Guru Pensiun   one row per record (optional document-link column)
    Ringkasan           totals, status breakdown, retirements per month,
                        top-10 schools, generation timestamp
    Progress Tracking   records grouped by status, one sub-table per status

The transformation is synchronous and all-or-nothing: ``export`` either
writes the complete file or raises.  Callers that must not fail (the
workspace) catch, log and report at their boundary.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Sequence

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from records.models import TeacherRecord
from utils.formatting import (
    format_date,
    format_generated_at,
    format_month_year,
    format_timestamp,
    generate_export_filename,
)

logger = logging.getLogger(__name__)

MAIN_SHEET = "Data Guru Pensiun"
SUMMARY_SHEET = "Ringkasan"
PROGRESS_SHEET = "Progress Tracking"

MAIN_COLUMNS = [
    ("No", 5),
    ("Nama", 25),
    ("NIP", 20),
    ("Jabatan", 20),
    ("Nama Sekolah", 30),
    ("Tanggal Pensiun", 15),
    ("Status Progres", 15),
    ("Tanggal Dibuat", 18),
    ("Terakhir Diupdate", 18),
]
LINK_COLUMN = ("Link Berkas", 40)
SUMMARY_WIDTHS = [35, 15]
PROGRESS_COLUMNS = [("Nama", 25), ("NIP", 20), ("Sekolah", 30), ("Tanggal Pensiun", 15)]

TOP_SCHOOLS = 10

HEADER_FILL = PatternFill(fill_type="solid", fgColor="007BFF")
HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_ALIGNMENT = Alignment(horizontal="center")
SECTION_FONT = Font(bold=True)


@dataclass
class ExportOptions:
    include_document_links: bool = True
    filename: str | None = None


def _set_widths(ws: Worksheet, widths: Sequence[int]) -> None:
    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def _cell_value(value: object) -> object:
    """Drop control characters that worksheets cannot store."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _append(ws: Worksheet, values: Sequence[object]) -> None:
    ws.append([_cell_value(v) for v in values])


def monthly_breakdown(records: Iterable[TeacherRecord]) -> dict[str, int]:
    """Retirements per ``<month> <year>``, in first-seen order."""
    return dict(Counter(format_month_year(r.retirement_date) for r in records))


def school_breakdown(records: Iterable[TeacherRecord],
                     limit: int = TOP_SCHOOLS) -> list[tuple[str, int]]:
    """Schools by record count, descending; ties keep first-seen order."""
    return Counter(r.school for r in records).most_common(limit)


def group_by_status(records: Iterable[TeacherRecord]) -> dict[str, list[TeacherRecord]]:
    """Records bucketed by status label, buckets in first-seen order."""
    groups: dict[str, list[TeacherRecord]] = {}
    for record in records:
        groups.setdefault(record.progress_status.label, []).append(record)
    return groups


class TeacherExcelExporter:
    """Writes teacher records to an .xlsx report.

    Args:
        clock: Returns "now" for the default file name and report footer
        filename_prefix: Prefix for generated file names
    """

    def __init__(self, clock: Callable[[], datetime] | None = None,
                 filename_prefix: str = "data_pensiun_guru") -> None:
        self._clock = clock or datetime.now
        self.filename_prefix = filename_prefix

    def generate_filename(self) -> str:
        return generate_export_filename(self.filename_prefix, now=self._clock())

    # ── public API ────────────────────────────────────────────────────────

    def build_workbook(self, records: Iterable[TeacherRecord],
                       options: ExportOptions | None = None) -> Workbook:
        """Assemble the three report sheets in memory."""
        records = list(records)
        options = options or ExportOptions()
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        self._create_main_sheet(wb, records, options)
        self._create_summary_sheet(wb, records)
        self._create_progress_sheet(wb, records)
        return wb

    def export(self, records: Iterable[TeacherRecord],
               options: ExportOptions | None = None,
               directory: Path | str | None = None) -> Path:
        """Write the report and return its path.

        The workbook is saved to a temporary file beside the target and
        moved into place only once complete, so an existing file with the
        same name survives a failed export.

        Raises:
            OSError: if the file cannot be written
        """
        records = list(records)
        options = options or ExportOptions()
        filename = options.filename or self.generate_filename()
        path = Path(directory) / filename if directory is not None else Path(filename)
        wb = self.build_workbook(records, options)
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=path.parent, prefix=f".{path.stem}_",
                                         suffix=".xlsx", delete=False) as tmp:
            tmp_path = Path(tmp.name)
        try:
            wb.save(tmp_path)
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        logger.info("Exported %d records to %s", len(records), path,
                    extra={"count": len(records), "path": str(path)})
        return path

    def workbook_bytes(self, records: Iterable[TeacherRecord],
                       options: ExportOptions | None = None) -> bytes:
        """The report as .xlsx bytes, without touching the filesystem."""
        buf = io.BytesIO()
        self.build_workbook(records, options).save(buf)
        return buf.getvalue()

    # ── sheets ────────────────────────────────────────────────────────────

    def _create_main_sheet(self, wb: Workbook, records: list[TeacherRecord],
                           options: ExportOptions) -> None:
        ws = wb.create_sheet(MAIN_SHEET)
        columns = list(MAIN_COLUMNS)
        if options.include_document_links:
            columns.append(LINK_COLUMN)

        ws.append([header for header, _ in columns])
        for index, record in enumerate(records, start=1):
            row = [
                index,
                record.name,
                record.nip,
                record.position,
                record.school,
                format_date(record.retirement_date),
                record.progress_status.label,
                format_timestamp(record.created_at),
                format_timestamp(record.updated_at),
            ]
            if options.include_document_links:
                row.append(record.document_link or "-")
            _append(ws, row)

        _set_widths(ws, [width for _, width in columns])
        for cell in ws[1]:
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.alignment = HEADER_ALIGNMENT

    def _create_summary_sheet(self, wb: Workbook, records: list[TeacherRecord]) -> None:
        ws = wb.create_sheet(SUMMARY_SHEET)

        ws.append(["RINGKASAN DATA PENSIUN GURU"])
        ws.append([])
        ws.append(["Total Data Guru:", len(records)])
        ws.append([])

        ws.append(["BREAKDOWN STATUS PENGAJUAN"])
        status_counts = Counter(r.progress_status.label for r in records)
        for label, count in status_counts.items():
            _append(ws, [label, count])
        ws.append([])

        ws.append(["RENCANA PENSIUN PER BULAN"])
        for month, count in monthly_breakdown(records).items():
            _append(ws, [month, count])
        ws.append([])

        ws.append([f"BREAKDOWN PER SEKOLAH (Top {TOP_SCHOOLS})"])
        for school, count in school_breakdown(records):
            _append(ws, [school, count])
        ws.append([])

        ws.append([f"Laporan dibuat pada: {format_generated_at(self._clock())}"])

        ws["A1"].font = SECTION_FONT
        _set_widths(ws, SUMMARY_WIDTHS)

    def _create_progress_sheet(self, wb: Workbook, records: list[TeacherRecord]) -> None:
        ws = wb.create_sheet(PROGRESS_SHEET)

        for index, (label, members) in enumerate(group_by_status(records).items()):
            if index > 0:
                ws.append([])
            ws.append([f"{label.upper()} ({len(members)} guru)"])
            ws.cell(row=ws.max_row, column=1).font = SECTION_FONT
            ws.append([header for header, _ in PROGRESS_COLUMNS])
            for record in members:
                _append(ws, [
                    record.name,
                    record.nip,
                    record.school,
                    format_date(record.retirement_date),
                ])

        _set_widths(ws, [width for _, width in PROGRESS_COLUMNS])


def export_teachers_to_excel(records: Iterable[TeacherRecord],
                             filename: str | None = None,
                             directory: Path | str | None = None) -> Path:
    """Export with default options."""
    return TeacherExcelExporter().export(
        records, ExportOptions(filename=filename), directory=directory
    )


def export_filtered_teachers_to_excel(records: Iterable[TeacherRecord],
                                      filter_description: str,
                                      filename: str | None = None,
                                      directory: Path | str | None = None) -> Path:
    """Export a filtered view under a ``data_pensiun_guru_filtered_*`` name."""
    exporter = TeacherExcelExporter(filename_prefix="data_pensiun_guru_filtered")
    logger.info("Exporting filtered view (%s)", filter_description)
    return exporter.export(records, ExportOptions(filename=filename), directory=directory)
