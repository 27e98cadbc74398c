"""
Tests for records/excel_export.py

Builds workbooks from the sample records and reads them back with
openpyxl to check sheet layout, row contents, column widths, summary
sections and the grouped progress sheet.
"""
import io
import sys
from datetime import datetime
from pathlib import Path

import openpyxl
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from conftest import make_fields
from records.excel_export import (
    MAIN_SHEET,
    PROGRESS_SHEET,
    SUMMARY_SHEET,
    ExportOptions,
    TeacherExcelExporter,
    export_filtered_teachers_to_excel,
    export_teachers_to_excel,
    group_by_status,
    monthly_breakdown,
    school_breakdown,
)

GENERATED = datetime(2026, 10, 19, 14, 30, 0)


@pytest.fixture
def exporter():
    return TeacherExcelExporter(clock=lambda: GENERATED)


@pytest.fixture
def records(populated_store):
    return populated_store.records()


def rows(ws):
    return [list(r) for r in ws.iter_rows(values_only=True)]


# ── workbook layout ───────────────────────────────────────────────────────────

def test_sheet_names_in_order(exporter, records):
    wb = exporter.build_workbook(records)
    assert wb.sheetnames == [MAIN_SHEET, SUMMARY_SHEET, PROGRESS_SHEET]


def test_main_sheet_rows(exporter, records):
    ws = exporter.build_workbook(records)[MAIN_SHEET]
    data = rows(ws)
    assert data[0] == ["No", "Nama", "NIP", "Jabatan", "Nama Sekolah", "Tanggal Pensiun",
                       "Status Progres", "Tanggal Dibuat", "Terakhir Diupdate", "Link Berkas"]
    assert data[1] == [1, "Budi Santoso", "196501011990031001", "Guru Madya",
                       "SDN 1 Bandung", "01 Mei 2031", "Dalam Proses",
                       "19/10/2026 08:15", "19/10/2026 08:15", "-"]
    assert data[2][9] == "https://drive.example.com/berkas/ani"
    assert len(data) == 4


def test_nip_kept_as_text(exporter, records):
    ws = exporter.build_workbook(records)[MAIN_SHEET]
    assert isinstance(ws["C2"].value, str)


def test_main_sheet_without_links(exporter, records):
    ws = exporter.build_workbook(records, ExportOptions(include_document_links=False))[MAIN_SHEET]
    assert ws.max_column == 9
    assert "Link Berkas" not in rows(ws)[0]


def test_main_sheet_widths_and_header_style(exporter, records):
    ws = exporter.build_workbook(records)[MAIN_SHEET]
    assert ws.column_dimensions["A"].width == 5
    assert ws.column_dimensions["E"].width == 30
    assert ws.column_dimensions["J"].width == 40
    assert ws["A1"].font.bold
    assert ws["A1"].fill.fgColor.rgb.endswith("007BFF")


def test_invalid_retirement_date_rendered(exporter, store):
    store.add(make_fields(retirement_date="rusak"))
    ws = exporter.build_workbook(store.records())[MAIN_SHEET]
    assert ws["F2"].value == "Invalid Date"


# ── summary sheet ─────────────────────────────────────────────────────────────

def test_summary_sheet(exporter, records):
    data = [r[0] for r in rows(exporter.build_workbook(records)[SUMMARY_SHEET])]
    assert data[0] == "RINGKASAN DATA PENSIUN GURU"
    assert "BREAKDOWN STATUS PENGAJUAN" in data
    assert "RENCANA PENSIUN PER BULAN" in data
    assert "BREAKDOWN PER SEKOLAH (Top 10)" in data
    assert data[-1] == "Laporan dibuat pada: 19 Oktober 2026 14:30"


def test_summary_values(exporter, records):
    data = rows(exporter.build_workbook(records)[SUMMARY_SHEET])
    pairs = {r[0]: r[1] for r in data if r[0] is not None and len(r) > 1}
    assert pairs["Total Data Guru:"] == 3
    assert pairs["Disetujui"] == 1
    assert pairs["Mei 2031"] == 1
    assert pairs["SDN 1 Bandung"] == 2


def test_empty_export(exporter):
    wb = exporter.build_workbook([])
    assert rows(wb[MAIN_SHEET]) == [[
        "No", "Nama", "NIP", "Jabatan", "Nama Sekolah", "Tanggal Pensiun",
        "Status Progres", "Tanggal Dibuat", "Terakhir Diupdate", "Link Berkas"]]
    summary = rows(wb[SUMMARY_SHEET])
    assert ["Total Data Guru:", 0] in summary
    assert wb[PROGRESS_SHEET].max_row == 1


# ── breakdown helpers ─────────────────────────────────────────────────────────

def test_monthly_breakdown_first_seen_order(records):
    assert list(monthly_breakdown(records)) == ["Mei 2031", "November 2026", "Januari 2030"]


def test_school_breakdown_top_n(store):
    for i in range(12):
        store.add(make_fields(school=f"Sekolah {i:02d}"))
    store.add(make_fields(school="Sekolah 05"))
    top = school_breakdown(store.records())
    assert len(top) == 10
    assert top[0] == ("Sekolah 05", 2)
    assert top[1] == ("Sekolah 00", 1)


def test_group_by_status(records):
    groups = group_by_status(records)
    assert list(groups) == ["Dalam Proses", "Disetujui", "Belum Diajukan"]


# ── progress sheet ────────────────────────────────────────────────────────────

def test_progress_sheet(exporter, records):
    data = rows(exporter.build_workbook(records)[PROGRESS_SHEET])
    assert data[0][0] == "DALAM PROSES (1 guru)"
    assert data[1] == ["Nama", "NIP", "Sekolah", "Tanggal Pensiun"]
    assert data[2] == ["Budi Santoso", "196501011990031001", "SDN 1 Bandung", "01 Mei 2031"]
    assert data[3] == [None, None, None, None]
    assert data[4][0] == "DISETUJUI (1 guru)"


# ── export to disk / bytes ────────────────────────────────────────────────────

def test_export_writes_file(exporter, records, tmp_path):
    path = exporter.export(records, directory=tmp_path / "out")
    assert path == tmp_path / "out" / "data_pensiun_guru_2026-10-19_14-30-00.xlsx"
    wb = openpyxl.load_workbook(path)
    assert wb.sheetnames == [MAIN_SHEET, SUMMARY_SHEET, PROGRESS_SHEET]


def test_export_custom_filename(exporter, records, tmp_path):
    path = exporter.export(records, ExportOptions(filename="laporan.xlsx"), directory=tmp_path)
    assert path.name == "laporan.xlsx"
    assert path.exists()


def test_workbook_bytes(exporter, records):
    wb = openpyxl.load_workbook(io.BytesIO(exporter.workbook_bytes(records)))
    assert wb[MAIN_SHEET].max_row == 4


def test_convenience_functions(records, tmp_path):
    full = export_teachers_to_excel(records, filename="semua.xlsx", directory=tmp_path)
    assert full.exists()
    filtered = export_filtered_teachers_to_excel(records[:1], "search='budi'", directory=tmp_path)
    assert filtered.name.startswith("data_pensiun_guru_filtered_")
    assert openpyxl.load_workbook(filtered)[MAIN_SHEET].max_row == 2


def test_control_characters_dropped(exporter, store, tmp_path):
    store.add(make_fields(name="Budi\x0bSantoso", school="SDN\x01 1 Bandung"))
    path = exporter.export(store.records(), directory=tmp_path)
    wb = openpyxl.load_workbook(path)
    assert wb[MAIN_SHEET]["B2"].value == "BudiSantoso"
    assert wb[MAIN_SHEET]["E2"].value == "SDN 1 Bandung"
    assert ["SDN 1 Bandung", 1] in rows(wb[SUMMARY_SHEET])


def test_failed_save_keeps_existing_file(exporter, records, tmp_path, monkeypatch):
    path = exporter.export(records, ExportOptions(filename="laporan.xlsx"), directory=tmp_path)
    before = path.read_bytes()

    def failing_save(self, filename):
        Path(filename).write_bytes(b"partial")
        raise OSError("disk full")

    monkeypatch.setattr(openpyxl.Workbook, "save", failing_save)
    with pytest.raises(OSError):
        exporter.export(records[:1], ExportOptions(filename="laporan.xlsx"), directory=tmp_path)
    assert path.read_bytes() == before
    assert [p.name for p in tmp_path.iterdir()] == ["laporan.xlsx"]
