"""
Unit tests for utils/formatting.py

Tests the Indonesian date helpers, export file names, truncate_text,
TableFormatter and ReportFormatter.
No database, network, or file I/O required.
"""
import re
import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.formatting import (
    INVALID_DATE,
    ReportFormatter,
    TableFormatter,
    format_date,
    format_date_for_input,
    format_generated_at,
    format_month_year,
    format_timestamp,
    generate_export_filename,
    truncate_text,
)


# ── format_date ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize("value,expected", [
    ("2031-05-01", "01 Mei 2031"),
    ("2026-12-31", "31 Desember 2026"),
    ("2030-01-20T00:00:00Z", "20 Januari 2030"),
])
def test_format_date(value, expected):
    assert format_date(value) == expected


@pytest.mark.parametrize("value", [None, "", "garbage", "2031-13-01"])
def test_format_date_invalid(value):
    assert format_date(value) == INVALID_DATE


def test_format_month_year():
    assert format_month_year("2031-08-17") == "Agustus 2031"
    assert format_month_year("nope") == INVALID_DATE


# ── format_timestamp ──────────────────────────────────────────────────────────

def test_format_timestamp():
    assert format_timestamp("2026-10-19T08:15:02.120Z") == "19/10/2026 08:15"


def test_format_timestamp_invalid():
    assert format_timestamp("yesterday") == INVALID_DATE
    assert format_timestamp(None) == INVALID_DATE


def test_format_generated_at():
    assert format_generated_at(datetime(2026, 3, 5, 9, 7)) == "05 Maret 2026 09:07"


def test_format_date_for_input():
    assert format_date_for_input("2031-05-01T10:00:00") == "2031-05-01"
    assert format_date_for_input("bad") == ""


# ── generate_export_filename ──────────────────────────────────────────────────

def test_generate_export_filename():
    name = generate_export_filename(now=datetime(2026, 10, 19, 14, 30, 0))
    assert name == "data_pensiun_guru_2026-10-19_14-30-00.xlsx"


def test_generate_export_filename_prefix_sanitized():
    name = generate_export_filename("laporan/guru:filter", now=datetime(2026, 1, 2, 3, 4, 5))
    assert name == "laporan_guru_filter_2026-01-02_03-04-05.xlsx"


def test_generate_export_filename_default_now():
    assert re.fullmatch(r"data_pensiun_guru_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.xlsx",
                        generate_export_filename())


# ── truncate_text ─────────────────────────────────────────────────────────────

def test_truncate_short():
    assert truncate_text("SDN 1", 10) == "SDN 1"


def test_truncate_long():
    assert truncate_text("SMA Negeri 3 Yogyakarta", 10) == "SMA Neg..."


# ── TableFormatter ────────────────────────────────────────────────────────────

class TestTableFormatter:
    def test_alignment(self):
        table = TableFormatter(["Nama", "NIP"])
        table.add_row(["Budi", "12345678"])
        table.add_row(["Cici Lestari", None])
        lines = table.to_string().splitlines()
        assert lines[0] == "Nama          NIP"
        assert lines[1] == "------------  --------"
        assert lines[2] == "Budi          12345678"
        assert lines[3] == "Cici Lestari  -"

    def test_wrong_column_count(self):
        with pytest.raises(ValueError):
            TableFormatter(["A", "B"]).add_row(["only one"])

    def test_truncates_wide_cells(self):
        table = TableFormatter(["Sekolah"], max_width=8)
        table.add_row(["SMA Negeri 3 Yogyakarta"])
        assert table.to_string().splitlines()[2] == "SMA N..."


# ── ReportFormatter ───────────────────────────────────────────────────────────

def test_report_formatter():
    report = ReportFormatter("RINGKASAN")
    report.add_section("Total", {"Total data guru": 3})
    report.add_section("Catatan", ["satu", "dua"])
    report.add_section("Status", "Belum ada data")
    assert report.to_string() == (
        "RINGKASAN\n=========\n\n"
        "Total\n-----\n  Total data guru: 3\n\n"
        "Catatan\n-------\n  • satu\n  • dua\n\n"
        "Status\n------\n  Belum ada data\n"
    )
