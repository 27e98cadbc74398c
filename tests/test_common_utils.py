"""
Unit tests for utils/common.py, utils/dates.py, utils/strings.py and
utils/database.py
"""
import sqlite3
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.common import generate_id, sanitize_filename, to_iso_timestamp
from utils.database import get_connection, table_exists
from utils.dates import EARLIEST, is_valid_date, parse_instant, parse_iso_date
from utils.strings import clean_text, fold


# ── generate_id ───────────────────────────────────────────────────────────────

def test_generate_id_shape():
    prefix, ms, suffix = generate_id(now_ms=1792397702120).split("_")
    assert prefix == "teacher"
    assert ms == "1792397702120"
    assert len(suffix) == 9
    assert suffix.isalnum() and suffix == suffix.lower()


def test_generate_id_uses_current_time():
    assert int(generate_id().split("_")[1]) > 1_700_000_000_000


# ── to_iso_timestamp ──────────────────────────────────────────────────────────

def test_to_iso_timestamp_utc():
    moment = datetime(2026, 10, 19, 8, 15, 2, 120456, tzinfo=timezone.utc)
    assert to_iso_timestamp(moment) == "2026-10-19T08:15:02.120Z"


def test_to_iso_timestamp_converts_offset():
    wib = timezone(timedelta(hours=7))
    assert to_iso_timestamp(datetime(2026, 10, 19, 15, 0, tzinfo=wib)) == \
        "2026-10-19T08:00:00.000Z"


def test_to_iso_timestamp_naive_is_utc():
    assert to_iso_timestamp(datetime(2026, 1, 1)) == "2026-01-01T00:00:00.000Z"


def test_sanitize_filename():
    assert sanitize_filename(' a<b>c:"d"|e?.xlsx ') == "a_b_c__d__e_.xlsx"


# ── dates ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("value,expected", [
    ("2031-04-01", date(2031, 4, 1)),
    (" 2031-04-01 ", date(2031, 4, 1)),
    ("2031-04-01T10:00:00Z", date(2031, 4, 1)),
    (date(2030, 1, 1), date(2030, 1, 1)),
    (datetime(2030, 1, 1, 12), date(2030, 1, 1)),
    ("01/04/2031", None),
    ("", None),
    (None, None),
])
def test_parse_iso_date(value, expected):
    assert parse_iso_date(value) == expected


def test_parse_instant():
    assert parse_instant("2026-10-19T08:15:02.120Z") == \
        datetime(2026, 10, 19, 8, 15, 2, 120000, tzinfo=timezone.utc)
    assert parse_instant("2031-04-01") == datetime(2031, 4, 1, tzinfo=timezone.utc)
    assert parse_instant("nope") is None
    assert parse_instant(None) is None


def test_instants_compare_across_formats():
    assert parse_instant("2031-04-01") < parse_instant("2031-04-01T00:00:00.001Z")
    assert EARLIEST < parse_instant("0001-01-02")


def test_is_valid_date():
    assert is_valid_date("2028-02-29")
    assert not is_valid_date("2027-02-29")


# ── strings ───────────────────────────────────────────────────────────────────

def test_clean_text():
    assert clean_text("  Siti  Aminah ") == "Siti  Aminah"
    assert clean_text(None) == ""


def test_fold():
    assert fold("SDN Bandung") == "sdn bandung"
    assert fold(None) == ""


# ── database ──────────────────────────────────────────────────────────────────

def test_get_connection_creates_parent(tmp_path):
    db = tmp_path / "nested" / "dir" / "x.sqlite"
    conn = get_connection(db)
    try:
        assert db.parent.is_dir()
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        assert conn.row_factory is sqlite3.Row
    finally:
        conn.close()


def test_memory_connection_and_table_exists():
    conn = get_connection(":memory:")
    assert not table_exists(conn, "kv_store")
    conn.execute("CREATE TABLE kv_store (key TEXT)")
    assert table_exists(conn, "kv_store")
    conn.close()
