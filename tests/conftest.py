"""
Pytest fixtures for the teacher retirement records tests.

Provides a frozen clock, in-memory storage, a small valid photo upload,
a populated record store and a workspace wired to a temporary export
directory.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from records.models import PhotoUpload, TeacherFormData  # noqa: E402
from records.storage import MemoryStorage  # noqa: E402
from records.store import RecordStore  # noqa: E402
from records.workspace import RecordWorkspace  # noqa: E402
from utils.config import ExportConfig  # noqa: E402

# Smallest valid PNG header bytes; content is never decoded as an image
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24

SAMPLE_TEACHERS = [
    {"name": "Budi Santoso", "nip": "196501011990031001", "position": "Guru Madya",
     "school": "SDN 1 Bandung", "retirement_date": "2031-05-01",
     "progress_status": "In Progress"},
    {"name": "ani Rahayu", "nip": "196602021991032002", "position": "Guru Muda",
     "school": "SMPN 2 Bandung", "retirement_date": "2026-11-15",
     "progress_status": "Approved",
     "document_link": "https://drive.example.com/berkas/ani"},
    {"name": "Cici Lestari", "nip": "196703031992033003", "position": "Kepala Sekolah",
     "school": "SDN 1 Bandung", "retirement_date": "2030-01-20"},
]


# ── Helpers ───────────────────────────────────────────────────────────────────

class FrozenClock:
    """Callable clock that returns a fixed instant until advanced."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def photo_uri(mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,iVBORw0KGgo="


def make_fields(**overrides) -> dict:
    fields = {
        "photo": photo_uri(),
        "name": "Siti Aminah",
        "nip": "196801011993032004",
        "position": "Guru Pertama",
        "school": "SMAN 3 Bandung",
        "retirement_date": "2032-02-01",
    }
    fields.update(overrides)
    return fields


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 10, 19, 8, 15, 2, 120000, tzinfo=timezone.utc))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, clock):
    return RecordStore(storage, clock=clock)


@pytest.fixture
def populated_store(store, clock):
    """Store holding SAMPLE_TEACHERS, added one second apart."""
    for teacher in SAMPLE_TEACHERS:
        store.add(make_fields(**teacher))
        clock.advance(seconds=1)
    return store


@pytest.fixture
def photo():
    return PhotoUpload(content=PNG_BYTES, mime_type="image/png", filename="foto.png")


@pytest.fixture
def valid_form(photo):
    return TeacherFormData(
        photo=photo,
        name="  Dewi Kartika  ",
        nip="196901011994032005",
        position="Guru Madya",
        school="SDN 5 Cimahi",
        retirement_date="2033-07-01",
        document_link="",
    )


@pytest.fixture
def workspace(populated_store, clock, tmp_path):
    config = ExportConfig()
    config.export_dir = tmp_path / "exports"
    return RecordWorkspace(populated_store, export_config=config, clock=clock)
