"""
Data models for teacher retirement records.

TeacherRecord is the only persisted entity.  It is a frozen pydantic model
so every snapshot handed out by the store is immutable; mutations build a
new validated instance.  JSON keys are the camelCase names used by the
persisted slot (``retirementDate``, ``progressStatus`` ...), attributes are
snake_case.

FilterCriteria, SortCriteria and the form/photo types are ephemeral and
never persisted.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.config import KnownValues


class ProgressStatus(str, Enum):
    """Submission progress of a retirement record."""

    NOT_SUBMITTED = "Not Submitted"
    IN_PROGRESS = "In Progress"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def label(self) -> str:
        """Indonesian display label, e.g. "Dalam Proses"."""
        return KnownValues.get_status_label(self.value)

    @classmethod
    def coerce(cls, value: Any) -> "ProgressStatus":
        """Accept a member, a canonical value or an Indonesian label.

        Raises:
            ValueError: if *value* names no status
        """
        if isinstance(value, cls):
            return value
        canonical = KnownValues.status_from_label(value) or value
        return cls(canonical)


# ── Persisted entity ──────────────────────────────────────────────────────────

class TeacherRecord(BaseModel):
    """One teacher's retirement submission."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Opaque unique id assigned by the store")
    photo: str = Field(..., description="Base64 data URI of the teacher's photo")
    name: str
    nip: str = Field(..., description="Nomor Induk Pegawai, digits only")
    position: str = Field(..., description="Job title (jabatan)")
    school: str
    retirement_date: str = Field(..., alias="retirementDate",
                                 description="ISO date, e.g. 2031-04-01")
    progress_status: ProgressStatus = Field(ProgressStatus.NOT_SUBMITTED,
                                            alias="progressStatus")
    document_link: str | None = Field(None, alias="documentLink")
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")

    @field_validator("progress_status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> ProgressStatus:
        return ProgressStatus.coerce(value)

    @field_validator("document_link", mode="before")
    @classmethod
    def _blank_link_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping an absent document link."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


def _field_names() -> dict[str, str]:
    names: dict[str, str] = {}
    for attr, info in TeacherRecord.model_fields.items():
        names[attr] = attr
        if info.alias:
            names[info.alias] = attr
    return names


# Attribute name for every accepted spelling of a record field
FIELD_NAMES = _field_names()

# Fields the store assigns; patches may not touch them
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})


def resolve_field(name: str) -> str:
    """Map ``retirementDate`` or ``retirement_date`` to the attribute name.

    Raises:
        KeyError: if *name* is not a record field
    """
    try:
        return FIELD_NAMES[name]
    except KeyError:
        raise KeyError(f"Unknown record field: {name!r}") from None


# ── Form submission ───────────────────────────────────────────────────────────

@dataclass
class PhotoUpload:
    """An uploaded image before it is encoded into the record."""

    content: bytes
    mime_type: str
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Path | str) -> "PhotoUpload":
        """Read an image file, guessing its MIME type from the extension."""
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(content=path.read_bytes(),
                   mime_type=mime_type or "application/octet-stream",
                   filename=path.name)


@dataclass
class TeacherFormData:
    """Raw values from the add-teacher form, untrimmed."""

    photo: PhotoUpload | None = None
    name: str = ""
    nip: str = ""
    position: str = ""
    school: str = ""
    retirement_date: str = ""
    document_link: str = ""


# ── View state ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FilterCriteria:
    """The user's current filter preference."""

    search_text: str = ""
    start_date: date | None = None
    end_date: date | None = None
    progress_status: ProgressStatus | str = KnownValues.ALL_STATUSES

    def is_default(self) -> bool:
        return (not self.search_text and self.start_date is None
                and self.end_date is None
                and self.progress_status == KnownValues.ALL_STATUSES)


@dataclass(frozen=True)
class SortCriteria:
    """Current sort column (or None) and direction ("asc" | "desc")."""

    key: str | None = None
    direction: str = "asc"


@dataclass
class Statistics:
    """Summary counts shown above the records table."""

    total: int = 0
    status_counts: dict[str, int] = field(default_factory=dict)
    retiring_this_year: int = 0
    filtered: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "status_counts": dict(self.status_counts),
            "retiring_this_year": self.retiring_this_year,
            "filtered": self.filtered,
        }
