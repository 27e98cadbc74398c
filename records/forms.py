"""
Turning an add-teacher form submission into record fields.

The photo is embedded in the record as a base64 data URI; text fields are
trimmed; the status starts at "Not Submitted"; an empty document link
means no document.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any

from records.models import PhotoUpload, ProgressStatus, TeacherFormData, TeacherRecord
from utils.formatting import format_date_for_input
from utils.patterns import DATA_URI
from utils.strings import clean_text
from utils.validation import ValidationResult, validate_image_file, validate_teacher_form

ADD_FAILED = "Terjadi kesalahan saat menambah data guru"
DUPLICATE_NIP = "NIP sudah terdaftar pada data lain"


class PhotoEncodingError(Exception):
    """The uploaded photo could not be read into a data URI."""


@dataclass
class SubmissionResult:
    """Outcome of a form submission, returned instead of raising."""

    success: bool
    record: TeacherRecord | None = None
    errors: dict[str, str] = field(default_factory=dict)
    warnings: dict[str, str] = field(default_factory=dict)
    error: str | None = None


def encode_photo(photo: PhotoUpload) -> str:
    """Encode uploaded image bytes as ``data:<mime>;base64,<payload>``.

    Raises:
        PhotoEncodingError: if the upload is empty or has no MIME type
    """
    if not photo.content:
        raise PhotoEncodingError("File reading failed")
    if not photo.mime_type:
        raise PhotoEncodingError("Failed to convert file to base64")
    payload = base64.b64encode(photo.content).decode("ascii")
    return f"data:{photo.mime_type};base64,{payload}"


def decode_photo(uri: str) -> tuple[str, bytes]:
    """Split a photo data URI back into ``(mime_type, content)``.

    Raises:
        PhotoEncodingError: if *uri* is not a base64 data URI
    """
    match = DATA_URI.match(uri or "")
    if match is None:
        raise PhotoEncodingError("Not a base64 data URI")
    try:
        return match.group(1), base64.b64decode(match.group(2), validate=True)
    except binascii.Error as e:
        raise PhotoEncodingError(f"Corrupt photo payload: {e}") from e


def check_form(form: TeacherFormData) -> ValidationResult:
    """Run the field rules plus the photo type/size check."""
    result = validate_teacher_form(form)
    if form.photo is not None:
        ok, message = validate_image_file(form.photo)
        if not ok:
            result.add_issue("photo", message)
    return result


def record_fields_from_form(form: TeacherFormData, photo_uri: str) -> dict[str, Any]:
    """Fields for RecordStore.add(), minus the store-assigned ones."""
    retirement_date = clean_text(form.retirement_date)
    return {
        "photo": photo_uri,
        "name": clean_text(form.name),
        "nip": clean_text(form.nip),
        "position": clean_text(form.position),
        "school": clean_text(form.school),
        "retirement_date": format_date_for_input(retirement_date) or retirement_date,
        "progress_status": ProgressStatus.NOT_SUBMITTED,
        "document_link": clean_text(form.document_link) or None,
    }
