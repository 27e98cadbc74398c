"""Form validation utilities for the retirement records tools.

Provides reusable functions for:
- Collecting per-field validation issues
- Validating a submitted teacher form (all rules, never fail-fast)
- Checking URLs, calendar dates and uploaded images
"""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from utils.config import KnownValues
from utils.dates import is_valid_date
from utils.patterns import NIP_DIGITS
from utils.strings import clean_text


class ValidationIssue:
    """Represents a single problem with one form field."""

    def __init__(self, field: str, message: str, severity: str = "error"):
        """Initialize a validation issue.

        Args:
            field: Form field the issue belongs to (e.g. 'nip')
            message: Human-readable message shown next to the field
            severity: 'error' blocks submission, 'warning' does not
        """
        self.field = field
        self.message = message
        self.severity = severity


class ValidationResult:
    """Collects validation issues for a form submission."""

    def __init__(self):
        self.issues: List[ValidationIssue] = []

    def add_issue(self, field: str, message: str, severity: str = "error") -> None:
        """Add a validation issue.

        Only the first error per field is kept so each field shows one
        message, matching how the form renders them.
        """
        if severity == "error" and field in self.errors:
            return
        self.issues.append(ValidationIssue(field, message, severity))

    def add_warning(self, field: str, message: str) -> None:
        self.add_issue(field, message, severity="warning")

    def get_issues_by_severity(self, severity: str) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == severity]

    @property
    def errors(self) -> Dict[str, str]:
        """Field -> message mapping of blocking errors, in check order."""
        return {i.field: i.message for i in self.issues if i.severity == "error"}

    @property
    def warnings(self) -> Dict[str, str]:
        return {i.field: i.message for i in self.issues if i.severity == "warning"}

    def error_count(self) -> int:
        return len(self.get_issues_by_severity("error"))

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return self.error_count() == 0

    def summary_text(self) -> str:
        """Generate a human-readable list of problems."""
        if not self.issues:
            return "Form valid"
        lines = ["Form tidak valid:" if not self.is_valid() else "Peringatan:"]
        for issue in self.issues:
            lines.append(f"  - {issue.field}: {issue.message}")
        return "\n".join(lines)


def is_valid_url(url: Optional[str]) -> bool:
    """Check that *url* is an absolute http or https URL.

    An empty value counts as valid because the document link is optional.

    Examples:
        is_valid_url("https://drive.example.com/berkas/1") -> True
        is_valid_url("ftp://example.com/a") -> False
        is_valid_url("") -> True
    """
    if not url:
        return True
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def validate_image_file(photo: Any) -> Tuple[bool, Optional[str]]:
    """Check an uploaded photo's MIME type and size.

    Args:
        photo: Object with ``mime_type`` and ``size`` attributes

    Returns:
        (is_valid, error_message)
    """
    if photo.mime_type not in KnownValues.ACCEPTED_IMAGE_TYPES:
        return False, "Format file tidak didukung. Gunakan JPG, PNG, atau WebP."
    if photo.size > KnownValues.MAX_FILE_SIZE:
        return False, "Ukuran file terlalu besar. Maksimal 5MB."
    return True, None


def validate_teacher_form(form: Any) -> ValidationResult:
    """Validate a submitted teacher form.

    Every field is checked independently and all problems are returned
    together so the caller can show them at once.

    Args:
        form: Object with photo, name, nip, position, school,
              retirement_date and document_link attributes

    Returns:
        ValidationResult; ``result.errors`` maps field name to message
    """
    result = ValidationResult()

    name = clean_text(form.name)
    if not name:
        result.add_issue("name", "Nama wajib diisi")
    elif len(name) < 2:
        result.add_issue("name", "Nama minimal 2 karakter")

    nip = clean_text(form.nip)
    if not nip:
        result.add_issue("nip", "NIP wajib diisi")
    elif not NIP_DIGITS.match(nip):
        result.add_issue("nip", "NIP harus berupa angka")
    elif len(nip) < 8:
        result.add_issue("nip", "NIP minimal 8 digit")

    if not clean_text(form.position):
        result.add_issue("position", "Jabatan wajib diisi")

    if not clean_text(form.school):
        result.add_issue("school", "Nama sekolah wajib diisi")

    retirement_date = clean_text(form.retirement_date)
    if not retirement_date:
        result.add_issue("retirement_date", "Tanggal pensiun wajib diisi")
    elif not is_valid_date(retirement_date):
        result.add_issue("retirement_date", "Format tanggal tidak valid")

    if form.photo is None:
        result.add_issue("photo", "Foto guru wajib diupload")

    document_link = clean_text(form.document_link)
    if document_link and not is_valid_url(document_link):
        result.add_issue("document_link", "URL dokumen tidak valid")

    return result
