"""Shared utilities for the teacher retirement records tools."""

# Common utilities
from utils.common import generate_id, utc_now, to_iso_timestamp, sanitize_filename

# Pattern definitions
from utils.patterns import NIP_DIGITS, DATA_URI

# String utilities
from utils.strings import clean_text, fold

# Date parsing
from utils.dates import parse_iso_date, parse_instant, is_valid_date, EARLIEST

# Database utilities
from utils.database import init_pragmas, get_connection, table_exists

# Validation utilities
from utils.validation import (
    ValidationIssue,
    ValidationResult,
    is_valid_url,
    validate_image_file,
    validate_teacher_form,
)

# Output formatting
from utils.formatting import (
    format_date,
    format_timestamp,
    format_month_year,
    format_generated_at,
    format_date_for_input,
    generate_export_filename,
    truncate_text,
    TableFormatter,
    ReportFormatter,
)

# Configuration
from utils.config import (
    Config,
    StorageConfig,
    ExportConfig,
    AppConfig,
    KnownValues,
)

__all__ = [
    # Common
    "generate_id",
    "utc_now",
    "to_iso_timestamp",
    "sanitize_filename",
    # Patterns
    "NIP_DIGITS",
    "DATA_URI",
    # Strings
    "clean_text",
    "fold",
    # Dates
    "parse_iso_date",
    "parse_instant",
    "is_valid_date",
    "EARLIEST",
    # Database
    "init_pragmas",
    "get_connection",
    "table_exists",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    "is_valid_url",
    "validate_image_file",
    "validate_teacher_form",
    # Formatting
    "format_date",
    "format_timestamp",
    "format_month_year",
    "format_generated_at",
    "format_date_for_input",
    "generate_export_filename",
    "truncate_text",
    "TableFormatter",
    "ReportFormatter",
    # Config
    "Config",
    "StorageConfig",
    "ExportConfig",
    "AppConfig",
    "KnownValues",
]
