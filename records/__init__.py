"""
Records package -- teacher retirement record keeping.

Re-exports key entry points so callers can do::

    from records import RecordStore, RecordWorkspace, SqliteStorage
"""

from records.models import (
    FilterCriteria,
    PhotoUpload,
    ProgressStatus,
    SortCriteria,
    Statistics,
    TeacherFormData,
    TeacherRecord,
)
from records.storage import KeyValueStorage, MemoryStorage, SqliteStorage
from records.store import RecordStore
from records.filters import filter_teachers, make_criteria
from records.sorting import sort_teachers, toggle_sort
from records.statistics import compute_statistics
from records.excel_export import ExportOptions, TeacherExcelExporter
from records.workspace import ExportResult, RecordWorkspace

__all__ = [
    "FilterCriteria",
    "PhotoUpload",
    "ProgressStatus",
    "SortCriteria",
    "Statistics",
    "TeacherFormData",
    "TeacherRecord",
    "KeyValueStorage",
    "MemoryStorage",
    "SqliteStorage",
    "RecordStore",
    "filter_teachers",
    "make_criteria",
    "sort_teachers",
    "toggle_sort",
    "compute_statistics",
    "ExportOptions",
    "TeacherExcelExporter",
    "ExportResult",
    "RecordWorkspace",
]
