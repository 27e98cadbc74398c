"""Configuration management utilities for the retirement records tools.

Provides:
- A small Config base class with dict/JSON round-tripping
- Storage and export settings
- Environment-driven application settings
- Known values (statuses, labels, upload limits) used in validation
"""

from pathlib import Path
from typing import Dict, Optional, Any
import json
import os


class Config:
    """Base configuration class for organizing application settings."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all public config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary.

        Keys that name a Path attribute on the defaults are coerced back
        to Path so a config loaded from JSON behaves like a fresh one.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance with values from dictionary
        """
        config = cls()
        for key, value in data.items():
            if isinstance(getattr(config, key, None), Path) and value is not None:
                value = Path(value)
            setattr(config, key, value)
        return config

    def save_json(self, path: Path) -> None:
        """Save configuration to JSON file.

        Args:
            path: Path to save configuration file
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_json(cls, path: Path) -> "Config":
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)


class StorageConfig(Config):
    """Configuration for the durable key-value slot."""

    def __init__(self):
        self.db_path = Path("pensiun_guru.sqlite")
        self.table_name = "kv_store"
        self.teachers_key = KnownValues.STORAGE_KEYS["teachers"]


class ExportConfig(Config):
    """Configuration for spreadsheet export."""

    def __init__(self):
        self.export_dir = Path(".")
        self.filename_prefix = "data_pensiun_guru"
        self.filtered_filename_prefix = "data_pensiun_guru_filtered"
        self.include_document_links = True


class KnownValues:
    """Container for known valid values used in validation and display."""

    # Canonical progress statuses, in display order
    STATUSES = ("Not Submitted", "In Progress", "Approved", "Rejected")

    # Indonesian display labels for each status
    STATUS_LABELS = {
        "Not Submitted": "Belum Diajukan",
        "In Progress": "Dalam Proses",
        "Approved": "Disetujui",
        "Rejected": "Ditolak",
    }

    # Sentinel accepted by the status filter
    ALL_STATUSES = "all"

    STORAGE_KEYS = {
        "teachers": "teachers-data",
    }

    # Photo upload constraints
    ACCEPTED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")
    MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

    MONTHS_ID = (
        "Januari", "Februari", "Maret", "April", "Mei", "Juni",
        "Juli", "Agustus", "September", "Oktober", "November", "Desember",
    )

    @classmethod
    def get_status_label(cls, status: str) -> Optional[str]:
        """Indonesian label for a canonical status, or None if unknown."""
        return cls.STATUS_LABELS.get(status)

    @classmethod
    def status_from_label(cls, label: str) -> Optional[str]:
        """Map an Indonesian label back to its canonical status value."""
        for status, status_label in cls.STATUS_LABELS.items():
            if status_label == label:
                return status
        return None


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have defaults so the CLI works without any configuration.

    Environment variables:
        PENSIUN_DB_PATH: SQLite file holding the key-value slot (default: pensiun_guru.sqlite)
        PENSIUN_EXPORT_DIR: Directory for exported spreadsheets (default: .)
        PENSIUN_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        PENSIUN_LOG_LEVEL: Root log level name (default: INFO)
    """

    def __init__(self) -> None:
        self.db_path = Path(os.getenv("PENSIUN_DB_PATH", "pensiun_guru.sqlite"))
        self.export_dir = Path(os.getenv("PENSIUN_EXPORT_DIR", "."))
        self.log_format = os.getenv("PENSIUN_LOG_FORMAT", "text")
        self.log_level = os.getenv("PENSIUN_LOG_LEVEL", "INFO").upper()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()

    def storage_config(self) -> StorageConfig:
        config = StorageConfig()
        config.db_path = self.db_path
        return config

    def export_config(self) -> ExportConfig:
        config = ExportConfig()
        config.export_dir = self.export_dir
        return config
