"""Common utility functions used across the retirement records tools."""

import random
import string
import time
from datetime import datetime, timezone

from utils.patterns import UNSAFE_FILENAME_CHARS

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_id(prefix: str = "teacher", now_ms: int | None = None) -> str:
    """Return a new record id like ``teacher_1760882400000_k3j9x0q2a``.

    The id combines the epoch time in milliseconds with nine random
    base-36 characters.  Callers that need a hard uniqueness guarantee
    (the record store) re-draw on collision.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}_{now_ms}_{suffix}"


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def to_iso_timestamp(moment: datetime) -> str:
    """Serialize *moment* as ISO-8601 UTC with millisecond precision.

    Examples:
        2026-10-19T08:15:02.120Z
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_filename(name: str) -> str:
    """Replace characters that are invalid in file names with underscores."""
    return UNSAFE_FILENAME_CHARS.sub("_", name).strip()
