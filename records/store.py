"""
Record store — the authoritative, ordered list of teacher records.

Records are kept in insertion order.  Every mutation writes the full list,
JSON-encoded, to a durable key-value slot under a fixed key; construction
reads the slot back.  Storage problems never reach the caller:

- unreadable, malformed or invalid slot content is logged and the store
  starts empty;
- a failed write is logged and the in-memory mutation stands.

Usage::

    store = RecordStore(SqliteStorage("pensiun_guru.sqlite"))
    rec = store.add({"photo": uri, "name": "Siti Aminah", ...})
    store.update(rec.id, {"progressStatus": "Approved"})
    store.remove(rec.id)
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Iterator, Mapping

from pydantic import ValidationError

from records.models import IMMUTABLE_FIELDS, TeacherRecord, resolve_field
from records.storage import KeyValueStorage, MemoryStorage
from utils.common import generate_id, to_iso_timestamp, utc_now
from utils.config import KnownValues
from utils.dates import parse_instant

logger = logging.getLogger(__name__)

STORAGE_KEY = KnownValues.STORAGE_KEYS["teachers"]

# Errors a storage backend may raise on read or write
STORAGE_ERRORS = (OSError, sqlite3.Error)


class RecordStore:
    """Owns the teacher records and mediates every mutation.

    Args:
        storage: Key-value substrate (defaults to a fresh MemoryStorage)
        key: Slot key the records are written under
        clock: Returns "now"; injectable so tests can freeze time
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        key: str = STORAGE_KEY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.storage = storage if storage is not None else MemoryStorage()
        self.key = key
        self._clock = clock or utc_now
        self._records: list[TeacherRecord] = self._load()

    # ── read side ─────────────────────────────────────────────────────────

    def records(self) -> tuple[TeacherRecord, ...]:
        """Immutable snapshot of all records in insertion order."""
        return tuple(self._records)

    def get(self, record_id: str) -> TeacherRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def exists(self, nip: str, excluding_id: str | None = None) -> bool:
        """Whether another record already uses *nip*.

        Advisory only: the store never refuses a duplicate NIP.
        """
        nip = nip.strip()
        return any(r.nip == nip and r.id != excluding_id for r in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TeacherRecord]:
        return iter(tuple(self._records))

    def __contains__(self, record_id: object) -> bool:
        return any(r.id == record_id for r in self._records)

    # ── mutations ─────────────────────────────────────────────────────────

    def add(self, fields: Mapping[str, Any]) -> TeacherRecord:
        """Append a new record built from *fields*.

        The store assigns ``id``, ``createdAt`` and ``updatedAt``.

        Raises:
            ValueError: if *fields* tries to set a store-assigned field
            pydantic.ValidationError: if required fields are missing or invalid
        """
        data = self._resolve_patch(fields)
        now = self._timestamp()
        record_id = self._new_id()
        record = TeacherRecord.model_validate(
            {**data, "id": record_id, "created_at": now, "updated_at": now}
        )
        self._records.append(record)
        logger.info("Added record %s (NIP %s)", record.id, record.nip,
                    extra={"record_id": record.id, "nip": record.nip})
        self._persist()
        return record

    def update(self, record_id: str, fields: Mapping[str, Any]) -> TeacherRecord | None:
        """Merge *fields* into the record with *record_id*.

        ``updatedAt`` is refreshed and always moves forward.  Returns the
        updated record, or None when no record has that id.

        Raises:
            KeyError: for a field name the record does not have
            ValueError: for store-assigned fields or invalid values
        """
        patch = self._resolve_patch(fields)
        for index, current in enumerate(self._records):
            if current.id == record_id:
                break
        else:
            logger.debug("Update skipped: no record %s", record_id)
            return None

        updated = self._patched(current, patch)
        self._records[index] = updated
        logger.info("Updated record %s: %s", record_id, ", ".join(sorted(patch)) or "touch")
        self._persist()
        return updated

    def update_many(self, record_ids: Iterable[str], fields: Mapping[str, Any]) -> int:
        """Apply the same patch to every record whose id is in *record_ids*.

        Returns the number of records changed.  Written to storage once.
        """
        wanted = set(record_ids)
        patch = self._resolve_patch(fields)
        changed = 0
        result: list[TeacherRecord] = []
        for current in self._records:
            if current.id in wanted:
                current = self._patched(current, patch)
                changed += 1
            result.append(current)
        if changed:
            self._records = result
            logger.info("Bulk-updated %d records: %s", changed, ", ".join(sorted(patch)))
            self._persist()
        return changed

    def remove(self, record_id: str) -> bool:
        """Delete the record with *record_id*.  Unknown ids are a no-op."""
        return self.remove_many([record_id]) == 1

    def remove_many(self, record_ids: Iterable[str]) -> int:
        """Delete every record whose id is in *record_ids*.

        Returns the number of records removed.
        """
        doomed = set(record_ids)
        kept = [r for r in self._records if r.id not in doomed]
        removed = len(self._records) - len(kept)
        if removed:
            self._records = kept
            logger.info("Removed %d record(s)", removed, extra={"count": removed})
            self._persist()
        return removed

    # ── internals ─────────────────────────────────────────────────────────

    def _resolve_patch(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        patch: dict[str, Any] = {}
        for name, value in fields.items():
            attr = resolve_field(name)
            if attr in IMMUTABLE_FIELDS:
                raise ValueError(f"Field {name!r} is assigned by the store")
            patch[attr] = value
        return patch

    def _patched(self, current: TeacherRecord, patch: dict[str, Any]) -> TeacherRecord:
        data = current.model_dump()
        data.update(patch)
        data["updated_at"] = self._timestamp(after=current.updated_at)
        return TeacherRecord.model_validate(data)

    def _timestamp(self, after: str | None = None) -> str:
        """ISO "now", nudged past *after* so updatedAt strictly increases."""
        moment = self._clock()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        previous = parse_instant(after)
        if previous is not None and moment <= previous:
            moment = previous + timedelta(milliseconds=1)
        return to_iso_timestamp(moment)

    def _new_id(self) -> str:
        taken = {r.id for r in self._records}
        now_ms = round(self._clock().timestamp() * 1000)
        record_id = generate_id(now_ms=now_ms)
        while record_id in taken:
            record_id = generate_id(now_ms=now_ms)
        return record_id

    def _load(self) -> list[TeacherRecord]:
        try:
            raw = self.storage.get(self.key)
        except STORAGE_ERRORS as e:
            logger.error("Failed to read %r from storage: %s", self.key, e)
            return []
        if raw is None:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            records = [TeacherRecord.model_validate(item) for item in data]
        except (ValueError, TypeError, ValidationError) as e:
            logger.error("Discarding malformed %r slot: %s", self.key, e)
            return []

        seen: set[str] = set()
        unique: list[TeacherRecord] = []
        for record in records:
            if record.id in seen:
                logger.warning("Dropping duplicate record id %s on load", record.id)
                continue
            seen.add(record.id)
            unique.append(record)
        logger.debug("Loaded %d records from %r", len(unique), self.key)
        return unique

    def _persist(self) -> None:
        payload = json.dumps([r.to_json_dict() for r in self._records],
                             ensure_ascii=False)
        try:
            self.storage.set(self.key, payload)
        except STORAGE_ERRORS as e:
            logger.error("Failed to save %d records to storage: %s",
                         len(self._records), e)
