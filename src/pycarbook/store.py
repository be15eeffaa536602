"""Local-first record store with remote seed and best-effort mirror.

Each :class:`RecordStore` owns one collection (bookings, purchase
orders): a JSON array of records kept under a single storage key.
Local storage is authoritative. The remote side is used twice, and
never in a way that can fail the caller:

* **seed**: when the local collection is empty, one fetch of a static
  JSON snapshot initializes it;
* **mirror**: writes are propagated to a server endpoint as detached
  asyncio tasks whose outcome is only logged.

Every write is a full read-modify-write of the collection without any
locking, so interleaved writers on the same key can lose updates.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from collections.abc import Mapping
from typing import Any

from pycarbook._redact import redact_for_log
from pycarbook._transport import Transport
from pycarbook.config import CollectionConfig
from pycarbook.exceptions import CarbookStorageError, CarbookTransportError
from pycarbook.models.result import Record, StoreResult
from pycarbook.storage import StorageBackend

_logger = logging.getLogger(__name__)


class RecordStore:
    """Durable, local-first storage of one named record collection.

    Usage::

        store = RecordStore(orders_collection(), MemoryStorage(), transport)
        await store.append({"orderId": "PO-1", "status": "pending"})
        await store.update_status("PO-1", "confirmed")
        await store.wait_for_mirrors()
    """

    def __init__(
        self,
        collection: CollectionConfig,
        storage: StorageBackend,
        transport: Transport | None = None,
        *,
        await_mirror: bool = False,
    ) -> None:
        self._collection = collection
        self._storage = storage
        self._transport = transport
        self._await_mirror = await_mirror
        self._pending_mirrors: set[asyncio.Task[bool]] = set()

    @property
    def collection(self) -> CollectionConfig:
        return self._collection

    @property
    def pending_mirrors(self) -> int:
        """Number of mirror calls still in flight."""
        return len(self._pending_mirrors)

    # ------------------------------------------------------------------
    # Local storage
    # ------------------------------------------------------------------

    def _read_local(self) -> list[Record]:
        key = self._collection.storage_key
        raw = self._storage.get_item(key)
        if raw is None or not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CarbookStorageError(f"Stored value under {key!r} is not JSON", key=key) from exc
        if not isinstance(data, list):
            raise CarbookStorageError(f"Stored value under {key!r} is not a JSON array", key=key)
        return data

    def _read_local_or_empty(self) -> list[Record]:
        if not self._storage.available:
            return []
        try:
            return self._read_local()
        except CarbookStorageError:
            _logger.warning("Ignoring unreadable %s collection", self._collection.name, exc_info=True)
            return []

    def _write_local(self, records: list[Record]) -> None:
        key = self._collection.storage_key
        try:
            serialized = json.dumps(records, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise CarbookStorageError(f"{self._collection.name} records are not JSON serializable: {exc}", key=key) from exc
        self._storage.set_item(key, serialized)

    def _find_index(self, records: list[Record], record_id: Any) -> int | None:
        id_field = self._collection.id_field
        for index, record in enumerate(records):
            if isinstance(record, Mapping) and id_field in record and record[id_field] == record_id:
                return index
        return None

    # ------------------------------------------------------------------
    # Remote seed / mirror
    # ------------------------------------------------------------------

    async def _fetch_snapshot(self) -> list[Record]:
        """Single attempt at fetching the seed snapshot; ``[]`` on any failure."""
        path = self._collection.snapshot_path
        if self._transport is None or path is None:
            return []
        try:
            data = await self._transport.get_json(path)
        except CarbookTransportError as exc:
            _logger.info("Could not load %s snapshot, using empty local storage: %s", self._collection.name, exc)
            return []
        except Exception:
            _logger.warning("Could not load %s snapshot, using empty local storage", self._collection.name, exc_info=True)
            return []

        if not isinstance(data, list):
            _logger.info("Ignoring %s snapshot: expected a JSON array, got %s", self._collection.name, type(data).__name__)
            return []
        return data

    async def _send_mirror(self, transport: Transport, path: str, payload: Any, action: str) -> bool:
        try:
            await transport.post_json(path, payload)
        except Exception as exc:
            _logger.warning("Server %s for %s failed, local storage only: %s", action, self._collection.name, exc)
            _logger.debug("Mirror failure details", exc_info=True)
            return False
        _logger.debug("Server %s for %s accepted", action, self._collection.name)
        return True

    async def _mirror(self, path: str | None, payload: Any, action: str) -> bool | None:
        """Dispatch a mirror call.

        Returns the mirror outcome when mirrors are awaited, otherwise
        ``None`` (also when no endpoint or transport is configured).
        """
        if path is None or self._transport is None:
            return None
        task = asyncio.get_running_loop().create_task(
            self._send_mirror(self._transport, path, copy.deepcopy(payload), action),
            name=f"pycarbook-mirror-{self._collection.name}-{action}",
        )
        self._pending_mirrors.add(task)
        task.add_done_callback(self._pending_mirrors.discard)
        if not self._await_mirror:
            return None
        # A cancelled caller must not take the mirror down with it.
        return await asyncio.shield(task)

    async def wait_for_mirrors(self) -> None:
        """Wait until every dispatched mirror call has finished."""
        while self._pending_mirrors:
            await asyncio.gather(*list(self._pending_mirrors), return_exceptions=True)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def load(self) -> list[Record]:
        """Return the collection, seeding it from the remote snapshot when empty.

        Never raises: storage problems and remote failures both degrade to
        an empty collection.
        """
        if not self._storage.available:
            return []
        try:
            records = self._read_local()
        except CarbookStorageError:
            _logger.error("Error loading %s", self._collection.name, exc_info=True)
            return []
        if records:
            return records

        seeded = await self._fetch_snapshot()
        if not seeded:
            return records

        try:
            self._write_local(seeded)
        except CarbookStorageError:
            _logger.warning("Could not persist %s snapshot locally", self._collection.name, exc_info=True)
        else:
            _logger.info("Seeded %s with %d records from snapshot", self._collection.name, len(seeded))
        return seeded

    async def list_all(self) -> list[Record]:
        """Read-all entry point for dashboards; falls back to the raw local value."""
        try:
            return await self.load()
        except Exception:
            _logger.error("Error getting %s", self._collection.name, exc_info=True)
            return self._read_local_or_empty()

    async def get(self, record_id: Any) -> Record | None:
        """Return the first record whose id field equals *record_id*."""
        records = await self.list_all()
        index = self._find_index(records, record_id)
        return None if index is None else records[index]

    async def append(self, record: Mapping[str, Any]) -> StoreResult:
        """Append *record* as the last element and mirror it when configured."""
        label = self._collection.label
        failure = StoreResult(success=False, message=f"Failed to save {label.lower()}")
        if not self._storage.available:
            _logger.warning("Cannot save %s: local storage is not available", label.lower())
            return failure

        try:
            records = self._read_local()
            records.append(dict(record))
            self._write_local(records)
        except CarbookStorageError:
            _logger.error("Error saving %s", label.lower(), exc_info=True)
            return failure
        _logger.debug("Saved %s %s", label.lower(), redact_for_log(record))

        mirrored = await self._mirror(self._collection.mirror_append_path, dict(record), "save")
        if self._collection.mirror_append_path is None or mirrored:
            return StoreResult(success=True, message=f"{label} saved successfully", mirrored=mirrored)
        return StoreResult(success=True, message=f"{label} saved to local storage", mirrored=mirrored)

    async def update_status(self, record_id: Any, status: str) -> StoreResult:
        """Set the status of the first record matching *record_id*.

        The full collection is written back; the mirror payload carries the
        id, the new status and the whole updated collection.
        """
        label = self._collection.label
        records = await self.load()
        index = self._find_index(records, record_id)
        if index is None:
            return StoreResult(success=False, message=f"{label} not found")

        records[index][self._collection.status_field] = status
        try:
            self._write_local(records)
        except CarbookStorageError:
            _logger.error("Error updating %s status", label.lower(), exc_info=True)
            return StoreResult(success=False, message=f"Failed to update {label.lower()} status")
        _logger.debug("%s %r status set to %r", label, record_id, status)

        payload = {
            self._collection.id_field: record_id,
            self._collection.status_field: status,
            self._collection.name: records,
        }
        mirrored = await self._mirror(self._collection.mirror_update_path, payload, "update")
        if self._collection.mirror_update_path is None or mirrored:
            return StoreResult(success=True, message=f"{label} status updated", mirrored=mirrored)
        return StoreResult(success=True, message=f"{label} status updated in local storage", mirrored=mirrored)
