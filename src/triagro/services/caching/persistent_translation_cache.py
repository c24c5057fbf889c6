"""Persistent translation cache mirrored to local blob storage."""

import asyncio
import logging
import threading
import time
from datetime import datetime
from typing import Any, Callable, Optional

from triagro.io import LocalStorage
from triagro.services.caching.translation_cache import CacheRecord, TranslationCache

logger = logging.getLogger(__name__)


class PersistentTranslationCache(TranslationCache):
    """
    In-memory cache whose contents are mirrored to durable storage.

    The whole cache is stored as one blob under STORAGE_KEY:

    {
        "data": [["en-tw-hello", "Akwaaba"], ...],
        "timestamp": 1760000000000
    }

    The blob timestamp (epoch milliseconds) is refreshed on every save.
    On load, a blob older than the TTL is discarded in full; entries are
    never expired one by one.

    Writes are debounced: every mutation restarts a save_delay timer and
    only the last snapshot in a burst is written.
    """

    STORAGE_KEY = "translationCache"
    DEFAULT_TTL_SECONDS = 24 * 60 * 60
    DEFAULT_SAVE_DELAY = 1.0

    def __init__(
        self,
        storage: LocalStorage,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        save_delay: float = DEFAULT_SAVE_DELAY,
        clock: Callable[[], float] = time.time,
    ):
        self._storage = storage
        self._ttl_seconds = ttl_seconds
        self._save_delay = save_delay
        self._clock = clock
        self._store: dict[str, CacheRecord] = {}
        self._save_task: Optional[asyncio.Task] = None
        self._write_lock = threading.Lock()
        self._last_persisted_at: Optional[int] = None
        self._snapshot_seq = 0
        self._written_seq = 0

    async def load(self) -> int:
        """
        Load the persisted blob into memory.

        Returns:
            Number of entries loaded (0 when the blob is absent, corrupt or stale).
        """
        blob = await asyncio.to_thread(self._storage.get_item, self.STORAGE_KEY)
        if blob is None:
            return 0

        entries = self._parse_blob(blob)
        if entries is None:
            logger.warning("Discarding malformed translation cache blob")
            await asyncio.to_thread(self._storage.remove_item, self.STORAGE_KEY)
            return 0

        timestamp = blob["timestamp"]
        if self._now_ms() - timestamp >= self._ttl_seconds * 1000:
            logger.info("Persisted translation cache expired, starting empty")
            await asyncio.to_thread(self._storage.remove_item, self.STORAGE_KEY)
            return 0

        written_at = datetime.fromtimestamp(timestamp / 1000)
        for key, value in entries:
            self._store[key] = CacheRecord(key=key, value=value, written_at=written_at)
        self._last_persisted_at = timestamp
        logger.info("Loaded %d cached translations", len(entries))
        return len(entries)

    def get_record(self, key: str) -> Optional[CacheRecord]:
        return self._store.get(key)

    def put_record(self, record: CacheRecord) -> None:
        self._store[record.key] = record
        self._schedule_save(self._save_delay)

    def delete_key(self, key: str) -> None:
        if self._store.pop(key, None) is not None:
            self._schedule_save(self._save_delay)

    def clear(self) -> None:
        """Clear memory and drop the persisted blob."""
        self._store.clear()
        self._schedule_save(0)

    def list_keys(self) -> list[str]:
        return list(self._store.keys())

    def __len__(self) -> int:
        return len(self._store)

    async def flush(self) -> None:
        """Write any pending changes now instead of waiting for the debounce timer."""
        task = self._save_task
        if task is None or task.done():
            return
        task.cancel()
        self._save_task = None
        await self._persist()

    @property
    def save_pending(self) -> bool:
        return self._save_task is not None and not self._save_task.done()

    def stats(self) -> dict[str, Any]:
        return {
            "size": len(self._store),
            "save_pending": self.save_pending,
            "last_persisted_at": self._last_persisted_at,
        }

    def _schedule_save(self, delay: float) -> None:
        if self._save_task is not None and not self._save_task.done():
            self._save_task.cancel()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (plain synchronous use): persist immediately.
            self._save_task = None
            self._write_snapshot(*self._snapshot())
            return

        self._save_task = loop.create_task(self._save_later(delay))

    async def _save_later(self, delay: float) -> None:
        if delay > 0:
            await asyncio.sleep(delay)
        await self._persist()

    async def _persist(self) -> None:
        seq, snapshot = self._snapshot()
        try:
            await asyncio.to_thread(self._write_snapshot, seq, snapshot)
        except OSError as e:
            logger.error("Error saving translation cache: %s", e)

    def _snapshot(self) -> tuple[int, Optional[dict[str, Any]]]:
        self._snapshot_seq += 1
        if not self._store:
            return self._snapshot_seq, None
        return self._snapshot_seq, {
            "data": [[key, record.value] for key, record in self._store.items()],
            "timestamp": self._now_ms(),
        }

    def _write_snapshot(self, seq: int, snapshot: Optional[dict[str, Any]]) -> None:
        """
        Write a snapshot unless a newer one is already on disk.

        A cancelled save task does not stop its worker thread, so an older
        snapshot can reach the lock after a flush has written a newer one.
        """
        with self._write_lock:
            if seq < self._written_seq:
                logger.debug("Skipping stale cache snapshot %d (written %d)", seq, self._written_seq)
                return
            if snapshot is None:
                self._storage.remove_item(self.STORAGE_KEY)
                self._last_persisted_at = None
            else:
                self._storage.set_item(self.STORAGE_KEY, snapshot)
                self._last_persisted_at = snapshot["timestamp"]
            self._written_seq = seq

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    @staticmethod
    def _parse_blob(blob: Any) -> Optional[list[tuple[str, str]]]:
        if not isinstance(blob, dict):
            return None
        data = blob.get("data")
        timestamp = blob.get("timestamp")
        if not isinstance(data, list) or not isinstance(timestamp, (int, float)):
            return None

        entries = []
        for item in data:
            if (
                isinstance(item, (list, tuple))
                and len(item) == 2
                and isinstance(item[0], str)
                and isinstance(item[1], str)
            ):
                entries.append((item[0], item[1]))
        return entries
