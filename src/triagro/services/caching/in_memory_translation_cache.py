"""In-memory translation cache for testing and session-level caching."""

from typing import Optional

from triagro.services.caching.translation_cache import CacheRecord, TranslationCache


class InMemoryTranslationCache(TranslationCache):
    """
    Simple in-memory cache implementation.

    Used for testing and session-level caching. No persistence.
    """

    def __init__(self):
        self._store: dict[str, CacheRecord] = {}

    def get_record(self, key: str) -> Optional[CacheRecord]:
        return self._store.get(key)

    def put_record(self, record: CacheRecord) -> None:
        self._store[record.key] = record

    def delete_key(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def list_keys(self) -> list[str]:
        return list(self._store.keys())

    def __len__(self) -> int:
        return len(self._store)
