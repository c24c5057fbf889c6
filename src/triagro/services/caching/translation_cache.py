"""Translation Cache abstraction - plugin interface for translation storage."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from triagro.services.text_processing import make_cache_key


@dataclass
class CacheRecord:
    """A cached translation entry."""

    key: str
    value: str
    written_at: datetime


class TranslationCache(ABC):
    """
    Abstract interface for caching translations.

    Keys are built from (text, source_lang, target_lang) with
    make_cache_key, so two requests differing only in case or
    whitespace land on the same entry. Implementations
    (InMemoryTranslationCache, PersistentTranslationCache) handle storage.
    """

    @staticmethod
    def key_for(text: str, source_lang: str, target_lang: str) -> str:
        return make_cache_key(text, source_lang, target_lang)

    def get(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        """Cached translation for text, or None."""
        record = self.get_record(self.key_for(text, source_lang, target_lang))
        return record.value if record else None

    def put(self, text: str, source_lang: str, target_lang: str, value: str) -> None:
        """Store or overwrite the translation for text."""
        key = self.key_for(text, source_lang, target_lang)
        self.put_record(CacheRecord(key=key, value=value, written_at=datetime.now()))

    def delete(self, text: str, source_lang: str, target_lang: str) -> None:
        """Delete a single cache entry."""
        self.delete_key(self.key_for(text, source_lang, target_lang))

    @abstractmethod
    def get_record(self, key: str) -> Optional[CacheRecord]:
        """Retrieve a record by its full cache key."""
        pass

    @abstractmethod
    def put_record(self, record: CacheRecord) -> None:
        """Store a record under record.key."""
        pass

    @abstractmethod
    def delete_key(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""
        pass

    @abstractmethod
    def list_keys(self) -> list[str]:
        """
        List all cache keys.

        Useful for diagnostics and testing.
        """
        pass

    def __len__(self) -> int:
        return len(self.list_keys())

    def __contains__(self, key: str) -> bool:
        return self.get_record(key) is not None
