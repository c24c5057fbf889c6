"""Caching services - abstract interface and concrete implementations."""

from triagro.services.caching.translation_cache import TranslationCache, CacheRecord
from triagro.services.caching.in_memory_translation_cache import InMemoryTranslationCache
from triagro.services.caching.persistent_translation_cache import PersistentTranslationCache
from triagro.services.caching.request_deduplicator import RequestDeduplicator

__all__ = [
    "TranslationCache",
    "CacheRecord",
    "InMemoryTranslationCache",
    "PersistentTranslationCache",
    "RequestDeduplicator",
]
