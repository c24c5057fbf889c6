"""Services layer - translation, caching and external integrations."""

from triagro.services.settings_manager import SettingsManager

# Text processing services
from triagro.services.text_processing import make_cache_key, normalize_text

# Caching services
from triagro.services.caching import (
    CacheRecord,
    InMemoryTranslationCache,
    PersistentTranslationCache,
    RequestDeduplicator,
    TranslationCache,
)

# Translation services
from triagro.services.translation import (
    GhanaNLPTranslationService,
    HybridTranslationService,
    RemoteTranslationError,
    RemoteTranslationService,
    ServiceAvailability,
    StaticTermStore,
    TranslationContext,
    TranslationResult,
)

__all__ = [
    "SettingsManager",
    "make_cache_key",
    "normalize_text",
    "CacheRecord",
    "InMemoryTranslationCache",
    "PersistentTranslationCache",
    "RequestDeduplicator",
    "TranslationCache",
    "GhanaNLPTranslationService",
    "HybridTranslationService",
    "RemoteTranslationError",
    "RemoteTranslationService",
    "ServiceAvailability",
    "StaticTermStore",
    "TranslationContext",
    "TranslationResult",
]
