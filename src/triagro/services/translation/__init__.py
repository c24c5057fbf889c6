"""Translation services - remote client, static store and the tiered resolver."""

from triagro.services.translation.translation_service import (
    Decoded,
    DecodeResult,
    RemoteAuthError,
    RemoteRateLimitedError,
    RemoteServiceUnavailableError,
    RemoteTranslationError,
    RemoteTranslationService,
    TranslationResult,
    UnrecognizedShape,
    UnsupportedLanguagePairError,
    decode_translation_payload,
)
from triagro.services.translation.service_availability import ServiceAvailability
from triagro.services.translation.ghana_nlp_translation_service import GhanaNLPTranslationService
from triagro.services.translation.term_store import StaticTermStore
from triagro.services.translation.translation_context import Tier, TierMetrics, TranslationContext
from triagro.services.translation.batch_translation import (
    translate_batch,
    translate_diagnosis,
    translate_labels,
)
from triagro.services.translation.hybrid_translation_service import HybridTranslationService

__all__ = [
    "Decoded",
    "DecodeResult",
    "RemoteAuthError",
    "RemoteRateLimitedError",
    "RemoteServiceUnavailableError",
    "RemoteTranslationError",
    "RemoteTranslationService",
    "TranslationResult",
    "UnrecognizedShape",
    "UnsupportedLanguagePairError",
    "decode_translation_payload",
    "ServiceAvailability",
    "GhanaNLPTranslationService",
    "StaticTermStore",
    "Tier",
    "TierMetrics",
    "TranslationContext",
    "translate_batch",
    "translate_diagnosis",
    "translate_labels",
    "HybridTranslationService",
]
