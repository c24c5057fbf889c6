"""Hybrid Translation Service - tiered resolution across local data, cache and the remote API."""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from triagro.core import PIVOT_LANGUAGE, SUPPORTED_LANGUAGES, is_language_supported
from triagro.services.text_processing import (
    is_numeric,
    join_sentences,
    make_cache_key,
    split_sentences,
)
from triagro.services.translation.batch_translation import (
    translate_batch,
    translate_diagnosis,
    translate_labels,
)
from triagro.services.translation.term_store import StaticTermStore
from triagro.services.translation.translation_context import Tier, TranslationContext
from triagro.services.translation.translation_service import (
    RemoteServiceUnavailableError,
    RemoteTranslationError,
    RemoteTranslationService,
)

logger = logging.getLogger(__name__)

_TIER_RANK = {Tier.CACHE: 0, Tier.TEMPLATE: 1, Tier.PHRASE: 2, Tier.REMOTE: 3}


def _preview(text: Any, limit: int = 50) -> str:
    text = str(text)
    return text if len(text) <= limit else text[:limit] + "..."


class HybridTranslationService:
    """
    Resolves translations through ordered tiers, cheapest first.

    1. no-op (same language, blank, numeric)
    2. cache hit on the normalized key
    3. static template match (exact terms, then treatment templates)
    4. phrase substitution
    5. remote API, deduplicated per key, written through to the cache
    6. original text

    Templates always beat phrase substitution, which always beats the
    remote API. translate() never raises: the worst case is the input
    text unchanged.

    Texts longer than long_text_threshold are split into sentences; each
    sentence goes through tiers 2-4 and whatever is left is sent to the
    API in one joined request.
    """

    LONG_TEXT_THRESHOLD = 300

    def __init__(
        self,
        term_store: StaticTermStore,
        remote: Optional[RemoteTranslationService] = None,
        context: Optional[TranslationContext] = None,
        long_text_threshold: int = LONG_TEXT_THRESHOLD,
    ):
        self._term_store = term_store
        self._remote = remote
        self.context = context if context is not None else TranslationContext.create()
        if remote is not None:
            # The remote client updates this flag; the resolver reads the same one.
            self.context.availability = remote.availability
        self.long_text_threshold = long_text_threshold

    async def initialize(self) -> bool:
        """Probe remote connectivity. Returns True if the remote tier is usable."""
        if self._remote is None:
            return False
        probe = getattr(self._remote, "test_connection", None)
        if probe is None:
            return self._remote_available()
        return await probe()

    def _remote_available(self) -> bool:
        return self._remote is not None and self.context.availability.is_available

    # ------------------------------------------------------------------
    # Core resolution
    # ------------------------------------------------------------------

    async def translate(self, text: str, source_lang: str = "en", target_lang: str = "tw") -> str:
        """Translate text, falling back to the original on any failure."""
        start = time.perf_counter()
        try:
            tier, result = await self._resolve(text, source_lang, target_lang)
        except Exception:
            logger.exception(
                "Translation failed for %r (%s -> %s)", _preview(text), source_lang, target_lang
            )
            tier, result = Tier.PASSTHROUGH, text

        duration_ms = (time.perf_counter() - start) * 1000
        self.context.metrics.record(tier, duration_ms)
        logger.debug("Resolved %r via %s in %.2fms", _preview(text), tier.value, duration_ms)
        return result

    async def translate_treatment(
        self,
        remedy: str,
        disease: Optional[str],
        source_lang: str = "en",
        target_lang: str = "tw",
    ) -> str:
        """
        Translate a remedy, preferring the treatment template for its disease.

        The disease-keyed template is not cached under the remedy text,
        since the same remedy may belong to a different diagnosis.
        """
        if (
            isinstance(disease, str)
            and not self._is_noop(remedy, source_lang, target_lang)
            and source_lang == PIVOT_LANGUAGE
        ):
            start = time.perf_counter()
            template = self._term_store.match_treatment(disease, target_lang)
            if template is not None:
                self.context.metrics.record(Tier.TEMPLATE, (time.perf_counter() - start) * 1000)
                return template
        return await self.translate(remedy, source_lang, target_lang)

    async def _resolve(self, text: str, source_lang: str, target_lang: str) -> Tuple[Tier, str]:
        if self._is_noop(text, source_lang, target_lang):
            return Tier.NOOP, text

        cached = self.context.cache.get(text, source_lang, target_lang)
        if cached is not None:
            return Tier.CACHE, cached

        template = self._match_template(text, source_lang, target_lang)
        if template is not None:
            self.context.cache.put(text, source_lang, target_lang, template)
            return Tier.TEMPLATE, template

        if len(text) > self.long_text_threshold:
            return await self._resolve_long_text(text, source_lang, target_lang)

        substituted = self._substitute_phrases(text, source_lang, target_lang)
        if substituted is not None:
            self.context.cache.put(text, source_lang, target_lang, substituted)
            return Tier.PHRASE, substituted

        return await self._resolve_remote(text, source_lang, target_lang)

    def _is_noop(self, text: Any, source_lang: str, target_lang: str) -> bool:
        if not isinstance(text, str) or not text.strip():
            return True
        return source_lang == target_lang or is_numeric(text)

    def _match_template(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        # Local tables are keyed by English text.
        if source_lang != PIVOT_LANGUAGE:
            return None
        return self._term_store.match_template(text, target_lang)

    def _substitute_phrases(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        if source_lang != PIVOT_LANGUAGE:
            return None
        substituted = self._term_store.substitute_phrases(text, target_lang)
        return substituted if substituted != text else None

    def _resolve_locally(
        self, text: str, source_lang: str, target_lang: str
    ) -> Optional[Tuple[Tier, str]]:
        cached = self.context.cache.get(text, source_lang, target_lang)
        if cached is not None:
            return Tier.CACHE, cached

        template = self._match_template(text, source_lang, target_lang)
        if template is not None:
            self.context.cache.put(text, source_lang, target_lang, template)
            return Tier.TEMPLATE, template

        substituted = self._substitute_phrases(text, source_lang, target_lang)
        if substituted is not None:
            self.context.cache.put(text, source_lang, target_lang, substituted)
            return Tier.PHRASE, substituted
        return None

    async def _resolve_remote(self, text: str, source_lang: str, target_lang: str) -> Tuple[Tier, str]:
        if not self._remote_available():
            return Tier.PASSTHROUGH, text

        key = make_cache_key(text, source_lang, target_lang)
        try:
            translated = await self.context.deduplicator.dedupe(
                key, lambda: self._fetch_remote(text, source_lang, target_lang)
            )
        except RemoteServiceUnavailableError as e:
            logger.debug("Skipping remote tier: %s", e)
            return Tier.PASSTHROUGH, text
        except RemoteTranslationError as e:
            logger.warning("Remote translation failed for %r: %s", _preview(text), e)
            return Tier.PASSTHROUGH, text

        if translated is None:
            return Tier.PASSTHROUGH, text
        return Tier.REMOTE, translated

    async def _fetch_remote(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        result = await self._remote.translate(text, source_lang, target_lang)
        if result.unrecognized:
            return None
        self.context.cache.put(text, source_lang, target_lang, result.text)
        return result.text

    async def _resolve_long_text(
        self, text: str, source_lang: str, target_lang: str
    ) -> Tuple[Tier, str]:
        sentences = split_sentences(text)
        resolved: List[Optional[str]] = []
        tiers: List[Tier] = []
        for sentence in sentences:
            local = self._resolve_locally(sentence, source_lang, target_lang)
            if local is None:
                resolved.append(None)
            else:
                tiers.append(local[0])
                resolved.append(local[1])

        missing = [index for index, value in enumerate(resolved) if value is None]
        if missing:
            joined = join_sentences([sentences[index] for index in missing])
            tier, translated = await self._resolve_remote(joined, source_lang, target_lang)
            if tier is not Tier.REMOTE:
                for index in missing:
                    resolved[index] = sentences[index]
                return Tier.PASSTHROUGH, join_sentences(resolved)

            self._distribute(translated, missing, sentences, resolved, source_lang, target_lang)
            tiers.append(Tier.REMOTE)

        result = join_sentences(resolved)
        self.context.cache.put(text, source_lang, target_lang, result)
        return max(tiers, key=_TIER_RANK.__getitem__, default=Tier.CACHE), result

    def _distribute(
        self,
        translated: str,
        missing: List[int],
        sentences: List[str],
        resolved: List[Optional[str]],
        source_lang: str,
        target_lang: str,
    ) -> None:
        pieces = split_sentences(translated)
        if len(pieces) == len(missing):
            for index, piece in zip(missing, pieces):
                resolved[index] = piece
                self.context.cache.put(sentences[index], source_lang, target_lang, piece)
            return

        # Sentence count changed in translation; keep the reply as one block.
        resolved[missing[0]] = translated
        for index in missing[1:]:
            resolved[index] = ""

    # ------------------------------------------------------------------
    # Public interface used by the UI
    # ------------------------------------------------------------------

    async def translate_text(self, text: str, target_lang: str, source_lang: str = "en") -> str:
        return await self.translate(text, source_lang, target_lang)

    async def batch_translate(
        self, texts: Sequence[str], target_lang: str, source_lang: str = "en"
    ) -> List[str]:
        return await translate_batch(self, texts, source_lang, target_lang)

    async def translate_diagnosis_result(
        self, result: Optional[Mapping[str, Any]], target_lang: str, source_lang: str = "en"
    ) -> Optional[Dict[str, Any]]:
        return await translate_diagnosis(self, result, target_lang, source_lang)

    async def translate_ui_labels(
        self, labels: Optional[Mapping[str, Any]], target_lang: str, source_lang: str = "en"
    ) -> Optional[Dict[str, Any]]:
        return await translate_labels(self, labels, target_lang, source_lang)

    def get_supported_languages(self) -> List[Dict[str, str]]:
        return [language.to_dict() for language in SUPPORTED_LANGUAGES]

    def is_language_supported(self, code: str) -> bool:
        return is_language_supported(code)

    def clear_cache(self) -> None:
        self.context.cache.clear()
        logger.info("Translation cache cleared")

    def get_service_stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {
            "hybrid": {
                **self.context.metrics.snapshot(),
                "remote_available": self._remote_available(),
                "availability": self.context.availability.snapshot(),
                "cache_size": len(self.context.cache),
                "pending_requests": self.context.deduplicator.pending_count,
            },
            "static": self._term_store.stats(),
        }
        usage = getattr(self._remote, "get_usage_stats", None)
        if usage is not None:
            stats["remote"] = usage()
        return stats

    async def health_check(self) -> Dict[str, Any]:
        remote_health = None
        check = getattr(self._remote, "health_check", None)
        if check is not None:
            remote_health = await check()

        return {
            "service": "Hybrid Translation Service",
            "status": "optimal" if self._remote_available() else "degraded",
            "performance": self.get_service_stats(),
            "remote": remote_health,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
