"""Unit tests for HybridTranslationService tier resolution."""

import asyncio
import time
from datetime import datetime
from unittest.mock import patch

import httpx
import pytest

from triagro.services.caching import CacheRecord, InMemoryTranslationCache
from triagro.services.translation import (
    GhanaNLPTranslationService,
    HybridTranslationService,
    RemoteServiceUnavailableError,
    RemoteTranslationError,
    StaticTermStore,
    TranslationContext,
)

REMEDY = "Apply copper-based fungicide every 7-10 days and remove affected leaves."


@pytest.fixture
def store():
    return StaticTermStore.from_dicts(
        terms={"Tomato": {"tw": "Tomato"}, "Healthy": {"tw": "Apɔmuden"}},
        templates=[
            {"name": "early_blight", "pattern": r"early.?blight", "translations": {"tw": "EB-TW"}},
        ],
        phrases={"apply fungicide": {"tw": "AF-TW"}, "leaves": {"tw": "nhaban"}},
    )


@pytest.fixture
def cache():
    return InMemoryTranslationCache()


@pytest.fixture
def translator(store, fake_remote, cache):
    return HybridTranslationService(
        term_store=store,
        remote=fake_remote,
        context=TranslationContext.create(cache=cache),
    )


def hits(translator, tier):
    return translator.get_service_stats()["hybrid"]["hits"][tier]


class TestNoop:
    """Inputs returned unchanged without touching any tier."""

    @pytest.mark.parametrize("text", ["", "   ", "42", "7-10", None, 12])
    def test_noop_inputs(self, translator, fake_remote, text):
        assert asyncio.run(translator.translate(text, "en", "tw")) == text
        assert fake_remote.calls == []

    def test_same_language(self, translator, fake_remote):
        assert asyncio.run(translator.translate("Hello", "tw", "tw")) == "Hello"
        assert fake_remote.calls == []
        assert hits(translator, "noop") == 1


class TestStaticTiers:
    """Template and phrase tiers."""

    def test_tomato_static_hit(self, translator, fake_remote):
        async def scenario():
            start = time.perf_counter()
            result = await translator.translate("Tomato", "en", "tw")
            return result, (time.perf_counter() - start) * 1000

        result, elapsed_ms = asyncio.run(scenario())

        assert result == "Tomato"
        assert fake_remote.calls == []
        assert hits(translator, "template") == 1
        assert elapsed_ms < 5

    def test_template_beats_remote(self, translator, fake_remote, cache):
        assert asyncio.run(translator.translate("Healthy", "en", "tw")) == "Apɔmuden"
        assert fake_remote.calls == []
        assert cache.get("Healthy", "en", "tw") == "Apɔmuden"

    def test_treatment_template(self, translator, fake_remote):
        text = "Spray fungicide to control early blight"
        assert asyncio.run(translator.translate(text, "en", "tw")) == "EB-TW"
        assert fake_remote.calls == []

    def test_phrase_beats_remote(self, translator, fake_remote, cache):
        result = asyncio.run(translator.translate("Please apply fungicide", "en", "tw"))

        assert result == "Please AF-TW"
        assert fake_remote.calls == []
        assert cache.get("Please apply fungicide", "en", "tw") == "Please AF-TW"
        assert hits(translator, "phrase") == 1

    def test_static_tiers_only_for_english_source(self, translator, fake_remote):
        result = asyncio.run(translator.translate("Tomato", "tw", "ee"))

        assert result == "[ee] Tomato"
        assert fake_remote.calls == [("Tomato", "tw", "ee")]


class TestCacheTier:
    """Cache lookups and write-through."""

    def test_preloaded_cache_hit_after_normalization(self, translator, fake_remote, cache):
        cache.put_record(CacheRecord(key="en-tw-hello", value="Akwaaba", written_at=datetime.now()))

        assert asyncio.run(translator.translate("  Hello  ", "en", "tw")) == "Akwaaba"
        assert fake_remote.calls == []
        assert hits(translator, "cache") == 1

    def test_remote_result_written_through(self, translator, fake_remote, cache):
        result = asyncio.run(translator.translate("Good morning", "en", "tw"))

        assert result == "[tw] Good morning"
        assert cache.get("good   MORNING", "en", "tw") == "[tw] Good morning"

    def test_idempotent(self, translator, fake_remote):
        async def scenario():
            first = await translator.translate("Good morning", "en", "tw")
            second = await translator.translate("Good morning", "en", "tw")
            return first, second

        first, second = asyncio.run(scenario())

        assert first == second
        assert len(fake_remote.calls) == 1
        assert hits(translator, "remote") == 1
        assert hits(translator, "cache") == 1

    def test_remedy_single_remote_call_and_cache_write(self, fake_remote, cache):
        translator = HybridTranslationService(
            term_store=StaticTermStore(),
            remote=fake_remote,
            context=TranslationContext.create(cache=cache),
        )

        with patch.object(cache, "put_record", wraps=cache.put_record) as put_record:
            result = asyncio.run(translator.translate(REMEDY, "en", "tw"))

        assert result == f"[tw] {REMEDY}"
        assert fake_remote.calls == [(REMEDY, "en", "tw")]
        assert put_record.call_count == 1

    def test_clear_cache(self, translator, fake_remote, cache):
        asyncio.run(translator.translate("Good morning", "en", "tw"))
        translator.clear_cache()

        assert len(cache) == 0
        asyncio.run(translator.translate("Good morning", "en", "tw"))
        assert len(fake_remote.calls) == 2


class TestRemoteTier:
    """Deduplication and fallback behaviour of the remote tier."""

    def test_concurrent_identical_requests_hit_remote_once(self, store, make_remote):
        remote = make_remote(delay=0.05)
        translator = HybridTranslationService(term_store=store, remote=remote)

        async def scenario():
            return await asyncio.gather(
                *(translator.translate("Good morning", "en", "tw") for _ in range(10))
            )

        results = asyncio.run(scenario())

        assert results == ["[tw] Good morning"] * 10
        assert len(remote.calls) == 1
        assert translator.context.deduplicator.pending_count == 0

    def test_case_variants_share_one_request(self, store, make_remote):
        remote = make_remote(delay=0.05)
        translator = HybridTranslationService(term_store=store, remote=remote)

        async def scenario():
            return await asyncio.gather(
                translator.translate("Good morning", "en", "tw"),
                translator.translate("  good MORNING ", "en", "tw"),
            )

        asyncio.run(scenario())
        assert len(remote.calls) == 1

    @pytest.mark.parametrize(
        "error",
        [
            RemoteTranslationError("HTTP failure", 500),
            RemoteServiceUnavailableError("disabled"),
            RuntimeError("unexpected"),
        ],
    )
    def test_remote_failure_returns_original(self, store, make_remote, error):
        remote = make_remote(error=error)
        translator = HybridTranslationService(term_store=store, remote=remote)

        assert asyncio.run(translator.translate("Good morning", "en", "tw")) == "Good morning"
        assert len(translator.context.cache) == 0
        assert hits(translator, "passthrough") == 1

    def test_failure_is_not_cached(self, store, make_remote):
        remote = make_remote(error=RemoteTranslationError("down"))
        translator = HybridTranslationService(term_store=store, remote=remote)

        async def scenario():
            await translator.translate("Good morning", "en", "tw")
            remote.error = None
            return await translator.translate("Good morning", "en", "tw")

        assert asyncio.run(scenario()) == "[tw] Good morning"
        assert len(remote.calls) == 2

    def test_unrecognized_response_not_cached(self, store, make_remote):
        remote = make_remote(unrecognized=True)
        translator = HybridTranslationService(term_store=store, remote=remote)

        assert asyncio.run(translator.translate("Good morning", "en", "tw")) == "Good morning"
        assert len(translator.context.cache) == 0

    def test_without_remote_passes_through(self, store):
        translator = HybridTranslationService(term_store=store)
        assert asyncio.run(translator.translate("Good morning", "en", "tw")) == "Good morning"


class TestLongText:
    """Sentence-level handling above the length threshold."""

    TEXT = "Apply fungicide. Check the weather today. Keep the field clean"

    @pytest.fixture
    def long_translator(self, store, fake_remote, cache):
        return HybridTranslationService(
            term_store=store,
            remote=fake_remote,
            context=TranslationContext.create(cache=cache),
            long_text_threshold=40,
        )

    def test_only_unresolved_sentences_go_remote(self, long_translator, fake_remote, cache):
        fake_remote.replies = {
            "Check the weather today. Keep the field clean.": "Hwɛ ewiem nnɛ. Ma afuo no nyɛ fɛ."
        }

        result = asyncio.run(long_translator.translate(self.TEXT, "en", "tw"))

        assert result == "AF-TW. Hwɛ ewiem nnɛ. Ma afuo no nyɛ fɛ."
        assert len(fake_remote.calls) == 1
        assert cache.get("Check the weather today", "en", "tw") == "Hwɛ ewiem nnɛ"
        assert cache.get(self.TEXT, "en", "tw") == result

    def test_mismatched_sentence_count_kept_as_block(self, long_translator, fake_remote):
        fake_remote.reply = lambda text, source, target: "One block without breaks"

        result = asyncio.run(long_translator.translate(self.TEXT, "en", "tw"))

        assert result == "AF-TW. One block without breaks."

    def test_remote_failure_keeps_original_sentences(self, long_translator, fake_remote, cache):
        fake_remote.error = RemoteTranslationError("down")

        result = asyncio.run(long_translator.translate(self.TEXT, "en", "tw"))

        assert result == "AF-TW. Check the weather today. Keep the field clean."
        assert cache.get(self.TEXT, "en", "tw") is None

    def test_fully_local_long_text(self, long_translator, fake_remote, cache):
        cache.put("Check the weather today", "en", "tw", "A")
        cache.put("Keep the field clean", "en", "tw", "B")

        result = asyncio.run(long_translator.translate(self.TEXT, "en", "tw"))

        assert result == "AF-TW. A. B."
        assert fake_remote.calls == []
        assert hits(long_translator, "phrase") == 1


class TestTreatmentByDisease:
    """Remedy translation keyed on the disease name."""

    def test_disease_template_used(self, translator, fake_remote, cache):
        result = asyncio.run(
            translator.translate_treatment(REMEDY, "Early blight", "en", "tw")
        )

        assert result == "EB-TW"
        assert fake_remote.calls == []
        assert cache.get(REMEDY, "en", "tw") is None

    def test_unknown_disease_falls_back_to_remedy(self, translator):
        result = asyncio.run(translator.translate_treatment("Water daily", "Unknown", "en", "tw"))
        assert result == "[tw] Water daily"


class TestServiceInterface:
    """Public helpers used by the UI."""

    def test_supported_languages(self, translator):
        languages = translator.get_supported_languages()
        codes = [language["code"] for language in languages]

        assert codes == ["en", "tw", "ee", "ga", "dag", "ff", "ha"]
        assert languages[1]["name"] == "Twi"
        assert translator.is_language_supported("dag")
        assert not translator.is_language_supported("fr")

    def test_translate_text_argument_order(self, translator):
        assert asyncio.run(translator.translate_text("Tomato", "tw")) == "Tomato"

    def test_initialize_without_connection_check_uses_availability(self, translator, fake_remote):
        assert asyncio.run(translator.initialize()) is True
        fake_remote.availability.mark_auth_failure()
        assert asyncio.run(translator.initialize()) is False

    def test_initialize_without_remote(self, store):
        assert asyncio.run(HybridTranslationService(term_store=store).initialize()) is False

    def test_health_check(self, translator, fake_remote):
        health = asyncio.run(translator.health_check())
        assert health["status"] == "optimal"

        fake_remote.availability.mark_auth_failure()
        health = asyncio.run(translator.health_check())
        assert health["status"] == "degraded"
        assert health["performance"]["hybrid"]["remote_available"] is False

    def test_context_shares_remote_availability(self, store):
        """A key rejected by the API shows up in the resolver's own flag and stats."""
        requests = []

        def reject(request):
            requests.append(request)
            return httpx.Response(401, json={"message": "Invalid subscription key"})

        async def scenario():
            async with httpx.AsyncClient(transport=httpx.MockTransport(reject)) as client:
                remote = GhanaNLPTranslationService(client=client, api_key="bad-key")
                translator = HybridTranslationService(term_store=store, remote=remote)
                first = await translator.translate("Good morning", "en", "tw")
                second = await translator.translate("Good evening", "en", "tw")
                return remote, translator, first, second

        remote, translator, first, second = asyncio.run(scenario())

        assert (first, second) == ("Good morning", "Good evening")
        assert translator.context.availability is remote.availability
        assert not translator.context.availability.is_available
        assert len(requests) == 1

        stats = translator.get_service_stats()
        assert stats["hybrid"]["remote_available"] is False
        assert stats["hybrid"]["availability"]["permanently_disabled"] is True

    def test_supplied_context_adopts_remote_availability(self, store, fake_remote, cache):
        context = TranslationContext.create(cache=cache)
        translator = HybridTranslationService(term_store=store, remote=fake_remote, context=context)

        fake_remote.availability.mark_rate_limited()

        assert context.availability is fake_remote.availability
        assert asyncio.run(translator.translate("Good morning", "en", "tw")) == "Good morning"
        assert fake_remote.calls == []

    def test_metrics(self, translator):
        async def scenario():
            await translator.translate("Tomato", "en", "tw")
            await translator.translate("Tomato", "en", "tw")
            await translator.translate("Good morning", "en", "tw")

        asyncio.run(scenario())
        stats = translator.get_service_stats()["hybrid"]

        assert stats["total_requests"] == 3
        assert stats["hits"]["template"] == 1
        assert stats["hits"]["cache"] == 1
        assert stats["hits"]["remote"] == 1
        assert stats["average_ms"] >= 0
