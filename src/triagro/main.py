"""Main entry point for the TriAgro translation service."""

import asyncio
import logging
import sys
from typing import Optional

import httpx

from triagro.io import LocalStorage
from triagro.services import SettingsManager
from triagro.services.caching import PersistentTranslationCache
from triagro.services.translation import (
    GhanaNLPTranslationService,
    HybridTranslationService,
    ServiceAvailability,
    StaticTermStore,
    TranslationContext,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

SAMPLE_DIAGNOSIS = {
    "plant": "Tomato",
    "disease": "Early blight",
    "remedy": "Apply copper-based fungicide every 7-10 days and remove affected leaves.",
    "confidence": 0.94,
}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def create_translator(
    settings: SettingsManager,
    accuracy_first: bool = False,
    client: Optional[httpx.AsyncClient] = None,
) -> HybridTranslationService:
    """
    Wire the translator following the Composition Root pattern.

    This is the only place that knows how to instantiate and wire all
    components. The caller owns the httpx client and should close it
    (and flush the cache) on shutdown.
    """
    # 1. Static data
    term_store = StaticTermStore.from_package_data()

    # 2. Persistent cache, restored from disk
    cache = PersistentTranslationCache(LocalStorage(settings.get_cache_path()))
    await cache.load()

    # 3. Remote client sharing one availability flag with the resolver
    availability = ServiceAvailability("Ghana NLP API")
    context = TranslationContext.create(cache=cache, availability=availability)

    remote = None
    api_key = settings.get_ghana_nlp_api_key()
    if api_key is None:
        logger.warning("GHANA_NLP_API_KEY is not set; using offline translation only")
    else:
        remote = GhanaNLPTranslationService(
            client=client if client is not None else httpx.AsyncClient(),
            api_key=api_key,
            availability=availability,
            base_url=settings.get_ghana_nlp_base_url(),
            timeout=settings.get_timeout(accuracy_first),
        )

    # 4. Resolver
    translator = HybridTranslationService(term_store=term_store, remote=remote, context=context)
    await translator.initialize()
    return translator


async def _run_demo(target_lang: str) -> int:
    settings = SettingsManager()
    async with httpx.AsyncClient() as client:
        translator = await create_translator(settings, client=client)
        result = await translator.translate_diagnosis_result(SAMPLE_DIAGNOSIS, target_lang)
        for field in ("plant", "disease", "remedy"):
            print(f"{field}: {result[field]}")
        print(translator.get_service_stats()["hybrid"])
        await translator.context.cache.flush()
    return 0


def main() -> int:
    """Translate a sample diagnosis into the language given on the command line (default Twi)."""
    settings = SettingsManager()
    configure_logging(settings.get_log_level())
    target_lang = sys.argv[1] if len(sys.argv) > 1 else "tw"
    return asyncio.run(_run_demo(target_lang))


if __name__ == "__main__":
    sys.exit(main())
