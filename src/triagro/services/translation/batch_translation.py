"""Batch and structured translation helpers built on top of a resolver."""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from triagro.services.translation.hybrid_translation_service import HybridTranslationService

logger = logging.getLogger(__name__)

DIAGNOSIS_FIELDS = ("plant", "disease", "remedy")


async def translate_batch(
    resolver: "HybridTranslationService",
    texts: Sequence[str],
    source_lang: str,
    target_lang: str,
) -> List[str]:
    """
    Translate texts concurrently, preserving order.

    A failure on one item yields that item's original text and never
    affects the others.
    """
    results = await asyncio.gather(
        *(resolver.translate(text, source_lang, target_lang) for text in texts),
        return_exceptions=True,
    )

    translated = []
    for text, result in zip(texts, results):
        if isinstance(result, BaseException):
            logger.warning("Batch item failed, keeping original: %s", result)
            translated.append(text)
        else:
            translated.append(result)
    return translated


async def translate_diagnosis(
    resolver: "HybridTranslationService",
    result: Optional[Mapping[str, Any]],
    target_lang: str,
    source_lang: str = "en",
) -> Optional[Mapping[str, Any]]:
    """
    Translate the plant, disease and remedy fields of a diagnosis.

    Returns a shallow copy; fields that are absent or not strings are
    carried over untouched. The remedy prefers the treatment template
    for the (untranslated) disease name.
    """
    if not result or source_lang == target_lang:
        return result

    translated: Dict[str, Any] = dict(result)
    disease = result.get("disease")

    async def translate_field(name: str) -> None:
        value = result.get(name)
        if not isinstance(value, str):
            return
        if name == "remedy":
            translated[name] = await resolver.translate_treatment(
                value, disease, source_lang, target_lang
            )
        else:
            translated[name] = await resolver.translate(value, source_lang, target_lang)

    await asyncio.gather(*(translate_field(name) for name in DIAGNOSIS_FIELDS))
    return translated


async def translate_labels(
    resolver: "HybridTranslationService",
    labels: Optional[Mapping[str, Any]],
    target_lang: str,
    source_lang: str = "en",
) -> Optional[Mapping[str, Any]]:
    """Translate every string value of a UI label mapping; other values are kept."""
    if not labels or source_lang == target_lang:
        return labels

    keys = [key for key, value in labels.items() if isinstance(value, str)]
    values = await translate_batch(resolver, [labels[key] for key in keys], source_lang, target_lang)

    translated = dict(labels)
    translated.update(zip(keys, values))
    return translated
