"""Domain layer - Pure entities for languages and translation templates."""

from .language import (
    PIVOT_LANGUAGE,
    SUPPORTED_LANGUAGE_PAIRS,
    SUPPORTED_LANGUAGES,
    Language,
    LanguagePair,
    TranslationRoute,
    find_language,
    is_language_supported,
    plan_route,
)
from .template_entry import TemplateEntry

__all__ = [
    "PIVOT_LANGUAGE",
    "SUPPORTED_LANGUAGE_PAIRS",
    "SUPPORTED_LANGUAGES",
    "Language",
    "LanguagePair",
    "TranslationRoute",
    "TemplateEntry",
    "find_language",
    "is_language_supported",
    "plan_route",
]
