"""Static Term Store - pre-baked agricultural terms, treatment templates and phrases."""

import json
import logging
import re
from importlib import resources
from typing import Any, Dict, List, Mapping, Optional, Sequence

from triagro.core import TemplateEntry
from triagro.services.text_processing import looks_like_treatment

logger = logging.getLogger(__name__)

TERMS_RESOURCE = "agricultural_terms.json"
TEMPLATES_RESOURCE = "treatment_templates.json"


def _exact_matcher(term: str) -> re.Pattern:
    words = [re.escape(word) for word in term.split()]
    return re.compile(r"^\s*" + r"\s+".join(words) + r"\s*$", re.IGNORECASE)


class StaticTermStore:
    """
    Immutable lookup tables for instant, offline translation.

    Three kinds of English-keyed content:
    - terms: exact agricultural terms and UI strings ("Tomato", "Healthy").
    - treatment templates: disease patterns mapped to full treatment text,
      only consulted for text that reads like a treatment instruction.
    - phrases: words and phrases substituted inside longer text.

    Built once at start-up; nothing mutates it afterwards, so one store
    can be shared by any number of resolvers.
    """

    def __init__(
        self,
        terms: Sequence[TemplateEntry] = (),
        treatment_templates: Sequence[TemplateEntry] = (),
        phrases: Optional[Mapping[str, Mapping[str, str]]] = None,
    ):
        self._terms = tuple(terms)
        self._treatment_templates = tuple(treatment_templates)
        self._phrases: Dict[str, Dict[str, str]] = {
            phrase.lower(): dict(translations) for phrase, translations in (phrases or {}).items()
        }
        self._phrase_patterns: Dict[str, re.Pattern] = self._compile_phrase_patterns()

    @classmethod
    def from_dicts(
        cls,
        terms: Optional[Mapping[str, Mapping[str, str]]] = None,
        templates: Optional[Sequence[Mapping[str, Any]]] = None,
        phrases: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> "StaticTermStore":
        """
        Build a store from plain data.

        Args:
            terms: {"Tomato": {"tw": "Tomato", ...}, ...}
            templates: [{"name": ..., "pattern": <regex>, "translations": {...}}, ...]
                in priority order.
            phrases: {"apply fungicide": {"tw": ..., ...}, ...}
        """
        term_entries = [
            TemplateEntry(name=term, matcher=_exact_matcher(term), translations_by_lang=translations)
            for term, translations in (terms or {}).items()
        ]
        template_entries = [
            TemplateEntry(
                name=item["name"],
                matcher=re.compile(item["pattern"], re.IGNORECASE),
                translations_by_lang=item.get("translations", {}),
            )
            for item in (templates or [])
        ]
        return cls(terms=term_entries, treatment_templates=template_entries, phrases=phrases)

    @classmethod
    def from_package_data(cls) -> "StaticTermStore":
        """Load the terms and templates shipped in triagro/data."""
        data_dir = resources.files("triagro") / "data"
        terms_data = json.loads((data_dir / TERMS_RESOURCE).read_text(encoding="utf-8"))
        templates_data = json.loads((data_dir / TEMPLATES_RESOURCE).read_text(encoding="utf-8"))

        store = cls.from_dicts(
            terms=terms_data.get("terms", {}),
            templates=templates_data.get("templates", []),
            phrases=terms_data.get("phrases", {}),
        )
        logger.info(
            "Static term store loaded: %d terms, %d templates, %d phrases",
            len(store._terms), len(store._treatment_templates), len(store._phrases),
        )
        return store

    def match_template(self, text: str, lang: str) -> Optional[str]:
        """
        First matcher with a translation for lang wins.

        Exact terms are tried first; treatment templates only when the
        text looks like a treatment instruction.
        """
        for entry in self._terms:
            if entry.matches(text):
                translation = entry.translation_for(lang)
                if translation:
                    return translation

        if looks_like_treatment(text):
            return self.match_treatment(text, lang)
        return None

    def match_treatment(self, hint: str, lang: str) -> Optional[str]:
        """Treatment template whose pattern matches hint (a disease name or remedy text)."""
        if not hint:
            return None
        for entry in self._treatment_templates:
            if entry.matches(hint):
                translation = entry.translation_for(lang)
                if translation:
                    return translation
        return None

    def substitute_phrases(self, text: str, lang: str) -> str:
        """
        Replace known English phrases in text, whole words, case-insensitive.

        Longer phrases win over the words they contain, and replacement is
        a single pass so translated output is never substituted again.
        """
        pattern = self._phrase_patterns.get(lang)
        if pattern is None:
            return text
        return pattern.sub(lambda m: self._phrases[m.group(0).lower()][lang], text)

    def languages(self) -> List[str]:
        """Language codes that have at least one entry."""
        codes = set()
        for entry in self._terms + self._treatment_templates:
            codes.update(entry.translations_by_lang.keys())
        for translations in self._phrases.values():
            codes.update(translations.keys())
        return sorted(codes)

    def stats(self) -> Dict[str, int]:
        return {
            "terms": len(self._terms),
            "templates": len(self._treatment_templates),
            "phrases": len(self._phrases),
        }

    def _compile_phrase_patterns(self) -> Dict[str, re.Pattern]:
        by_lang: Dict[str, List[str]] = {}
        for phrase, translations in self._phrases.items():
            for lang, translation in translations.items():
                if translation:
                    by_lang.setdefault(lang, []).append(phrase)

        patterns = {}
        for lang, phrases in by_lang.items():
            ordered = sorted(phrases, key=len, reverse=True)
            alternation = "|".join(re.escape(phrase) for phrase in ordered)
            patterns[lang] = re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)
        return patterns
