"""Template entity - a matcher with its per-language translations."""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class TemplateEntry:
    """
    Immutable pairing of an English matcher with ready-made translations.

    Entries are loaded once at start-up and never mutated afterwards.
    """

    name: str
    matcher: re.Pattern
    translations_by_lang: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the mapping so a shared store cannot be edited at runtime.
        object.__setattr__(
            self, "translations_by_lang", MappingProxyType(dict(self.translations_by_lang))
        )

    def matches(self, text: str) -> bool:
        return bool(self.matcher.search(text))

    def translation_for(self, lang: str) -> Optional[str]:
        """Translation for lang, or None when this entry has none."""
        value = self.translations_by_lang.get(lang)
        return value if value else None
