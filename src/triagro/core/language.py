"""Language entities - supported languages and remote translation pairs."""

from dataclasses import dataclass
from typing import Dict, List, Optional

PIVOT_LANGUAGE = "en"


@dataclass(frozen=True)
class Language:
    """A language the application can display text in."""

    code: str
    name: str
    native_name: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "name": self.name, "native_name": self.native_name}


@dataclass(frozen=True)
class LanguagePair:
    """A direction supported natively by the remote translation API."""

    source: str
    target: str
    name: str

    @property
    def code(self) -> str:
        """Pair code as sent to the API (e.g. "en-tw")."""
        return f"{self.source}-{self.target}"


@dataclass(frozen=True)
class TranslationRoute:
    """
    Sequence of pair codes needed to get from one language to another.

    A direct route has one hop; a pivot route goes through English and
    has two. Both are treated as one logical operation by the client.
    """

    hops: tuple

    @property
    def is_pivot(self) -> bool:
        return len(self.hops) > 1


SUPPORTED_LANGUAGES: List[Language] = [
    Language("en", "English", "English"),
    Language("tw", "Twi", "Twi"),
    Language("ee", "Ewe", "Eʋegbe"),
    Language("ga", "Ga", "Gã"),
    Language("dag", "Dagbani", "Dagbanli"),
    Language("ff", "Fula", "Fulfulde"),
    Language("ha", "Hausa", "Hausa"),
]

# Ga is not offered by the remote API; it is served from local data only.
SUPPORTED_LANGUAGE_PAIRS: List[LanguagePair] = [
    LanguagePair("en", "tw", "English to Twi"),
    LanguagePair("en", "ee", "English to Ewe"),
    LanguagePair("en", "dag", "English to Dagbani"),
    LanguagePair("en", "ff", "English to Fula"),
    LanguagePair("en", "ha", "English to Hausa"),
    LanguagePair("tw", "en", "Twi to English"),
    LanguagePair("ee", "en", "Ewe to English"),
    LanguagePair("dag", "en", "Dagbani to English"),
    LanguagePair("ff", "en", "Fula to English"),
    LanguagePair("ha", "en", "Hausa to English"),
    LanguagePair("tw", "ee", "Twi to Ewe"),
    LanguagePair("ee", "tw", "Ewe to Twi"),
    LanguagePair("tw", "dag", "Twi to Dagbani"),
    LanguagePair("dag", "tw", "Dagbani to Twi"),
]


def find_language(code: str) -> Optional[Language]:
    """Return the Language for a code, or None if unknown."""
    for language in SUPPORTED_LANGUAGES:
        if language.code == code:
            return language
    return None


def is_language_supported(code: str) -> bool:
    return find_language(code) is not None


def plan_route(
    source: str,
    target: str,
    pairs: Optional[List[LanguagePair]] = None,
) -> Optional[TranslationRoute]:
    """
    Work out how the remote API can translate source -> target.

    Args:
        source: Source language code.
        target: Target language code.
        pairs: Supported pairs (defaults to SUPPORTED_LANGUAGE_PAIRS).

    Returns:
        A direct route if the pair is supported, a two-hop route through
        English if both legs are supported, otherwise None.
    """
    codes = {pair.code for pair in (pairs if pairs is not None else SUPPORTED_LANGUAGE_PAIRS)}
    direct = f"{source}-{target}"
    if direct in codes:
        return TranslationRoute(hops=(direct,))

    if PIVOT_LANGUAGE in (source, target):
        return None

    first = f"{source}-{PIVOT_LANGUAGE}"
    second = f"{PIVOT_LANGUAGE}-{target}"
    if first in codes and second in codes:
        return TranslationRoute(hops=(first, second))
    return None
