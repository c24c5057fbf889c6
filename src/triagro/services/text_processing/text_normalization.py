"""Text normalization utilities for consistent cache keying."""

import re
from typing import List

_WHITESPACE = re.compile(r"\s+")
_NUMERIC = re.compile(r"[\d\s.,:%/+-]+")
_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")

TREATMENT_KEYWORDS = (
    "apply", "remove", "spray", "treat", "fungicide", "pesticide",
    "fertilizer", "water", "drainage", "circulation", "rotation",
    "prevent", "control", "monitor", "ensure",
)


def normalize_text(text: str) -> str:
    """
    Normalize text for consistent cache keying.

    Rules:
    - Trim leading and trailing whitespace
    - Collapse runs of whitespace (spaces, tabs, newlines) to single spaces
    - Lowercase, so "Hello" and "  hello " share a key

    Args:
        text: Original text to normalize.

    Returns:
        Normalized text string.
    """
    text = text.strip()
    text = _WHITESPACE.sub(" ", text)
    return text.lower()


def make_cache_key(text: str, source_lang: str, target_lang: str) -> str:
    """Build the "{src}-{tgt}-{normalized}" key shared by cache and dedupe map."""
    return f"{source_lang}-{target_lang}-{normalize_text(text)}"


def is_numeric(text: str) -> bool:
    """True for text made only of digits and number punctuation ("7-10", "2.5%")."""
    stripped = text.strip()
    return bool(stripped) and any(ch.isdigit() for ch in stripped) and bool(
        _NUMERIC.fullmatch(stripped)
    )


def split_sentences(text: str) -> List[str]:
    """Split on runs of . ! ? and drop empty pieces."""
    return [piece.strip() for piece in _SENTENCE_BOUNDARY.split(text) if piece.strip()]


def join_sentences(sentences: List[str]) -> str:
    """Reassemble sentences with ". " and a single trailing period."""
    cleaned = [s.strip().rstrip(".!?").strip() for s in sentences if s and s.strip()]
    if not cleaned:
        return ""
    return ". ".join(cleaned) + "."


def looks_like_treatment(text: str) -> bool:
    """Heuristic for remedy/treatment instructions (keyword present, longer than 20 chars)."""
    lowered = text.lower()
    return len(text) > 20 and any(keyword in lowered for keyword in TREATMENT_KEYWORDS)
