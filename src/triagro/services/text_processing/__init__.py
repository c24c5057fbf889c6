"""Text processing services - normalization and sentence handling."""

from triagro.services.text_processing.text_normalization import (
    is_numeric,
    join_sentences,
    looks_like_treatment,
    make_cache_key,
    normalize_text,
    split_sentences,
)

__all__ = [
    "is_numeric",
    "join_sentences",
    "looks_like_treatment",
    "make_cache_key",
    "normalize_text",
    "split_sentences",
]
