"""
TriAgro Translation - offline-first translation for Ghanaian farmers.

This package resolves crop-diagnosis text into Ghanaian languages with:
- Instant lookup of agricultural terms and treatment templates
- Phrase substitution for common instructions
- A persistent, time-limited cache of previous results
- The Ghana NLP translation API as the last resort
"""

__version__ = "0.1.0"

from triagro.core import Language, SUPPORTED_LANGUAGES

__all__ = [
    "Language",
    "SUPPORTED_LANGUAGES",
]
