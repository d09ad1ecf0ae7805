"""Core text processing (cleaning, tokenization)."""

from .cleaning import build_cache_key, normalize_title, significant_words

__all__ = [
    "build_cache_key",
    "normalize_title",
    "significant_words",
]
