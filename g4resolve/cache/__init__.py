"""Resolved-import caching."""

from .grammar_cache import CacheEntry, GrammarCache, InMemoryGrammarCache, NullCache, create_cache
from .keys import generate_import_key, generate_key

__all__ = [
    "CacheEntry",
    "GrammarCache",
    "InMemoryGrammarCache",
    "NullCache",
    "create_cache",
    "generate_import_key",
    "generate_key",
]
