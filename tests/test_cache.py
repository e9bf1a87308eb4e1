"""Tests for cache keys and the in-memory grammar cache."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from g4resolve.cache import (
    GrammarCache,
    InMemoryGrammarCache,
    NullCache,
    create_cache,
    generate_import_key,
    generate_key,
)
from g4resolve.config import ResolverConfig


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestCacheKeys:
    """Test deterministic key generation."""

    def test_same_content_same_key(self) -> None:
        """Test that keys are deterministic."""
        content = "grammar Test; rule: 'test';"
        assert generate_key(content) == generate_key(content)

    def test_key_format(self) -> None:
        """Test that keys are 128-bit lowercase hex."""
        key = generate_key("grammar Test;")
        assert len(key) == 32
        assert key == key.lower()
        int(key, 16)

    def test_different_content_different_keys(self) -> None:
        """Test that different content gives different keys."""
        assert generate_key("grammar Test1;") != generate_key("grammar Test2;")

    def test_none_content_rejected(self) -> None:
        """Test that None content is an error."""
        with pytest.raises(ValueError, match="cannot be None"):
            generate_key(None)

    def test_import_key_normalises_location(self) -> None:
        """Test that equivalent base directories share a key."""
        assert generate_import_key("Common", Path("/g/sub/..")) == generate_import_key(
            "Common",
            Path("/g"),
        )
        assert generate_import_key("Common", Path("/g")) != generate_import_key("Lexer", Path("/g"))
        assert generate_import_key("Common", Path("/g")) != generate_import_key(
            "Common",
            Path("/h"),
        )


class TestInMemoryGrammarCache:
    """Test the in-memory cache."""

    def test_get_put(self) -> None:
        """Test basic storage."""
        cache = InMemoryGrammarCache()
        assert cache.get("k") is None

        cache.put("k", "value")
        assert cache.get("k") == "value"
        assert "k" in cache
        assert len(cache) == 1

    def test_satisfies_protocol(self) -> None:
        """Test that both caches match the resolver's cache interface."""
        assert isinstance(InMemoryGrammarCache(), GrammarCache)
        assert isinstance(NullCache(), GrammarCache)

    def test_lru_eviction(self) -> None:
        """Test that the least recently used entry is evicted."""
        cache = InMemoryGrammarCache(max_size=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)

        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert cache.stats()["evictions"] == 1

    def test_ttl_expiry(self) -> None:
        """Test that entries expire after the TTL."""
        clock = FakeClock()
        cache = InMemoryGrammarCache(ttl_seconds=10, clock=clock)
        cache.put("k", "value")

        clock.now += 9
        assert cache.get("k") == "value"

        clock.now += 1
        assert cache.get("k") is None
        assert cache.stats()["expirations"] == 1

    def test_no_ttl(self) -> None:
        """Test that TTL 0 keeps entries forever."""
        clock = FakeClock()
        cache = InMemoryGrammarCache(ttl_seconds=0, clock=clock)
        cache.put("k", "value")
        clock.now += 10**9
        assert cache.get("k") == "value"

    def test_invalidate_and_clear(self) -> None:
        """Test removing entries."""
        cache = InMemoryGrammarCache()
        cache.put("a", 1)
        cache.put("b", 2)

        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        cache.clear()
        assert len(cache) == 0

    def test_stats(self) -> None:
        """Test hit/miss statistics."""
        cache = InMemoryGrammarCache(max_size=5)
        cache.put("a", 1)
        cache.get("a")
        cache.get("missing")

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["puts"] == 1
        assert stats["size"] == 1
        assert stats["max_size"] == 5
        assert stats["hit_rate"] == 0.5

    def test_invalid_size(self) -> None:
        """Test that a non-positive size is rejected."""
        with pytest.raises(ValueError):
            InMemoryGrammarCache(max_size=0)

    def test_concurrent_access(self) -> None:
        """Test concurrent get/put from several threads."""
        cache = InMemoryGrammarCache(max_size=50)

        def worker(n):
            for i in range(200):
                cache.put(f"{n}:{i % 20}", i)
                cache.get(f"{(n + 1) % 4}:{i % 20}")

        with ThreadPoolExecutor(max_workers=4) as executor:
            list(executor.map(worker, range(4)))

        stats = cache.stats()
        assert len(cache) <= 50
        assert stats["puts"] == 800
        assert stats["hits"] + stats["misses"] == 800


class TestCreateCache:
    """Test building caches from configuration."""

    def test_enabled(self) -> None:
        """Test the default cache."""
        cache = create_cache(ResolverConfig(cache_max_size=7, cache_ttl_seconds=30))
        assert isinstance(cache, InMemoryGrammarCache)
        assert cache.max_size == 7
        assert cache.ttl_seconds == 30

    def test_disabled(self) -> None:
        """Test that a disabled cache never stores."""
        cache = create_cache(ResolverConfig(cache_enabled=False))
        assert isinstance(cache, NullCache)
        cache.put("k", "value")
        assert cache.get("k") is None
