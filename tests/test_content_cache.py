"""
Tests for the content-addressed reflection cache.
"""

import pytest

from journal_reflect.dto import ReflectionMetadata, ReflectionResponse
from journal_reflect.repositories import ContentCache, content_hash


def make_response(tag: str = "a") -> ReflectionResponse:
    return ReflectionResponse(
        summary=f"summary {tag}",
        pattern=f"pattern {tag}",
        suggestion=f"suggestion {tag}",
        metadata=ReflectionMetadata(
            model="test-model",
            processed_at="2026-01-01T00:00:00+00:00",
            processing_time_ms=12,
        ),
    )


@pytest.fixture
def cache(clock):
    return ContentCache(ttl=3600, max_entries=1000, clock=clock)


def test_content_hash_is_deterministic():
    assert content_hash("hello world") == content_hash("hello world")


def test_content_hash_is_order_sensitive():
    assert content_hash("ab") != content_hash("ba")


def test_content_hash_changes_with_appended_character():
    text = "I went for a long walk today."
    assert content_hash(text) != content_hash(text + "!")


def test_content_hash_matches_32_bit_rolling_hash():
    assert content_hash("") == "0"
    assert content_hash("a") == "2p"  # 97 in base36
    assert content_hash("hello") == "1n1e4y"  # 99162322 in base36


def test_get_miss(cache):
    assert cache.get("missing") is None
    assert cache.get_stats()["misses"] == 1


def test_put_then_get(cache):
    response = make_response()
    cache.put("key", response)
    assert cache.get("key") == response
    assert cache.get_stats()["hits"] == 1


def test_entry_expires_after_ttl(cache, clock):
    cache.put("key", make_response())

    clock.advance(3600)
    assert cache.get("key") is not None

    clock.advance(1)
    assert cache.get("key") is None
    assert len(cache) == 0


def test_put_with_custom_ttl(cache, clock):
    cache.put("key", make_response(), ttl=10)
    clock.advance(11)
    assert cache.get("key") is None


def test_content_mismatch_is_a_miss(cache):
    cache.put("key", make_response(), content="first entry text")
    assert cache.get("key", content="other entry text") is None
    assert cache.get("key", content="first entry text") is not None


def test_put_above_high_water_mark_sweeps_expired(clock):
    cache = ContentCache(ttl=60, max_entries=3, clock=clock)
    for i in range(3):
        cache.put(f"old-{i}", make_response(str(i)))

    clock.advance(61)
    cache.put("fresh", make_response("f"))
    assert len(cache) == 1
    assert cache.get_stats()["evictions"] == 3


def test_put_below_high_water_mark_does_not_sweep(clock):
    cache = ContentCache(ttl=60, max_entries=5, clock=clock)
    for i in range(3):
        cache.put(f"old-{i}", make_response(str(i)))

    clock.advance(61)
    cache.put("fresh", make_response("f"))
    assert len(cache) == 4


def test_sweep_keeps_live_entries_even_above_limit(clock):
    cache = ContentCache(ttl=60, max_entries=2, clock=clock)
    for i in range(5):
        cache.put(f"key-{i}", make_response(str(i)))
    assert len(cache) == 5


def test_clear(cache):
    cache.put("a", make_response("a"))
    cache.put("b", make_response("b"))
    assert cache.clear() == 2
    assert len(cache) == 0
