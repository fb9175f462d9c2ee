from __future__ import annotations

import pytest

import fuzzy_regex.matcher_cache as cache_module
from fuzzy_regex.config import FuzzyConfig
from fuzzy_regex.matcher_cache import MatcherCache


def test_matcher_cache_clamps_non_positive_limits() -> None:
    cache = MatcherCache(max_keep=0, ttl_sec=0)

    assert cache.max_keep == 1
    assert cache.ttl_sec == 1

    cache.get_or_compile(FuzzyConfig(search_term="first"))
    cache.get_or_compile(FuzzyConfig(search_term="second"))
    assert len(cache) == 1


def test_matcher_cache_reuses_equal_configs() -> None:
    cache = MatcherCache(max_keep=4, ttl_sec=60)
    first, cached_first = cache.get_or_compile(FuzzyConfig(search_term="hello"))
    second, cached_second = cache.get_or_compile(FuzzyConfig.builder().search_term("hello").build())

    assert cached_first is False
    assert cached_second is True
    assert first is second
    assert (cache.hits, cache.misses) == (1, 1)


def test_matcher_cache_keys_on_options() -> None:
    cache = MatcherCache(max_keep=4, ttl_sec=60)
    loose, _ = cache.get_or_compile(FuzzyConfig(search_term="hello"))
    strict, cached = cache.get_or_compile(FuzzyConfig(search_term="hello", case_sensitive=True))

    assert cached is False
    assert loose.pattern != strict.pattern
    assert len(cache) == 2


def test_matcher_cache_evicts_least_recent() -> None:
    cache = MatcherCache(max_keep=2, ttl_sec=60)
    a = FuzzyConfig(search_term="alpha")
    b = FuzzyConfig(search_term="beta")
    c = FuzzyConfig(search_term="gamma")
    cache.get_or_compile(a)
    cache.get_or_compile(b)
    cache.get_or_compile(a)
    cache.get_or_compile(c)

    assert cache.get_or_compile(a)[1] is True
    assert cache.get_or_compile(b)[1] is False


def test_matcher_cache_expires_entries(monkeypatch: pytest.MonkeyPatch) -> None:
    now = [1000.0]
    monkeypatch.setattr(cache_module.time, "time", lambda: now[0])
    cache = MatcherCache(max_keep=4, ttl_sec=10)
    config = FuzzyConfig(search_term="hello")
    cache.get_or_compile(config)

    now[0] += 11
    assert cache.get_or_compile(config)[1] is False
