from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass

import regex

from .config import FuzzyConfig
from .pattern import compile_pattern


@dataclass
class CacheEntry:
    created_at: float
    matcher: regex.Pattern


class MatcherCache:
    """Compiled patterns keyed by configuration, bounded by size and age.

    Patterns are compiled with the ``regex`` engine so searches can take a
    ``timeout``.
    """

    def __init__(self, max_keep: int, ttl_sec: int) -> None:
        self.max_keep = max(1, int(max_keep))
        self.ttl_sec = max(1, int(ttl_sec))
        self._items: OrderedDict[FuzzyConfig, CacheEntry] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._items)

    def _cleanup(self) -> None:
        now = time.time()
        expired = [key for key, entry in self._items.items() if now - entry.created_at > self.ttl_sec]
        for key in expired:
            self._items.pop(key, None)
        while len(self._items) > self.max_keep:
            self._items.popitem(last=False)

    def get_or_compile(self, config: FuzzyConfig) -> tuple[regex.Pattern, bool]:
        self._cleanup()
        cached = self._items.get(config)
        if cached is not None:
            self._items.move_to_end(config)
            self.hits += 1
            return cached.matcher, True

        matcher = compile_pattern(config, engine=regex)
        self.misses += 1
        self._items[config] = CacheEntry(created_at=time.time(), matcher=matcher)
        self._cleanup()
        return matcher, False

    def clear(self) -> None:
        self._items.clear()
