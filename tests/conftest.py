from __future__ import annotations

import re
from typing import Any, Callable

import pytest

from fuzzy_regex.config import FuzzyConfig, Settings
from fuzzy_regex.state import AppState, create_state


@pytest.fixture()
def state(monkeypatch: pytest.MonkeyPatch) -> AppState:
    for name in (
        "FUZZY_PRESET",
        "FUZZY_MIN_WORD_LENGTH",
        "FUZZY_REQUIRED_CHAR_RATIO",
        "FUZZY_CASE_SENSITIVE",
        "FUZZY_MAX_CHAR_GAP",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("MATCHER_CACHE_MAX_KEEP", "4")
    monkeypatch.setenv("MATCHER_CACHE_TTL_SEC", "60")
    monkeypatch.setenv("FILTER_MAX_LINES", "3")
    monkeypatch.setenv("MAX_TERM_CHARS", "64")
    monkeypatch.setenv("MAX_TEXT_CHARS", "2000")
    monkeypatch.setenv("MATCH_TIMEOUT_SEC", "0.2")

    cfg = Settings.from_env()
    return create_state(cfg)


@pytest.fixture()
def compiled() -> Callable[..., re.Pattern[str]]:
    def _compile(search_term: str, **options: Any) -> re.Pattern[str]:
        return FuzzyConfig.builder().search_term(search_term).options(**options).build().compile()

    return _compile
