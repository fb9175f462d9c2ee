from __future__ import annotations

import time
from typing import Any

import regex

from .config import FuzzyConfig, is_int
from .errors import MatchTimeout, ensure
from .models import FilterResult, LineHit, MatchResult, PatternResult, TokenInfo
from .pattern import build_pattern, explain_pattern
from .state import AppState


def _build_config(state: AppState, search_term: str, options: dict[str, Any]) -> FuzzyConfig:
    settings = state.settings
    ensure(isinstance(search_term, str), "search_term must be a string")
    ensure(
        len(search_term) <= settings.max_term_chars,
        f"search_term is longer than {settings.max_term_chars} characters",
        {"length": len(search_term), "max_term_chars": settings.max_term_chars},
    )
    return (
        FuzzyConfig.builder()
        .search_term(search_term)
        .preset(settings.preset)
        .options(**settings.default_options())
        .options(**options)
        .build()
    )


def _ensure_text_size(state: AppState, text: str, field: str) -> None:
    limit = state.settings.max_text_chars
    ensure(
        len(text) <= limit,
        f"{field} is longer than {limit} characters",
        {"length": len(text), "max_text_chars": limit},
    )


def _search(matcher: regex.Pattern, text: str, timeout: float) -> regex.Match | None:
    if timeout <= 0:
        raise MatchTimeout("match time budget exhausted", {"timeout_sec": 0})
    try:
        return matcher.search(text, timeout=timeout)
    except TimeoutError as e:
        raise MatchTimeout("match exceeded time budget", {"timeout_sec": round(timeout, 3)}) from e


def fuzzy_pattern(
    state: AppState,
    *,
    search_term: str,
    min_word_length: int | None = None,
    required_char_ratio: float | None = None,
    case_sensitive: bool | None = None,
    max_char_gap: int | None = None,
) -> dict[str, Any]:
    config = _build_config(
        state,
        search_term,
        {
            "min_word_length": min_word_length,
            "required_char_ratio": required_char_ratio,
            "case_sensitive": case_sensitive,
            "max_char_gap": max_char_gap,
        },
    )
    result = PatternResult(
        pattern=build_pattern(config),
        config=config.options(),
        tokens=[TokenInfo(**item) for item in explain_pattern(config)],
    )
    return result.model_dump()


def fuzzy_match(
    state: AppState,
    *,
    search_term: str,
    text: str,
    min_word_length: int | None = None,
    required_char_ratio: float | None = None,
    case_sensitive: bool | None = None,
    max_char_gap: int | None = None,
) -> dict[str, Any]:
    ensure(isinstance(text, str), "text must be a string")
    _ensure_text_size(state, text, "text")
    config = _build_config(
        state,
        search_term,
        {
            "min_word_length": min_word_length,
            "required_char_ratio": required_char_ratio,
            "case_sensitive": case_sensitive,
            "max_char_gap": max_char_gap,
        },
    )
    matcher, cached = state.matchers.get_or_compile(config)
    m = _search(matcher, text, state.settings.match_timeout_sec)
    result = MatchResult(
        matched=m is not None,
        span=m.span() if m else None,
        matched_text=m.group(0) if m else None,
        pattern=matcher.pattern,
        cached=cached,
    )
    return result.model_dump()


def fuzzy_filter(
    state: AppState,
    *,
    search_term: str,
    lines: list[str],
    limit: int | None = None,
    min_word_length: int | None = None,
    required_char_ratio: float | None = None,
    case_sensitive: bool | None = None,
    max_char_gap: int | None = None,
) -> dict[str, Any]:
    ensure(isinstance(lines, list), "lines must be a list of strings")
    max_lines = state.settings.filter_max_lines if limit is None else limit
    ensure(is_int(max_lines) and max_lines >= 1, "limit must be an integer >= 1", {"limit": limit})
    texts = [str(line) for line in lines]
    _ensure_text_size(state, "\n".join(texts), "lines")
    config = _build_config(
        state,
        search_term,
        {
            "min_word_length": min_word_length,
            "required_char_ratio": required_char_ratio,
            "case_sensitive": case_sensitive,
            "max_char_gap": max_char_gap,
        },
    )
    matcher, _ = state.matchers.get_or_compile(config)

    # One time budget covers the whole batch.
    deadline = time.monotonic() + state.settings.match_timeout_sec
    items: list[LineHit] = []
    matched = 0
    for line_no, line in enumerate(texts, start=1):
        m = _search(matcher, line, deadline - time.monotonic())
        if m is None:
            continue
        matched += 1
        if len(items) < max_lines:
            items.append(LineHit(line_no=line_no, text=line, span=m.span()))

    result = FilterResult(
        total_lines=len(texts),
        matched=matched,
        truncated=matched > len(items),
        items=items,
        pattern=matcher.pattern,
    )
    return result.model_dump()
