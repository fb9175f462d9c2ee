from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from typing import Any

from .errors import ensure

DEFAULT_MIN_WORD_LENGTH = 3
DEFAULT_REQUIRED_CHAR_RATIO = 0.5
DEFAULT_CASE_SENSITIVE = False
DEFAULT_MAX_CHAR_GAP = 10

# name -> (required_char_ratio, max_char_gap)
PRESETS: dict[str, tuple[float, int]] = {
    "default": (DEFAULT_REQUIRED_CHAR_RATIO, DEFAULT_MAX_CHAR_GAP),
    "strict": (0.8, 2),
    "proximity": (0.5, 30),
}

OPTION_NAMES = ("min_word_length", "required_char_ratio", "case_sensitive", "max_char_gap")


def _env_bool(name: str, default: bool | None) -> bool | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_options(
    *,
    min_word_length: Any,
    required_char_ratio: Any,
    case_sensitive: Any,
    max_char_gap: Any,
) -> None:
    ensure(
        is_int(min_word_length) and min_word_length >= 1,
        "min_word_length must be an integer >= 1",
        {"min_word_length": min_word_length},
    )
    ensure(
        isinstance(required_char_ratio, (int, float))
        and not isinstance(required_char_ratio, bool)
        and not math.isnan(required_char_ratio)
        and 0.0 <= required_char_ratio <= 1.0,
        "required_char_ratio must be between 0.0 and 1.0",
        {"required_char_ratio": required_char_ratio},
    )
    ensure(
        isinstance(case_sensitive, bool),
        "case_sensitive must be a boolean",
        {"case_sensitive": case_sensitive},
    )
    ensure(
        is_int(max_char_gap) and max_char_gap >= 0,
        "max_char_gap must be an integer >= 0",
        {"max_char_gap": max_char_gap},
    )


@dataclass(frozen=True)
class FuzzyConfig:
    """Validated parameters for one fuzzy pattern build.

    Instances are immutable and hashable, so callers can key their own caches
    on them. Use :meth:`builder` for the fluent two-phase construction.
    """

    search_term: str
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH
    required_char_ratio: float = DEFAULT_REQUIRED_CHAR_RATIO
    case_sensitive: bool = DEFAULT_CASE_SENSITIVE
    max_char_gap: int = DEFAULT_MAX_CHAR_GAP

    def __post_init__(self) -> None:
        ensure(isinstance(self.search_term, str), "search_term must be a string")
        ensure(bool(self.search_term.strip()), "search term cannot be empty")
        validate_options(
            min_word_length=self.min_word_length,
            required_char_ratio=self.required_char_ratio,
            case_sensitive=self.case_sensitive,
            max_char_gap=self.max_char_gap,
        )
        object.__setattr__(self, "required_char_ratio", float(self.required_char_ratio))

    @classmethod
    def builder(cls) -> "FuzzyConfigBuilder":
        return FuzzyConfigBuilder()

    def options(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in OPTION_NAMES}

    def build_pattern(self) -> str:
        from .pattern import build_pattern

        return build_pattern(self)

    def compile(self) -> re.Pattern[str]:
        from .pattern import compile_pattern

        return compile_pattern(self)


class FuzzyConfigBuilder:
    """Collects a search term and overrides; ``build()`` validates them.

    A preset supplies ratio and gap defaults. Explicit setters always take
    precedence over the preset, whichever was called first.
    """

    def __init__(self) -> None:
        self._search_term: str | None = None
        self._preset: str | None = None
        self._overrides: dict[str, Any] = {}

    def search_term(self, value: str) -> "FuzzyConfigBuilder":
        self._search_term = value
        return self

    def preset(self, name: str) -> "FuzzyConfigBuilder":
        ensure(name in PRESETS, f"unknown preset: {name}", {"allowed": sorted(PRESETS)})
        self._preset = name
        return self

    def min_word_length(self, value: int) -> "FuzzyConfigBuilder":
        self._overrides["min_word_length"] = value
        return self

    def required_char_ratio(self, value: float) -> "FuzzyConfigBuilder":
        self._overrides["required_char_ratio"] = value
        return self

    def case_sensitive(self, value: bool) -> "FuzzyConfigBuilder":
        self._overrides["case_sensitive"] = value
        return self

    def max_char_gap(self, value: int) -> "FuzzyConfigBuilder":
        self._overrides["max_char_gap"] = value
        return self

    def options(self, **values: Any) -> "FuzzyConfigBuilder":
        """Apply several overrides at once; ``None`` values are skipped."""
        for key, value in values.items():
            ensure(key in OPTION_NAMES, f"unknown option: {key}", {"allowed": list(OPTION_NAMES)})
            if value is not None:
                self._overrides[key] = value
        return self

    def build(self) -> FuzzyConfig:
        ensure(self._search_term is not None, "search_term is required")
        fields: dict[str, Any] = {}
        if self._preset is not None:
            ratio, gap = PRESETS[self._preset]
            fields["required_char_ratio"] = ratio
            fields["max_char_gap"] = gap
        fields.update(self._overrides)
        return FuzzyConfig(search_term=self._search_term, **fields)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Settings:
    log_level: str
    preset: str
    min_word_length: int | None
    required_char_ratio: float | None
    case_sensitive: bool | None
    max_char_gap: int | None
    matcher_cache_max_keep: int
    matcher_cache_ttl_sec: int
    filter_max_lines: int
    max_term_chars: int
    max_text_chars: int
    match_timeout_sec: float

    @classmethod
    def from_env(cls) -> "Settings":
        preset = os.getenv("FUZZY_PRESET", "default").strip().lower()
        if preset not in PRESETS:
            raise ValueError(f"FUZZY_PRESET must be one of {sorted(PRESETS)}")

        return cls(
            log_level=os.getenv("LOG_LEVEL", "error"),
            preset=preset,
            min_word_length=_env_int("FUZZY_MIN_WORD_LENGTH", None),
            required_char_ratio=_env_float("FUZZY_REQUIRED_CHAR_RATIO", None),
            case_sensitive=_env_bool("FUZZY_CASE_SENSITIVE", None),
            max_char_gap=_env_int("FUZZY_MAX_CHAR_GAP", None),
            matcher_cache_max_keep=_env_int("MATCHER_CACHE_MAX_KEEP", 128) or 128,
            matcher_cache_ttl_sec=_env_int("MATCHER_CACHE_TTL_SEC", 1800) or 1800,
            filter_max_lines=_env_int("FILTER_MAX_LINES", 200) or 200,
            max_term_chars=_env_int("MAX_TERM_CHARS", 256) or 256,
            max_text_chars=_env_int("MAX_TEXT_CHARS", 20000) or 20000,
            match_timeout_sec=_env_float("MATCH_TIMEOUT_SEC", 0.5) or 0.5,
        )

    def default_options(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in OPTION_NAMES}
