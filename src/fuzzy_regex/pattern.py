from __future__ import annotations

import re
from typing import Any

from .config import FuzzyConfig
from .errors import RegexError, ensure
from .fragments import gap_tier, is_short, required_count, word_fragment, word_separator
from .tokenizer import tokenize


def build_pattern(config: FuzzyConfig) -> str:
    """Return the fuzzy regex for ``config.search_term``.

    Word fragments are joined in token order by the inter-word separator.
    The result is unanchored and carries no inline flags; case folding is
    already encoded per character.
    """
    tokens = tokenize(config.search_term)
    ensure(bool(tokens), "search term cannot be empty")
    separator = word_separator(config.max_char_gap)
    return separator.join(word_fragment(token, config) for token in tokens)


def compile_pattern(config: FuzzyConfig, engine: Any = re) -> Any:
    """Compile the pattern with ``engine`` (``re`` or a compatible module).

    Engine failures are raised as :class:`RegexError`; that includes the
    ``OverflowError`` raised for repeat bounds the engine cannot store.
    """
    pattern = build_pattern(config)
    try:
        return engine.compile(pattern)
    except (engine.error, OverflowError) as e:
        raise RegexError(
            f"regex compilation failed: {e}",
            {"pattern": pattern, "position": getattr(e, "pos", None)},
        ) from e


def fuzzy_search_pattern(search_term: str) -> str:
    """Build a pattern for ``search_term`` with the default configuration."""
    return build_pattern(FuzzyConfig.builder().search_term(search_term).build())


def explain_pattern(config: FuzzyConfig) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    for token in tokenize(config.search_term):
        short = is_short(token, config)
        items.append(
            {
                "index": token.index,
                "text": token.text,
                "length": token.length,
                "strategy": "exact" if short else "fuzzy",
                "required_count": token.length if short else required_count(token.length, config.required_char_ratio),
                "gap_tier": gap_tier(config.max_char_gap),
                "fragment": word_fragment(token, config),
            }
        )
    return items
