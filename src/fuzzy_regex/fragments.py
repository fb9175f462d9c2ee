from __future__ import annotations

import math
import re
from functools import lru_cache

from .config import FuzzyConfig
from .tokenizer import Token

# Gaps up to this size stay inside a word; larger gaps may span whitespace.
GAP_TIER_THRESHOLD = 10

NON_SPACE = r"[^\s]"
ANY_CHAR = r"[\s\S]"

# Cased code points end in the Adlam block (U+1E900).
LAST_CASED_CODE_POINT = 0x1E9FF


def gap_tier(max_char_gap: int) -> str:
    if max_char_gap <= 0:
        return "none"
    if max_char_gap <= GAP_TIER_THRESHOLD:
        return "non_space"
    return "any"


def gap_fragment(max_char_gap: int) -> str:
    """Lazy fragment allowed between two required characters."""
    tier = gap_tier(max_char_gap)
    if tier == "none":
        return ""
    if tier == "non_space":
        return f"{NON_SPACE}{{0,{max_char_gap}}}?"
    return f"{ANY_CHAR}{{0,{max_char_gap}}}?"


def word_separator(max_char_gap: int) -> str:
    """Fragment placed between two word fragments.

    The leading ``[^\\s]*`` consumes the part of the previous word that was
    not required. What may follow depends on the gap tier: plain whitespace,
    whitespace plus at most one stray word of up to ``max_char_gap``
    characters, or any ``max_char_gap`` characters.
    """
    tail = f"{NON_SPACE}*"
    tier = gap_tier(max_char_gap)
    if tier == "none":
        return rf"{tail}\s+"
    if tier == "non_space":
        return rf"{tail}\s+(?:{NON_SPACE}{{1,{max_char_gap}}}\s+)?"
    return f"{tail}{gap_fragment(max_char_gap)}"


def char_literal(ch: str, case_sensitive: bool) -> str:
    if case_sensitive:
        return re.escape(ch)
    variants = [ch]
    for form in (ch.lower(), ch.upper(), *_casefold_index().get(ch.casefold(), ())):
        # Skip multi-character forms such as "ß".upper() == "SS".
        if len(form) == 1 and form not in variants:
            variants.append(form)
    if len(variants) == 1:
        return re.escape(ch)
    return "[" + "".join(re.escape(v) for v in variants) + "]"


@lru_cache(maxsize=1)
def _casefold_index() -> dict[str, tuple[str, ...]]:
    """Map each casefolded form to every code point that folds to it.

    Needed for forms unreachable through lower/upper, e.g. final sigma "ς"
    for "Σ", or "ẞ" for "ß".
    """
    index: dict[str, list[str]] = {}
    for cp in range(LAST_CASED_CODE_POINT + 1):
        ch = chr(cp)
        folded = ch.casefold()
        if folded != ch or ch.upper() != ch:
            index.setdefault(folded, []).append(ch)
    return {key: tuple(chars) for key, chars in index.items()}


def required_count(length: int, ratio: float) -> int:
    # round() drops float noise such as 10 * 0.3 == 3.0000000000000004.
    return max(1, math.ceil(round(length * ratio, 9)))


def is_short(token: Token, config: FuzzyConfig) -> bool:
    return token.length <= config.min_word_length


def word_fragment(token: Token, config: FuzzyConfig) -> str:
    chars = [char_literal(ch, config.case_sensitive) for ch in token.text]
    if is_short(token, config):
        return "".join(chars)
    needed = required_count(token.length, config.required_char_ratio)
    return gap_fragment(config.max_char_gap).join(chars[:needed])
