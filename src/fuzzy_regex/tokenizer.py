from __future__ import annotations

import re
from dataclasses import dataclass

SPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Token:
    text: str
    index: int

    @property
    def length(self) -> int:
        # str indexes code points, so multi-byte characters count once.
        return len(self.text)


def tokenize(search_term: str) -> list[Token]:
    words = [part for part in SPACE_RE.split(search_term) if part]
    return [Token(text=word, index=index) for index, word in enumerate(words)]
