from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class TokenInfo(BaseModel):
    index: int
    text: str
    length: int
    strategy: Literal["exact", "fuzzy"]
    required_count: int
    gap_tier: Literal["none", "non_space", "any"]
    fragment: str


class PatternResult(BaseModel):
    pattern: str
    config: dict[str, Any]
    tokens: list[TokenInfo] = Field(default_factory=list)


class MatchResult(BaseModel):
    matched: bool
    span: tuple[int, int] | None = None
    matched_text: str | None = None
    pattern: str
    cached: bool = False


class LineHit(BaseModel):
    line_no: int
    text: str
    span: tuple[int, int]


class FilterResult(BaseModel):
    total_lines: int
    matched: int
    truncated: bool = False
    items: list[LineHit] = Field(default_factory=list)
    pattern: str


class ToolErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None
