from __future__ import annotations

from dataclasses import dataclass
from typing import Any

ALLOWED_ERROR_CODES = {
    "invalid_pattern",
    "regex_error",
    "match_timeout",
    "internal_error",
}


@dataclass
class FuzzyError(Exception):
    code: str
    message: str
    details: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.code not in ALLOWED_ERROR_CODES:
            self.code = "invalid_pattern"

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class InvalidPattern(FuzzyError):
    """Search term or configuration value rejected before any pattern text is built."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(code="invalid_pattern", message=message, details=details)


class RegexError(FuzzyError):
    """The regex engine refused a generated pattern."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(code="regex_error", message=message, details=details)


class MatchTimeout(FuzzyError):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(code="match_timeout", message=message, details=details)


def ensure(condition: bool, message: str, details: dict[str, Any] | None = None) -> None:
    if not condition:
        raise InvalidPattern(message, details)
