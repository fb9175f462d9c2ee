from __future__ import annotations

import argparse
import time
from typing import Any, Callable

from fastmcp import FastMCP

from .errors import FuzzyError
from .models import ToolErrorResponse
from .state import AppState, create_state
from .tools_fuzzy import fuzzy_filter as fuzzy_filter_impl
from .tools_fuzzy import fuzzy_match as fuzzy_match_impl
from .tools_fuzzy import fuzzy_pattern as fuzzy_pattern_impl


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _execute(state: AppState, tool: str, fn: Callable[..., dict[str, Any]], *args: Any, **kwargs: Any) -> dict[str, Any]:
    started = time.monotonic()
    try:
        out = fn(*args, **kwargs)
        fields: dict[str, Any] = {}
        if isinstance(out, dict):
            if tool == "fuzzy_pattern":
                fields["tokens"] = len(out.get("tokens") or [])
            elif tool == "fuzzy_match":
                fields["matched"] = out.get("matched")
                fields["cached"] = out.get("cached")
            elif tool == "fuzzy_filter":
                fields["total_lines"] = out.get("total_lines")
                fields["matched"] = out.get("matched")
                fields["truncated"] = out.get("truncated")
        state.logger.emit(tool=tool, ok=True, elapsed_ms=_elapsed_ms(started), **fields)
        return out
    except FuzzyError as e:
        state.logger.emit(tool=tool, ok=False, level="error", elapsed_ms=_elapsed_ms(started), code=e.code)
        return ToolErrorResponse(**e.to_dict()).model_dump(exclude_none=True)
    except Exception as e:
        error_type = type(e).__name__
        state.logger.emit(
            tool=tool,
            ok=False,
            level="error",
            elapsed_ms=_elapsed_ms(started),
            code="internal_error",
            error_type=error_type,
        )
        return ToolErrorResponse(
            code="internal_error",
            message=str(e),
            details={"error_type": error_type},
        ).model_dump(exclude_none=True)


def create_app(state: AppState | None = None) -> FastMCP:
    app_state = state or create_state()
    mcp = FastMCP("fuzzy_regex")

    @mcp.tool()
    def fuzzy_pattern(
        search_term: str,
        min_word_length: int | None = None,
        required_char_ratio: float | None = None,
        case_sensitive: bool | None = None,
        max_char_gap: int | None = None,
    ) -> dict[str, Any]:
        return _execute(
            app_state,
            "fuzzy_pattern",
            lambda: fuzzy_pattern_impl(
                app_state,
                search_term=search_term,
                min_word_length=min_word_length,
                required_char_ratio=required_char_ratio,
                case_sensitive=case_sensitive,
                max_char_gap=max_char_gap,
            ),
        )

    @mcp.tool()
    def fuzzy_match(
        search_term: str,
        text: str,
        min_word_length: int | None = None,
        required_char_ratio: float | None = None,
        case_sensitive: bool | None = None,
        max_char_gap: int | None = None,
    ) -> dict[str, Any]:
        return _execute(
            app_state,
            "fuzzy_match",
            lambda: fuzzy_match_impl(
                app_state,
                search_term=search_term,
                text=text,
                min_word_length=min_word_length,
                required_char_ratio=required_char_ratio,
                case_sensitive=case_sensitive,
                max_char_gap=max_char_gap,
            ),
        )

    @mcp.tool()
    def fuzzy_filter(
        search_term: str,
        lines: list[str],
        limit: int | None = None,
        min_word_length: int | None = None,
        required_char_ratio: float | None = None,
        case_sensitive: bool | None = None,
        max_char_gap: int | None = None,
    ) -> dict[str, Any]:
        return _execute(
            app_state,
            "fuzzy_filter",
            lambda: fuzzy_filter_impl(
                app_state,
                search_term=search_term,
                lines=lines,
                limit=limit,
                min_word_length=min_word_length,
                required_char_ratio=required_char_ratio,
                case_sensitive=case_sensitive,
                max_char_gap=max_char_gap,
            ),
        )

    return mcp


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve fuzzy regex pattern tools over MCP.")
    parser.add_argument("--stdio", action="store_true", default=False)
    args = parser.parse_args()
    mcp = create_app()
    if args.stdio:
        mcp.run(transport="stdio")
    else:
        mcp.run()


if __name__ == "__main__":
    main()
