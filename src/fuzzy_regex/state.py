from __future__ import annotations

from dataclasses import dataclass

from .config import Settings
from .logging_jsonl import JsonlLogger
from .matcher_cache import MatcherCache


@dataclass
class AppState:
    settings: Settings
    logger: JsonlLogger
    matchers: MatcherCache


def create_state(settings: Settings | None = None) -> AppState:
    cfg = settings or Settings.from_env()
    return AppState(
        settings=cfg,
        logger=JsonlLogger(level=cfg.log_level),
        matchers=MatcherCache(max_keep=cfg.matcher_cache_max_keep, ttl_sec=cfg.matcher_cache_ttl_sec),
    )
