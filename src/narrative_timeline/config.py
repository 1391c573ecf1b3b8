from __future__ import annotations

import os
from dataclasses import dataclass, field


def _s(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _b(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _list(name: str, default: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in _s(name, default).split(",") if part.strip())


def _level(name: str, default: str) -> str:
    value = _s(name, default).upper()
    if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        return default
    return value


@dataclass(frozen=True)
class TimelineConfig:
    # Zone used to localize wall-clock text that carries no explicit offset
    default_timezone: str = _s("NARRATIVE_TIMELINE_TZ", "UTC")
    default_locale: str = _s("NARRATIVE_TIMELINE_LOCALE", "en_US")

    # Languages handed to the natural-language resolver
    languages: tuple[str, ...] = field(
        default_factory=lambda: _list("NARRATIVE_TIMELINE_LANGUAGES", "en")
    )
    forward_date: bool = _b("NARRATIVE_TIMELINE_FORWARD_DATE", False)

    log_level: str = _level("NARRATIVE_TIMELINE_LOG_LEVEL", "INFO")


CONFIG = TimelineConfig()
