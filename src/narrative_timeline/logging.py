"""Structured logging for date parsing and conflict scans.

Events are JSON lines with key-value context:
- date_unparsed, relaxed_zone_rejected, dateparser_rejected (debug)
- conflict_scan_started (debug), conflict_scan_complete (info, counts by type)
- death_date_unparsed, dependency_unresolved, causality_link_unresolved (debug)

The level comes from NARRATIVE_TIMELINE_LOG_LEVEL at import.
"""
from __future__ import annotations

from typing import Literal

import logging
import structlog

from narrative_timeline.config import CONFIG

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: LogLevel = "INFO") -> None:
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "narrative_timeline"):
    return structlog.get_logger(name)


# Initialize default config
configure_logging(CONFIG.log_level)
