"""structlog setup driven by the library settings."""

from __future__ import annotations

import logging
import sys

import structlog

from snipfile.settings import Settings, get_settings


def resolve_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its number; INFO when unknown."""
    level = getattr(logging, name.strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings | None = None) -> None:
    """Render snipfile events as JSON on stderr, filtered at ``SNIPFILE_LOG_LEVEL``."""

    settings = settings or get_settings()
    level = resolve_level(settings.log_level)
    logging.getLogger("snipfile").setLevel(level)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )
