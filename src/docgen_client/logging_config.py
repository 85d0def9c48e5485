"""
Document Generator Client - Logging

structlog setup shared by the library and the CLI.
"""

from __future__ import annotations

import logging
from typing import Optional

import structlog

from .config import LogConfig, LogFormat


def configure_logging(config: Optional[LogConfig] = None) -> None:
    """Configure structlog with a console or JSON renderer."""
    config = config or LogConfig()
    level = logging.getLevelName(config.level)
    if not isinstance(level, int):
        level = logging.INFO

    if config.format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
