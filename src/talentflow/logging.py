"""Logging utilities for the assessment engine."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # resolved per call so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "INFO", renderer: str = "json") -> None:
    """Configure structlog with JSON (or console) output on stderr."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s")

    final_processor: Any
    if renderer == "console":
        final_processor = structlog.dev.ConsoleRenderer(colors=False)
    else:
        final_processor = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            final_processor,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
