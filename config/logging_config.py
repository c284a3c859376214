"""Structured JSON logging configuration using structlog."""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    component: str, level: str = "INFO", stream: TextIO | None = None
) -> structlog.BoundLogger:
    """Configure structlog with JSON output and return a bound logger for the component.

    Logs go to stdout unless another stream is given; the CLI passes stderr so
    that its JSON result stays alone on stdout.

    Logger caching is off because the output stream can change between calls:
    the API and the CLI each reconfigure on startup, and the CLI tests rebind
    stderr to a fresh capture on every run. A cached logger would keep writing
    to the stream it first saw, which may already be closed.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger(component=component)
