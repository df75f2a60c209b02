"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any, Dict

import structlog
from rich.console import Console
from rich.logging import RichHandler

from autoply.config import settings


def configure_logging() -> None:
    """Configure structured logging with rich output."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Standard library logging carries playwright and asyncio messages
    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=True)],
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    The logger stays lazy: it resolves against whatever configuration is
    active when it first logs, so module and adapter loggers created at
    import time still honour configure_logging().
    """
    return structlog.get_logger(name, **initial_values)


def log_step_context(platform: str, url: str, step: int, **kwargs: Any) -> Dict[str, Any]:
    """Create a log context for one submission step."""
    return {
        "platform": platform,
        "url": url,
        "step": step,
        **{k: v for k, v in kwargs.items() if not k.startswith("_")},
    }
