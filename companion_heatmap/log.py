"""
structlog setup for the heatmap package.

Loggers handed out by get_logger go through the stdlib logging backend,
so an application that never calls setup_logging only sees warnings and
above (the stdlib default) instead of debug chatter from every layout.
"""

import logging
import sys
from typing import Any

import structlog


def _configure_stdlib_backend(processors) -> None:
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def setup_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structured logging.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ...)
        json_logs: JSON lines when True, colored console output otherwise
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)

    processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    _configure_stdlib_backend(processors)


def get_logger(name: str | None = None, component: str | None = None, **initial_context: Any):
    """
    Return a bound structlog logger.

    Usage:
        >>> log = get_logger(__name__, component="treemap-layout")
        >>> log.debug("treemap_layout", items=12)
    """
    if not structlog.is_configured():
        _configure_stdlib_backend(
            [
                structlog.stdlib.add_log_level,
                structlog.processors.format_exc_info,
                structlog.dev.ConsoleRenderer(colors=False),
            ]
        )

    context = dict(initial_context)
    if component:
        context["component"] = component
    # lazy proxy: resolved against the current configuration on every call,
    # so module level loggers pick up a later setup_logging
    if name:
        return structlog.get_logger(name, **context)
    return structlog.get_logger(**context)
