"""structlog configuration for aumai-mockengine."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from aumai_mockengine.config import LogFormat


def configure_logging(
    log_level: str = "INFO", log_format: LogFormat = "console"
) -> structlog.stdlib.BoundLogger:
    """Route structlog events through stdlib logging on stderr.

    Library modules only call ``structlog.get_logger``; applications (and the
    CLI) call this once to pick a level and renderer.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=log_format == "console"))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger("aumai_mockengine")



def configure_library_defaults() -> None:
    """Send structlog events to stdlib logging until an application decides.

    structlog's own default prints every event to stdout.  Routed through
    stdlib logging instead, events below the root level (``WARNING`` when
    nothing is configured) are dropped and the rest reach stderr.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


__all__ = ["configure_library_defaults", "configure_logging"]
