"""
Semantic Memory - Logging Configuration

structlog renders every event; the standard library only carries the
rendered line to stdout. Debug settings give coloured console lines,
anything else one JSON object per event.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from structlog.types import Processor

from semantic_memory.core.config import settings

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "aiosqlite", "sqlalchemy.engine")

_HANDLER_NAME = "semantic_memory"


def _processors(debug: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    return processors


def setup_logging(level: Optional[str] = None, debug: Optional[bool] = None) -> None:
    """
    Configure structlog and the root logger.

    ``level`` and ``debug`` default to ``LOG_LEVEL`` and ``DEBUG`` from
    settings. Safe to call again; the stdout handler is installed once.
    """
    debug = settings.DEBUG if debug is None else debug
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    structlog.configure(
        processors=_processors(debug),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if not any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LoggerMixin:
    """Gives a class a ``logger`` named after its module, tagged with the class name."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        cls = type(self)
        return get_logger(cls.__module__).bind(component=cls.__name__)
