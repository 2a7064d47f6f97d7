from __future__ import annotations

import logging
import os
import sys
from typing import Final

import structlog

LOG_LEVEL_ENV: Final[str] = "ERRCASE_LOG_LEVEL"
LOG_FORMAT_ENV: Final[str] = "ERRCASE_LOG_FORMAT"
LOG_FORMATS: Final[tuple[str, ...]] = ("console", "json")
_ROOT_LOGGER: Final[str] = "errcase"


def resolve_log_level(level: str | None = None) -> int:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {name}")
    return resolved


def resolve_log_format(log_format: str | None = None) -> str:
    resolved = (log_format or os.environ.get(LOG_FORMAT_ENV) or "console").lower()
    if resolved not in LOG_FORMATS:
        raise ValueError(f"log format must be one of: {','.join(LOG_FORMATS)}")
    return resolved


def configure_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Route errcase log events to stderr through structlog.

    Explicit arguments win over ``ERRCASE_LOG_LEVEL`` / ``ERRCASE_LOG_FORMAT``.
    """
    numeric_level = resolve_log_level(level)
    if resolve_log_format(log_format) == "json":
        renderer: structlog.typing.Processor = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))
    root = logging.getLogger(_ROOT_LOGGER)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(numeric_level)
    root.propagate = False
