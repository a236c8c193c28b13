"""Structured logging setup.

Library modules only call get_logger(); the application configures
structlog once through setup_logging(). Extra processors run before the
renderer, which is how the request locale ends up on every event logged
while a request is being served.
"""

from collections.abc import Sequence
import logging
import sys
from typing import Any

import structlog

from translated_fields.core.config import settings

# Package logger; library events are filtered on this name
PACKAGE_LOGGER = "translated_fields"


def setup_logging(
    *,
    debug: bool | None = None,
    json_logs: bool | None = None,
    extra_processors: Sequence[structlog.types.Processor] = (),
) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        debug: Log at DEBUG level; defaults to settings.DEBUG
        json_logs: Render JSON lines; defaults to True outside "local"
        extra_processors: Processors applied to every event before rendering
    """
    if debug is None:
        debug = settings.DEBUG
    if json_logs is None:
        json_logs = settings.ENVIRONMENT != "local"
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(log_level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        *extra_processors,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    processors: list[Any]
    if json_logs:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
