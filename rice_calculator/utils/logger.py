"""Structured logging setup using structlog."""

import logging
import sys
from typing import Optional

import structlog

from rice_calculator.config import settings


def setup_logging(level: str = "", json_logs: Optional[bool] = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Log level name. Defaults to ``FAVRO_LOG_LEVEL``.
        json_logs: Render JSON lines instead of console output.
            Defaults to ``FAVRO_LOG_JSON``.
    """
    level = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.log_json

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
