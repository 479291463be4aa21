"""structlog setup shared by the app, scripts and tests.

Every module logs through ``get_logger(__name__)``; events are snake_case
names with keyword fields, e.g. ``log.info("leave_approved", request_id=...)``.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import FilteringBoundLogger


def configure_logging(level: str = "INFO", *, json_output: bool = True) -> None:
    """Route structlog events to stderr, JSON lines unless ``json_output`` is off."""
    level_no = logging.getLevelName(level.upper())
    if not isinstance(level_no, int):
        raise ValueError(f"Unknown log level: {level!r}")

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )

    # Third-party libraries (werkzeug, mysql-connector) log through stdlib.
    logging.basicConfig(level=level_no, stream=sys.stderr)


def get_logger(name: str) -> FilteringBoundLogger:
    return structlog.get_logger().bind(logger=name)
