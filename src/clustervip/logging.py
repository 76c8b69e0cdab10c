"""
Structured logging for clustervip using structlog.
"""

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: Optional[object] = None,
) -> None:
    """
    Configure structured logging.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_output: Render JSON lines instead of the colored console format
        stream: Output stream, stderr when omitted
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )


@contextmanager
def log_operation(logger: structlog.stdlib.BoundLogger, operation: str, **kwargs):
    """
    Log the start, completion or failure of an operation with its duration.

    Usage:
        with log_operation(log, "reconcile_vip_port", cluster="demo"):
            ...
    """
    log = logger.bind(operation=operation, **kwargs)
    start_time = datetime.now()
    log.info(f"{operation}.started")

    try:
        yield log
    except Exception as e:
        duration_ms = (datetime.now() - start_time).total_seconds() * 1000
        log.error(
            f"{operation}.failed",
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=round(duration_ms, 2),
        )
        raise
    duration_ms = (datetime.now() - start_time).total_seconds() * 1000
    log.info(f"{operation}.completed", duration_ms=round(duration_ms, 2))
