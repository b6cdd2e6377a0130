"""Structured logging configuration."""
import logging
import time
from contextlib import contextmanager

import structlog


def setup_logging(level: str = "INFO"):
    """Configure structlog JSON output at the given level."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def get_logger(component: str = None):
    """Get logger with optional component context."""
    logger = structlog.get_logger("flamelink")
    if component:
        logger = logger.bind(component=component)
    return logger


@contextmanager
def log_duration(logger, action: str, **extra):
    """Context manager to log action duration."""
    start = time.perf_counter()
    try:
        yield
        duration_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"{action}_completed", duration_ms=round(duration_ms, 2), **extra)
    except Exception as e:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.error(
            f"{action}_failed",
            duration_ms=round(duration_ms, 2),
            error=str(e)[:100],
            error_type=type(e).__name__,
            **extra,
        )
        raise
