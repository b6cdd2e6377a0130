"""Logging and deprecation helpers."""
from .logging import get_logger, log_duration, setup_logging
from .deprecate import deprecate

__all__ = ["get_logger", "log_duration", "setup_logging", "deprecate"]
