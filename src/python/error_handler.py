"""
Timeline Error Handler Module

This module provides a centralized error handling system that:
1. Logs errors with enough context to reproduce a failed gesture
2. Provides a consistent error reporting pattern throughout the engine
3. Guards the numeric boundary so NaN never reaches the coordinate math
"""

import logging
import math
import numbers
import traceback

logger = logging.getLogger("yearline.error_handler")


def is_finite_number(*values: object) -> bool:
    """True when every value is a real, finite number."""
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return False
        if not math.isfinite(value):
            return False
    return True


class ErrorHandler:
    """Centralized error handling for the timeline engine."""

    @staticmethod
    def log_exception(e: Exception, context: str = "") -> str:
        """Log an exception with its stack trace."""
        error_type = type(e).__name__
        error_msg = str(e)

        if context:
            logger.error(f"{context}: {error_type}: {error_msg}")
        else:
            logger.error(f"{error_type}: {error_msg}")

        logger.debug("".join(traceback.format_exception(e)))

        return f"{error_type}: {error_msg}"

    @staticmethod
    def show_error(message: str, title: str = "Error") -> None:
        """Log an error message."""
        logger.error(f"[{title}] {message}")

    @staticmethod
    def show_warning(message: str, title: str = "Warning") -> None:
        """Log a warning message."""
        logger.warning(f"[{title}] {message}")

    @staticmethod
    def show_info(message: str, title: str = "Info") -> None:
        """Log an info message."""
        logger.info(f"[{title}] {message}")
