"""
Structured Logging for Service Bus Namespace Operations

Context-aware logging for remote operations. Records flow to the handlers
installed by :func:`sbnamespace.core.logging_config.setup_logging`; extra
fields are carried under ``context`` so the JSON formatter emits them.

Author: sbnamespace contributors
"""

import logging
import time
import uuid
from functools import wraps
from typing import Any, Optional

from sbnamespace.core.logging_config import correlation_id


class CorrelationContext:
    """Manages correlation ID context for one sweep or verification run."""

    @staticmethod
    def new_correlation_id() -> str:
        """Start a new correlation scope."""
        corr_id = str(uuid.uuid4())
        correlation_id.set(corr_id)
        return corr_id


class StructuredLogger:
    """Structured logger with correlation tracking."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        context = {k: v for k, v in kwargs.items() if v is not None}
        extra = {"context": context} if context else {}
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def log_operation(
        self,
        operation: str,
        resource_group: Optional[str],
        name: Optional[str],
        **kwargs: Any
    ) -> None:
        """Log a namespace operation."""
        self.info(
            f"{operation}: {resource_group}/{name}",
            operation=operation,
            resource_group=resource_group,
            name=name,
            **kwargs
        )

    def log_error(
        self,
        operation: str,
        error_type: str,
        error_message: str,
        **kwargs: Any
    ) -> None:
        """Log error with context."""
        self.error(
            f"Error in {operation}: {error_message}",
            operation=operation,
            error_type=error_type,
            error_message=error_message,
            **kwargs
        )


def track_operation_time(logger: StructuredLogger, operation: str):
    """Decorator to track coroutine execution time."""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
                duration_ms = (time.time() - start_time) * 1000
                logger.debug(
                    f"Operation completed: {operation}",
                    operation=operation,
                    duration_ms=round(duration_ms, 2)
                )
                return result
            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                logger.debug(
                    f"Operation failed: {operation}",
                    operation=operation,
                    duration_ms=round(duration_ms, 2),
                    error_type=type(e).__name__,
                    error_message=str(e)
                )
                raise
        return wrapper
    return decorator
