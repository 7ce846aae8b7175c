"""Structured logging utilities for generator lifecycle events."""
import json
import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Optional


class StructuredLogger:
    """Structured logger with correlation ID support.

    One generator instance keeps one correlation ID, so every event about the
    same configuration can be grouped downstream.
    """

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)
        self._correlation_id: Optional[str] = None

    @property
    def correlation_id(self) -> Optional[str]:
        return self._correlation_id

    def set_correlation_id(self, correlation_id: str):
        """Set correlation ID for current context."""
        self._correlation_id = correlation_id

    def clear_correlation_id(self):
        """Clear correlation ID."""
        self._correlation_id = None

    def generate_correlation_id(self) -> str:
        """Generate new correlation ID."""
        return f"SYN_{uuid.uuid4().hex[:12]}"

    def _format_message(self, level: str, message: str, **kwargs: Any) -> dict:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": level,
            "message": message,
            "correlation_id": self._correlation_id or "none",
        }

        if kwargs:
            log_entry["context"] = kwargs

        return log_entry

    def _emit(self, level: int, message: str, **kwargs: Any):
        if not self.logger.isEnabledFor(level):
            return
        entry = self._format_message(logging.getLevelName(level), message, **kwargs)
        self.logger.log(level, json.dumps(entry, default=str))

    def info(self, message: str, **kwargs: Any):
        """Log info with structured data."""
        self._emit(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any):
        """Log warning with structured data."""
        self._emit(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any):
        """Log error with structured data."""
        self._emit(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any):
        """Log debug with structured data."""
        self._emit(logging.DEBUG, message, **kwargs)


def get_structured_logger(name: str) -> StructuredLogger:
    """Get or create structured logger."""
    return StructuredLogger(name)
