"""Logging configuration for structured logging."""
import logging
import sys
from typing import TextIO


def configure_structured_logging(level: str = "INFO", stream: TextIO | None = None):
    """Configure root logging for JSON lines emitted by StructuredLogger."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",  # JSON already formatted
        stream=stream or sys.stdout,
    )

    # Property tests generate thousands of configs; keep their chatter out
    logging.getLogger("hypothesis").setLevel(logging.WARNING)
