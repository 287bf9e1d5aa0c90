"""
Logging utilities for the FastAPI application and the token reclamation task.

Provides a consistent logging format and keeps outbound HTTP client chatter
out of the access log unless debugging.
"""

import logging
import sys

_NOISY_LOGGERS = ("httpx", "httpcore", "PIL")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    resolved = level.upper()
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    if resolved != "DEBUG":
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging"]
