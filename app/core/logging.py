"""Structured logging configuration for the Assessment Engine."""

import logging
import sys
from typing import Any

# Context fields promoted to top-level keys, in output order
_CONTEXT_FIELDS = ("assessment_id", "section_id", "question_id")


class StructuredFormatter(logging.Formatter):
    """key=value structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured output."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        parts = [f"{k}={v}" for k, v in log_data.items()]
        if record.exc_info:
            parts.append(self.formatException(record.exc_info))
        return " ".join(parts)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        # Set level based on environment
        try:
            from app.core.config import get_settings

            settings = get_settings()
            if settings.ASSESSMENT_ENGINE_ENV == "dev":
                logger.setLevel(logging.DEBUG)
            else:
                logger.setLevel(logging.INFO)
        except Exception:
            # Default to INFO if settings not available
            logger.setLevel(logging.INFO)

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """
    Log with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: Context fields (assessment_id, section_id, question_id are
            promoted; anything else is appended as key=value)
    """
    extra: dict[str, Any] = {}
    for field in _CONTEXT_FIELDS:
        if field in kwargs:
            extra[field] = str(kwargs.pop(field))
    extra["extra_data"] = kwargs

    logger.log(level, msg, extra=extra)
