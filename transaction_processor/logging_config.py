"""
Structured Logging Configuration Module

Provides JSON-formatted structured logging for transaction processing.
Library modules only call ``get_logger``; handlers are attached once by the
CLI through ``setup_logging``.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import IO, Optional


ROOT_LOGGER_NAME = "transaction_processor"
TEXT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
            "action": getattr(record, 'action', None),
            "client": getattr(record, 'client', None),
            "tx": getattr(record, 'tx', None),
            "extra": getattr(record, 'extra', None)
        }

        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    level: str = "INFO",
    fmt: str = "json",
    log_file: Optional[str] = None,
    stream: Optional[IO[str]] = None,
    logger_name: str = ROOT_LOGGER_NAME
) -> logging.Logger:
    """
    Setup logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: "json" for structured output, "text" for plain lines
        log_file: Append logs to this file instead of a stream
        stream: Stream for the handler (defaults to stderr so stdout stays
            free for the report)
        logger_name: Name of the logger

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(stream or sys.stderr)

    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               action: Optional[str] = None, client: Optional[int] = None,
               tx: Optional[int] = None, extra: Optional[dict] = None):
    """
    Log an action with structured data.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, etc.)
        message: Log message
        action: Action being performed
        client: Client the action applies to
        tx: Transaction the action applies to
        extra: Additional structured data
    """
    numeric_level = getattr(logging, level.upper())
    if not logger.isEnabledFor(numeric_level):
        return

    fields = {}
    if action:
        fields['action'] = action
    if client is not None:
        fields['client'] = client
    if tx is not None:
        fields['tx'] = tx
    if extra:
        fields['extra'] = extra

    logger.log(numeric_level, message, extra=fields)
