"""JSON log output for the ``credit_ledger`` logger tree."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger.json import JsonFormatter

ROOT_LOGGER = "credit_ledger"


class JSONFormatter(JsonFormatter):
    """One JSON object per record, with ``extra`` fields at the top level."""

    def __init__(self) -> None:
        super().__init__("%(message)s")

    def add_fields(
        self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        if "exc_info" in log_record:
            log_record["exception"] = log_record.pop("exc_info")


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Install the JSON handler on the ``credit_ledger`` logger.

    Safe to call more than once: previous handlers are replaced.
    """
    logger = logging.getLogger(ROOT_LOGGER)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False

    return logger
