"""
Logging setup for the certificate service.

The importer attaches structured context through ``extra``
(``intern_id``, ``index``, ``outcome``, batch counts).
``JSONFormatter`` emits those fields as top-level keys in production; the
console formatter used in development appends them as ``key=value`` pairs.

Secrets (bearer tokens, JWTs, passwords, database credentials) are redacted
from every message before it is written.
"""

import json
import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Structured fields the service passes via ``extra``, in output order
CONTEXT_FIELDS = (
    "source",
    "index",
    "intern_id",
    "outcome",
    "total",
    "successful",
    "failed",
    "skipped",
    "error_type",
)

REDACTIONS = (
    (re.compile(r"(bearer\s+)[\w.-]{20,}", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"\beyJ[\w-]{10,}\.[\w-]{10,}\.[\w-]{10,}"), "[REDACTED_JWT]"),
    (re.compile(r"((?:password|secret)\s*[=:]\s*)\S+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(\w+(?:\+\w+)?://[^:/@\s]+:)[^@\s]+(@)"), r"\1[REDACTED]\2"),
)

NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "sqlalchemy.engine", "multipart")


def redact(message: Any) -> str:
    """Strip credentials out of a log message."""
    text = message if isinstance(message, str) else str(message)
    for pattern, replacement in REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """The known ``extra`` fields present on ``record``."""
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line: level, logger, redacted message, context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        entry.update(record_context(record))
        if record.exc_info:
            entry["exception"] = redact(self.formatException(record.exc_info))
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Readable single-line output for development."""

    def __init__(self):
        super().__init__("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return redact(line)


def setup_logging(env: Optional[str] = None, level: Optional[str] = None) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        env: Defaults to ``ENV``; ``production`` selects JSON output
        level: Defaults to ``LOG_LEVEL``; unknown names fall back to INFO
    """
    env = env or os.getenv("ENV", "development")
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if not isinstance(logging.getLevelName(level_name), int):
        level_name = "INFO"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if env == "production" else ConsoleFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_name)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
