"""ADLENS — Structured JSON Logging.

One JSON object per line on stdout. Graph API access tokens are masked
wherever they appear in a message or traceback.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from adlens.config import settings

# Extra fields callers may attach via ``logger.x(..., extra={...})``
EXTRA_FIELDS = (
    "method",
    "path",
    "attempt",
    "status_code",
    "error_kind",
    "duration_ms",
    "entity_id",
)

_TOKEN_PATTERN = re.compile(r"(access_token=)[^&\s\"']+")

REDACTED = "***"


def redact(text: str) -> str:
    """Mask ``access_token=...`` query values, e.g. inside logged URLs."""
    return _TOKEN_PATTERN.sub(rf"\g<1>{REDACTED}", text)


class JSONFormatter(logging.Formatter):
    """Renders a record as a single JSON line with the known extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = redact(self.formatException(record.exc_info))
        for key in EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = redact(value) if isinstance(value, str) else value
        return json.dumps(entry, default=str)


def get_logger(name: str) -> logging.Logger:
    """``adlens.<name>`` logger writing JSON lines at ``settings.log_level``."""
    logger = logging.getLogger(f"adlens.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger
