# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Structured logging for the SDK.

Records emitted by the delivery engine carry context through ``extra=``
(see :data:`CONTEXT_FIELDS`). The JSON formatter lifts those attributes into
the entry; the text formatter appends them as ``key=value`` pairs. Both
redact LogVault API keys and bearer tokens before anything is written.
"""

import json
import logging
import re
import sys
from typing import Any

REDACT_PATTERNS = [
    re.compile(r"(lv_(?:live|test)_[a-zA-Z0-9]{4})[a-zA-Z0-9_\-]*"),
    re.compile(r"(Bearer\s+[a-zA-Z0-9\-._~+/]{10})[a-zA-Z0-9\-._~+/]*"),
]

# Attributes the delivery engine attaches to its records.
CONTEXT_FIELDS = ("action", "state", "attempt", "max_attempts", "kind", "delay_ms", "status_code")


def redact_sensitive(text: str) -> str:
    for pattern in REDACT_PATTERNS:
        text = pattern.sub(r"\1[REDACTED]", text)
    return text


def delivery_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the delivery context attached to *record*, secrets redacted."""
    context: dict[str, Any] = {}
    for field in CONTEXT_FIELDS:
        value = getattr(record, field, None)
        if value is None:
            continue
        context[field] = value if isinstance(value, int | float) else redact_sensitive(str(value))
    return context


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_sensitive(record.getMessage()),
        }
        log_entry.update(delivery_context(record))
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = redact_sensitive(str(record.exc_info[1]))
        return json.dumps(log_entry)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        context = delivery_context(record)
        if context:
            msg += " " + " ".join(f"{key}={value}" for key, value in context.items())
        return redact_sensitive(msg)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Attach a single stderr handler to the ``logvault`` logger.

    Calling it again replaces the previous handler.
    """
    logger = logging.getLogger("logvault")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            TextFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    logger.addHandler(handler)
