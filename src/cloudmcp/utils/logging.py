"""Logging setup: a stderr handler with secret redaction.

stdout is the MCP stdio channel, so every handler writes to stderr.  The
:class:`SecretRedactingFilter` scrubs registered secrets (account tokens)
from each record before any handler formats it.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from collections.abc import Iterable
from datetime import UTC, datetime

REDACTED = "***REDACTED***"

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_MIN_SECRET_LEN = 4


class SecretRegistry:
    """Process-wide set of strings that must never be emitted."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._secrets: set[str] = set()

    def add(self, *secrets: str) -> None:
        with self._lock:
            self._secrets.update(s for s in secrets if s and len(s) >= _MIN_SECRET_LEN)

    def update(self, secrets: Iterable[str]) -> None:
        self.add(*secrets)

    def discard(self, secret: str) -> None:
        with self._lock:
            self._secrets.discard(secret)

    def redact(self, text: str) -> str:
        with self._lock:
            secrets = sorted(self._secrets, key=len, reverse=True)
        for secret in secrets:
            if secret in text:
                text = text.replace(secret, REDACTED)
        return text


secret_registry = SecretRegistry()


def redact(text: str) -> str:
    """Replace every registered secret in *text*."""
    return secret_registry.redact(text)


class SecretRedactingFilter(logging.Filter):
    """Rewrites the record's message with registered secrets masked."""

    def __init__(self, registry: SecretRegistry | None = None) -> None:
        super().__init__()
        self._registry = registry or secret_registry

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._registry.redact(message)
        if redacted != message or record.args:
            record.msg = redacted
            record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = self._registry.redact(
                logging.Formatter().formatException(record.exc_info)
            )
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line."""

    _EXTRA_FIELDS = ("tool", "account", "latency_ms", "status")

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "ts": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in self._EXTRA_FIELDS:
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_text:
            data["exc"] = record.exc_text
        elif record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data, separators=(",", ":"), default=str)


def setup_logging(level: str = "info", fmt: str = "text") -> logging.Logger:
    """Configure the ``cloudmcp`` logger hierarchy and return its root."""
    root = logging.getLogger("cloudmcp")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonLogFormatter() if fmt == "json" else logging.Formatter(_LOG_FORMAT))
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)
    return root
