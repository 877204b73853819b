"""
Structured logging for caskaudit.

Audit runs talk to hosting APIs with personal access tokens and fetch whole
release feeds, so log output is scrubbed before it is written:

- fields whose name mentions a credential are dropped (see BLOCKED_FIELDS)
- URLs are reduced to host and path
- feed bodies and headers are replaced by placeholders

Usage:
    from caskaudit.logging_config import setup_logging, get_logger

    setup_logging()  # once, at startup
    logger = get_logger(__name__)
    logger.info("Auditing cask", extra={"cask": "example-app"})

The cask token is logged under ``cask``: ``token`` is a blocked field.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlsplit

import orjson

# Overrides the level passed to setup_logging() when set
LEVEL_ENV_VAR = "CASKAUDIT_LOG_LEVEL"

_URL_IN_TEXT = re.compile(r"(https?://[^\s\"'<>]+)")

_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})\b"), "[GITHUB_TOKEN]"),
    (re.compile(r"\bglpat-[A-Za-z0-9_\-]{20,}\b"), "[GITLAB_TOKEN]"),
    (re.compile(r"\bbearer\s+['\"]?[\w\-\.]+['\"]?", re.I), "[TOKEN]"),
    (re.compile(r"\b(access_token|token)=['\"]?[\w\-\.]+['\"]?", re.I), "[TOKEN]"),
    (re.compile(r"(authorization|private-token)[=:\s]+['\"]?[\w\-\.]+(\s+[\w\-\.]+)?['\"]?", re.I), "[AUTH]"),
)

# Substrings of field names that never reach the output
BLOCKED_FIELDS: frozenset[str] = frozenset(
    {
        "token",
        "secret",
        "password",
        "authorization",
        "private-token",
        "bearer",
        "credential",
        "cookie",
    }
)

# Bulky payload fields, replaced wholesale
PLACEHOLDER_FIELDS: dict[str, str] = {
    "content": "[CONTENT]",
    "body": "[BODY]",
    "headers": "[HEADERS]",
}

_MAX_DEPTH = 3
_MAX_LIST_ITEMS = 10

_NOISY_LOGGERS = ("aiohttp", "asyncio")

# Attributes every LogRecord carries; anything else came in via extra=
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


def _normalize_url(url: str) -> str:
    """Host and path only: no scheme, credentials, query or fragment."""
    parts = urlsplit(url)
    return f"{parts.hostname or ''}{parts.path}" or "/"


def _sanitize_text(text: str) -> str:
    """Strip query strings and known credential shapes from free text."""
    if not text:
        return text

    text = _URL_IN_TEXT.sub(lambda m: _normalize_url(m.group(1)), text)
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


def _is_blocked(name: str) -> bool:
    lowered = name.lower()
    return any(blocked in lowered for blocked in BLOCKED_FIELDS)


def _scrub_value(key: str, value: Any, depth: int) -> Any:
    lowered = key.lower()
    if lowered == "url" and isinstance(value, str):
        return _normalize_url(value)
    if lowered in PLACEHOLDER_FIELDS:
        return PLACEHOLDER_FIELDS[lowered]
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _sanitize_text(value)
    if isinstance(value, dict):
        return _filter_log_record(value, _depth=depth + 1)
    if isinstance(value, (list, tuple)):
        if len(value) > _MAX_LIST_ITEMS:
            return f"[list:{len(value)} items]"
        return list(value)
    return _sanitize_text(str(value))


def _filter_log_record(record: dict[str, Any], *, _depth: int = 0) -> dict[str, Any]:
    """Scrub a mapping of structured log fields, recursing into dicts."""
    if _depth > _MAX_DEPTH:
        return {"_truncated": "max depth exceeded"}
    return {
        key: _scrub_value(key, value, _depth)
        for key, value in record.items()
        if not _is_blocked(key)
    }


def _structured_fields(record: logging.LogRecord) -> dict[str, Any]:
    extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
    return _filter_log_record(extra) if extra else {}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, serialized with orjson.

    {"ts":"2026-01-01T00:00:00.000+00:00","level":"INFO","logger":"caskaudit.audit.runner","msg":"Audit finished","cask":"example-app","status":"passed"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": _sanitize_text(record.getMessage()),
        }
        if record.levelno >= logging.WARNING:
            entry["file"] = record.filename
            entry["line"] = record.lineno
        if record.exc_info:
            entry["exc"] = _sanitize_text(self.formatException(record.exc_info))

        entry.update(_structured_fields(record))
        return orjson.dumps(entry, default=str).decode()


class SimpleFormatter(logging.Formatter):
    """``LEVEL    logger: message | key=value ...`` for terminals and tests."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname:8s} {record.name}: {_sanitize_text(record.getMessage())}"

        fields = _structured_fields(record)
        if fields:
            line += " | " + " ".join(f"{key}={value}" for key, value in fields.items())
        if record.exc_info:
            line += "\n" + _sanitize_text(self.formatException(record.exc_info))
        return line


def setup_logging(
    *,
    level: int | str = logging.INFO,
    json_format: bool = True,
    stream: Any = None,
) -> None:
    """Install a single scrubbing handler on the root logger.

    Args:
        level: Root log level; CASKAUDIT_LOG_LEVEL overrides it when set.
        json_format: JSON lines (default) or SimpleFormatter output.
        stream: Destination stream (default stderr).
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else SimpleFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(os.environ.get(LEVEL_ENV_VAR, "").upper() or level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``; kept for call-site symmetry."""
    return logging.getLogger(name)
