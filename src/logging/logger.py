# src/logging/logger.py — v1
"""Logger factory with JSON and text formatters.

The library never configures handlers on import; host applications call
setup_logging() or configure_logging(settings) once.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from originality.config.settings import Settings
from originality.logging.context import get_context


def _record_data(record: logging.LogRecord) -> dict[str, Any]:
    """Structured payload passed as `extra={"data": {...}}`, or {}."""
    data = getattr(record, "data", None)
    return data if isinstance(data, dict) else {}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: message, check context and payload."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context_dict = get_context().as_dict()
        if context_dict:
            log_entry["context"] = context_dict

        data = _record_data(record)
        if data:
            log_entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Korean page titles stay readable in the log stream
        return json.dumps(log_entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Single-line format for local runs: `[check_id] (stage) url - message k=v`."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        parts = [
            datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname:8s}]",
            record.name,
        ]
        if ctx.check_id:
            parts.append(f"[{ctx.check_id}]")
        if ctx.stage:
            parts.append(f"({ctx.stage})")
        if ctx.url:
            parts.append(ctx.url)
        parts.append(f"- {record.getMessage()}")
        parts.extend(f"{key}={value}" for key, value in _record_data(record).items())
        line = " ".join(parts)
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Configuration is applied by setup_logging()."""
    return logging.getLogger(f"originality.{name}")


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Configure the root originality logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
    """
    root_logger = logging.getLogger("originality")
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates on re-init
    root_logger.handlers.clear()

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonFormatter()
    else:
        formatter = TextFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def configure_logging(settings: Settings | None = None) -> None:
    """Apply `log_level` and `log_format` from settings."""
    settings = settings or Settings()
    setup_logging(settings.log_level, settings.log_format)
