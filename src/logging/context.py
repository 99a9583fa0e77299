# src/logging/context.py — v1
"""Contextual logging support: attach check_id, stage and url to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging: set per originality check.
_check_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "check_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)
_url: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "url", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    check_id: str | None = None
    stage: str | None = None
    url: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        check_id=_check_id.get(),
        stage=_stage.get(),
        url=_url.get(),
    )


def set_check_context(check_id: str) -> None:
    """Set check-level context (called once per originality check)."""
    _check_id.set(check_id)


def set_stage_context(stage: str | None, url: str | None = None) -> None:
    """Set stage-level context (corpus, search, fetch, aggregate)."""
    _stage.set(stage)
    _url.set(url)


def clear_context() -> None:
    """Reset all context variables."""
    _check_id.set(None)
    _stage.set(None)
    _url.set(None)
