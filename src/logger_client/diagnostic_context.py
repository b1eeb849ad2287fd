"""Mapped diagnostic context for log records.

Values put here follow the current thread or asyncio task and are copied onto
every record that passes through :class:`DiagnosticContextFilter`, where the
forwarder picks them up (for example the caller's user agent).
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

USER_AGENT_PARAM = "user_agent"

_CONTEXT: contextvars.ContextVar[Mapping[str, Any]] = contextvars.ContextVar(
    "logger_client_mdc", default={}
)


def get_context() -> dict[str, Any]:
    return dict(_CONTEXT.get())


def get(key: str, default: Any = None) -> Any:
    return _CONTEXT.get().get(key, default)


def put(key: str, value: Any) -> None:
    _CONTEXT.set({**_CONTEXT.get(), key: value})


def remove(key: str) -> None:
    current = dict(_CONTEXT.get())
    current.pop(key, None)
    _CONTEXT.set(current)


def clear() -> None:
    _CONTEXT.set({})


@contextmanager
def scoped(**values: Any) -> Iterator[None]:
    """Add ``values`` to the context for the duration of the block."""
    token = _CONTEXT.set({**_CONTEXT.get(), **values})
    try:
        yield
    finally:
        _CONTEXT.reset(token)


class DiagnosticContextFilter(logging.Filter):
    """Copy the diagnostic context onto records; ``extra`` values win."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _CONTEXT.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
