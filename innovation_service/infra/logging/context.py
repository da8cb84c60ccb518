"""Per-task log context.

Fields set here ride along on every record emitted from the same asyncio
task, so a dispatch can tag its logs with ``event_kind`` and
``notification_event`` once instead of threading them through every handler.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

_EMPTY: Mapping[str, Any] = MappingProxyType({})

_fields: ContextVar[Mapping[str, Any]] = ContextVar("innovation_log_fields", default=_EMPTY)


def get_log_context() -> dict[str, Any]:
    return dict(_fields.get())


def set_log_context(**fields: Any) -> None:
    """Merge ``fields`` into the current task's log context."""
    _fields.set(MappingProxyType({**_fields.get(), **fields}))


def remove_from_log_context(*keys: str) -> None:
    current = _fields.get()
    if any(key in current for key in keys):
        _fields.set(MappingProxyType({k: v for k, v in current.items() if k not in keys}))


def clear_log_context() -> None:
    _fields.set(_EMPTY)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` for the duration of a ``with`` block.

    The previous context is restored on exit, including any keys the block
    overwrote.

    Example:
        with log_context(event_kind="LOCK_USER"):
            logger.info("Dispatching")
    """
    token = _fields.set(MappingProxyType({**_fields.get(), **fields}))
    try:
        yield
    finally:
        _fields.reset(token)


class ContextInjectingFilter(logging.Filter):
    """Stamp the current log context onto records.

    Explicit ``extra=`` values win over context values of the same name.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _fields.get().items():
            record.__dict__.setdefault(key, value)
        return True
