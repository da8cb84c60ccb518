"""Logger adapters used across the service.

``ContextBoundLogger`` carries fields bound at creation (``component``,
``handler`` ...) into ``extra``. ``LazyLogger`` additionally accepts
zero-argument callables as the message or as format arguments and only
calls them when the level is enabled, which keeps recipient dumps out of
the hot path.
"""

from __future__ import annotations

import logging
from typing import Any


class ContextBoundLogger(logging.LoggerAdapter):
    """LoggerAdapter whose bound fields are merged into every record's ``extra``.

    Example:
        log = get_logger(__name__, component="recipients")
        log.bind(innovation_id="inn-1").info("Resolved owners")
    """

    def __init__(self, logger: logging.Logger, **fields: Any) -> None:
        super().__init__(logger, fields)

    def bind(self, **fields: Any) -> ContextBoundLogger:
        return type(self)(self.logger, **{**self.extra, **fields})

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        if self.extra:
            kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


class LazyLogger(ContextBoundLogger):
    """ContextBoundLogger that defers building messages until they are emitted.

    Example:
        log = get_lazy_logger(__name__)
        log.debug(lambda: f"Queued {len(handler.emails)} emails")
        log.debug("Recipients: %s", lambda: [r.user_id for r in recipients])
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        if callable(msg):
            msg = msg()
        args = tuple(arg() if callable(arg) else arg for arg in args)
        super().log(level, msg, *args, **kwargs)


def get_logger(name: str, **fields: Any) -> ContextBoundLogger:
    return ContextBoundLogger(logging.getLogger(name), **fields)


def get_lazy_logger(name: str, **fields: Any) -> LazyLogger:
    return LazyLogger(logging.getLogger(name), **fields)
