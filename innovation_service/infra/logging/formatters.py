"""Record formatters: JSON Lines for shipping, key=value text for terminals."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

# Attributes every LogRecord has; anything else arrived through extra= or the log context
_STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "taskName"}


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the non-standard attributes of ``record``."""
    return {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}


def current_trace_ids() -> dict[str, str]:
    """Return ``trace_id``/``span_id`` of the active OpenTelemetry span, if any."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": trace.format_trace_id(span_context.trace_id),
        "span_id": trace.format_span_id(span_context.span_id),
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Output keys: ``timestamp`` (UTC, millisecond ISO-8601 with ``Z``),
    ``level``, ``logger``, ``message``, the ``static`` fields, the trace ids
    of the active span, ``exception``/``stack`` when present, then every
    extra field on the record.

    Example:
        {"timestamp": "2026-01-01T00:00:00.123Z", "level": "INFO",
         "logger": "innovation_service.features.notifications.registry",
         "message": "Notification event dispatched", "event_kind": "LOCK_USER"}
    """

    def __init__(self, static: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static = dict(static or {})

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=UTC)
        return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self.static,
            **current_trace_ids(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["exception"] = record.exc_text
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)

        for key, value in record_fields(record).items():
            payload.setdefault(key, value)

        # json.dumps escapes embedded newlines, so each record stays on one line
        return json.dumps(payload, ensure_ascii=False, default=str)


class KeyValueFormatter(logging.Formatter):
    """Human-readable lines with extra fields appended as ``key=value``.

    Example:
        2026-01-01 10:00:00 INFO  registry: Notification event dispatched event_kind=LOCK_USER
    """

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)-5s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if not fields:
            return line
        head, sep, tail = line.partition("\n")
        suffix = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        return f"{head} {suffix}{sep}{tail}"
