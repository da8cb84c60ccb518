"""Process-wide logging setup.

The root logger gets a single QueueHandler. Formatting and I/O happen on a
QueueListener thread that owns the console and file sinks, so handler
coroutines never block on stderr or disk.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from queue import SimpleQueue
from typing import TYPE_CHECKING

from innovation_service.infra.logging.context import ContextInjectingFilter
from innovation_service.infra.logging.formatters import JSONFormatter, KeyValueFormatter

if TYPE_CHECKING:
    from innovation_service.core.settings.logs import LoggingSettings

_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
_configured = False


def _sinks(settings: LoggingSettings) -> list[logging.Handler]:
    formatter: logging.Formatter
    if settings.json_logs:
        formatter = JSONFormatter(static={"service": settings.service_name})
    else:
        formatter = KeyValueFormatter()

    sinks: list[logging.Handler] = []
    if settings.console_enabled:
        sinks.append(logging.StreamHandler(sys.stderr))
    if settings.file_path is not None:
        settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        sinks.append(
            RotatingFileHandler(
                settings.file_path,
                maxBytes=settings.file_max_bytes,
                backupCount=settings.file_backup_count,
                encoding="utf-8",
            )
        )
    for sink in sinks:
        sink.setFormatter(formatter)
    return sinks


def configure_logging(settings: LoggingSettings) -> None:
    """(Re)configure the root logger from ``settings``.

    Calling this again replaces the previous queue pipeline.
    """
    global _listener, _queue_handler

    shutdown()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": settings.level, "handlers": []},
        }
    )
    logging.captureWarnings(settings.capture_warnings)

    queue: SimpleQueue[logging.LogRecord] = SimpleQueue()
    _queue_handler = QueueHandler(queue)
    # Runs on the emitting task, where the contextvars are visible
    if settings.include_context:
        _queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_queue_handler)

    _listener = QueueListener(queue, *_sinks(settings), respect_handler_level=True)
    _listener.start()


def shutdown() -> None:
    """Flush queued records and detach the queue handler."""
    global _listener, _queue_handler

    if _listener is not None:
        _listener.stop()
        for sink in _listener.handlers:
            sink.close()
        _listener = None
    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None


def setup_logging(settings: LoggingSettings | None = None, *, force: bool = False) -> None:
    """Configure logging once per process.

    Args:
        settings: Explicit settings; defaults to ``get_logging_settings()``.
        force: Reconfigure even if logging was already set up.
    """
    global _configured

    if _configured and not force:
        return
    if settings is None:
        from innovation_service.core.settings import get_logging_settings

        settings = get_logging_settings()

    configure_logging(settings)
    if not _configured:
        atexit.register(shutdown)
    _configured = True
