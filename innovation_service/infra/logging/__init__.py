"""Structured logging for the notification service.

Usage:
    from innovation_service.infra.logging import get_logger, log_context

    logger = get_logger(__name__)
    with log_context(event_kind="LOCK_USER"):
        logger.info("Dispatching")  # record carries event_kind
"""

from innovation_service.infra.logging.adapters import (
    ContextBoundLogger,
    LazyLogger,
    get_lazy_logger,
    get_logger,
)
from innovation_service.infra.logging.config import configure_logging, setup_logging, shutdown
from innovation_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    remove_from_log_context,
    set_log_context,
)
from innovation_service.infra.logging.formatters import JSONFormatter, KeyValueFormatter

__all__ = [
    "ContextBoundLogger",
    "ContextInjectingFilter",
    "JSONFormatter",
    "KeyValueFormatter",
    "LazyLogger",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "get_logger",
    "log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
