"""Prometheus metrics for the notification dispatch engine.

Usage:
    from innovation_service.features.notifications.metrics import (
        notification_events_total,
    )

    notification_events_total.labels(kind="LOCK_USER", outcome="dispatched").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Event Metrics
# =============================================================================

notification_events_total = Counter(
    "notification_events_total",
    "Total number of notification events processed",
    labelnames=["kind", "outcome"],
)
"""
Counter for processed events.

Labels:
    kind: NotifierType value (LOCK_USER, THREAD_CREATION, etc.)
    outcome: dispatched or failed
"""

notification_handler_duration_seconds = Histogram(
    "notification_handler_duration_seconds",
    "Time spent running a notification handler",
    labelnames=["kind"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
"""
Histogram for handler run duration, recipient lookups included.

Labels:
    kind: NotifierType value
"""

# =============================================================================
# Queue Metrics
# =============================================================================

notification_emails_queued_total = Counter(
    "notification_emails_queued_total",
    "Emails forwarded to the email transport",
    labelnames=["template"],
)

notification_emails_suppressed_total = Counter(
    "notification_emails_suppressed_total",
    "Emails dropped because the recipient role opted out of the category",
    labelnames=["category"],
)
"""
Counter for preference suppressions.

Labels:
    category: NotificationCategory value the recipient set to NO
"""

notification_in_app_queued_total = Counter(
    "notification_in_app_queued_total",
    "In-app notifications forwarded to the notification store",
    labelnames=["detail"],
)
