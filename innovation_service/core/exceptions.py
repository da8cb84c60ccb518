"""Errors raised by the notification engine.

Each error maps onto an RFC 7807 problem document (``status``, ``type``,
``title``, ``detail`` plus free-form extension members), so a worker can
log it and an API layer can return it unchanged.
"""

from __future__ import annotations

from typing import Any, ClassVar


class AppException(Exception):
    """Base class; subclasses pin ``status_code``, ``type`` and ``title``.

    Example:
        raise NotFoundError(
            "Innovation not found",
            type="innovation-not-found",
            extra={"innovation_id": "abc123"},
        )
    """

    status_code: ClassVar[int] = 500
    default_type: ClassVar[str] = "about:blank"
    title: ClassVar[str] = "Internal Server Error"

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.type = type or self.default_type
        self.instance = instance
        self.extra = dict(extra or {})

    def to_problem_details(self) -> dict[str, Any]:
        problem: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "status": self.status_code,
            "detail": self.detail,
        }
        if self.instance:
            problem["instance"] = self.instance
        return {**self.extra, **problem}


class NotFoundError(AppException):
    """An entity the event refers to does not exist.

    Raised by recipient lookups (innovation, thread, task, unit ...) and
    fatal to the handler run.
    """

    status_code = 404
    default_type = "not-found"
    title = "Not Found"


class UnprocessableEntityError(AppException):
    """The event carries an input combination a handler cannot act on."""

    status_code = 422
    default_type = "unprocessable-entity"
    title = "Unprocessable Entity"


class UnknownEventKindError(AppException):
    """No handler is registered for an event kind; a wiring defect, never transient."""

    default_type = "unknown-event-kind"

    def __init__(self, kind: Any) -> None:
        super().__init__(
            f"No notification handler registered for event kind {kind!r}",
            extra={"kind": str(kind)},
        )
        self.kind = kind


class ServiceUnavailableException(AppException):
    """An upstream service answered 502/503/504."""

    status_code = 503
    default_type = "service-unavailable"
    title = "Service Unavailable"
