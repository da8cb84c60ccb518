"""Deep links into the web frontend.

Paths use ``:name`` placeholders. ``:baseUrl`` is filled from the viewer's
role so one template serves innovators, accessors and the assessment team::

    builder = DeepLinkBuilder("https://innovation.example.org")
    builder.thread_url(ServiceRole.ACCESSOR, "inn-1", "thr-1", "notif-1")
    # https://innovation.example.org/accessor/innovations/inn-1/threads/thr-1?dismissNotification=notif-1
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import quote, urlencode

from innovation_service.features.notifications.enums import ServiceRole

if TYPE_CHECKING:
    from collections.abc import Mapping

_PLACEHOLDER = re.compile(r":([A-Za-z][A-Za-z0-9_]*)")

_ROLE_BASE_PATHS = {
    ServiceRole.INNOVATOR: "innovator",
    ServiceRole.ACCESSOR: "accessor",
    ServiceRole.QUALIFYING_ACCESSOR: "accessor",
    ServiceRole.ASSESSMENT: "assessment",
    ServiceRole.ADMIN: "admin",
}


def frontend_base_path(role: ServiceRole) -> str:
    return _ROLE_BASE_PATHS[role]


class DeepLinkBuilder:
    """Builds absolute frontend URLs against ``base_url``."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def build(
        self,
        path_template: str,
        *,
        role: ServiceRole | None = None,
        path_params: Mapping[str, str] | None = None,
        query: Mapping[str, str | None] | None = None,
    ) -> str:
        """Substitute placeholders in ``path_template`` and append ``query``.

        Args:
            path_template: Path such as ``:baseUrl/innovations/:innovationId``.
            role: Viewer role, required when the template uses ``:baseUrl``.
            path_params: Values for the remaining placeholders, percent-encoded.
            query: Query parameters; ``None`` values are dropped.

        Raises:
            ValueError: If a placeholder has no value.
        """
        params = dict(path_params or {})
        if role is not None:
            params.setdefault("baseUrl", frontend_base_path(role))

        def _substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in params:
                raise ValueError(f"Missing value for path placeholder ':{name}' in {path_template!r}")
            if name == "baseUrl":
                return params[name]
            return quote(str(params[name]), safe="")

        path = _PLACEHOLDER.sub(_substitute, path_template.strip("/"))
        url = f"{self.base_url}/{path}" if path else self.base_url
        query_items = {k: v for k, v in (query or {}).items() if v is not None}
        if query_items:
            url = f"{url}?{urlencode(query_items)}"
        return url

    def _dismissable(
        self,
        path_template: str,
        role: ServiceRole,
        notification_id: str,
        extra_query: Mapping[str, str | None] | None = None,
        **path_params: str,
    ) -> str:
        query: dict[str, str | None] = {"dismissNotification": notification_id}
        if extra_query:
            query.update(extra_query)
        return self.build(path_template, role=role, path_params=path_params, query=query)

    # ========================================================================
    # Innovation pages
    # ========================================================================

    def innovation_overview_url(self, role: ServiceRole, innovation_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/overview", role, notification_id, innovationId=innovation_id
        )

    def innovation_record_url(self, role: ServiceRole, innovation_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/record", role, notification_id, innovationId=innovation_id
        )

    def task_url(self, role: ServiceRole, innovation_id: str, task_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/tasks/:taskId",
            role,
            notification_id,
            innovationId=innovation_id,
            taskId=task_id,
        )

    def threads_url(self, role: ServiceRole, innovation_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/threads", role, notification_id, innovationId=innovation_id
        )

    def thread_url(self, role: ServiceRole, innovation_id: str, thread_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/threads/:threadId",
            role,
            notification_id,
            innovationId=innovation_id,
            threadId=thread_id,
        )

    def document_url(self, role: ServiceRole, innovation_id: str, document_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/documents/:documentId",
            role,
            notification_id,
            innovationId=innovation_id,
            documentId=document_id,
        )

    def assessment_url(self, role: ServiceRole, innovation_id: str, assessment_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/assessments/:assessmentId",
            role,
            notification_id,
            innovationId=innovation_id,
            assessmentId=assessment_id,
        )

    # ========================================================================
    # Supports
    # ========================================================================

    def support_status_url(self, role: ServiceRole, innovation_id: str, support_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/support/:supportId",
            role,
            notification_id,
            innovationId=innovation_id,
            supportId=support_id,
        )

    def support_summary_url(
        self,
        role: ServiceRole,
        innovation_id: str,
        notification_id: str,
        unit_id: str | None = None,
    ) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/support-summary",
            role,
            notification_id,
            extra_query={"unitId": unit_id},
            innovationId=innovation_id,
        )

    def data_sharing_preferences_url(self, role: ServiceRole, innovation_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/support", role, notification_id, innovationId=innovation_id
        )

    # ========================================================================
    # Innovation management
    # ========================================================================

    def export_request_url(self, role: ServiceRole, innovation_id: str, request_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/record/export-requests/:requestId",
            role,
            notification_id,
            innovationId=innovation_id,
            requestId=request_id,
        )

    def collaborator_info_url(
        self,
        role: ServiceRole,
        innovation_id: str,
        collaborator_id: str,
        notification_id: str,
    ) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/collaborations/:collaboratorId",
            role,
            notification_id,
            innovationId=innovation_id,
            collaboratorId=collaborator_id,
        )

    def manage_collaborators_url(self, innovation_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/manage/innovation/collaborators",
            ServiceRole.INNOVATOR,
            notification_id,
            innovationId=innovation_id,
        )

    def manage_innovation_url(self, innovation_id: str, notification_id: str) -> str:
        return self._dismissable(
            ":baseUrl/innovations/:innovationId/manage/innovation",
            ServiceRole.INNOVATOR,
            notification_id,
            innovationId=innovation_id,
        )

    # ========================================================================
    # Account
    # ========================================================================

    def dashboard_url(self, role: ServiceRole, notification_id: str) -> str:
        return self._dismissable(":baseUrl", role, notification_id)

    def create_account_url(self) -> str:
        return self.build("signup")

    def sign_in_url(self) -> str:
        return self.build("signin")

    def unsubscribe_url(self, notification_id: str) -> str:
        return self.build("account/email-notifications", query={"dismissNotification": notification_id})
