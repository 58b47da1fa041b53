"""
Notification Dispatch

Decides which notification, if any, a lifecycle event produces, and hands it
to a ``Notifier``.

The ``on_*`` builders are pure. ``dispatch`` is the only place a notifier is
called, and it never raises: a failed send is logged and the caller's state
change stands.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol
from uuid import UUID

from app.modules.applications.helpers import status_label
from app.modules.applications.matching import EligibilityReport
from app.modules.applications.models import Application, ApplicationStatus

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    APPLICATION_UPDATE = "application_update"
    ELIGIBILITY_RESULT = "eligibility_result"
    NEW_APPLICATION = "new_application"


@dataclass(frozen=True)
class NotificationRequest:
    """One outbound notification for one recipient."""

    recipient_id: UUID
    kind: NotificationKind
    title: str
    body: str
    payload: dict[str, Any] = field(default_factory=dict)
    action_url: str | None = None


class Notifier(Protocol):
    """Delivery transport. May raise; callers go through ``NotificationDispatcher``."""

    async def send(self, request: NotificationRequest) -> None: ...


class NotificationDispatcher:
    """Maps lifecycle events to notification requests and delivers them best-effort."""

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    def on_transition(
        self,
        application: Application,
        previous_status: ApplicationStatus | None,
        opportunity_title: str,
    ) -> NotificationRequest | None:
        """
        Tell the candidate their application changed status.

        Returns None when there was no previous status (creation is announced
        to the organization by ``on_application_created``) or the status did
        not change.
        """
        if previous_status is None or previous_status == application.status:
            return None

        label = status_label(application.status)
        payload: dict[str, Any] = {
            "application_id": str(application.id),
            "opportunity_id": str(application.opportunity_id),
            "opportunity_title": opportunity_title,
            "previous_status": previous_status.value,
            "new_status": application.status.value,
            "status_label": label,
        }
        if application.feedback:
            payload["feedback"] = application.feedback

        return NotificationRequest(
            recipient_id=application.candidate_id,
            kind=NotificationKind.APPLICATION_UPDATE,
            title="Application Update",
            body=f'Your application for "{opportunity_title}" is now {label}',
            payload=payload,
            action_url=f"/applications/{application.id}",
        )

    def on_eligibility_computed(
        self,
        report: EligibilityReport,
        opportunity_title: str,
    ) -> NotificationRequest:
        """Tell the candidate the result of an on-demand eligibility check."""
        verdict = "eligible" if report.is_eligible else "not eligible"
        return NotificationRequest(
            recipient_id=report.candidate_id,
            kind=NotificationKind.ELIGIBILITY_RESULT,
            title="Eligibility Results",
            body=f'You are {verdict} for "{opportunity_title}" (Score: {report.score}%)',
            payload={
                "opportunity_id": str(report.opportunity_id),
                "opportunity_title": opportunity_title,
                "score": report.score,
                "tier": report.tier.value,
                "is_eligible": report.is_eligible,
                "missing_skills": list(report.missing_skills),
            },
            action_url=f"/opportunities/{report.opportunity_id}/eligibility",
        )

    def on_application_created(
        self,
        application: Application,
        opportunity_title: str,
        candidate_name: str,
    ) -> NotificationRequest:
        """Tell the organization a candidate applied."""
        return NotificationRequest(
            recipient_id=application.organization_id,
            kind=NotificationKind.NEW_APPLICATION,
            title="New Application",
            body=f'{candidate_name} applied for "{opportunity_title}"',
            payload={
                "application_id": str(application.id),
                "opportunity_id": str(application.opportunity_id),
                "opportunity_title": opportunity_title,
                "candidate_id": str(application.candidate_id),
                "candidate_name": candidate_name,
            },
            action_url=f"/organization/opportunities/{application.opportunity_id}/applications",
        )

    async def dispatch(self, request: NotificationRequest | None) -> bool:
        """
        Send ``request`` through the notifier.

        Returns:
            True if sent, False if there was nothing to send or the send failed
        """
        if request is None:
            return False

        try:
            await self.notifier.send(request)
        except Exception as e:
            # Best-effort - never undo or block the state change
            logger.error(
                f"Failed to send {request.kind.value} notification to {request.recipient_id}: {e}",
                exc_info=True,
            )
            return False

        logger.info(f"Sent {request.kind.value} notification to {request.recipient_id}")
        return True
