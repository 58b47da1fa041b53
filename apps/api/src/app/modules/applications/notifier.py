"""
Email Notifier

Delivers ``NotificationRequest``s by email through Resend. Recipients are
resolved from the users table with a short-lived session of their own, so a
notification never shares a transaction with the state change it reports.
"""

import logging
from collections.abc import Callable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import async_session_maker
from app.core.email import (
    send_application_update,
    send_eligibility_result,
    send_new_application,
)
from app.modules.applications.notifications import NotificationKind, NotificationRequest
from app.modules.users.models import User
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class NotificationDeliveryError(Exception):
    """Raised when a notification could not be delivered."""


class EmailNotifier:
    """``Notifier`` that emails the recipient."""

    def __init__(self, session_factory: Callable[[], AsyncSession] = async_session_maker):
        self.session_factory = session_factory

    async def _get_recipient(self, recipient_id: UUID) -> User:
        async with self.session_factory() as db:
            user = await UserRepository.get_by_id(db, recipient_id)
        if user is None or not user.is_active:
            raise NotificationDeliveryError(f"Recipient {recipient_id} not found")
        return user

    async def send(self, request: NotificationRequest) -> None:
        recipient = await self._get_recipient(request.recipient_id)
        payload = request.payload

        if request.kind == NotificationKind.APPLICATION_UPDATE:
            sent = await send_application_update(
                to_email=recipient.email,
                recipient_name=recipient.name,
                opportunity_title=payload["opportunity_title"],
                status_label=payload["status_label"],
                feedback=payload.get("feedback"),
                action_url=request.action_url,
            )
        elif request.kind == NotificationKind.ELIGIBILITY_RESULT:
            sent = await send_eligibility_result(
                to_email=recipient.email,
                recipient_name=recipient.name,
                opportunity_title=payload["opportunity_title"],
                score=payload["score"],
                is_eligible=payload["is_eligible"],
                missing_skills=payload.get("missing_skills", []),
                action_url=request.action_url,
            )
        elif request.kind == NotificationKind.NEW_APPLICATION:
            sent = await send_new_application(
                to_email=recipient.email,
                organization_name=recipient.name,
                opportunity_title=payload["opportunity_title"],
                candidate_name=payload["candidate_name"],
                action_url=request.action_url,
            )
        else:
            raise NotificationDeliveryError(f"Unsupported notification kind: {request.kind}")

        if not sent:
            raise NotificationDeliveryError(
                f"Email delivery failed for {request.kind.value} to {request.recipient_id}"
            )
