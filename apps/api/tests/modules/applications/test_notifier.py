"""
Unit tests for EmailNotifier.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from app.modules.applications.notifications import NotificationKind, NotificationRequest
from app.modules.applications.notifier import EmailNotifier, NotificationDeliveryError
from app.modules.users.models import User


def _session_factory(db):
    @asynccontextmanager
    async def factory():
        yield db

    return factory


@pytest.fixture
def recipient():
    user = MagicMock(spec=User)
    user.id = uuid4()
    user.email = "aminata@example.com"
    user.name = "Aminata Kamara"
    user.is_active = True
    return user


def _update_request(recipient_id):
    return NotificationRequest(
        recipient_id=recipient_id,
        kind=NotificationKind.APPLICATION_UPDATE,
        title="Application Update",
        body='Your application for "Intern" is now Interview',
        payload={"opportunity_title": "Intern", "status_label": "Interview", "feedback": "Mon"},
        action_url="/applications/abc",
    )


class TestEmailNotifier:
    """Tests for EmailNotifier.send."""

    @pytest.mark.asyncio
    async def test_application_update_email(self, mock_db, recipient):
        with (
            patch(
                "app.modules.applications.notifier.UserRepository.get_by_id",
                AsyncMock(return_value=recipient),
            ),
            patch(
                "app.modules.applications.notifier.send_application_update",
                AsyncMock(return_value=True),
            ) as mock_send,
        ):
            await EmailNotifier(_session_factory(mock_db)).send(_update_request(recipient.id))

        mock_send.assert_awaited_once_with(
            to_email="aminata@example.com",
            recipient_name="Aminata Kamara",
            opportunity_title="Intern",
            status_label="Interview",
            feedback="Mon",
            action_url="/applications/abc",
        )

    @pytest.mark.asyncio
    async def test_eligibility_email(self, mock_db, recipient):
        request = NotificationRequest(
            recipient_id=recipient.id,
            kind=NotificationKind.ELIGIBILITY_RESULT,
            title="Eligibility Results",
            body="...",
            payload={
                "opportunity_title": "Intern",
                "score": 33,
                "is_eligible": False,
                "missing_skills": ["SQL"],
            },
        )
        with (
            patch(
                "app.modules.applications.notifier.UserRepository.get_by_id",
                AsyncMock(return_value=recipient),
            ),
            patch(
                "app.modules.applications.notifier.send_eligibility_result",
                AsyncMock(return_value=True),
            ) as mock_send,
        ):
            await EmailNotifier(_session_factory(mock_db)).send(request)

        assert mock_send.await_args.kwargs["score"] == 33
        assert mock_send.await_args.kwargs["missing_skills"] == ["SQL"]

    @pytest.mark.asyncio
    async def test_unknown_recipient_raises(self, mock_db):
        with patch(
            "app.modules.applications.notifier.UserRepository.get_by_id",
            AsyncMock(return_value=None),
        ):
            with pytest.raises(NotificationDeliveryError):
                await EmailNotifier(_session_factory(mock_db)).send(_update_request(uuid4()))

    @pytest.mark.asyncio
    async def test_failed_send_raises(self, mock_db, recipient):
        with (
            patch(
                "app.modules.applications.notifier.UserRepository.get_by_id",
                AsyncMock(return_value=recipient),
            ),
            patch(
                "app.modules.applications.notifier.send_application_update",
                AsyncMock(return_value=False),
            ),
        ):
            with pytest.raises(NotificationDeliveryError):
                await EmailNotifier(_session_factory(mock_db)).send(_update_request(recipient.id))
