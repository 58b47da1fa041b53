"""
Unit tests for the application lifecycle service.

These tests cover:
- Eligibility checks and their notification
- Applying (notifications, duplicates, lookups)
- Organization transitions and ownership
- Candidate withdrawal
- Listings and analytics
"""

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.modules.applications.errors import (
    ApplicationNotFoundError,
    CandidateNotFoundError,
    CollaboratorUnavailableError,
    DuplicateApplicationError,
    InvalidTransitionError,
    OpportunityClosedError,
    OpportunityNotFoundError,
    UnauthorizedError,
)
from app.modules.applications.matching import EligibilityTier
from app.modules.applications.models import ApplicationStatus
from app.modules.applications.notifications import NotificationKind
from app.modules.applications.service import ApplicationLifecycleService


@pytest.fixture
def service(mock_repository, mock_notifier, clock):
    return ApplicationLifecycleService(mock_repository, mock_notifier, clock)


def _sent_request(mock_notifier):
    return mock_notifier.send.await_args.args[0]


class TestComputeEligibility:
    """Tests for compute_eligibility."""

    @pytest.mark.asyncio
    async def test_returns_report_and_notifies(
        self, service, mock_notifier, candidate, opportunity
    ):
        report = await service.compute_eligibility(candidate.id, opportunity.id)

        assert report.score == 33
        assert report.tier == EligibilityTier.WEAK
        request = _sent_request(mock_notifier)
        assert request.kind == NotificationKind.ELIGIBILITY_RESULT
        assert request.recipient_id == candidate.id

    @pytest.mark.asyncio
    async def test_notification_can_be_skipped(
        self, service, mock_notifier, candidate, opportunity
    ):
        await service.compute_eligibility(candidate.id, opportunity.id, notify=False)

        mock_notifier.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, service, mock_repository, opportunity):
        mock_repository.get_candidate.return_value = None

        with pytest.raises(CandidateNotFoundError):
            await service.compute_eligibility(uuid4(), opportunity.id)

    @pytest.mark.asyncio
    async def test_unknown_opportunity(self, service, mock_repository, candidate):
        mock_repository.get_opportunity.return_value = None

        with pytest.raises(OpportunityNotFoundError):
            await service.compute_eligibility(candidate.id, uuid4())


class TestApply:
    """Tests for apply."""

    @pytest.mark.asyncio
    async def test_apply_creates_pending_and_notifies_organization(
        self, service, mock_notifier, candidate, opportunity
    ):
        application = await service.apply(
            candidate.id, opportunity.id, cover_letter="Keen to learn from your platform team."
        )

        assert application.status == ApplicationStatus.PENDING
        assert application.organization_id == opportunity.organization_id
        assert application.eligibility_score == 33
        request = _sent_request(mock_notifier)
        assert request.kind == NotificationKind.NEW_APPLICATION
        assert request.recipient_id == opportunity.organization_id
        assert request.payload["candidate_name"] == candidate.name

    @pytest.mark.asyncio
    async def test_low_score_does_not_block(self, service, candidate, opportunity):
        candidate.skills = []

        application = await service.apply(candidate.id, opportunity.id)

        assert application.eligibility_score == 0
        assert application.status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_notifier_failure_does_not_block_apply(
        self, service, mock_notifier, mock_repository, candidate, opportunity
    ):
        mock_notifier.send = AsyncMock(side_effect=ConnectionError("smtp down"))

        application = await service.apply(candidate.id, opportunity.id)

        assert application.status == ApplicationStatus.PENDING
        mock_repository.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_apply(self, service, mock_repository, candidate, opportunity):
        first = await service.apply(candidate.id, opportunity.id)
        mock_repository.find_application.return_value = first

        with pytest.raises(DuplicateApplicationError):
            await service.apply(candidate.id, opportunity.id)

    @pytest.mark.asyncio
    async def test_reapply_after_withdrawal(self, service, mock_repository, candidate, opportunity):
        # find_application ignores withdrawn rows
        mock_repository.find_application.return_value = None

        application = await service.apply(candidate.id, opportunity.id)

        assert application.status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_apply_after_deadline(
        self, service, mock_repository, mock_notifier, candidate, opportunity, now
    ):
        opportunity.application_deadline = now - timedelta(hours=1)

        with pytest.raises(OpportunityClosedError):
            await service.apply(candidate.id, opportunity.id)

        mock_repository.save.assert_not_awaited()
        mock_notifier.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_apply_to_unknown_opportunity(self, service, mock_repository, candidate):
        mock_repository.get_opportunity.return_value = None

        with pytest.raises(OpportunityNotFoundError):
            await service.apply(candidate.id, uuid4())

    @pytest.mark.asyncio
    async def test_organization_mismatch(self, service, candidate, opportunity):
        with pytest.raises(UnauthorizedError):
            await service.apply(candidate.id, opportunity.id, organization_id=uuid4())


class TestTransitionApplication:
    """Tests for organization-initiated transitions."""

    @pytest.mark.asyncio
    async def test_transition_notifies_candidate(
        self, service, mock_repository, mock_notifier, make_application, organization_id
    ):
        application = make_application(ApplicationStatus.UNDER_REVIEW)
        mock_repository.get.return_value = application

        result = await service.transition_application(
            application.id,
            ApplicationStatus.SHORTLISTED,
            organization_id=organization_id,
        )

        assert result.status == ApplicationStatus.SHORTLISTED
        request = _sent_request(mock_notifier)
        assert request.recipient_id == application.candidate_id
        assert request.payload["status_label"] == "Shortlisted"
        assert request.payload["opportunity_title"] == "Backend Engineering Intern"

    @pytest.mark.asyncio
    async def test_other_organization_is_unauthorized(
        self, service, mock_repository, make_application
    ):
        application = make_application()
        mock_repository.get.return_value = application

        with pytest.raises(UnauthorizedError):
            await service.transition_application(
                application.id, ApplicationStatus.REJECTED, organization_id=uuid4()
            )

        assert application.status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_admin_may_act_on_any_application(
        self, service, mock_repository, make_application
    ):
        application = make_application()
        mock_repository.get.return_value = application

        result = await service.transition_application(
            application.id, ApplicationStatus.UNDER_REVIEW, organization_id=uuid4(), is_admin=True
        )

        assert result.status == ApplicationStatus.UNDER_REVIEW

    @pytest.mark.asyncio
    async def test_organization_cannot_withdraw(
        self, service, mock_repository, make_application, organization_id
    ):
        application = make_application()
        mock_repository.get.return_value = application

        with pytest.raises(UnauthorizedError):
            await service.transition_application(
                application.id, ApplicationStatus.WITHDRAWN, organization_id=organization_id
            )

    @pytest.mark.asyncio
    async def test_invalid_transition_sends_nothing(
        self, service, mock_repository, mock_notifier, make_application, organization_id
    ):
        application = make_application(ApplicationStatus.ACCEPTED)
        mock_repository.get.return_value = application

        with pytest.raises(InvalidTransitionError):
            await service.transition_application(
                application.id, ApplicationStatus.REJECTED, organization_id=organization_id
            )

        mock_notifier.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_application(self, service, mock_repository):
        mock_repository.get.return_value = None

        with pytest.raises(ApplicationNotFoundError):
            await service.transition_application(uuid4(), ApplicationStatus.REJECTED)

    @pytest.mark.asyncio
    async def test_title_lookup_failure_still_notifies(
        self, service, mock_repository, mock_notifier, make_application
    ):
        application = make_application()
        mock_repository.get.return_value = application
        mock_repository.get_opportunity = AsyncMock(
            side_effect=CollaboratorUnavailableError("database")
        )

        result = await service.transition_application(application.id, ApplicationStatus.ACCEPTED)

        assert result.status == ApplicationStatus.ACCEPTED
        assert "your opportunity" in _sent_request(mock_notifier).body

    @pytest.mark.asyncio
    async def test_unexpected_title_lookup_error_after_save(
        self, service, mock_repository, mock_notifier, make_application
    ):
        application = make_application()
        mock_repository.get.return_value = application
        mock_repository.get_opportunity = AsyncMock(side_effect=RuntimeError("driver glitch"))

        result = await service.transition_application(application.id, ApplicationStatus.ACCEPTED)

        assert result.status == ApplicationStatus.ACCEPTED
        mock_repository.save.assert_awaited_once()
        assert "your opportunity" in _sent_request(mock_notifier).body


class TestWithdraw:
    """Tests for candidate withdrawal."""

    @pytest.mark.asyncio
    async def test_withdraw_notifies_candidate_only(
        self, service, mock_repository, mock_notifier, make_application
    ):
        application = make_application(ApplicationStatus.SHORTLISTED)
        mock_repository.get.return_value = application

        result = await service.withdraw(application.id, application.candidate_id)

        assert result.status == ApplicationStatus.WITHDRAWN
        mock_notifier.send.assert_awaited_once()
        assert _sent_request(mock_notifier).recipient_id == application.candidate_id

    @pytest.mark.asyncio
    async def test_withdraw_loads_application_once(
        self, service, mock_repository, mock_notifier, make_application
    ):
        application = make_application(ApplicationStatus.UNDER_REVIEW)
        mock_repository.get.return_value = application

        await service.withdraw(application.id, application.candidate_id)

        mock_repository.get.assert_awaited_once_with(application.id)
        payload = _sent_request(mock_notifier).payload
        assert payload["previous_status"] == ApplicationStatus.UNDER_REVIEW.value

    @pytest.mark.asyncio
    async def test_withdraw_survives_title_lookup_error(
        self, service, mock_repository, mock_notifier, make_application
    ):
        application = make_application()
        mock_repository.get.return_value = application
        mock_repository.get_opportunity = AsyncMock(side_effect=RuntimeError("pool timeout"))

        result = await service.withdraw(application.id, application.candidate_id)

        assert result.status == ApplicationStatus.WITHDRAWN
        mock_notifier.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_withdraw_survives_notifier_failure(
        self, service, mock_repository, mock_notifier, make_application
    ):
        application = make_application()
        mock_repository.get.return_value = application
        mock_notifier.send = AsyncMock(side_effect=RuntimeError("boom"))

        result = await service.withdraw(application.id, application.candidate_id)

        assert result.status == ApplicationStatus.WITHDRAWN

    @pytest.mark.asyncio
    async def test_withdraw_someone_elses_application(
        self, service, mock_repository, make_application
    ):
        application = make_application()
        mock_repository.get.return_value = application

        with pytest.raises(UnauthorizedError):
            await service.withdraw(application.id, uuid4())


class TestListings:
    """Tests for application listings."""

    @pytest.mark.asyncio
    async def test_get_own_application(self, service, mock_repository, make_application):
        application = make_application()
        mock_repository.get.return_value = application

        result = await service.get_application(application.id, application.candidate_id)

        assert result is application

    @pytest.mark.asyncio
    async def test_other_candidates_application_reads_as_not_found(
        self, service, mock_repository, make_application
    ):
        application = make_application()
        mock_repository.get.return_value = application

        with pytest.raises(ApplicationNotFoundError):
            await service.get_application(application.id, uuid4())

    @pytest.mark.asyncio
    async def test_applicants_carry_review_flags(
        self, service, mock_repository, make_application, opportunity, organization_id
    ):
        short = make_application(cover_letter="Hire me")
        thorough = make_application(cover_letter="I have built three Flask services " * 3)
        mock_repository.list_for_opportunity.return_value = [short, thorough]

        rows = await service.list_opportunity_applications(opportunity.id, organization_id)

        assert rows == [(short, ["Cover letter too short"]), (thorough, [])]

    @pytest.mark.asyncio
    async def test_applicants_of_other_organization(self, service, opportunity):
        with pytest.raises(UnauthorizedError):
            await service.list_opportunity_applications(opportunity.id, uuid4())


class TestAnalytics:
    """Tests for get_application_analytics."""

    @pytest.mark.asyncio
    async def test_analytics(self, service, mock_repository, organization_id, now):
        counts = {status: 0 for status in ApplicationStatus}
        counts[ApplicationStatus.PENDING] = 3
        counts[ApplicationStatus.ACCEPTED] = 1
        mock_repository.count_by_status.return_value = counts
        mock_repository.applied_since.return_value = [now, now - timedelta(days=40)]

        analytics = await service.get_application_analytics(organization_id)

        assert analytics["total_applications"] == 4
        assert len(analytics["status_distribution"]) == len(ApplicationStatus)
        assert {"status": ApplicationStatus.PENDING, "count": 3} in analytics[
            "status_distribution"
        ]
        assert [m["month"] for m in analytics["monthly_trends"]] == [
            "2025-10",
            "2025-11",
            "2025-12",
            "2026-01",
            "2026-02",
            "2026-03",
        ]
        assert analytics["monthly_trends"][-1]["count"] == 1
        assert analytics["monthly_trends"][-2]["count"] == 1
        mock_repository.count_by_status.assert_awaited_once_with(organization_id)
