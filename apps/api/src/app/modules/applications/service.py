"""
Application Lifecycle Service

Public operations of the application lifecycle, used by the routers.

This module implements:
1. Eligibility:
   - Score a candidate against an opportunity and notify the candidate

2. Applying:
   - Reject closed opportunities and duplicate applications
   - Create the PENDING application with an advisory score snapshot
   - Notify the organization

3. Transitions:
   - Organization-initiated status changes on applications it owns
   - Candidate withdrawal of their own application
   - Notify the candidate of every status change

4. Listings and analytics for candidates and organizations

Notifications are sent after the write has committed and are best-effort:
a failed send is logged by ``NotificationDispatcher`` and never reported to
the caller.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from app.modules.applications.errors import (
    ApplicationNotFoundError,
    CandidateNotFoundError,
    OpportunityNotFoundError,
    UnauthorizedError,
)
from app.modules.applications.guard import ApplicationGuard, utc_now
from app.modules.applications.helpers import (
    detect_review_flags,
    monthly_trends,
    trend_window_start,
)
from app.modules.applications.matching import EligibilityReport, build_eligibility_report
from app.modules.applications.models import Application, ApplicationStatus
from app.modules.applications.notifications import NotificationDispatcher, Notifier
from app.modules.applications.repository import ApplicationRepository
from app.modules.applications.state_machine import ApplicationStateMachine
from app.modules.opportunities.models import Opportunity
from app.modules.users.models import User

logger = logging.getLogger(__name__)

FALLBACK_OPPORTUNITY_TITLE = "your opportunity"


class ApplicationLifecycleService:
    """Eligibility, applying, transitions, listings and analytics."""

    def __init__(
        self,
        repository: ApplicationRepository,
        notifier: Notifier,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.clock = clock
        self.guard = ApplicationGuard(repository, clock)
        self.state_machine = ApplicationStateMachine(repository, self.guard, clock)
        self.dispatcher = NotificationDispatcher(notifier)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def _get_opportunity(self, opportunity_id: UUID) -> Opportunity:
        opportunity = await self.repository.get_opportunity(opportunity_id)
        if opportunity is None:
            raise OpportunityNotFoundError(opportunity_id)
        return opportunity

    async def _get_candidate(self, candidate_id: UUID) -> User:
        candidate = await self.repository.get_candidate(candidate_id)
        if candidate is None:
            raise CandidateNotFoundError(candidate_id)
        return candidate

    async def _opportunity_title(self, opportunity_id: UUID) -> str:
        """Title for a notification. The state change has already committed, so never raise."""
        try:
            opportunity = await self.repository.get_opportunity(opportunity_id)
        except Exception as e:
            logger.error(
                f"Could not load opportunity {opportunity_id} for notification: {e}",
                exc_info=True,
            )
            return FALLBACK_OPPORTUNITY_TITLE
        return opportunity.title if opportunity else FALLBACK_OPPORTUNITY_TITLE

    # -------------------------------------------------------------------------
    # Eligibility
    # -------------------------------------------------------------------------

    async def compute_eligibility(
        self,
        candidate_id: UUID,
        opportunity_id: UUID,
        *,
        notify: bool = True,
    ) -> EligibilityReport:
        """
        Build an eligibility report and, by default, send it to the candidate.

        Raises:
            CandidateNotFoundError: Unknown or inactive candidate
            OpportunityNotFoundError: Unknown opportunity
        """
        candidate = await self._get_candidate(candidate_id)
        opportunity = await self._get_opportunity(opportunity_id)

        report = build_eligibility_report(candidate, opportunity)
        logger.info(
            f"Eligibility for candidate {candidate_id} on {opportunity_id}: "
            f"{report.score}% ({report.tier.value})"
        )

        if notify:
            await self.dispatcher.dispatch(
                self.dispatcher.on_eligibility_computed(report, opportunity.title)
            )
        return report

    # -------------------------------------------------------------------------
    # Applying
    # -------------------------------------------------------------------------

    async def apply(
        self,
        candidate_id: UUID,
        opportunity_id: UUID,
        organization_id: UUID | None = None,
        cover_letter: str | None = None,
    ) -> Application:
        """
        Submit an application.

        The eligibility score is stored for reference only; a low score never
        blocks the application.

        Args:
            candidate_id: Applying candidate
            opportunity_id: Target opportunity
            organization_id: Expected owner of the opportunity (defaults to
                the opportunity's organization)
            cover_letter: Optional cover letter

        Raises:
            OpportunityNotFoundError: Unknown opportunity
            CandidateNotFoundError: Unknown or inactive candidate
            UnauthorizedError: ``organization_id`` does not own the opportunity
            OpportunityClosedError: Deadline passed or posting inactive
            DuplicateApplicationError: A live application already exists
        """
        opportunity = await self._get_opportunity(opportunity_id)
        candidate = await self._get_candidate(candidate_id)

        if organization_id is not None and organization_id != opportunity.organization_id:
            raise UnauthorizedError("The opportunity does not belong to that organization.")

        report = build_eligibility_report(candidate, opportunity)
        application = await self.state_machine.create(
            candidate_id,
            opportunity,
            opportunity.organization_id,
            cover_letter,
            eligibility_score=report.score,
        )

        await self.dispatcher.dispatch(
            self.dispatcher.on_application_created(application, opportunity.title, candidate.name)
        )
        return application

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def transition_application(
        self,
        application_id: UUID,
        target_status: ApplicationStatus,
        feedback: str | None = None,
        *,
        organization_id: UUID | None = None,
        is_admin: bool = False,
    ) -> Application:
        """
        Move an application to ``target_status`` and notify the candidate.

        When ``organization_id`` is given the call is organization-initiated:
        the organization must own the application (admins may act on any),
        and it may not withdraw on the candidate's behalf.

        Raises:
            ApplicationNotFoundError: Unknown application id
            UnauthorizedError: Organization does not own the application, or
                targeted WITHDRAWN
            InvalidTransitionError: Target not reachable from the current status
        """
        application = await self.state_machine.get(application_id)

        if organization_id is not None:
            if not is_admin and application.organization_id != organization_id:
                logger.warning(
                    f"Organization {organization_id} tried to update application "
                    f"{application_id} owned by {application.organization_id}"
                )
                raise UnauthorizedError()
            if target_status == ApplicationStatus.WITHDRAWN:
                raise UnauthorizedError("Only the applicant can withdraw an application.")

        previous_status = application.status
        application = await self.state_machine.advance(application, target_status, feedback)

        title = await self._opportunity_title(application.opportunity_id)
        await self.dispatcher.dispatch(
            self.dispatcher.on_transition(application, previous_status, title)
        )
        return application

    async def withdraw(self, application_id: UUID, requesting_candidate_id: UUID) -> Application:
        """
        Withdraw the candidate's own application.

        Raises:
            ApplicationNotFoundError: Unknown application id
            UnauthorizedError: Requester is not the applicant
            InvalidTransitionError: Application already terminal
        """
        application = await self.state_machine.get(application_id)
        previous_status = application.status

        application = await self.state_machine.withdraw_application(
            application, requesting_candidate_id
        )

        title = await self._opportunity_title(application.opportunity_id)
        await self.dispatcher.dispatch(
            self.dispatcher.on_transition(application, previous_status, title)
        )
        return application

    # -------------------------------------------------------------------------
    # Listings and analytics
    # -------------------------------------------------------------------------

    async def get_application(self, application_id: UUID, candidate_id: UUID) -> Application:
        """A candidate's own application. Other candidates' ids read as not found."""
        application = await self.repository.get(application_id)
        if application is None or application.candidate_id != candidate_id:
            raise ApplicationNotFoundError(application_id)
        return application

    async def list_candidate_applications(self, candidate_id: UUID) -> list[Application]:
        return await self.repository.list_for_candidate(candidate_id)

    async def list_opportunity_applications(
        self,
        opportunity_id: UUID,
        organization_id: UUID,
        *,
        is_admin: bool = False,
    ) -> list[tuple[Application, list[str]]]:
        """
        Applicants for an opportunity with their review flags.

        Raises:
            OpportunityNotFoundError: Unknown opportunity
            UnauthorizedError: Organization does not own the opportunity
        """
        opportunity = await self._get_opportunity(opportunity_id)
        if not is_admin and opportunity.organization_id != organization_id:
            raise UnauthorizedError("You can only view applications to your own opportunities.")

        applications = await self.repository.list_for_opportunity(opportunity_id)
        return [(application, detect_review_flags(application)) for application in applications]

    async def get_application_analytics(self, organization_id: UUID | None) -> dict:
        """
        Application statistics.

        Args:
            organization_id: Organization to report on, or None for the whole
                platform (admins)

        Returns:
            Dict with total_applications, status_distribution (every status)
            and monthly_trends (last six calendar months, oldest first)
        """
        now = self.clock()
        counts = await self.repository.count_by_status(organization_id)
        applied_at = await self.repository.applied_since(organization_id, trend_window_start(now))

        return {
            "total_applications": sum(counts.values()),
            "status_distribution": [
                {"status": status, "count": counts.get(status, 0)} for status in ApplicationStatus
            ],
            "monthly_trends": monthly_trends(applied_at, now),
        }
