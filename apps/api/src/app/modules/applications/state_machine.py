"""
Application State Machine

Every status change goes through ``ApplicationStateMachine``, which checks
``VALID_STATUS_TRANSITIONS`` before writing anything.

Status flow:
    PENDING -> UNDER_REVIEW -> SHORTLISTED -> INTERVIEW -> ACCEPTED | REJECTED

Any non-terminal status may jump straight to ACCEPTED or REJECTED, and the
candidate may withdraw from any non-terminal status. ACCEPTED, REJECTED and
WITHDRAWN are terminal. Moving to the current status is an invalid
transition, not a no-op.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from app.modules.applications.errors import (
    ApplicationNotFoundError,
    InvalidTransitionError,
    UnauthorizedError,
)
from app.modules.applications.guard import ApplicationGuard
from app.modules.applications.models import Application, ApplicationStatus
from app.modules.applications.repository import ApplicationRepository
from app.modules.opportunities.models import Opportunity

logger = logging.getLogger(__name__)


VALID_STATUS_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset(
        {
            ApplicationStatus.UNDER_REVIEW,
            ApplicationStatus.SHORTLISTED,
            ApplicationStatus.INTERVIEW,
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }
    ),
    ApplicationStatus.UNDER_REVIEW: frozenset(
        {
            ApplicationStatus.SHORTLISTED,
            ApplicationStatus.INTERVIEW,
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }
    ),
    ApplicationStatus.SHORTLISTED: frozenset(
        {
            ApplicationStatus.INTERVIEW,
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }
    ),
    ApplicationStatus.INTERVIEW: frozenset(
        {
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }
    ),
    # Terminal states - no transitions allowed
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in VALID_STATUS_TRANSITIONS.items() if not targets
)


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    """True if ``target`` is reachable from ``current`` in one step."""
    return target in VALID_STATUS_TRANSITIONS.get(current, frozenset())


class ApplicationStateMachine:
    """
    Creates applications and moves them between statuses.

    Writes are all-or-nothing: if the repository fails to save a transition,
    the in-memory application is restored to its previous status,
    ``updated_at`` and feedback before the error propagates.
    """

    def __init__(
        self,
        repository: ApplicationRepository,
        guard: ApplicationGuard,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repository = repository
        self.guard = guard
        self.clock = clock or guard.clock

    async def get(self, application_id: UUID) -> Application:
        application = await self.repository.get(application_id)
        if application is None:
            raise ApplicationNotFoundError(application_id)
        return application

    async def create(
        self,
        candidate_id: UUID,
        opportunity: Opportunity,
        organization_id: UUID,
        cover_letter: str | None = None,
        *,
        eligibility_score: float | None = None,
    ) -> Application:
        """
        Create a PENDING application.

        Raises:
            OpportunityClosedError: Posting inactive or past its deadline
            DuplicateApplicationError: A live application exists for the pair
        """
        self.guard.assert_opportunity_open(opportunity)
        await self.guard.assert_can_apply(candidate_id, opportunity.id)

        now = self.clock()
        application = Application(
            candidate_id=candidate_id,
            opportunity_id=opportunity.id,
            organization_id=organization_id,
            status=ApplicationStatus.PENDING,
            applied_at=now,
            updated_at=now,
            cover_letter=cover_letter,
            eligibility_score=eligibility_score,
        )
        application = await self.repository.save(application)

        logger.info(
            f"Application {application.id} created: candidate {candidate_id} -> "
            f"opportunity {opportunity.id}"
        )
        return application

    async def advance(
        self,
        application: Application,
        target_status: ApplicationStatus,
        feedback: str | None = None,
    ) -> Application:
        """Apply one validated transition to an already-loaded application."""
        current_status = application.status
        if not can_transition(current_status, target_status):
            logger.warning(
                f"Invalid transition for application {application.id}: "
                f"{current_status.value} -> {target_status.value}"
            )
            raise InvalidTransitionError(current_status.value, target_status.value)

        snapshot = (application.status, application.updated_at, application.feedback)

        application.status = target_status
        application.updated_at = self.clock()
        if feedback is not None:
            application.feedback = feedback

        try:
            application = await self.repository.save(application)
        except Exception:
            application.status, application.updated_at, application.feedback = snapshot
            raise

        logger.info(
            f"Application {application.id} moved {current_status.value} -> {target_status.value}"
        )
        return application

    async def transition(
        self,
        application_id: UUID,
        target_status: ApplicationStatus,
        feedback: str | None = None,
    ) -> Application:
        """
        Move an application to ``target_status``.

        Raises:
            ApplicationNotFoundError: Unknown application id
            InvalidTransitionError: Target not reachable from the current status
        """
        application = await self.get(application_id)
        return await self.advance(application, target_status, feedback)

    async def withdraw(self, application_id: UUID, requesting_candidate_id: UUID) -> Application:
        """
        Withdraw an application on behalf of the candidate who owns it.

        Raises:
            ApplicationNotFoundError: Unknown application id
            UnauthorizedError: The requester does not own the application
            InvalidTransitionError: The application is already terminal
        """
        application = await self.get(application_id)
        return await self.withdraw_application(application, requesting_candidate_id)

    async def withdraw_application(
        self, application: Application, requesting_candidate_id: UUID
    ) -> Application:
        """Ownership-checked withdrawal of an already-loaded application."""
        if application.candidate_id != requesting_candidate_id:
            logger.warning(
                f"Candidate {requesting_candidate_id} tried to withdraw application "
                f"{application.id} owned by {application.candidate_id}"
            )
            raise UnauthorizedError("Only the applicant can withdraw this application.")
        return await self.advance(application, ApplicationStatus.WITHDRAWN)
