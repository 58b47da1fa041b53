"""
Application Guard

Preconditions checked before an application is created.

The duplicate check is a read followed later by a separate insert, so two
concurrent applies for the same pair can both pass it. The partial unique
index ``uq_applications_candidate_opportunity_active`` closes that window:
the losing insert fails in ``SQLAlchemyApplicationRepository.save`` and is
reported as ``DuplicateApplicationError`` like a guard rejection.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from app.modules.applications.errors import DuplicateApplicationError, OpportunityClosedError
from app.modules.applications.repository import ApplicationRepository
from app.modules.opportunities.models import Opportunity

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


def _as_aware(value: datetime) -> datetime:
    # Naive timestamps are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class ApplicationGuard:
    """Rejects applications to closed opportunities and duplicate applications."""

    def __init__(
        self,
        repository: ApplicationRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.clock = clock

    def assert_opportunity_open(self, opportunity: Opportunity) -> None:
        """
        Raise ``OpportunityClosedError`` if the posting is inactive or its
        deadline has passed. The deadline instant itself is already closed.
        """
        if not opportunity.is_active:
            logger.warning(f"Apply rejected: opportunity {opportunity.id} is inactive")
            raise OpportunityClosedError("This opportunity is no longer active.")

        if self.clock() >= _as_aware(opportunity.application_deadline):
            logger.warning(f"Apply rejected: opportunity {opportunity.id} deadline has passed")
            raise OpportunityClosedError(
                "The application deadline for this opportunity has passed."
            )

    async def assert_can_apply(self, candidate_id: UUID, opportunity_id: UUID) -> None:
        """Raise ``DuplicateApplicationError`` if a live application exists for the pair."""
        existing = await self.repository.find_application(candidate_id, opportunity_id)
        if existing is not None:
            logger.warning(
                f"Duplicate application: candidate {candidate_id} already has "
                f"{existing.id} ({existing.status.value}) for opportunity {opportunity_id}"
            )
            raise DuplicateApplicationError(candidate_id, opportunity_id)
