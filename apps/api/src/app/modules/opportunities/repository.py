"""
Opportunity Repository

Database operations for internship postings.
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.opportunities.models import Opportunity, WorkType

logger = logging.getLogger(__name__)


class OpportunityRepository:
    """Repository for opportunity database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        organization_id: UUID,
        title: str,
        application_deadline: datetime,
        required_skills: list[str] | None = None,
        description: str = "",
        location: str | None = None,
        category: str | None = None,
        work_type: WorkType = WorkType.ONSITE,
        positions: int = 1,
    ) -> Opportunity:
        """
        Create a new opportunity.

        Args:
            db: Database session
            organization_id: Owning organization's user id
            title: Posting title
            application_deadline: Timezone-aware deadline
            required_skills: Free-text skills the posting asks for

        Returns:
            Created Opportunity instance
        """
        opportunity = Opportunity(
            organization_id=organization_id,
            title=title,
            description=description,
            location=location,
            category=category,
            work_type=work_type,
            required_skills=list(required_skills or []),
            positions=positions,
            application_deadline=application_deadline,
            is_active=True,
        )

        db.add(opportunity)
        await db.flush()
        await db.refresh(opportunity)

        logger.info(f"Created opportunity: {opportunity.id} - {opportunity.title}")
        return opportunity

    @staticmethod
    async def get_by_id(db: AsyncSession, opportunity_id: UUID) -> Opportunity | None:
        """Get an opportunity by ID."""
        result = await db.execute(select(Opportunity).where(Opportunity.id == opportunity_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_organization(db: AsyncSession, organization_id: UUID) -> list[Opportunity]:
        """All postings of an organization, newest first."""
        result = await db.execute(
            select(Opportunity)
            .where(Opportunity.organization_id == organization_id)
            .order_by(Opportunity.created_at.desc())
        )
        return list(result.scalars().all())
