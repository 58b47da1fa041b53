"""
Applications Repository

``ApplicationRepository`` is the storage contract the lifecycle core depends
on. ``SQLAlchemyApplicationRepository`` implements it over PostgreSQL.

Error translation:
- ``IntegrityError`` on save means the partial unique index on
  (candidate_id, opportunity_id) rejected a second live application, and is
  raised as ``DuplicateApplicationError``
- Any other driver error (``OperationalError``, ``InterfaceError`` and the
  rest of ``DBAPIError``) or a connection pool timeout means the database
  could not serve the request, and is raised as ``CollaboratorUnavailableError``
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Protocol
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.applications.errors import (
    CollaboratorUnavailableError,
    DuplicateApplicationError,
)
from app.modules.applications.models import Application, ApplicationStatus
from app.modules.opportunities.models import Opportunity
from app.modules.opportunities.repository import OpportunityRepository
from app.modules.users.models import User
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class ApplicationRepository(Protocol):
    """Storage operations used by the guard, state machine and service."""

    async def find_application(
        self, candidate_id: UUID, opportunity_id: UUID
    ) -> Application | None: ...

    async def get(self, application_id: UUID) -> Application | None: ...

    async def save(self, application: Application) -> Application: ...

    async def get_opportunity(self, opportunity_id: UUID) -> Opportunity | None: ...

    async def get_candidate(self, candidate_id: UUID) -> User | None: ...

    async def list_for_candidate(self, candidate_id: UUID) -> list[Application]: ...

    async def list_for_opportunity(self, opportunity_id: UUID) -> list[Application]: ...

    async def count_by_status(
        self, organization_id: UUID | None
    ) -> dict[ApplicationStatus, int]: ...

    async def applied_since(
        self, organization_id: UUID | None, since: datetime
    ) -> list[datetime]: ...


class SQLAlchemyApplicationRepository:
    """``ApplicationRepository`` backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _translate_errors(self) -> AsyncIterator[None]:
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Unique constraint rejected application write: {e.orig}")
            raise DuplicateApplicationError() from e
        except (DBAPIError, PoolTimeoutError) as e:
            await self.db.rollback()
            logger.error(f"Database unavailable: {e}")
            raise CollaboratorUnavailableError("database") from e

    async def find_application(
        self, candidate_id: UUID, opportunity_id: UUID
    ) -> Application | None:
        """The candidate's live (non-withdrawn) application for an opportunity."""
        async with self._translate_errors():
            result = await self.db.execute(
                select(Application).where(
                    Application.candidate_id == candidate_id,
                    Application.opportunity_id == opportunity_id,
                    Application.status != ApplicationStatus.WITHDRAWN,
                )
            )
            return result.scalars().first()

    async def get(self, application_id: UUID) -> Application | None:
        """Get application by ID."""
        async with self._translate_errors():
            return await self.db.get(Application, application_id)

    async def save(self, application: Application) -> Application:
        """Insert or update an application and commit."""
        async with self._translate_errors():
            self.db.add(application)
            await self.db.commit()
            await self.db.refresh(application)
        return application

    async def get_opportunity(self, opportunity_id: UUID) -> Opportunity | None:
        async with self._translate_errors():
            return await OpportunityRepository.get_by_id(self.db, opportunity_id)

    async def get_candidate(self, candidate_id: UUID) -> User | None:
        """Active youth user with this id."""
        async with self._translate_errors():
            return await UserRepository.get_candidate(self.db, candidate_id)

    async def list_for_candidate(self, candidate_id: UUID) -> list[Application]:
        """All of a candidate's applications, newest first."""
        async with self._translate_errors():
            result = await self.db.execute(
                select(Application)
                .where(Application.candidate_id == candidate_id)
                .order_by(Application.applied_at.desc())
            )
            return list(result.scalars().all())

    async def list_for_opportunity(self, opportunity_id: UUID) -> list[Application]:
        """All applications to an opportunity, newest first."""
        async with self._translate_errors():
            result = await self.db.execute(
                select(Application)
                .where(Application.opportunity_id == opportunity_id)
                .order_by(Application.applied_at.desc())
            )
            return list(result.scalars().all())

    async def count_by_status(self, organization_id: UUID | None) -> dict[ApplicationStatus, int]:
        """
        Count applications per status.

        Args:
            organization_id: Restrict to one organization, or None for all

        Returns:
            Mapping with an entry for every status, zero where none exist
        """
        query = select(Application.status, func.count(Application.id)).group_by(
            Application.status
        )
        if organization_id is not None:
            query = query.where(Application.organization_id == organization_id)

        async with self._translate_errors():
            result = await self.db.execute(query)
            rows = result.all()

        counts = {status: 0 for status in ApplicationStatus}
        for status, count in rows:
            counts[status] = count
        return counts

    async def applied_since(self, organization_id: UUID | None, since: datetime) -> list[datetime]:
        """``applied_at`` of every application submitted at or after ``since``."""
        query = select(Application.applied_at).where(Application.applied_at >= since)
        if organization_id is not None:
            query = query.where(Application.organization_id == organization_id)

        async with self._translate_errors():
            result = await self.db.execute(query)
            return list(result.scalars().all())
