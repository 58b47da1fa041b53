"""
User Repository

Read access to candidates and organizations. Profile editing happens in the
profile service, not here.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        name: str,
        role: UserRole,
        skills: list[str] | None = None,
        location: str | None = None,
    ) -> User:
        """Create a user record (used by the seed script and tests)."""
        user = User(
            email=email,
            name=name,
            role=role,
            skills=list(skills or []),
            location=location,
            is_active=True,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> User | None:
        """Get a user by ID."""
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by email address."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_candidate(db: AsyncSession, candidate_id: UUID) -> User | None:
        """Get an active youth user, or None."""
        result = await db.execute(
            select(User).where(
                User.id == candidate_id,
                User.role == UserRole.YOUTH,
                User.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()
