"""
Opportunity Models

Internship postings. Created and edited by the posting workflow; the
application lifecycle only reads them.
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSON
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel


class WorkType(str, Enum):
    """Where the intern works."""

    REMOTE = "remote"
    ONSITE = "onsite"
    HYBRID = "hybrid"


class Opportunity(BaseModel):
    """
    Internship posting owned by an organization.

    An opportunity accepts applications while it is active and its
    application deadline has not passed.
    """

    __tablename__ = "opportunities"

    organization_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    location: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    category: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    work_type: Mapped[WorkType] = mapped_column(
        ENUM(WorkType, name="work_type", create_type=True),
        nullable=False,
        default=WorkType.ONSITE,
    )

    # Free text, compared case-insensitively
    required_skills: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    positions: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )
    application_deadline: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Opportunity(id={self.id}, title={self.title}, active={self.is_active})>"
