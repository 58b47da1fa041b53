"""
Application Models

The internship application and its status enum. Status values change only
through ``ApplicationStateMachine``; rows are never deleted (withdrawal is a
status).
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Index, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class ApplicationStatus(str, enum.Enum):
    """Status of an internship application."""

    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    SHORTLISTED = "shortlisted"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Application(Base):
    """
    A candidate's application to one opportunity.

    ``candidate_id``, ``opportunity_id``, ``organization_id``, ``applied_at``
    and ``cover_letter`` are fixed at creation.
    """

    __tablename__ = "applications"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    opportunity_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("opportunities.id", ondelete="CASCADE"), nullable=False
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Status tracking
    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(ApplicationStatus, name="application_status"),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Rejection or interview note from the organization
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Advisory score at apply time
    eligibility_score: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (
        Index("ix_applications_candidate_id", "candidate_id"),
        Index("ix_applications_opportunity_id", "opportunity_id"),
        Index("ix_applications_organization_status", "organization_id", "status"),
        # One live application per (candidate, opportunity)
        Index(
            "uq_applications_candidate_opportunity_active",
            "candidate_id",
            "opportunity_id",
            unique=True,
            postgresql_where=text("status <> 'WITHDRAWN'"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, status={self.status.value})>"
