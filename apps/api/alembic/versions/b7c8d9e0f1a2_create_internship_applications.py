"""create users, opportunities and applications

Revision ID: b7c8d9e0f1a2
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration:
1. Creates the users table (candidates, organizations, admins)
2. Creates the opportunities table (internship postings)
3. Creates the applications table
4. Adds a partial unique index allowing one non-withdrawn application per
   (candidate_id, opportunity_id)

SQLAlchemy stores Python enums by member name, so enum labels and the
partial index predicate use upper-case names.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c8d9e0f1a2"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create the InternBridge tables."""
    user_role_enum = postgresql.ENUM(
        "YOUTH", "ORGANIZATION", "ADMIN", name="user_role", create_type=False
    )
    work_type_enum = postgresql.ENUM(
        "REMOTE", "ONSITE", "HYBRID", name="work_type", create_type=False
    )
    application_status_enum = postgresql.ENUM(
        "PENDING",
        "UNDER_REVIEW",
        "SHORTLISTED",
        "INTERVIEW",
        "ACCEPTED",
        "REJECTED",
        "WITHDRAWN",
        name="application_status",
        create_type=False,
    )
    bind = op.get_bind()
    user_role_enum.create(bind, checkfirst=True)
    work_type_enum.create(bind, checkfirst=True)
    application_status_enum.create(bind, checkfirst=True)

    # Users
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("skills", postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Opportunities
    op.create_table(
        "opportunities",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("work_type", work_type_enum, nullable=False),
        sa.Column("required_skills", postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column("positions", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("application_deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["organization_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_opportunities_organization_id", "opportunities", ["organization_id"])
    op.create_index("ix_opportunities_title", "opportunities", ["title"])

    # Applications
    op.create_table(
        "applications",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("candidate_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("opportunity_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", application_status_enum, nullable=False),
        sa.Column("applied_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("cover_letter", sa.Text(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("eligibility_score", sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["candidate_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["opportunity_id"], ["opportunities.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["organization_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_applications_candidate_id", "applications", ["candidate_id"])
    op.create_index("ix_applications_opportunity_id", "applications", ["opportunity_id"])
    op.create_index(
        "ix_applications_organization_status", "applications", ["organization_id", "status"]
    )

    # One live application per candidate and opportunity; withdrawn rows do not count
    op.create_index(
        "uq_applications_candidate_opportunity_active",
        "applications",
        ["candidate_id", "opportunity_id"],
        unique=True,
        postgresql_where=sa.text("status <> 'WITHDRAWN'"),
    )


def downgrade() -> None:
    """Drop the InternBridge tables and enum types."""
    op.drop_index("uq_applications_candidate_opportunity_active", table_name="applications")
    op.drop_index("ix_applications_organization_status", table_name="applications")
    op.drop_index("ix_applications_opportunity_id", table_name="applications")
    op.drop_index("ix_applications_candidate_id", table_name="applications")
    op.drop_table("applications")

    op.drop_index("ix_opportunities_title", table_name="opportunities")
    op.drop_index("ix_opportunities_organization_id", table_name="opportunities")
    op.drop_table("opportunities")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS application_status")
    op.execute("DROP TYPE IF EXISTS work_type")
    op.execute("DROP TYPE IF EXISTS user_role")
