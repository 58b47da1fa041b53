"""
User Models

Youth candidates, organizations and platform admins share one ``users``
table. Credentials live with the identity provider, not here.
"""

from enum import Enum

from sqlalchemy import Boolean, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel


class UserRole(str, Enum):
    """User roles in the system."""

    YOUTH = "youth"
    ORGANIZATION = "organization"
    ADMIN = "admin"


class User(BaseModel):
    """
    A person or organization using InternBridge.

    Candidates (role YOUTH) carry a free-text skill list that eligibility
    scoring reads. Organizations (role ORGANIZATION) own opportunities.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        ENUM(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.YOUTH,
    )

    # Profile
    location: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    bio: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    # Free text, no canonical taxonomy
    skills: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"
