"""
Applications Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.modules.applications.helpers import status_label
from app.modules.applications.matching import EligibilityTier
from app.modules.applications.models import ApplicationStatus

# =============================================================================
# Candidate requests
# =============================================================================


class ApplicationCreate(BaseModel):
    """Request body for applying to an opportunity."""

    opportunity_id: UUID
    cover_letter: str | None = Field(None, max_length=5000)


# =============================================================================
# Organization requests
# =============================================================================


class TransitionRequest(BaseModel):
    """Request body for moving an application to a new status."""

    target_status: ApplicationStatus = Field(..., description="Status to move the application to")
    feedback: str | None = Field(
        None,
        max_length=2000,
        description="Note for the candidate, e.g. interview details or rejection reason",
    )


# =============================================================================
# Responses
# =============================================================================


class ApplicationResponse(BaseModel):
    """An application as returned to candidates and organizations."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    candidate_id: UUID
    opportunity_id: UUID
    organization_id: UUID
    status: ApplicationStatus
    applied_at: datetime
    updated_at: datetime
    cover_letter: str | None = None
    feedback: str | None = None
    eligibility_score: float | None = None

    @computed_field
    @property
    def status_label(self) -> str:
        return status_label(self.status)


class ApplicationListResponse(BaseModel):
    items: list[ApplicationResponse]
    total: int


class ApplicantListItem(ApplicationResponse):
    """Application seen by the owning organization, with advisory review flags."""

    review_flags: list[str] = Field(default_factory=list)


class ApplicantListResponse(BaseModel):
    items: list[ApplicantListItem]
    total: int


class SuggestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    skill: str
    title: str
    description: str
    provider: str
    url: str


class EligibilityReportResponse(BaseModel):
    """Advisory fit of a candidate for an opportunity. Never blocks applying."""

    model_config = ConfigDict(from_attributes=True)

    candidate_id: UUID
    opportunity_id: UUID
    score: int = Field(..., ge=0, le=100)
    tier: EligibilityTier
    is_eligible: bool
    matched_skills: list[str]
    missing_skills: list[str]
    suggestions: list[SuggestionResponse]


class StatusCount(BaseModel):
    status: ApplicationStatus
    count: int

    @computed_field
    @property
    def label(self) -> str:
        return status_label(self.status)


class MonthlyCount(BaseModel):
    month: str = Field(..., description="Calendar month as YYYY-MM")
    count: int


class ApplicationAnalyticsResponse(BaseModel):
    total_applications: int
    status_distribution: list[StatusCount]
    monthly_trends: list[MonthlyCount]
