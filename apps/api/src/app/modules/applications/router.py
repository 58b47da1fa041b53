"""
Applications Router

Candidate-facing endpoints for eligibility checks and applications.

Endpoints:
- GET /opportunities/{id}/eligibility - Score the caller against an opportunity
- POST /applications - Apply to an opportunity
- GET /applications - List the caller's applications
- GET /applications/{id} - Get one of the caller's applications
- POST /applications/{id}/withdraw - Withdraw one of the caller's applications

Security:
- All endpoints require a youth (candidate) bearer token
- Applying and eligibility checks are rate limited per candidate
- Candidates only ever see their own applications
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, require_candidate
from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.applications.errors import ApplicationServiceError
from app.modules.applications.notifier import EmailNotifier
from app.modules.applications.repository import SQLAlchemyApplicationRepository
from app.modules.applications.schemas import (
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    EligibilityReportResponse,
)
from app.modules.applications.service import ApplicationLifecycleService

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Dependencies & Helpers
# ============================================


def get_application_service(db: AsyncSession = Depends(get_db)) -> ApplicationLifecycleService:
    """Lifecycle service bound to the request's session."""
    return ApplicationLifecycleService(
        repository=SQLAlchemyApplicationRepository(db),
        notifier=EmailNotifier(),
    )


def handle_service_error(e: ApplicationServiceError) -> HTTPException:
    """Convert service errors to HTTPExceptions."""
    return HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


# ============================================
# Eligibility
# ============================================


@router.get(
    "/opportunities/{opportunity_id}/eligibility",
    response_model=EligibilityReportResponse,
    summary="Check Eligibility",
    description="""
Score the caller's skills against an opportunity's required skills.

The score is the rounded percentage of required skills matched. A skill
matches when either string contains the other, ignoring case. Tiers:
`strong` (80+), `partial` (50-79), `weak` (below 50).

The result is advisory and also sent to the candidate as a notification.
It never prevents applying.
""",
    responses={
        404: {"description": "Opportunity or candidate profile not found"},
        429: {"description": "Too many eligibility checks"},
    },
)
async def check_eligibility(
    opportunity_id: UUID,
    user: CurrentUser = Depends(require_candidate),
    service: ApplicationLifecycleService = Depends(get_application_service),
) -> EligibilityReportResponse:
    await enforce_rate_limit(
        f"eligibility:{user.id}",
        settings.eligibility_rate_limit,
        settings.eligibility_rate_window_seconds,
    )

    try:
        report = await service.compute_eligibility(user.id, opportunity_id)
    except ApplicationServiceError as e:
        raise handle_service_error(e) from e

    return EligibilityReportResponse.model_validate(report)


# ============================================
# Applications
# ============================================


@router.post(
    "/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to an Opportunity",
    description="""
Submit an application. The new application starts in `pending` and the
organization is notified.

**Duplicate Prevention:**
- Only one live (not withdrawn) application per candidate and opportunity
- Re-applying after withdrawing is allowed
""",
    responses={
        404: {"description": "Opportunity or candidate profile not found"},
        409: {
            "description": "Duplicate application, or the opportunity is closed",
            "content": {
                "application/json": {
                    "example": {
                        "detail": {
                            "error": "OPPORTUNITY_CLOSED",
                            "message": "The application deadline for this opportunity has passed.",
                        }
                    }
                }
            },
        },
        429: {"description": "Too many applications"},
        503: {"description": "Database temporarily unavailable"},
    },
)
async def apply(
    body: ApplicationCreate,
    user: CurrentUser = Depends(require_candidate),
    service: ApplicationLifecycleService = Depends(get_application_service),
) -> ApplicationResponse:
    await enforce_rate_limit(
        f"apply:{user.id}",
        settings.apply_rate_limit,
        settings.apply_rate_window_seconds,
    )

    try:
        application = await service.apply(
            candidate_id=user.id,
            opportunity_id=body.opportunity_id,
            cover_letter=body.cover_letter,
        )
    except ApplicationServiceError as e:
        raise handle_service_error(e) from e

    return ApplicationResponse.model_validate(application)


@router.get(
    "/applications",
    response_model=ApplicationListResponse,
    summary="List My Applications",
)
async def list_my_applications(
    user: CurrentUser = Depends(require_candidate),
    service: ApplicationLifecycleService = Depends(get_application_service),
) -> ApplicationListResponse:
    try:
        applications = await service.list_candidate_applications(user.id)
    except ApplicationServiceError as e:
        raise handle_service_error(e) from e

    items = [ApplicationResponse.model_validate(application) for application in applications]
    return ApplicationListResponse(items=items, total=len(items))


@router.get(
    "/applications/{application_id}",
    response_model=ApplicationResponse,
    summary="Get My Application",
    responses={404: {"description": "Application not found"}},
)
async def get_my_application(
    application_id: UUID,
    user: CurrentUser = Depends(require_candidate),
    service: ApplicationLifecycleService = Depends(get_application_service),
) -> ApplicationResponse:
    try:
        application = await service.get_application(application_id, user.id)
    except ApplicationServiceError as e:
        raise handle_service_error(e) from e

    return ApplicationResponse.model_validate(application)


@router.post(
    "/applications/{application_id}/withdraw",
    response_model=ApplicationResponse,
    summary="Withdraw Application",
    description="""
Withdraw one of your applications. Allowed from any non-final status;
accepted, rejected and already withdrawn applications cannot be withdrawn.
""",
    responses={
        403: {"description": "Not your application"},
        404: {"description": "Application not found"},
        409: {"description": "Application is already final"},
    },
)
async def withdraw_application(
    application_id: UUID,
    user: CurrentUser = Depends(require_candidate),
    service: ApplicationLifecycleService = Depends(get_application_service),
) -> ApplicationResponse:
    try:
        application = await service.withdraw(application_id, user.id)
    except ApplicationServiceError as e:
        raise handle_service_error(e) from e

    logger.info(f"Candidate {user.id} withdrew application {application_id}")
    return ApplicationResponse.model_validate(application)
