"""
Organization Applications Router

Endpoints organizations use to review applicants and move applications
through the review pipeline. Platform admins may act on any organization's
applications.

Endpoints:
- POST /organization/applications/{id}/transition - Change an application's status
- GET /organization/opportunities/{id}/applications - Applicants with review flags
- GET /organization/analytics - Application statistics
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from app.core.auth import CurrentUser, require_organization
from app.modules.applications.errors import ApplicationServiceError
from app.modules.applications.router import get_application_service, handle_service_error
from app.modules.applications.schemas import (
    ApplicantListItem,
    ApplicantListResponse,
    ApplicationAnalyticsResponse,
    ApplicationResponse,
    TransitionRequest,
)
from app.modules.applications.service import ApplicationLifecycleService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/applications/{application_id}/transition",
    response_model=ApplicationResponse,
    summary="Change Application Status",
    description="""
Move an application to a new status and notify the candidate.

**Allowed transitions:**
- `pending` -> `under_review`, `shortlisted`, `interview`, `accepted`, `rejected`
- `under_review` -> `shortlisted`, `interview`, `accepted`, `rejected`
- `shortlisted` -> `interview`, `accepted`, `rejected`
- `interview` -> `accepted`, `rejected`

`accepted`, `rejected` and `withdrawn` are final. Only the candidate can
withdraw an application.
""",
    responses={
        403: {"description": "Not your organization's application, or target is withdrawn"},
        404: {"description": "Application not found"},
        409: {"description": "Transition not allowed from the current status"},
    },
)
async def transition_application(
    application_id: UUID,
    body: TransitionRequest,
    user: CurrentUser = Depends(require_organization),
    service: ApplicationLifecycleService = Depends(get_application_service),
) -> ApplicationResponse:
    try:
        application = await service.transition_application(
            application_id,
            body.target_status,
            body.feedback,
            organization_id=user.id,
            is_admin=user.is_admin,
        )
    except ApplicationServiceError as e:
        raise handle_service_error(e) from e

    logger.info(
        f"Organization {user.id} moved application {application_id} to {body.target_status.value}"
    )
    return ApplicationResponse.model_validate(application)


@router.get(
    "/opportunities/{opportunity_id}/applications",
    response_model=ApplicantListResponse,
    summary="List Applicants",
    description="""
Applications to one of your opportunities, newest first. `review_flags`
lists advisory signals such as a very short cover letter; they do not
change the application.
""",
    responses={
        403: {"description": "Not your organization's opportunity"},
        404: {"description": "Opportunity not found"},
    },
)
async def list_applicants(
    opportunity_id: UUID,
    user: CurrentUser = Depends(require_organization),
    service: ApplicationLifecycleService = Depends(get_application_service),
) -> ApplicantListResponse:
    try:
        rows = await service.list_opportunity_applications(
            opportunity_id, user.id, is_admin=user.is_admin
        )
    except ApplicationServiceError as e:
        raise handle_service_error(e) from e

    items = [
        ApplicantListItem.model_validate(application).model_copy(update={"review_flags": flags})
        for application, flags in rows
    ]
    return ApplicantListResponse(items=items, total=len(items))


@router.get(
    "/analytics",
    response_model=ApplicationAnalyticsResponse,
    summary="Application Analytics",
    description="""
Totals, per-status counts and monthly application counts for the last six
months. Organizations see their own applications; admins see the platform.
""",
)
async def get_analytics(
    user: CurrentUser = Depends(require_organization),
    service: ApplicationLifecycleService = Depends(get_application_service),
) -> ApplicationAnalyticsResponse:
    try:
        analytics = await service.get_application_analytics(None if user.is_admin else user.id)
    except ApplicationServiceError as e:
        raise handle_service_error(e) from e

    return ApplicationAnalyticsResponse.model_validate(analytics)
