from fastapi import APIRouter

from app.modules.applications import organization_router as organization_applications_router
from app.modules.applications import router as applications_router

api_router = APIRouter()

api_router.include_router(applications_router, tags=["Applications"])

api_router.include_router(
    organization_applications_router,
    prefix="/organization",
    tags=["Organization - Applications"],
)
