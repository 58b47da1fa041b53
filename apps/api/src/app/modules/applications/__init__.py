"""
Applications module - eligibility scoring and the internship application lifecycle.
"""

from app.modules.applications.models import Application, ApplicationStatus
from app.modules.applications.organization_router import router as organization_router
from app.modules.applications.router import router
from app.modules.applications.service import ApplicationLifecycleService

__all__ = [
    "Application",
    "ApplicationStatus",
    "ApplicationLifecycleService",
    "router",
    "organization_router",
]
