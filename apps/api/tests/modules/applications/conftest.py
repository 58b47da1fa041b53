"""
Fixtures for application lifecycle tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.modules.applications.models import Application, ApplicationStatus
from app.modules.opportunities.models import Opportunity
from app.modules.users.models import User, UserRole

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Fixed clock so timestamps are predictable."""
    return lambda: NOW


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def candidate():
    """A youth user with two skills."""
    user = MagicMock(spec=User)
    user.id = uuid4()
    user.email = "aminata@example.com"
    user.name = "Aminata Kamara"
    user.role = UserRole.YOUTH
    user.skills = ["python", "communication"]
    user.is_active = True
    return user


@pytest.fixture
def opportunity(organization_id):
    """An open opportunity requiring Python, SQL and Docker."""
    posting = MagicMock(spec=Opportunity)
    posting.id = uuid4()
    posting.organization_id = organization_id
    posting.title = "Backend Engineering Intern"
    posting.required_skills = ["Python", "SQL", "Docker"]
    posting.application_deadline = NOW + timedelta(days=14)
    posting.is_active = True
    return posting


@pytest.fixture
def make_application(candidate, opportunity):
    """Build a real Application in the given status."""

    def _make(status: ApplicationStatus = ApplicationStatus.PENDING, **overrides) -> Application:
        values = {
            "id": uuid4(),
            "candidate_id": candidate.id,
            "opportunity_id": opportunity.id,
            "organization_id": opportunity.organization_id,
            "status": status,
            "applied_at": NOW - timedelta(days=2),
            "updated_at": NOW - timedelta(days=2),
            "cover_letter": None,
            "feedback": None,
            "eligibility_score": None,
        }
        values.update(overrides)
        return Application(**values)

    return _make


async def _save(application: Application) -> Application:
    if application.id is None:
        application.id = uuid4()
    return application


@pytest.fixture
def mock_repository(candidate, opportunity):
    """In-memory stand-in for ApplicationRepository."""
    repo = AsyncMock()
    repo.find_application = AsyncMock(return_value=None)
    repo.get = AsyncMock(return_value=None)
    repo.save = AsyncMock(side_effect=_save)
    repo.get_opportunity = AsyncMock(return_value=opportunity)
    repo.get_candidate = AsyncMock(return_value=candidate)
    repo.list_for_candidate = AsyncMock(return_value=[])
    repo.list_for_opportunity = AsyncMock(return_value=[])
    repo.count_by_status = AsyncMock(return_value={status: 0 for status in ApplicationStatus})
    repo.applied_since = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_notifier():
    """Notifier whose send succeeds."""
    notifier = AsyncMock()
    notifier.send = AsyncMock(return_value=None)
    return notifier
