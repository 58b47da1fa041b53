"""
Seed Demo Data

Creates a demo organization, a demo candidate and one open opportunity so
the eligibility and application endpoints can be tried locally with
development tokens ("youth:<id>", "organization:<id>") or the printed
signed bearer tokens.

Usage:
    cd apps/api
    python scripts/seed_demo_data.py
"""

import asyncio
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from app.core.database import async_session_maker, close_db
from app.core.security import create_access_token
from app.modules.opportunities.models import WorkType
from app.modules.opportunities.repository import OpportunityRepository
from app.modules.users.models import UserRole
from app.modules.users.repository import UserRepository

ORGANIZATION_EMAIL = "talent@acme-labs.example"
CANDIDATE_EMAIL = "aminata.demo@example.com"


async def seed_demo_data() -> None:
    """Create the demo organization, candidate and opportunity if missing."""
    async with async_session_maker() as db:
        organization = await UserRepository.get_by_email(db, ORGANIZATION_EMAIL)
        if organization is None:
            organization = await UserRepository.create(
                db,
                email=ORGANIZATION_EMAIL,
                name="Acme Labs",
                role=UserRole.ORGANIZATION,
                location="Freetown",
            )

        candidate = await UserRepository.get_by_email(db, CANDIDATE_EMAIL)
        if candidate is None:
            candidate = await UserRepository.create(
                db,
                email=CANDIDATE_EMAIL,
                name="Aminata Kamara",
                role=UserRole.YOUTH,
                skills=["python", "communication"],
                location="Freetown",
            )

        opportunities = await OpportunityRepository.list_for_organization(db, organization.id)
        if opportunities:
            opportunity = opportunities[0]
        else:
            opportunity = await OpportunityRepository.create(
                db,
                organization_id=organization.id,
                title="Backend Engineering Intern",
                description="Help build the APIs behind our logistics platform.",
                required_skills=["Python", "SQL", "Docker"],
                application_deadline=datetime.now(UTC) + timedelta(days=30),
                location="Freetown",
                category="Software Development",
                work_type=WorkType.HYBRID,
                positions=2,
            )

        await db.commit()

        print("Demo data ready!")
        print(f"  Opportunity:  {opportunity.title} ({opportunity.id})")
        for user in (organization, candidate):
            token = create_access_token(
                str(user.id),
                email=user.email,
                role=user.role.value,
                expires_delta=timedelta(days=7),
            )
            print(f"  {user.role.value.capitalize()}: {user.email}")
            print(f"    Dev token:    {user.role.value}:{user.id}")
            print(f"    Bearer token: {token}")

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
