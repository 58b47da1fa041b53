"""
Opportunities module - internship postings.
"""

from app.modules.opportunities.models import Opportunity, WorkType
from app.modules.opportunities.repository import OpportunityRepository

__all__ = ["Opportunity", "WorkType", "OpportunityRepository"]
