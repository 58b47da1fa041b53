"""
Unit tests for the users and opportunities table mappings.
"""

from sqlalchemy import inspect
from sqlalchemy.orm import configure_mappers

from app.modules.applications.models import Application
from app.modules.opportunities.models import Opportunity
from app.modules.users.models import User


class TestMappers:
    """Tests for mapper configuration."""

    def test_mappers_configure(self):
        configure_mappers()

        assert inspect(Application).columns["organization_id"].foreign_keys
        assert inspect(Opportunity).columns["organization_id"].foreign_keys

    def test_lookups_use_plain_foreign_keys(self):
        # Lookups go through the repositories, never lazy-loaded relationships
        assert not inspect(User).relationships
        assert not inspect(Opportunity).relationships
