"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from buyer_crm.models.caller import Caller
from buyer_crm.models.enums import AppRole
from buyer_crm.services import supabase_client
from tests.utils.factories import create_user_id
from tests.utils.fake_supabase import FakeSupabase


@pytest.fixture
def fake_supabase(monkeypatch):
    """In-memory Supabase installed as the client singleton."""
    client = FakeSupabase()
    monkeypatch.setattr(supabase_client, "_client", client)
    return client


@pytest.fixture
def admin_caller():
    return Caller(user_id=create_user_id(), role=AppRole.ADMIN)


@pytest.fixture
def agent_caller():
    return Caller(user_id=create_user_id(), role=AppRole.AGENT)


@pytest.fixture
def other_agent_caller():
    return Caller(user_id=create_user_id(), role=AppRole.AGENT)


@pytest.fixture
def viewer_caller():
    return Caller(user_id=create_user_id(), role=AppRole.VIEWER)


@pytest.fixture
def roleless_caller():
    """Authenticated identity without a profile."""
    return Caller(user_id=create_user_id(), role=None)


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture
def authenticated(fake_supabase):
    """Register a profile + access token for a role; returns (user_id, token)."""
    def _authenticate(role: str = "agent"):
        user_id = create_user_id()
        fake_supabase.seed("profiles", {"user_id": user_id, "full_name": "Test User", "role": role})
        return user_id, fake_supabase.auth.issue_token(user_id)
    return _authenticate
