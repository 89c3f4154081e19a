"""Tests for profile data access."""

import pytest
from buyer_crm.models.profile import ProfileUpdate
from buyer_crm.services.profiles import get_profile, list_profiles, update_profile
from buyer_crm.utils.errors import AuthorizationError, NotFoundError
from tests.utils.factories import create_profile_row


@pytest.mark.unit
@pytest.mark.asyncio
async def test_any_authenticated_caller_lists_profiles(fake_supabase, roleless_caller):
    fake_supabase.seed("profiles", create_profile_row(full_name="Zoe Adams"))
    fake_supabase.seed("profiles", create_profile_row(full_name="Amir Khan", role="viewer"))
    
    profiles = await list_profiles(roleless_caller)
    
    assert [profile.full_name for profile in profiles] == ["Amir Khan", "Zoe Adams"]
    assert profiles[0].role == "viewer"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_missing_profile(fake_supabase, agent_caller):
    with pytest.raises(NotFoundError):
        await get_profile(agent_caller, agent_caller.user_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_own_profile(fake_supabase, agent_caller, freeze_time_fixture):
    row = fake_supabase.seed("profiles", create_profile_row(user_id=agent_caller.user_id))
    freeze_time_fixture.tick(30)
    
    profile = await update_profile(agent_caller, agent_caller.user_id, ProfileUpdate(full_name="New Name"))
    
    assert profile.full_name == "New Name"
    assert profile.role == "agent"
    assert profile.updated_at > row["updated_at"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_cannot_update_someone_elses_profile(fake_supabase, admin_caller):
    row = fake_supabase.seed("profiles", create_profile_row(full_name="Original"))
    
    with pytest.raises(AuthorizationError):
        await update_profile(admin_caller, row["user_id"], ProfileUpdate(full_name="Hijacked"))
    
    assert fake_supabase.rows("profiles")[0]["full_name"] == "Original"


@pytest.mark.unit
def test_profile_update_rejects_role_change():
    with pytest.raises(ValueError):
        ProfileUpdate(role="admin")
