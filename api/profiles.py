"""Profile endpoint."""

from buyer_crm.models.profile import ProfileUpdate
from buyer_crm.services import profiles
from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):
    """
    GET   /api/profiles              all profiles (?user_id= for one)
    PATCH /api/profiles?user_id=     update a profile (own row only)
    """

    async def get(self, caller):
        user_id = self.query_params().get("user_id")
        if user_id:
            return json_response(await profiles.get_profile(caller, user_id))
        return json_response(await profiles.list_profiles(caller))

    async def patch(self, caller):
        user_id = self.query_params().get("user_id") or caller.user_id
        changes = ProfileUpdate(**self.read_json())
        return json_response(await profiles.update_profile(caller, user_id, changes))
