"""Lead assignment endpoint."""

from buyer_crm.services.leads import assign_lead
from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):
    """POST /api/leads/assign?id=<lead id> with {"assigned_to": <user id or null>}."""

    async def post(self, caller):
        lead_id = self.require_param("id")
        body = self.read_json()
        return json_response(await assign_lead(caller, lead_id, body.get("assigned_to")))
