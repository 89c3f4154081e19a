"""Lead activity endpoint."""

from buyer_crm.models.activity import LeadActivityCreate
from buyer_crm.services.activities import list_activities, log_activity
from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):
    """
    GET  /api/activities?lead_id=<id>   history, newest first
    POST /api/activities?lead_id=<id>   append {"activity_type", "description", "metadata"}
    """

    async def get(self, caller):
        return json_response(await list_activities(caller, self.require_param("lead_id")))

    async def post(self, caller):
        lead_id = self.require_param("lead_id")
        payload = LeadActivityCreate(**self.read_json())
        return json_response(await log_activity(caller, lead_id, payload), status=201)
