"""Lead analytics endpoint."""

from buyer_crm.services.analytics import get_lead_analytics
from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):

    async def get(self, caller):
        return json_response(await get_lead_analytics(caller))
