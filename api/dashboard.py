"""Dashboard counts endpoint."""

from buyer_crm.services.analytics import get_dashboard_stats
from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):

    async def get(self, caller):
        return json_response(await get_dashboard_stats(caller))
