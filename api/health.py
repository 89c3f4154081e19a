"""Health check endpoint."""

from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):
    """Health check handler for Vercel serverless function."""

    requires_auth = False

    async def get(self, caller):
        return json_response({"status": "ok", "service": "buyer-crm-backend"})

    async def post(self, caller):
        return await self.get(caller)
