"""Registration endpoint: creates the identity and provisions its profile."""

from buyer_crm.services.identity import register_identity
from buyer_crm.utils.errors import RequestError
from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):
    """POST /api/auth/signup with {"email", "password", "full_name"?}."""

    requires_auth = False

    async def post(self, caller):
        body = self.read_json()
        email = body.get("email")
        password = body.get("password")
        if not email or not password:
            raise RequestError("email and password are required")
        
        profile = await register_identity(email, password, full_name=body.get("full_name"))
        return json_response(profile, status=201)
