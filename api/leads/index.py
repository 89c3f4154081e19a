"""Lead CRUD endpoint: list, create, update and delete buyer leads."""

from buyer_crm.models.lead import LeadCreate, LeadFilters, LeadUpdate
from buyer_crm.services import leads
from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):
    """
    GET    /api/leads?q=&status=&source=&page=&page_size=   list (or ?id= for one lead)
    POST   /api/leads                                       create
    PATCH  /api/leads?id=<lead id>                          partial update
    DELETE /api/leads?id=<lead id>                          delete (admin)
    """

    async def get(self, caller):
        params = self.query_params()
        if params.get("id"):
            return json_response(await leads.get_lead(caller, params["id"]))
        
        filters = LeadFilters(
            search=params.get("q") or None,
            status=params.get("status") or None,
            source=params.get("source") or None,
            page=params.get("page") or 1,
            page_size=params.get("page_size") or LeadFilters.model_fields["page_size"].default,
            order_by=params.get("order_by") or "created_at",
            ascending=params.get("ascending", "false").lower() == "true",
        )
        return json_response(await leads.list_leads(caller, filters))

    async def post(self, caller):
        payload = LeadCreate(**self.read_json())
        return json_response(await leads.create_lead(caller, payload), status=201)

    async def patch(self, caller):
        lead_id = self.require_param("id")
        changes = LeadUpdate(**self.read_json())
        return json_response(await leads.update_lead(caller, lead_id, changes))

    async def delete(self, caller):
        await leads.delete_lead(caller, self.require_param("id"))
        return json_response({"ok": True})
