"""CSV import endpoint."""

from buyer_crm.services.csv_import import import_leads_csv
from buyer_crm.utils.http import ApiHandler, json_response


class handler(ApiHandler):
    """POST /api/leads/import_csv with the raw CSV text as the request body."""

    async def post(self, caller):
        result = await import_leads_csv(caller, self.read_body())
        return json_response(result)
