"""CSV export endpoint."""

from buyer_crm.services.csv_export import export_leads_csv
from buyer_crm.utils.http import ApiHandler, csv_response


class handler(ApiHandler):
    """GET /api/leads/export_csv - every lead visible to the caller as an attachment."""

    async def get(self, caller):
        export = await export_leads_csv(caller)
        return csv_response(export.content, filename=export.filename)
