"""Sample import template download."""

from buyer_crm.services.csv_export import sample_import_csv
from buyer_crm.utils.http import ApiHandler, csv_response


class handler(ApiHandler):

    requires_auth = False

    async def get(self, caller):
        return csv_response(sample_import_csv(), filename="sample_leads_import.csv")
