"""LeadSift Python SDK — Client library for the LeadSift API.

Quick start::

    from leadsift.client import LeadSiftClient

    client = LeadSiftClient("http://localhost:8080")
    page = client.search_leads({"city": "Austin", "state_code": "TX"})
    for lead in page["data"]:
        print(lead["_id"])
"""

from leadsift.client.client import AsyncLeadSiftClient, LeadSiftClient

__all__ = ["AsyncLeadSiftClient", "LeadSiftClient"]
