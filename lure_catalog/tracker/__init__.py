"""
Ingestion tracker integration (Airtable).

Modules:
    api_client - AirtableAPIClient (search, create, update, paginate)
    sync       - TrackerSync (maker lifecycle, URL records, pending queue)
"""

from .api_client import AirtableAPIClient
from .sync import TrackerSync

__all__ = ['AirtableAPIClient', 'TrackerSync']
