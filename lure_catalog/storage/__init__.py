"""
Storage backends for the catalog.

Modules:
    catalog_store - CatalogStore (Supabase REST: dedup query, row insert)
    blob_store    - BlobStore (R2 object uploads, public URLs)
"""

from .blob_store import BlobStore
from .catalog_store import CatalogStore, build_lure_row

__all__ = ['BlobStore', 'CatalogStore', 'build_lure_row']
