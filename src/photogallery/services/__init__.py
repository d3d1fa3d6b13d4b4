"""
Services module for photogallery.

This module contains the service classes that hold the business logic:
- SessionAuthService: Admin login and signed session tokens
- PhotoService: Photo upload/list/update/delete and image serving
- Reconciler: Repair of partial failures between the two stores
- MetadataStore / BlobStore: Adapters for the metadata and image stores
"""

from .auth import SessionAuthService, SessionToken
from .metadata import DuckDBMetadataStore, MetadataStore
from .photos import ImageResponse, PhotoService
from .reconciliation import ReconciliationReport, Reconciler
from .storage import BlobStore, GCSBlobStore, LocalBlobStore, StoredObject, guess_content_type

__all__ = [
    "SessionAuthService",
    "SessionToken",
    "PhotoService",
    "ImageResponse",
    "Reconciler",
    "ReconciliationReport",
    "MetadataStore",
    "DuckDBMetadataStore",
    "BlobStore",
    "GCSBlobStore",
    "LocalBlobStore",
    "StoredObject",
    "guess_content_type",
]
