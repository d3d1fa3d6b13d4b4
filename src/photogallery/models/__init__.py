"""
Models module for photogallery.

This module contains data models and schemas:
- PhotoRecord: Data class for photo metadata
- ImageVariant: Requestable renderings of an image
- PhotoUpdate: Validated body of an update request
- DatabaseManager: DuckDB connection and schema management
"""

from .database import DatabaseManager, create_database
from .photo import ImageVariant, PhotoRecord, derive_file_name, original_key, thumbnail_key
from .schemas import PhotoUpdate

__all__ = [
    "PhotoRecord",
    "ImageVariant",
    "PhotoUpdate",
    "DatabaseManager",
    "create_database",
    "derive_file_name",
    "original_key",
    "thumbnail_key",
]
