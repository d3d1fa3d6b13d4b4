"""
HTTP layer for photogallery.

- create_app: FastAPI application factory (routing, CORS, error envelope)
- create_stores: Build the metadata and blob stores from configuration
"""

from .app import CORS_HEADERS, create_app, create_stores

__all__ = ["CORS_HEADERS", "create_app", "create_stores"]
