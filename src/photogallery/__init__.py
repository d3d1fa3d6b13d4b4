"""
photogallery - Single-tenant photo gallery service with FastAPI

A small web service for publishing a personal photo collection:
- Photo upload with title/description metadata
- Originals stored in Google Cloud Storage (or a local directory in development)
- Metadata kept as JSON records in a DuckDB key-value table
- Resize-on-read variants through CDN image hints
- Password-protected admin surface with signed session cookies
"""

__version__ = "0.1.0"
__author__ = "photogallery"
__description__ = "Single-tenant photo gallery service with FastAPI"
