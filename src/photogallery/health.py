"""
Health check functionality for photogallery.

Checks that both stores the photo service depends on are reachable.
"""

import time
from typing import Any

from . import __version__
from .logging_config import get_logger
from .services.metadata import MetadataStore
from .services.storage import BlobStore

logger = get_logger(__name__)


def check_metadata_health(metadata_store: MetadataStore) -> dict[str, Any]:
    """Check metadata store connectivity."""
    try:
        metadata_store.ping()
        return {"status": "healthy", "message": "Metadata store reachable", "timestamp": time.time()}
    except Exception as e:
        logger.error("metadata_health_check_failed", error=str(e))
        return {"status": "unhealthy", "message": f"Metadata store check failed: {e}", "timestamp": time.time()}


def check_storage_health(blob_store: BlobStore) -> dict[str, Any]:
    """Check blob store connectivity."""
    try:
        blob_store.ping()
        return {"status": "healthy", "message": "Blob store reachable", "timestamp": time.time()}
    except Exception as e:
        logger.error("storage_health_check_failed", error=str(e))
        return {"status": "unhealthy", "message": f"Blob store check failed: {e}", "timestamp": time.time()}


def perform_health_check(metadata_store: MetadataStore, blob_store: BlobStore) -> dict[str, Any]:
    """Perform a health check of both stores."""
    start_time = time.time()

    checks = {
        "metadata": check_metadata_health(metadata_store),
        "storage": check_storage_health(blob_store),
    }

    unhealthy_services = [name for name, result in checks.items() if result["status"] != "healthy"]
    overall_status = "unhealthy" if unhealthy_services else "healthy"

    health_response: dict[str, Any] = {
        "status": overall_status,
        "version": __version__,
        "timestamp": time.time(),
        "duration_ms": round((time.time() - start_time) * 1000, 2),
        "checks": checks,
    }
    if unhealthy_services:
        health_response["unhealthy_services"] = unhealthy_services

    logger.info(
        "health_check_completed",
        status=overall_status,
        duration_ms=health_response["duration_ms"],
        unhealthy_services=unhealthy_services,
    )
    return health_response
