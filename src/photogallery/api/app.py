"""
FastAPI application factory.

The application applies CORS headers to every response, answers preflight
requests directly, maps ``GalleryError`` subclasses to their HTTP status with a
``{"error": message}`` body, and turns any other exception into a 500 carrying
the exception message.
"""

import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import GalleryConfig
from ..errors import GalleryError, ValidationError
from ..logging_config import get_logger, log_error
from ..services.auth import SessionAuthService
from ..services.metadata import DuckDBMetadataStore, MetadataStore
from ..services.photos import PhotoService
from ..services.storage import BlobStore, GCSBlobStore, LocalBlobStore
from .routes import api_router, image_router, page_router

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def create_stores(config: GalleryConfig) -> tuple[MetadataStore, BlobStore]:
    """
    Build the metadata and blob stores named by the configuration.

    Returns:
        tuple: (metadata store, blob store)
    """
    metadata_store = DuckDBMetadataStore(config.metadata_db_path)
    if config.blob_backend == "gcs":
        blob_store: BlobStore = GCSBlobStore(config.gcs_bucket or "", project_id=config.gcs_project)
    else:
        blob_store = LocalBlobStore(config.local_storage_dir)
    return metadata_store, blob_store


async def gallery_error_handler(request: Request, exc: GalleryError) -> JSONResponse:
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError("Invalid request", code="invalid_request", details={"errors": str(exc.errors())})
    return JSONResponse(error.to_dict(), status_code=error.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # Unknown paths and unsupported methods both answer like the catch-all route.
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404)
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


def create_app(
    config: GalleryConfig,
    photo_service: PhotoService | None = None,
    auth_service: SessionAuthService | None = None,
) -> FastAPI:
    """
    Create the gallery application.

    Args:
        config: Gallery configuration
        photo_service: Photo service to use (built from the configuration if omitted)
        auth_service: Authentication service to use (built from the configuration if omitted)

    Returns:
        FastAPI: Configured application
    """
    if photo_service is None:
        photo_service = PhotoService(*create_stores(config))
    if auth_service is None:
        auth_service = SessionAuthService(config)

    app = FastAPI(
        title="photogallery",
        version=__version__,
        docs_url="/api/docs" if config.is_development else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if config.is_development else None,
    )
    app.state.config = config
    app.state.photo_service = photo_service
    app.state.auth_service = auth_service

    app.add_exception_handler(GalleryError, gallery_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]

    @app.middleware("http")
    async def cors_and_error_boundary(request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            log_error(e, {"operation": "request", "method": request.method, "path": request.url.path})
            response = JSONResponse({"error": str(e)}, status_code=500)

        response.headers.update(CORS_HEADERS)
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response

    app.include_router(api_router)
    app.include_router(image_router)
    app.include_router(page_router)

    logger.info("application_created", environment=config.environment, blob_backend=config.blob_backend)
    return app
