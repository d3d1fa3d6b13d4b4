"""HTTP routes of the gallery: JSON API, image delivery and HTML pages."""

import json
from importlib import resources

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from ..errors import ValidationError
from ..health import perform_health_check
from ..logging_config import get_logger
from ..models.photo import ImageVariant
from ..models.schemas import PhotoUpdate
from ..services.auth import SessionAuthService
from ..services.photos import PhotoService
from .deps import get_auth_service, get_photo_service, require_session, session_token

logger = get_logger(__name__)

api_router = APIRouter(prefix="/api")
image_router = APIRouter(prefix="/images")
page_router = APIRouter()


def _load_page(name: str) -> str:
    return resources.files("photogallery").joinpath("templates", name).read_text(encoding="utf-8")


# Photos


@api_router.get("/photos")
def list_photos(photo_service: PhotoService = Depends(get_photo_service)) -> JSONResponse:
    photos = photo_service.list_photos()
    return JSONResponse([photo.to_dict() for photo in photos])


@api_router.post("/photos", dependencies=[Depends(require_session)])
async def upload_photo(
    file: UploadFile | None = File(None),
    title: str | None = Form(None),
    description: str | None = Form(None),
    photo_service: PhotoService = Depends(get_photo_service),
) -> JSONResponse:
    if file is None:
        raise ValidationError("No file uploaded", code="missing_file")

    content = await file.read()
    record = photo_service.upload_photo(
        content,
        file.content_type,
        file.filename or "",
        title=title,
        description=description,
    )
    return JSONResponse(
        {"success": True, "photoId": record.id, "metadata": record.to_dict(include_id=False)},
        status_code=201,
    )


@api_router.put("/photos/{photo_id}", dependencies=[Depends(require_session)])
async def update_photo(
    photo_id: str,
    request: Request,
    photo_service: PhotoService = Depends(get_photo_service),
) -> JSONResponse:
    try:
        body = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Request body must be valid JSON", code="malformed_body", original_exception=e) from e

    record = photo_service.update_photo(photo_id, PhotoUpdate.parse_body(body))
    return JSONResponse({"success": True, "metadata": record.to_dict(include_id=False)})


@api_router.delete("/photos/{photo_id}", dependencies=[Depends(require_session)])
def delete_photo(photo_id: str, photo_service: PhotoService = Depends(get_photo_service)) -> JSONResponse:
    photo_service.delete_photo(photo_id)
    return JSONResponse({"success": True})


# Session


@api_router.post("/login")
def login(
    password: str | None = Form(None),
    auth_service: SessionAuthService = Depends(get_auth_service),
) -> JSONResponse:
    token = auth_service.login(password)
    response = JSONResponse({"success": True})
    cookie = auth_service.cookie
    response.set_cookie(
        cookie.name,
        token.value,
        max_age=token.max_age,
        path=cookie.path,
        httponly=cookie.httponly,
        secure=cookie.secure,
        samesite=cookie.samesite,
    )
    return response


@api_router.post("/logout")
def logout(auth_service: SessionAuthService = Depends(get_auth_service)) -> JSONResponse:
    auth_service.logout()
    response = JSONResponse({"success": True})
    cookie = auth_service.cookie
    response.set_cookie(
        cookie.name,
        "",
        max_age=0,
        path=cookie.path,
        httponly=cookie.httponly,
        secure=cookie.secure,
        samesite=cookie.samesite,
    )
    return response


# Images


@image_router.get("/{image_path:path}")
def get_image(
    image_path: str,
    size: str | None = None,
    photo_service: PhotoService = Depends(get_photo_service),
) -> Response:
    # /images/<prefix>/<fileName>: the prefix is informational, the original is always read.
    parts = [part for part in image_path.split("/") if part]
    if len(parts) < 2:
        raise ValidationError("Invalid image path", code="invalid_image_path")

    image = photo_service.get_image(parts[1], ImageVariant.from_query(size))
    return Response(content=image.data, media_type=image.content_type, headers=image.headers)


# Pages


@page_router.get("/", response_class=HTMLResponse)
@page_router.get("/index.html", response_class=HTMLResponse)
def home_page() -> HTMLResponse:
    return HTMLResponse(_load_page("index.html"))


@page_router.get("/admin/login", response_class=HTMLResponse)
def login_page() -> HTMLResponse:
    return HTMLResponse(_load_page("login.html"))


@page_router.get("/admin", response_class=HTMLResponse)
def admin_page(request: Request, auth_service: SessionAuthService = Depends(get_auth_service)) -> Response:
    if not auth_service.is_authorized(session_token(request)):
        return RedirectResponse("/admin/login", status_code=302)
    return HTMLResponse(_load_page("admin.html"))


@page_router.get("/health")
def health(photo_service: PhotoService = Depends(get_photo_service)) -> JSONResponse:
    result = perform_health_check(photo_service.metadata_store, photo_service.blob_store)
    return JSONResponse(result, status_code=200 if result["status"] == "healthy" else 503)
