"""FastAPI dependencies shared by the route handlers."""

from fastapi import Request

from ..services.auth import SessionAuthService
from ..services.photos import PhotoService


def get_photo_service(request: Request) -> PhotoService:
    return request.app.state.photo_service


def get_auth_service(request: Request) -> SessionAuthService:
    return request.app.state.auth_service


def session_token(request: Request) -> str | None:
    """Session token from the request cookie, if any."""
    auth_service = get_auth_service(request)
    return request.cookies.get(auth_service.cookie.name)


def require_session(request: Request) -> None:
    """
    Gate for mutating API routes.

    Raises:
        AuthenticationError: If the request has no valid session cookie
    """
    get_auth_service(request).require_session(session_token(request))
