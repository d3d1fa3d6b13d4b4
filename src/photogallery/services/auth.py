"""Authentication service for the gallery admin surface."""

import base64
import hashlib
import hmac
import re
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..config import GalleryConfig
from ..errors import AuthenticationError
from ..logging_config import get_logger, log_security_event, log_user_action

logger = get_logger(__name__)

ADMIN_USER = "admin"


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


@dataclass(frozen=True)
class SessionCookie:
    """Attributes of the session cookie set on login and cleared on logout."""

    name: str = "session"
    path: str = "/"
    httponly: bool = True
    secure: bool = True
    samesite: str = "strict"


@dataclass(frozen=True)
class SessionToken:
    """A signed session credential."""

    value: str
    expires_at: int
    max_age: int


class SessionAuthService:
    """
    Password login and signed session tokens for the single admin.

    A token is ``<nonce>.<expires_at>.<signature>``: a random nonce, the
    expiry as a unix timestamp, and an HMAC-SHA256 over the first two parts
    keyed by the configured session secret.
    """

    cookie = SessionCookie()

    def __init__(self, config: GalleryConfig, clock: Callable[[], float] = time.time) -> None:
        """
        Initialize the authentication service.

        Args:
            config: Gallery configuration holding the admin password and session secret
            clock: Source of the current unix time
        """
        self._password = config.admin_password.encode("utf-8")
        self._secret = config.session_secret.encode("utf-8")
        self.max_age = config.session_max_age
        self._clock = clock

        if config.is_development:
            logger.info("development_auth_mode_enabled", environment=config.environment)

    def _sign(self, payload: str) -> str:
        digest = hmac.new(self._secret, payload.encode("ascii"), hashlib.sha256).digest()
        return _b64encode(digest)

    def issue_token(self) -> SessionToken:
        """Create a new signed session token."""
        expires_at = int(self._clock()) + self.max_age
        payload = f"{_b64encode(secrets.token_bytes(16))}.{expires_at}"
        return SessionToken(value=f"{payload}.{self._sign(payload)}", expires_at=expires_at, max_age=self.max_age)

    def login(self, supplied_password: str | None) -> SessionToken:
        """
        Exchange the admin password for a session token.

        Args:
            supplied_password: Password from the login form

        Returns:
            SessionToken: Token to set as the session cookie

        Raises:
            AuthenticationError: If the password is missing or wrong
        """
        supplied = (supplied_password or "").encode("utf-8")
        if not supplied or not hmac.compare_digest(supplied, self._password):
            raise AuthenticationError("Invalid password", code="invalid_credentials")

        token = self.issue_token()
        log_user_action(ADMIN_USER, "login", expires_at=token.expires_at)
        return token

    def logout(self) -> None:
        """Record a logout; the caller clears the cookie."""
        log_user_action(ADMIN_USER, "logout")

    def is_authorized(self, token: str | None) -> bool:
        """
        Check a session token.

        Args:
            token: Value of the session cookie, if any

        Returns:
            bool: True if the token is well formed, correctly signed and unexpired
        """
        if not token:
            return False

        parts = token.split(".")
        if not token.isascii() or len(parts) != 3:
            log_security_event("malformed_session_token")
            return False

        nonce, expires_raw, signature = parts
        if not nonce or not re.fullmatch(r"[0-9]+", expires_raw):
            log_security_event("malformed_session_token")
            return False

        expected = self._sign(f"{nonce}.{expires_raw}")
        if not hmac.compare_digest(signature.encode("ascii"), expected.encode("ascii")):
            log_security_event("invalid_session_signature")
            return False

        if int(expires_raw) <= self._clock():
            log_security_event("expired_session_token", expires_at=int(expires_raw))
            return False

        return True

    def require_session(self, token: str | None) -> None:
        """
        Ensure the request carries a valid session.

        Raises:
            AuthenticationError: If the session is missing or invalid
        """
        if not self.is_authorized(token):
            raise AuthenticationError("Unauthorized", code="session_invalid")
