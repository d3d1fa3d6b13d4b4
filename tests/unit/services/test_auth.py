"""
Unit tests for session authentication.
"""

import pytest

from photogallery.errors import AuthenticationError
from photogallery.services.auth import SessionAuthService


class ManualClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestSessionAuthService:
    """Test cases for SessionAuthService."""

    @pytest.fixture
    def manual_clock(self):
        return ManualClock()

    @pytest.fixture
    def service(self, gallery_config, manual_clock):
        return SessionAuthService(gallery_config, clock=manual_clock)

    def test_login_with_correct_password(self, service, gallery_config, manual_clock):
        token = service.login(gallery_config.admin_password)

        assert token.max_age == 86400
        assert token.expires_at == int(manual_clock.now) + 86400
        assert service.is_authorized(token.value) is True

    @pytest.mark.parametrize("password", ["wrong", "", None])
    def test_login_rejects_bad_password(self, service, password):
        with pytest.raises(AuthenticationError) as exc_info:
            service.login(password)

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == "invalid_credentials"

    def test_tokens_are_unique(self, service):
        assert service.issue_token().value != service.issue_token().value

    def test_token_format(self, service):
        nonce, expires_at, signature = service.issue_token().value.split(".")

        assert nonce
        assert expires_at.isdigit()
        assert "=" not in signature

    @pytest.mark.parametrize(
        "token",
        [
            None,
            "",
            "garbage",
            "a.b",
            "a.b.c.d",
            "a.notanumber.c",
            ".123.sig",
            "\xe9.123.sig",
            "a.\xb2.sig",
            "a.\u0661\u0662\u0663.sig",
            "a.123.sig\xe9",
        ],
    )
    def test_malformed_tokens(self, service, token):
        assert service.is_authorized(token) is False

    def test_tampered_expiry_is_rejected(self, service):
        nonce, expires_at, signature = service.issue_token().value.split(".")
        tampered = f"{nonce}.{int(expires_at) + 1000}.{signature}"

        assert service.is_authorized(tampered) is False

    def test_tampered_signature_is_rejected(self, service):
        value = service.issue_token().value
        flipped = value[:-1] + ("A" if value[-1] != "A" else "B")

        assert service.is_authorized(flipped) is False

    def test_token_from_another_secret_is_rejected(self, service, test_data_factory, tmp_path):
        other = SessionAuthService(test_data_factory.create_config(tmp_path, session_secret="other-secret"))

        assert service.is_authorized(other.issue_token().value) is False

    def test_expired_token(self, service, manual_clock):
        token = service.issue_token()

        manual_clock.now += 86400 - 1
        assert service.is_authorized(token.value) is True

        manual_clock.now += 1
        assert service.is_authorized(token.value) is False

    def test_custom_max_age(self, test_data_factory, tmp_path, manual_clock):
        service = SessionAuthService(test_data_factory.create_config(tmp_path, session_max_age=60), clock=manual_clock)

        token = service.issue_token()

        assert token.max_age == 60
        manual_clock.now += 60
        assert service.is_authorized(token.value) is False

    def test_require_session(self, service):
        service.require_session(service.issue_token().value)

        with pytest.raises(AuthenticationError) as exc_info:
            service.require_session(None)

        assert exc_info.value.message == "Unauthorized"
        assert exc_info.value.code == "session_invalid"

    def test_cookie_attributes(self, service):
        assert service.cookie.name == "session"
        assert service.cookie.path == "/"
        assert service.cookie.httponly is True
        assert service.cookie.secure is True
        assert service.cookie.samesite == "strict"

    def test_logout_does_not_raise(self, service):
        service.logout()
