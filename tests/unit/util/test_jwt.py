"""Unit tests for JWT utilities and JWTService."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from murmur.config import AuthSettings
from murmur.domain.service import JWTService
from murmur.util.error import TokenError
from murmur.util.jwt import create_token, verify_token


@pytest.fixture
def settings() -> AuthSettings:
    return AuthSettings(jwt_secret="test-secret")


class TestTokens:
    """Tests for create_token and verify_token."""

    def test_token_carries_author_info(self, settings):
        token = create_token("u1", "Ada", settings, image="https://x/ada.png")

        payload = verify_token(token, settings)

        assert payload.user_id == "u1"
        assert payload.name == "Ada"
        assert payload.image == "https://x/ada.png"
        assert payload.exp > datetime.now(timezone.utc)

    def test_wrong_secret_rejected(self, settings):
        token = create_token("u1", "Ada", settings)

        with pytest.raises(TokenError, match="Invalid"):
            verify_token(token, AuthSettings(jwt_secret="other"))

    def test_expired_token_rejected(self, settings):
        token = jwt.encode(
            {
                "user_id": "u1",
                "name": "Ada",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(TokenError, match="expired"):
            verify_token(token, settings)


class TestJWTService:
    """Tests for JWTService."""

    def test_round_trip(self, settings):
        service = JWTService(settings)

        payload = service.verify_token(service.create_token("u1", "Ada"))

        assert payload.user_id == "u1"

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_missing_or_invalid_token_is_anonymous(self, settings, token):
        assert JWTService(settings).get_payload_from_token(token) is None
