"""JWT token utilities."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from murmur.config import AuthSettings
from murmur.util.error import TokenError


class TokenPayload(BaseModel):
    """JWT token payload.

    Carries the author display info that is denormalized onto comments.
    """

    user_id: str
    name: str
    image: str | None = None
    exp: datetime


def create_token(
    user_id: str, name: str, settings: AuthSettings, image: str | None = None
) -> str:
    """Create a JWT token for the user.

    Args:
        user_id: User ID
        name: Display name
        settings: Authentication settings
        image: Avatar URL

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiry_days)

    payload = {
        "user_id": user_id,
        "name": name,
        "image": image,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        TokenError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError:
        raise TokenError("Invalid token")
