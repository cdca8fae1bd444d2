"""JWT token domain service."""

import logfire

from murmur.config import AuthSettings
from murmur.util.error import TokenError
from murmur.util.jwt import TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for JWT token operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, user_id: str, name: str, image: str | None = None) -> str:
        """Create JWT token for user.

        Args:
            user_id: User ID
            name: Display name
            image: Avatar URL

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", user_id=user_id):
            token = create_token(user_id, name, self.auth_settings, image=image)
            logfire.info("JWT token created", user_id=user_id)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            TokenError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info("JWT token verified", user_id=payload.user_id)
                return payload
            except TokenError as e:
                logfire.error("JWT token verification failed", error=str(e))
                raise

    def get_payload_from_token(self, token: str | None) -> TokenPayload | None:
        """Extract the token payload without raising exceptions.

        Args:
            token: JWT token string (optional)

        Returns:
            Payload if token is valid, None if token is missing or invalid
        """
        if not token:
            return None

        try:
            return self.verify_token(token)
        except (TokenError, ValueError) as e:
            # Invalid or expired token, treat as unauthenticated
            logfire.debug(
                "JWT verification failed, treating as unauthenticated", error=str(e)
            )
            return None
