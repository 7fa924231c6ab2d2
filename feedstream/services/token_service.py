import datetime

import jwt
import structlog

from feedstream.core.exceptions import ConfigurationError
from feedstream.schemas.identity import FeedIdentity

logger = structlog.get_logger()


class TokenService:
    """Create and validate JWT tokens signed with the API secret."""

    def __init__(self, api_secret: str, algorithm: str = "HS256"):
        if not api_secret:
            raise ConfigurationError("Missing API secret, tokens can only be created server side")
        self._secret_key = api_secret
        self._algorithm = algorithm

    def create_scope_token(
        self,
        resource: str,
        action: str,
        feed_id: str | None = None,
        user_id: str | None = None,
        expires_in: int | None = None,
    ) -> str:
        """Create a token scoped to a resource/action pair, optionally a single feed or user."""
        payload = {"resource": resource, "action": action}
        if feed_id is not None:
            payload["feed_id"] = feed_id
        if user_id is not None:
            payload["user_id"] = user_id
        if expires_in is not None:
            payload["exp"] = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(seconds=expires_in)
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def create_feed_token(self, identity: FeedIdentity) -> str:
        return self.create_scope_token("*", "*", feed_id=identity.flat_id)

    def create_server_token(self) -> str:
        """The elevated credential used for cross-feed operations."""
        return self.create_scope_token("*", "*", feed_id="*")

    def create_user_token(self, user_id: str, extra: dict | None = None, expires_in: int | None = None) -> str:
        now = datetime.datetime.now(datetime.timezone.utc)
        payload = {**(extra or {}), "user_id": user_id, "iat": now}
        if expires_in is not None:
            payload["exp"] = now + datetime.timedelta(seconds=expires_in)
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> dict | None:
        """Decode and validate a JWT. Returns claims dict or None if invalid/expired."""
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            logger.debug("jwt_expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.debug("jwt_invalid", error=str(e))
            return None
