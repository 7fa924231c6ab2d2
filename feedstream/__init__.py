"""Python client for the feedstream activity feed API."""

__version__ = "0.1.0"

from feedstream.client import FeedStreamClient  # noqa: E402
from feedstream.core.exceptions import (  # noqa: E402
    AuthorizationError,
    ConfigurationError,
    FeedStreamError,
    RemoteAPIError,
    ValidationError,
)
from feedstream.schemas.activity import ByForeignId, ById, FollowRelation, TargetUpdate  # noqa: E402
from feedstream.schemas.identity import FeedIdentity, make_feed_identity  # noqa: E402
from feedstream.services.feed import Feed  # noqa: E402

__all__ = [
    "__version__",
    "AuthorizationError",
    "ByForeignId",
    "ById",
    "ConfigurationError",
    "Feed",
    "FeedIdentity",
    "FeedStreamClient",
    "FeedStreamError",
    "FollowRelation",
    "RemoteAPIError",
    "TargetUpdate",
    "ValidationError",
    "make_feed_identity",
]
