from collections.abc import Awaitable, Mapping

import httpx
import structlog

from feedstream.config import settings
from feedstream.core.exceptions import ConfigurationError
from feedstream.core.references import CollectionEntry, UserReference
from feedstream.schemas.activity import FollowRelation
from feedstream.schemas.identity import FeedIdentity, make_feed_identity
from feedstream.services.batch import BatchOperations
from feedstream.services.feed import Feed
from feedstream.services.realtime import PubSub, SubscriptionManager, SubscriptionRegistry
from feedstream.services.token_service import TokenService
from feedstream.services.transport.base import Transport
from feedstream.services.transport.http_client import HTTPTransport

logger = structlog.get_logger()


class FeedStreamClient:
    """Entry point: builds feeds and runs cross-feed operations.

    With ``api_secret`` the client runs in server mode and can sign feed
    tokens itself; without it every feed needs an explicit token (or the
    client's ``user_token``) and batch operations are unavailable.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        app_id: str | None = None,
        *,
        user_token: str | None = None,
        base_url: str | None = None,
        api_version: str | None = None,
        transport: Transport | None = None,
        pubsub: PubSub | None = None,
        http_client: httpx.AsyncClient | None = None,
        enrich_by_default: bool = False,
    ):
        self.api_key = api_key or settings.feedstream_api_key
        if not self.api_key:
            raise ConfigurationError("Missing API key, pass api_key or set FEEDSTREAM_API_KEY")
        api_secret = api_secret or settings.feedstream_api_secret
        self.app_id = app_id or settings.feedstream_app_id
        self.user_token = user_token
        self.enrich_by_default = enrich_by_default
        self.current_user: UserReference | None = None

        if transport is None:
            if http_client is None:
                http_client = httpx.AsyncClient(
                    timeout=httpx.Timeout(
                        connect=settings.feedstream_http_connect_timeout,
                        read=settings.feedstream_http_read_timeout,
                        write=5.0,
                        pool=5.0,
                    )
                )
            transport = HTTPTransport(
                api_key=self.api_key,
                base_url=base_url or settings.feedstream_base_url,
                api_version=api_version or settings.feedstream_api_version,
                http_client=http_client,
            )
        self.transport = transport

        self.tokens = TokenService(api_secret) if api_secret else None
        self.subscriptions = SubscriptionRegistry()
        self.realtime = SubscriptionManager(self.subscriptions, pubsub=pubsub, app_id=self.app_id)
        self.batch = BatchOperations(self.transport, self.tokens)

    @property
    def using_api_secret(self) -> bool:
        return self.tokens is not None

    async def __aenter__(self) -> "FeedStreamClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Cancel live subscriptions and close the transport."""
        cancelled = self.realtime.unsubscribe_all()
        if cancelled:
            logger.info("subscriptions_cancelled", count=cancelled)
        await self.transport.close()

    # ── Feeds & users ────────────────────────────────────────────────────────

    def feed(self, slug: str, user_id: str | int | UserReference, token: str | None = None) -> Feed:
        """Return the feed ``slug:user_id``.

        Without ``token`` a feed token is signed with the API secret, or the
        client's user token is used in client-side mode.
        """
        identity = make_feed_identity(slug, user_id)
        if token is None:
            token = self.tokens.create_feed_token(identity) if self.tokens else self.user_token

        return Feed(
            self.transport,
            identity,
            token,
            realtime=self.realtime,
            current_user=lambda: self.current_user,
            enrich_by_default=self.enrich_by_default,
        )

    def user(self, user_id: str) -> UserReference:
        if not user_id:
            raise ConfigurationError("Missing user id")
        return UserReference(user_id)

    def set_user(self, user_id: str) -> UserReference:
        """Make ``user_id`` the default actor for activities added through this client."""
        self.current_user = self.user(user_id)
        return self.current_user

    def collection_entry(self, collection: str, entry_id: str) -> CollectionEntry:
        return CollectionEntry(collection, entry_id)

    def create_user_token(self, user_id: str, extra: dict | None = None) -> str:
        if self.tokens is None:
            raise ConfigurationError("Missing API secret, user tokens can only be created server side")
        return self.tokens.create_user_token(user_id, extra)

    # ── Batch operations ─────────────────────────────────────────────────────

    def add_to_many(self, activity: Mapping, feed_ids: list[str | FeedIdentity]) -> Awaitable[dict]:
        return self.batch.add_to_many(activity, feed_ids)

    def follow_many(
        self, relations: list[FollowRelation | Mapping], activity_copy_limit: int | None = None
    ) -> Awaitable[dict]:
        return self.batch.follow_many(relations, activity_copy_limit)

    def unfollow_many(self, relations: list[FollowRelation | Mapping]) -> Awaitable[dict]:
        return self.batch.unfollow_many(relations)
