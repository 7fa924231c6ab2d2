"""Real-time feed updates over the pub/sub transport.

Every feed has one notification channel per application. Subscriptions are
tracked per client in a ``SubscriptionRegistry`` keyed by channel, so a feed
can be unsubscribed later without holding on to the transport handle.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from feedstream.core.exceptions import ConfigurationError
from feedstream.core.security import FeedCredential
from feedstream.schemas.identity import FeedIdentity

logger = structlog.get_logger()

MessageCallback = Callable[[dict], Any]


class SubscriptionHandle(Protocol):
    def cancel(self) -> None: ...


class PubSub(ABC):
    @abstractmethod
    def subscribe(self, channel: str, callback: MessageCallback) -> SubscriptionHandle:
        """Start delivering messages published on ``channel`` to ``callback``."""
        ...


def notification_channel(app_id: str, identity: FeedIdentity) -> str:
    return f"site-{app_id}-feed-{identity.flat_id}"


@dataclass
class Subscription:
    channel: str
    token: str = field(repr=False)
    handle: SubscriptionHandle
    owner: FeedIdentity


class SubscriptionRegistry:
    """Live subscriptions of one client, at most one per channel."""

    def __init__(self):
        self._entries: dict[str, Subscription] = {}

    def get(self, channel: str) -> Subscription | None:
        return self._entries.get(channel)

    def add(self, subscription: Subscription) -> None:
        self._entries[subscription.channel] = subscription

    def pop(self, channel: str) -> Subscription | None:
        return self._entries.pop(channel, None)

    def channels(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, channel: object) -> bool:
        return channel in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Subscription]:
        return iter(list(self._entries.values()))


class SubscriptionManager:
    def __init__(self, registry: SubscriptionRegistry, pubsub: PubSub | None = None, app_id: str | None = None):
        self.registry = registry
        self.pubsub = pubsub
        self.app_id = app_id

    def subscribe(self, credential: FeedCredential, callback: MessageCallback) -> SubscriptionHandle:
        if not self.app_id:
            raise ConfigurationError(
                "Missing app id, which is needed to subscribe, use FeedStreamClient(api_key, api_secret, app_id)"
            )
        if self.pubsub is None:
            raise ConfigurationError("No pub/sub transport configured, pass pubsub= to the client to subscribe")

        channel = notification_channel(self.app_id, credential.feed_id)
        previous = self.registry.pop(channel)
        if previous is not None:
            logger.info("subscription_replaced", channel=channel)
            previous.handle.cancel()

        handle = self.pubsub.subscribe(channel, callback)
        self.registry.add(
            Subscription(channel=channel, token=credential.token, handle=handle, owner=credential.feed_id)
        )
        logger.info("feed_subscribed", channel=channel, feed_id=credential.feed_id.id)
        return handle

    def unsubscribe(self, identity: FeedIdentity) -> bool:
        """Cancel the feed's subscription. Returns False if there was none."""
        if not self.app_id:
            return False
        channel = notification_channel(self.app_id, identity)
        # Entry goes before the cancel: a re-entrant unsubscribe from a callback finds nothing
        subscription = self.registry.pop(channel)
        if subscription is None:
            return False
        subscription.handle.cancel()
        logger.info("feed_unsubscribed", channel=channel, feed_id=identity.id)
        return True

    def unsubscribe_all(self) -> int:
        count = 0
        for subscription in self.registry:
            if self.unsubscribe(subscription.owner):
                count += 1
        return count
