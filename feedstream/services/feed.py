from collections.abc import Awaitable, Callable, Mapping

from feedstream.core.exceptions import ConfigurationError, ValidationError
from feedstream.core.references import UserReference, replace_references
from feedstream.core.security import FeedCredential
from feedstream.core.validation import coerce_model, option_fields
from feedstream.schemas.activity import ActivityRef, ByForeignId, ById, TargetUpdate
from feedstream.schemas.identity import FeedIdentity, make_feed_identity
from feedstream.schemas.options import FollowListOptions, FollowOptions, GetOptions, UnfollowOptions
from feedstream.services.reactions import replace_reaction_options, should_use_enrich_endpoint
from feedstream.services.realtime import MessageCallback, SubscriptionHandle, SubscriptionManager
from feedstream.services.transport.base import Transport


class Feed:
    """API calls for one feed, signed with that feed's token.

    Every request method validates its input and returns an awaitable for the
    transport call. Bad input raises right away, before anything is sent.
    """

    def __init__(
        self,
        transport: Transport,
        identity: FeedIdentity,
        token: str,
        realtime: SubscriptionManager | None = None,
        current_user: Callable[[], UserReference | None] | None = None,
        enrich_by_default: bool = False,
    ):
        if not isinstance(identity, FeedIdentity):
            raise ConfigurationError("Feeds are built from a FeedIdentity, use make_feed_identity(slug, user_id)")
        self.transport = transport
        self.credential = FeedCredential(feed_id=identity, token=token)
        self.realtime = realtime
        self.enrich_by_default = enrich_by_default
        self._current_user = current_user or (lambda: None)

    @property
    def identity(self) -> FeedIdentity:
        return self.credential.feed_id

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def signature(self) -> str:
        return self.credential.signature

    def __repr__(self) -> str:
        return f"Feed({self.id!r})"

    # ── Activities ───────────────────────────────────────────────────────────

    def add_activity(self, activity: Mapping) -> Awaitable[dict]:
        """Add one activity, defaulting ``actor`` to the client's current user."""
        if not isinstance(activity, Mapping):
            raise ValidationError("Activity must be a mapping", details={"type": type(activity).__name__})
        activity = replace_references(dict(activity))
        if not activity.get("actor"):
            user = self._current_user()
            if user is not None:
                activity["actor"] = user.ref()

        return self.transport.post(
            url=f"feed/{self.identity.path_id}/",
            body=activity,
            signature=self.signature,
        )

    def add_activities(self, activities: list[Mapping]) -> Awaitable[dict]:
        if not isinstance(activities, (list, tuple)) or not all(isinstance(a, Mapping) for a in activities):
            raise ValidationError("Activities must be a list of mappings")
        return self.transport.post(
            url=f"feed/{self.identity.path_id}/",
            body={"activities": replace_references(list(activities))},
            signature=self.signature,
        )

    def remove_activity(self, activity: ActivityRef | str) -> Awaitable[dict]:
        """Remove an activity by id, or by foreign id with ``ByForeignId``."""
        if isinstance(activity, str):
            activity = coerce_model(ById, activity_id=activity)

        if isinstance(activity, ByForeignId):
            key, qs = activity.foreign_id, {"foreign_id": "1"}
        elif isinstance(activity, ById):
            key, qs = activity.activity_id, {}
        else:
            raise ValidationError("Expected an activity id, ById or ByForeignId")

        return self.transport.delete(
            url=f"feed/{self.identity.path_id}/{key}/",
            qs=qs,
            signature=self.signature,
        )

    def update_activity_to_targets(
        self,
        foreign_id: str,
        time,
        new_targets: list[str] | None = None,
        added_targets: list[str] | None = None,
        removed_targets: list[str] | None = None,
    ) -> Awaitable[dict]:
        """Change an activity's "to" targets.

        ``new_targets`` replaces the target list and can't be combined with
        ``added_targets``/``removed_targets``, which must not overlap.
        """
        update = coerce_model(
            TargetUpdate,
            foreign_id=foreign_id,
            time=time,
            new_targets=new_targets,
            added_targets=added_targets,
            removed_targets=removed_targets,
        )
        return self.transport.post(
            url=f"feed_targets/{self.identity.path_id}/activity_to_targets/",
            body=update.to_payload(),
            signature=self.signature,
        )

    # ── Reading ──────────────────────────────────────────────────────────────

    def get(self, options: GetOptions | Mapping | None = None, **kwargs) -> Awaitable[dict]:
        """Read the feed.

        Lists given for ``mark_read``/``mark_seen`` are sent comma joined.
        Any reaction flag (or ``enrich=True``) switches to the enriched
        endpoint.
        """
        opts = replace_reaction_options(coerce_model(GetOptions, options, **kwargs))
        prefix = "enrich/feed/" if should_use_enrich_endpoint(opts, self.enrich_by_default) else "feed/"

        return self.transport.get(
            url=f"{prefix}{self.identity.path_id}/",
            qs=opts.to_query(),
            signature=self.signature,
        )

    def get_activity_detail(
        self, activity_id: str, options: GetOptions | Mapping | None = None, **kwargs
    ) -> Awaitable[dict]:
        if not activity_id:
            raise ValidationError("Missing activity id")
        merged = {
            "id_lte": activity_id,
            "id_gte": activity_id,
            "limit": 1,
            **option_fields(options),
            **kwargs,
        }
        return self.get(**merged)

    # ── Follow graph ─────────────────────────────────────────────────────────

    def follow(
        self,
        target: "str | FeedIdentity | Feed",
        target_user_id: str | UserReference | None = None,
        options: FollowOptions | Mapping | None = None,
        **kwargs,
    ) -> Awaitable[dict]:
        """Follow another feed, given as slug and user id, an identity or a Feed.

        ``limit`` caps how many of the target's activities are copied over.
        """
        target_id = _resolve_target(target, target_user_id)
        opts = coerce_model(FollowOptions, options, **kwargs)

        body = {"target": target_id.id}
        if opts.limit is not None:
            body["activity_copy_limit"] = opts.limit

        return self.transport.post(
            url=f"feed/{self.identity.path_id}/following/",
            body=body,
            signature=self.signature,
        )

    def unfollow(
        self,
        target: "str | FeedIdentity | Feed",
        target_user_id: str | UserReference | None = None,
        options: UnfollowOptions | Mapping | None = None,
        **kwargs,
    ) -> Awaitable[dict]:
        target_id = _resolve_target(target, target_user_id)
        opts = coerce_model(UnfollowOptions, options, **kwargs)

        return self.transport.delete(
            url=f"feed/{self.identity.path_id}/following/{target_id.id}/",
            qs=opts.to_query(),
            signature=self.signature,
        )

    def following(self, options: FollowListOptions | Mapping | None = None, **kwargs) -> Awaitable[dict]:
        """List the feeds this feed follows."""
        opts = coerce_model(FollowListOptions, options, **kwargs)
        return self.transport.get(
            url=f"feed/{self.identity.path_id}/following/",
            qs=opts.to_query(),
            signature=self.signature,
        )

    def followers(self, options: FollowListOptions | Mapping | None = None, **kwargs) -> Awaitable[dict]:
        """List the feeds following this feed."""
        opts = coerce_model(FollowListOptions, options, **kwargs)
        return self.transport.get(
            url=f"feed/{self.identity.path_id}/followers/",
            qs=opts.to_query(),
            signature=self.signature,
        )

    # ── Real-time ────────────────────────────────────────────────────────────

    def subscribe(self, callback: MessageCallback) -> SubscriptionHandle:
        """Deliver this feed's real-time updates to ``callback`` until unsubscribed."""
        if self.realtime is None:
            raise ConfigurationError("Feed has no real-time manager, create it with client.feed() to subscribe")
        return self.realtime.subscribe(self.credential, callback)

    def unsubscribe(self) -> bool:
        if self.realtime is None:
            return False
        return self.realtime.unsubscribe(self.identity)


def _resolve_target(target: "str | FeedIdentity | Feed", user_id: str | UserReference | None) -> FeedIdentity:
    if isinstance(target, Feed):
        return target.identity
    if isinstance(target, FeedIdentity):
        return target
    return make_feed_identity(target, user_id)
