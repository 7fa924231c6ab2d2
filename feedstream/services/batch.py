"""Cross-feed operations, signed with the server token instead of a feed's signature.

Member feed ids are only checked for shape here; the API validates them.
"""

from collections.abc import Awaitable, Mapping

from feedstream.core.exceptions import AuthorizationError, ValidationError
from feedstream.core.references import replace_references
from feedstream.core.validation import coerce_model
from feedstream.schemas.activity import FollowRelation
from feedstream.schemas.identity import FeedIdentity
from feedstream.services.token_service import TokenService
from feedstream.services.transport.base import Transport


class BatchOperations:
    def __init__(self, transport: Transport, tokens: TokenService | None = None):
        self.transport = transport
        self._tokens = tokens

    def _server_signature(self, operation: str) -> str:
        if self._tokens is None:
            raise AuthorizationError(
                f"{operation} requires the API secret, a feed token is not enough",
                details={"operation": operation},
            )
        return self._tokens.create_server_token()

    def add_to_many(self, activity: Mapping, feed_ids: list[str | FeedIdentity]) -> Awaitable[dict]:
        """Add one activity to every feed in ``feed_ids`` with a single request."""
        signature = self._server_signature("add_to_many")
        if not isinstance(activity, Mapping):
            raise ValidationError("Activity must be a mapping")
        if not isinstance(feed_ids, (list, tuple)):
            raise ValidationError("feed_ids must be a list of feed ids")

        return self.transport.post(
            url="feed/add_to_many/",
            body={
                "activity": replace_references(dict(activity)),
                "feeds": [f.id if isinstance(f, FeedIdentity) else f for f in feed_ids],
            },
            signature=signature,
        )

    def follow_many(
        self,
        relations: list[FollowRelation | Mapping],
        activity_copy_limit: int | None = None,
    ) -> Awaitable[dict]:
        signature = self._server_signature("follow_many")
        follows = _coerce_relations(relations)
        qs = {}
        if activity_copy_limit is not None:
            if isinstance(activity_copy_limit, bool) or not isinstance(activity_copy_limit, int):
                raise ValidationError("activity_copy_limit must be an integer")
            qs["activity_copy_limit"] = activity_copy_limit

        return self.transport.post(
            url="follow_many/",
            body=[relation.to_payload() for relation in follows],
            qs=qs,
            signature=signature,
        )

    def unfollow_many(self, relations: list[FollowRelation | Mapping]) -> Awaitable[dict]:
        signature = self._server_signature("unfollow_many")
        unfollows = _coerce_relations(relations)

        return self.transport.post(
            url="unfollow_many/",
            body=[relation.model_dump(include={"source", "target"}) for relation in unfollows],
            signature=signature,
        )


def _coerce_relations(relations: list[FollowRelation | Mapping]) -> list[FollowRelation]:
    if not isinstance(relations, (list, tuple)):
        raise ValidationError("Relations must be a list")
    result = []
    for relation in relations:
        if isinstance(relation, FollowRelation):
            result.append(relation)
        elif isinstance(relation, Mapping):
            result.append(coerce_model(FollowRelation, **relation))
        else:
            raise ValidationError("Each relation must be a FollowRelation or a mapping with source and target")
    return result
