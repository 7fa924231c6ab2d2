from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from feedstream.schemas.identity import FeedIdentity


class ById(BaseModel):
    kind: Literal["id"] = "id"
    activity_id: str = Field(min_length=1)


class ByForeignId(BaseModel):
    kind: Literal["foreign_id"] = "foreign_id"
    foreign_id: str = Field(min_length=1)


ActivityRef = ById | ByForeignId


class FollowRelation(BaseModel):
    """One directed follow edge, as sent to follow_many/unfollow_many."""

    model_config = ConfigDict(frozen=True)

    source: FeedIdentity | str
    target: FeedIdentity | str
    activity_copy_limit: int | None = Field(default=None, ge=0)

    @field_serializer("source", "target")
    def _serialize_feed(self, value: FeedIdentity | str) -> str:
        return value.id if isinstance(value, FeedIdentity) else value

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class TargetUpdate(BaseModel):
    """Change of an activity's "to" targets.

    Either replace the whole target list with ``new_targets`` or edit it
    with ``added_targets``/``removed_targets``, never both.
    """

    foreign_id: str = Field(min_length=1)
    time: datetime | Annotated[str, Field(min_length=1)]
    new_targets: list[str] | None = None
    added_targets: list[str] | None = None
    removed_targets: list[str] | None = None

    @model_validator(mode="after")
    def _check_targets(self) -> "TargetUpdate":
        if self.new_targets is not None:
            if self.added_targets is not None or self.removed_targets is not None:
                raise ValueError("Can't include added_targets or removed_targets if you're also including new_targets")
            return self
        if not self.added_targets and not self.removed_targets:
            raise ValueError("Requires at least one of new_targets, added_targets or removed_targets")
        if self.added_targets and self.removed_targets:
            overlap = set(self.added_targets) & set(self.removed_targets)
            if overlap:
                raise ValueError(f"Can't have the same feed id in added_targets and removed_targets: {sorted(overlap)}")
        return self

    @field_serializer("time")
    def _serialize_time(self, value: datetime | str) -> str:
        return value.isoformat() if isinstance(value, datetime) else value

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)
