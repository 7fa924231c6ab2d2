from pydantic import BaseModel, ConfigDict, Field, StrictInt


# Reaction enrichment flags go over the wire in the API's camelCase spelling
REACTION_WIRE_NAMES = {
    "with_own_reactions": "withOwnReactions",
    "with_recent_reactions": "withRecentReactions",
    "with_reaction_counts": "withReactionCounts",
    "with_own_children": "withOwnChildren",
}


class ReactionOptions(BaseModel):
    """Shortcut for the individual ``with_*`` reaction flags."""

    model_config = ConfigDict(extra="forbid")

    own: bool | None = None
    recent: bool | None = None
    counts: bool | None = None
    own_children: bool | None = None


class GetOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)
    id_gt: str | None = None
    id_gte: str | None = None
    id_lt: str | None = None
    id_lte: str | None = None
    ranking: str | None = None
    session: str | None = None
    mark_read: bool | list[str] | str | None = None
    mark_seen: bool | list[str] | str | None = None

    # Enrichment, consumed client-side to pick the endpoint
    enrich: bool | None = None
    reactions: ReactionOptions | None = None
    with_own_reactions: bool | None = None
    with_recent_reactions: bool | None = None
    with_reaction_counts: bool | None = None
    with_own_children: bool | None = None

    def to_query(self) -> dict:
        query = {}
        for name, value in self.model_dump(exclude_none=True, exclude={"enrich", "reactions"}).items():
            if name in ("mark_read", "mark_seen") and isinstance(value, list):
                value = ",".join(value)
            query[REACTION_WIRE_NAMES.get(name, name)] = value
        return query


class FollowListOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)
    filter: list[str] | str | None = None

    def to_query(self) -> dict:
        query = self.model_dump(exclude_none=True)
        if isinstance(query.get("filter"), list):
            query["filter"] = ",".join(query["filter"])
        return query


class FollowOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    limit: StrictInt | None = Field(default=None, ge=0)  # activities copied from the target on follow


class UnfollowOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    keep_history: bool = False

    def to_query(self) -> dict:
        return {"keep_history": "1"} if self.keep_history else {}
