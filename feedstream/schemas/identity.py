from pydantic import BaseModel, ConfigDict, model_validator

from feedstream.core.exceptions import ConfigurationError, ValidationError
from feedstream.core.references import UserReference
from feedstream.core.validation import validate_feed_slug, validate_user_id


def _check_components(slug, user_id) -> None:
    if not slug or not user_id:
        raise ConfigurationError('Please provide a feed slug and user id, ie client.feed("user", "1")')
    if ":" in str(slug) or ":" in str(user_id):
        raise ConfigurationError('Please initialize the feed using client.feed("user", "1") not client.feed("user:1")')
    validate_feed_slug(slug)
    validate_user_id(user_id)


class FeedIdentity(BaseModel):
    """A feed's (slug, user id) pair and the id forms derived from it."""

    model_config = ConfigDict(frozen=True)

    slug: str
    user_id: str

    @model_validator(mode="after")
    def _validate_components(self) -> "FeedIdentity":
        _check_components(self.slug, self.user_id)
        return self

    @property
    def id(self) -> str:
        return f"{self.slug}:{self.user_id}"

    @property
    def path_id(self) -> str:
        return f"{self.slug}/{self.user_id}"

    @property
    def flat_id(self) -> str:
        return f"{self.slug}{self.user_id}"

    @classmethod
    def parse(cls, feed_id: str) -> "FeedIdentity":
        """Build an identity from its canonical ``slug:user_id`` form."""
        parts = feed_id.split(":") if isinstance(feed_id, str) else []
        if len(parts) != 2:
            raise ValidationError(
                f"Invalid feed id {feed_id!r}, expected the form 'slug:user_id'",
                details={"field": "feed_id", "value": str(feed_id)},
            )
        return make_feed_identity(*parts)

    def __str__(self) -> str:
        return self.id


def make_feed_identity(slug: str, user_id: str | int | UserReference) -> FeedIdentity:
    if isinstance(user_id, UserReference):
        user_id = user_id.id
    elif isinstance(user_id, int) and not isinstance(user_id, bool):
        user_id = str(user_id)
    _check_components(slug, user_id)
    return FeedIdentity(slug=slug, user_id=user_id)
