from dataclasses import dataclass, field

from feedstream.core.exceptions import ConfigurationError
from feedstream.schemas.identity import FeedIdentity


def build_signature(identity: FeedIdentity, token: str) -> str:
    """Per-feed request signature: flat feed id and token separated by a space."""
    return f"{identity.flat_id} {token}"


@dataclass(frozen=True)
class FeedCredential:
    feed_id: FeedIdentity
    token: str = field(repr=False)

    def __post_init__(self):
        if not self.token:
            raise ConfigurationError("Missing token, in client side mode please provide a feed secret")

    @property
    def signature(self) -> str:
        return build_signature(self.feed_id, self.token)
