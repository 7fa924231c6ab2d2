import pytest

from feedstream.core.exceptions import ConfigurationError
from feedstream.core.security import FeedCredential, build_signature
from feedstream.schemas.identity import make_feed_identity


def test_signature_is_flat_id_and_token():
    assert build_signature(make_feed_identity("user", "1"), "tok") == "user1 tok"


def test_credential_signature():
    credential = FeedCredential(feed_id=make_feed_identity("flat", "42"), token="secret-token")
    assert credential.signature == "flat42 secret-token"


@pytest.mark.parametrize("token", [None, ""])
def test_credential_requires_token(token):
    with pytest.raises(ConfigurationError, match="Missing token"):
        FeedCredential(feed_id=make_feed_identity("flat", "42"), token=token)


def test_token_hidden_from_repr():
    credential = FeedCredential(feed_id=make_feed_identity("flat", "42"), token="secret-token")
    assert "secret-token" not in repr(credential)
