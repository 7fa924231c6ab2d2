"""Unit tests for feed identity derivation and validation."""

import pytest

from feedstream.core.exceptions import ConfigurationError, ValidationError
from feedstream.core.references import UserReference
from feedstream.core.validation import validate_feed_slug, validate_user_id
from feedstream.schemas.identity import FeedIdentity, make_feed_identity


class TestMakeFeedIdentity:
    @pytest.mark.parametrize(
        "slug,user_id",
        [("user", "1"), ("timeline_aggregated", "alice"), ("flat", "user-42_x"), ("n0t1f", "ABC")],
    )
    def test_valid_identity(self, slug, user_id):
        identity = make_feed_identity(slug, user_id)
        assert identity.id == f"{slug}:{user_id}"
        assert identity.path_id == f"{slug}/{user_id}"
        assert identity.flat_id == f"{slug}{user_id}"

    @pytest.mark.parametrize("slug,user_id", [("", "1"), ("user", ""), (None, "1"), ("user", None)])
    def test_missing_component(self, slug, user_id):
        with pytest.raises(ConfigurationError):
            make_feed_identity(slug, user_id)

    def test_composite_id_passed_as_slug(self):
        with pytest.raises(ConfigurationError, match="not client.feed"):
            make_feed_identity("user:1", "1")

    def test_composite_id_passed_as_user_id(self):
        with pytest.raises(ConfigurationError):
            make_feed_identity("user", "user:1")

    @pytest.mark.parametrize("slug", ["us er", "user-feed", "user!", "ü/x"])
    def test_invalid_slug(self, slug):
        with pytest.raises(ValidationError):
            make_feed_identity(slug, "1")

    @pytest.mark.parametrize("user_id", ["a b", "a/b", "1\n", "a.b"])
    def test_invalid_user_id(self, user_id):
        with pytest.raises(ValidationError):
            make_feed_identity("user", user_id)

    def test_user_reference_as_user_id(self):
        identity = make_feed_identity("user", UserReference("alice"))
        assert identity.id == "user:alice"

    def test_integer_user_id(self):
        identity = make_feed_identity("user", 42)
        assert identity.id == "user:42"
        assert identity.user_id == "42"

    def test_zero_user_id(self):
        assert make_feed_identity("user", 0).flat_id == "user0"

    def test_bool_user_id_rejected(self):
        with pytest.raises(ValidationError):
            make_feed_identity("user", True)

    def test_identity_is_immutable(self):
        identity = make_feed_identity("user", "1")
        with pytest.raises(Exception):
            identity.slug = "other"

    def test_direct_construction_is_validated(self):
        with pytest.raises(ConfigurationError):
            FeedIdentity(slug="user:1", user_id="1")

    def test_identities_compare_by_value(self):
        assert make_feed_identity("user", "1") == make_feed_identity("user", "1")
        assert hash(make_feed_identity("user", "1")) == hash(make_feed_identity("user", "1"))
        assert str(make_feed_identity("user", "1")) == "user:1"


class TestParse:
    def test_parse_canonical_id(self):
        identity = FeedIdentity.parse("timeline:42")
        assert identity.slug == "timeline"
        assert identity.user_id == "42"

    @pytest.mark.parametrize("feed_id", ["timeline", "a:b:c", ""])
    def test_parse_rejects_malformed(self, feed_id):
        with pytest.raises(ValidationError):
            FeedIdentity.parse(feed_id)

    def test_parse_rejects_empty_component(self):
        with pytest.raises(ConfigurationError):
            FeedIdentity.parse("timeline:")


class TestValidators:
    def test_slug_returns_value(self):
        assert validate_feed_slug("user_1") == "user_1"

    def test_user_id_allows_dash(self):
        assert validate_user_id("a-b") == "a-b"

    def test_non_string_rejected(self):
        with pytest.raises(ValidationError):
            validate_user_id(42)
