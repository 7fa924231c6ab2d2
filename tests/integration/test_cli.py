"""CLI commands against the fake feed API."""

import httpx
import pytest
from httpx import ASGITransport
from typer.testing import CliRunner

import feedstream.cli as cli_module
from feedstream.cli import cli_app
from feedstream.client import FeedStreamClient
from feedstream.config import settings
from tests.mocks.fake_credentials import TEST_API_KEY, TEST_API_SECRET
from tests.mocks.fake_feed_api import REJECTED_API_KEY
from tests.mocks.fake_feed_api import app as fake_api_app

runner = CliRunner()


def _client_factory(api_key: str = TEST_API_KEY, api_secret: str | None = TEST_API_SECRET):
    def _make():
        return FeedStreamClient(
            api_key=api_key,
            api_secret=api_secret,
            base_url="http://fake-api",
            http_client=httpx.AsyncClient(transport=ASGITransport(app=fake_api_app), base_url="http://fake-api"),
        )

    return _make


@pytest.fixture
def fake_api(monkeypatch):
    monkeypatch.setattr(cli_module, "_make_client", _client_factory())


def test_feed_token(fake_api):
    result = runner.invoke(cli_app, ["token", "--slug", "user", "--user-id", "1"])
    assert result.exit_code == 0
    assert result.output.strip().count(".") == 2  # header.payload.signature


def test_user_token(fake_api):
    result = runner.invoke(cli_app, ["token", "--user-id", "alice"])
    assert result.exit_code == 0


def test_token_needs_secret(monkeypatch):
    monkeypatch.setattr(cli_module, "_make_client", _client_factory(api_secret=None))
    monkeypatch.setattr(settings, "feedstream_api_secret", None)
    result = runner.invoke(cli_app, ["token", "--slug", "user", "--user-id", "1"])
    assert result.exit_code == 1
    assert "API secret" in result.output


def test_add_activity(fake_api):
    result = runner.invoke(
        cli_app,
        ["add-activity", "user", "1", "--actor", "SU:1", "--verb", "post", "--object", "x", "--foreign-id", "post:1"],
    )
    assert result.exit_code == 0
    assert "Activity added" in result.output


def test_follow(fake_api):
    result = runner.invoke(cli_app, ["follow", "timeline", "1", "user:2", "--limit", "5"])
    assert result.exit_code == 0
    assert "now follows user:2" in result.output


def test_follow_rejects_malformed_target(fake_api):
    result = runner.invoke(cli_app, ["follow", "timeline", "1", "user-2"])
    assert result.exit_code == 1
    assert "Invalid feed id" in result.output


def test_unfollow(fake_api):
    result = runner.invoke(cli_app, ["unfollow", "timeline", "1", "user:2", "--keep-history"])
    assert result.exit_code == 0


def test_read_empty_feed(fake_api):
    result = runner.invoke(cli_app, ["read", "user", "1"])
    assert result.exit_code == 0
    assert "No activities" in result.output


def test_followers_empty(fake_api):
    result = runner.invoke(cli_app, ["followers", "user", "1"])
    assert result.exit_code == 0
    assert "No follow relations" in result.output


def test_invalid_slug(fake_api):
    result = runner.invoke(cli_app, ["read", "user feed", "1"])
    assert result.exit_code == 1
    assert "Invalid feed slug" in result.output


def test_remote_error_exit_code(monkeypatch):
    monkeypatch.setattr(cli_module, "_make_client", _client_factory(api_key=REJECTED_API_KEY))
    result = runner.invoke(cli_app, ["read", "user", "1"])
    assert result.exit_code == 1
    assert "API error 403" in result.output
