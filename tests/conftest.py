import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from feedstream.client import FeedStreamClient
from feedstream.schemas.identity import make_feed_identity
from feedstream.services.feed import Feed
from tests.mocks.fake_credentials import TEST_API_KEY, TEST_API_SECRET, TEST_APP_ID
from tests.mocks.fake_pubsub import FakePubSub
from tests.mocks.fake_transport import RecordingTransport


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def pubsub():
    return FakePubSub()


@pytest.fixture
def client(transport, pubsub):
    """Server-side client: holds the API secret, records requests in memory."""
    return FeedStreamClient(
        api_key=TEST_API_KEY,
        api_secret=TEST_API_SECRET,
        app_id=TEST_APP_ID,
        transport=transport,
        pubsub=pubsub,
    )


@pytest.fixture
def browser_client(transport, pubsub):
    """Client-side client: no API secret, feeds need explicit tokens."""
    return FeedStreamClient(
        api_key=TEST_API_KEY,
        app_id=TEST_APP_ID,
        transport=transport,
        pubsub=pubsub,
    )


@pytest.fixture
def feed(client):
    """The ``flat:42`` feed of the server-side client."""
    return client.feed("flat", "42")


@pytest.fixture
def standalone_feed(transport):
    """A feed built without a client: no real-time support, no current user."""
    return Feed(transport, make_feed_identity("user", "1"), "feed-token")


@pytest_asyncio.fixture
async def api_client():
    """Client wired to the fake feed API via in-process ASGITransport."""
    from tests.mocks.fake_feed_api import app as fake_api_app

    http_client = httpx.AsyncClient(transport=ASGITransport(app=fake_api_app), base_url="http://fake-api")
    client = FeedStreamClient(
        api_key=TEST_API_KEY,
        api_secret=TEST_API_SECRET,
        app_id=TEST_APP_ID,
        base_url="http://fake-api",
        http_client=http_client,
    )
    yield client
    await client.close()
