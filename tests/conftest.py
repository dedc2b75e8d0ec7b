import httpx
import pytest

from iptv_addon.config import CustomSettings
from iptv_addon.services.cache_store import CacheStore

from tests.helpers import (
    CHANNELS_URL,
    FEED_CHANNELS,
    FEED_STREAMS,
    PLAYLIST,
    PLAYLIST_URL,
    STREAMS_URL,
    json_response,
)


@pytest.fixture
def cache() -> CacheStore:
    return CacheStore()


@pytest.fixture
def feed_routes() -> dict:
    return {
        CHANNELS_URL: json_response(FEED_CHANNELS),
        STREAMS_URL: json_response(FEED_STREAMS),
        PLAYLIST_URL: httpx.Response(200, text=PLAYLIST),
    }


@pytest.fixture
def make_client():
    def factory(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=1.0)

    return factory


@pytest.fixture
def test_settings() -> CustomSettings:
    return CustomSettings(
        _env_file=None,
        include_countries="GR",
        channels_url=CHANNELS_URL,
        streams_url=STREAMS_URL,
        m3u_playlist_url=PLAYLIST_URL,
        fetch_timeout=1000,
    )
