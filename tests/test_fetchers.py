import httpx

from iptv_addon.services.cache_store import CHANNELS_KEY, PLAYLIST_KEY, STREAMS_KEY
from iptv_addon.services.channel_types import ChannelRecord
from iptv_addon.services.feed_fetcher import StructuredFeedFetcher
from iptv_addon.services.playlist_fetcher import PlaylistFetcher

from tests.helpers import (
    CHANNELS_URL,
    FEED_CHANNELS,
    PLAYLIST_URL,
    STREAMS_URL,
    RecordingHandler,
    json_response,
    raise_connect_error,
    raise_timeout,
)


def make_feed_fetcher(make_client, cache, handler) -> StructuredFeedFetcher:
    return StructuredFeedFetcher(make_client(handler), cache, CHANNELS_URL, STREAMS_URL)


async def test_channels_fetched_every_call_and_cached(make_client, cache, feed_routes):
    handler = RecordingHandler(feed_routes)
    fetcher = make_feed_fetcher(make_client, cache, handler)

    first = await fetcher.fetch_channels()
    second = await fetcher.fetch_channels()

    assert handler.count(CHANNELS_URL) == 2
    assert [c.id for c in first] == [c["id"] for c in FEED_CHANNELS]
    assert first == second
    assert cache.get(CHANNELS_KEY) == second
    assert first[1] == ChannelRecord(
        id="Skai.gr", name="Skai", logo=None, categories=("news",),
        country="GR", languages=("ell",),
    )


async def test_channels_fall_back_to_cache_on_failure(make_client, cache, feed_routes):
    handler = RecordingHandler(feed_routes)
    fetcher = make_feed_fetcher(make_client, cache, handler)
    cached = await fetcher.fetch_channels()

    feed_routes[CHANNELS_URL] = raise_timeout

    assert await fetcher.fetch_channels() == cached


async def test_channels_empty_on_failure_without_cache(make_client, cache):
    handler = RecordingHandler({CHANNELS_URL: raise_connect_error})
    fetcher = make_feed_fetcher(make_client, cache, handler)

    assert await fetcher.fetch_channels() == []
    assert not cache.has(CHANNELS_KEY)


async def test_channels_reject_non_array_and_bad_json(make_client, cache):
    handler = RecordingHandler({CHANNELS_URL: json_response({"error": "nope"})})
    fetcher = make_feed_fetcher(make_client, cache, handler)
    assert await fetcher.fetch_channels() == []

    handler.routes[CHANNELS_URL] = httpx.Response(200, text="<html>")
    assert await fetcher.fetch_channels() == []

    handler.routes[CHANNELS_URL] = httpx.Response(500)
    assert await fetcher.fetch_channels() == []
    assert not cache.has(CHANNELS_KEY)


async def test_channels_tolerate_missing_fields(make_client, cache):
    handler = RecordingHandler({
        CHANNELS_URL: json_response([{"id": "x", "languages": None}, {"name": "no id"}, "junk"])
    })
    fetcher = make_feed_fetcher(make_client, cache, handler)

    [channel] = await fetcher.fetch_channels()

    assert channel == ChannelRecord(id="x", name="x")


async def test_streams_cached_after_first_success(make_client, cache, feed_routes):
    handler = RecordingHandler(feed_routes)
    fetcher = make_feed_fetcher(make_client, cache, handler)

    first = await fetcher.fetch_streams()
    second = await fetcher.fetch_streams()

    assert handler.count(STREAMS_URL) == 1
    assert first is second
    assert first[1].referrer == "https://skai.test/"
    assert first[1].user_agent == "SkaiPlayer/1.0"


async def test_streams_retry_after_failure(make_client, cache, feed_routes):
    feed_routes[STREAMS_URL] = raise_connect_error
    handler = RecordingHandler(feed_routes)
    fetcher = make_feed_fetcher(make_client, cache, handler)

    assert await fetcher.fetch_streams() == []
    assert not cache.has(STREAMS_KEY)

    feed_routes[STREAMS_URL] = json_response([{"channel": "a", "url": "http://x/a"}])
    streams = await fetcher.fetch_streams()

    assert [s.channel for s in streams] == ["a"]
    assert handler.count(STREAMS_URL) == 2


async def test_playlist_disabled_makes_no_request(make_client, cache):
    handler = RecordingHandler({})
    fetcher = PlaylistFetcher(make_client(handler), cache, "")

    assert await fetcher.fetch_channels() == []
    assert handler.requests == []


async def test_playlist_cached_after_success(make_client, cache, feed_routes):
    handler = RecordingHandler(feed_routes)
    fetcher = PlaylistFetcher(make_client(handler), cache, PLAYLIST_URL)

    first = await fetcher.fetch_channels()
    second = await fetcher.fetch_channels()

    assert handler.count(PLAYLIST_URL) == 1
    assert [c.id for c in first] == ["ERT1.gr", "cool-tv-", "dangling"]
    assert second is first
    assert cache.get(PLAYLIST_KEY) is first


async def test_playlist_failure_not_cached(make_client, cache, feed_routes):
    feed_routes[PLAYLIST_URL] = httpx.Response(503)
    handler = RecordingHandler(feed_routes)
    fetcher = PlaylistFetcher(make_client(handler), cache, PLAYLIST_URL)

    assert await fetcher.fetch_channels() == []
    assert not cache.has(PLAYLIST_KEY)

    feed_routes[PLAYLIST_URL] = httpx.Response(200, text="#EXTINF:-1,A\nhttp://x/a\n")
    assert [c.id for c in await fetcher.fetch_channels()] == ["a"]


async def test_playlist_from_local_file(make_client, cache, tmp_path):
    playlist = tmp_path / "local.m3u"
    playlist.write_text('#EXTINF:-1 tvg-id="local",Local\nhttp://x/local.m3u8\n', encoding="utf-8")
    handler = RecordingHandler({})

    fetcher = PlaylistFetcher(make_client(handler), cache, str(playlist))
    [channel] = await fetcher.fetch_channels()

    assert channel.id == "local"
    assert handler.requests == []


async def test_playlist_missing_local_file(make_client, cache, tmp_path):
    fetcher = PlaylistFetcher(make_client(RecordingHandler({})), cache, f"file://{tmp_path}/missing.m3u")

    assert await fetcher.fetch_channels() == []
    assert not cache.has(PLAYLIST_KEY)


async def test_channels_tolerate_scalar_tag_fields(make_client, cache):
    handler = RecordingHandler({
        CHANNELS_URL: json_response([
            {"id": "a", "name": "A", "categories": 5, "languages": True, "country": "GR"},
            {"id": "b", "name": "B", "categories": {"news": 1}, "languages": "ell"},
        ])
    })
    fetcher = make_feed_fetcher(make_client, cache, handler)

    channels = await fetcher.fetch_channels()

    assert [(c.id, c.categories, c.languages) for c in channels] == [
        ("a", (), ()),
        ("b", (), ("ell",)),
    ]
    assert cache.get(CHANNELS_KEY) == channels
