"""Feed fixtures and mock transport helpers shared by the tests"""
import json
from collections.abc import Callable

import httpx


CHANNELS_URL = "https://feed.test/channels.json"
STREAMS_URL = "https://feed.test/streams.json"
PLAYLIST_URL = "https://feed.test/playlist.m3u"

FEED_CHANNELS = [
    {"id": "ERT1.gr", "name": "ERT 1", "logo": "https://logo.test/ert1.png",
     "categories": ["general"], "country": "GR", "languages": ["ell"]},
    {"id": "Skai.gr", "name": "Skai", "logo": None,
     "categories": ["news"], "country": "GR", "languages": ["ell"]},
    {"id": "NoStream.gr", "name": "No Stream", "logo": None,
     "categories": ["music"], "country": "GR", "languages": ["ell"]},
    {"id": "EmptyUrl.gr", "name": "Empty Url", "logo": None,
     "categories": [], "country": "GR", "languages": ["ell"]},
    {"id": "BBCOne.uk", "name": "BBC One", "logo": None,
     "categories": ["general"], "country": "UK", "languages": ["eng"]},
]

FEED_STREAMS = [
    {"channel": "ERT1.gr", "url": "https://cdn.test/ert1.m3u8"},
    {"channel": "Skai.gr", "url": "https://cdn.test/skai.m3u8",
     "http_referrer": "https://skai.test/", "user_agent": "SkaiPlayer/1.0"},
    {"channel": "EmptyUrl.gr", "url": ""},
    {"channel": "BBCOne.uk", "url": "https://cdn.test/bbc1.m3u8"},
]

PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="ERT1.gr" tvg-logo="https://logo.test/old.png" group-title="General",ERT 1 (playlist)
https://playlist.test/ert1.m3u8
#EXTINF:-1 group-title="Music",Cool TV!
https://playlist.test/cool.m3u8
#EXTINF:-1 tvg-id="dangling",Dangling Entry
"""


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(),
                          headers={"content-type": "application/json"})


class RecordingHandler:
    """MockTransport handler routing by URL and recording every request"""

    def __init__(self, routes: dict[str, Callable[[httpx.Request], httpx.Response] | httpx.Response]):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        if callable(route):
            return route(request)
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)

    def count(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)


def raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def raise_timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)

