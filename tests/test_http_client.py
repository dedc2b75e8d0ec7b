import httpx
import pytest

from iptv_addon.utils.http_client import (
    build_async_client,
    fetch_json,
    local_source_path,
    read_text_source,
    resolve_proxy,
)

from tests.helpers import RecordingHandler, json_response


@pytest.mark.parametrize(
    "proxy_url, expected",
    [
        ("socks5://127.0.0.1:9050", ("socks", "socks5://127.0.0.1:9050")),
        ("socks5h://proxy:1080", ("socks", "socks5h://proxy:1080")),
        ("socks://proxy:1080", ("socks", "socks5://proxy:1080")),
        ("http://proxy:3128", ("http", "http://proxy:3128")),
        ("https://proxy:3128", ("http", "https://proxy:3128")),
    ],
)
def test_resolve_proxy(proxy_url, expected):
    assert resolve_proxy(proxy_url) == expected


async def test_build_client_with_http_proxy():
    client = build_async_client(2.0, proxy_url="http://proxy.test:3128")
    try:
        assert client.timeout.read == 2.0
        assert client.follow_redirects is True
    finally:
        await client.aclose()


async def test_explicit_transport_wins_over_proxy():
    handler = RecordingHandler({"https://x.test/a": json_response([1])})
    client = build_async_client(1.0, proxy_url="http://proxy.test:3128",
                                transport=httpx.MockTransport(handler))

    assert await fetch_json(client, "https://x.test/a") == [1]


async def test_fetch_json_errors():
    handler = RecordingHandler({
        "https://x.test/bad": httpx.Response(200, text="{nope"),
        "https://x.test/gone": httpx.Response(410),
    })
    client = build_async_client(1.0, transport=httpx.MockTransport(handler))

    with pytest.raises(ValueError):
        await fetch_json(client, "https://x.test/bad")
    with pytest.raises(httpx.HTTPStatusError):
        await fetch_json(client, "https://x.test/gone")


def test_local_source_path(tmp_path):
    assert local_source_path(f"file://{tmp_path}/a%20b.m3u") == tmp_path / "a b.m3u"
    assert local_source_path(str(tmp_path / "c.m3u")) == tmp_path / "c.m3u"


async def test_read_text_source_remote_and_local(tmp_path):
    handler = RecordingHandler({"https://x.test/list.m3u": httpx.Response(200, text="#EXTM3U")})
    client = build_async_client(1.0, transport=httpx.MockTransport(handler))
    local = tmp_path / "list.m3u"
    local.write_text("#EXTM3U local", encoding="utf-8")

    assert await read_text_source(client, "https://x.test/list.m3u") == "#EXTM3U"
    assert await read_text_source(client, str(local)) == "#EXTM3U local"
