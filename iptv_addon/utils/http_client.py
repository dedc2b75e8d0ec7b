"""
HTTP client utilities

This module builds the outbound httpx clients (optionally proxied) and reads
remote or local text/JSON sources.
"""
import json
import logging
from pathlib import Path
from typing import Any, Literal
from urllib.parse import unquote, urlparse

import aiofiles
import httpx


logger = logging.getLogger(__name__)

ProxyKind = Literal["socks", "http"]

# Errors that mean "this source is unavailable right now"
SOURCE_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError, OSError)


def resolve_proxy(proxy_url: str) -> tuple[ProxyKind, str]:
    """
    Pick the proxy transport from the URL scheme prefix.

    Any scheme starting with "socks" goes through the SOCKS transport
    (bare socks:// is treated as socks5://); everything else is a plain
    HTTP forward proxy.

    Args:
        proxy_url: Proxy URL from configuration

    Returns:
        Tuple of (kind, normalized_url)
    """
    url = proxy_url.strip()
    if url.lower().startswith("socks"):
        if url.lower().startswith("socks://"):
            url = "socks5://" + url[len("socks://"):]
        return "socks", url
    return "http", url


def build_async_client(
    timeout: float,
    proxy_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    follow_redirects: bool = True,
) -> httpx.AsyncClient:
    """
    Create an AsyncClient with a bounded timeout and optional forward proxy.

    Args:
        timeout: Timeout in seconds applied to connect/read/write/pool
        proxy_url: Optional proxy URL (http(s):// or socks*://)
        transport: Explicit transport, overrides the proxy (used by tests)
        follow_redirects: Follow redirects like a browser would

    Returns:
        Configured httpx.AsyncClient (caller owns and closes it)
    """
    if transport is None and proxy_url:
        kind, url = resolve_proxy(proxy_url)
        logger.info("Routing outbound requests through %s proxy", kind.upper())
        transport = httpx.AsyncHTTPTransport(proxy=httpx.Proxy(url))

    return httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        follow_redirects=follow_redirects,
    )


async def fetch_json(client: httpx.AsyncClient, url: str) -> Any:
    """
    GET a URL and decode its JSON body.

    Raises:
        httpx.HTTPError: On transport failure or non-2xx status
        ValueError: If the body is not valid JSON
    """
    logger.debug("Requesting %s", url)
    response = await client.get(url)
    response.raise_for_status()
    try:
        return response.json()
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON from {url}: {exc}") from exc


def is_remote_source(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def local_source_path(source: str) -> Path:
    """Map a file:// URL or plain path to a filesystem path."""
    if source.lower().startswith("file://"):
        return Path(unquote(urlparse(source).path))
    return Path(source).expanduser()


async def read_text_source(client: httpx.AsyncClient, source: str) -> str:
    """
    Read a text document from an HTTP(S) URL or a local file.

    Raises:
        httpx.HTTPError: On transport failure or non-2xx status
        OSError: If the local file cannot be read
    """
    if is_remote_source(source):
        logger.debug("Requesting %s", source)
        response = await client.get(source)
        response.raise_for_status()
        return response.text

    path = local_source_path(source)
    logger.debug("Reading local source %s", path)
    async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
        return await f.read()
