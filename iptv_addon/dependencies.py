"""
Dependency wiring

Builds the service graph (one cache store shared by fetchers and verifier,
one HTTP client per concern) and exposes it to the FastAPI routes.
"""
import logging
from dataclasses import dataclass

import httpx

from iptv_addon.config import CustomSettings, settings
from iptv_addon.services.aggregator import CatalogAggregator, ChannelFilter
from iptv_addon.services.cache_store import CacheStore
from iptv_addon.services.catalog_service import CatalogService
from iptv_addon.services.feed_fetcher import StructuredFeedFetcher
from iptv_addon.services.playlist_fetcher import PlaylistFetcher
from iptv_addon.services.scheduler_service import RefreshScheduler
from iptv_addon.services.stream_verifier import StreamVerifier
from iptv_addon.utils.http_client import build_async_client


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AddonServices:
    """Everything a request handler or background job needs."""
    settings: CustomSettings
    cache: CacheStore
    feed_client: httpx.AsyncClient
    probe_client: httpx.AsyncClient
    catalog: CatalogService
    scheduler: RefreshScheduler

    async def aclose(self) -> None:
        self.scheduler.shutdown()
        self.cache.flush()
        await self.feed_client.aclose()
        await self.probe_client.aclose()


def build_services(
    app_settings: CustomSettings,
    *,
    feed_transport: httpx.AsyncBaseTransport | None = None,
    probe_transport: httpx.AsyncBaseTransport | None = None,
) -> AddonServices:
    """
    Wire the pipeline from settings.

    Feeds are fetched directly; only stream probes go through the
    configured proxy.

    Args:
        app_settings: Loaded configuration
        feed_transport: Optional transport for feed requests (tests)
        probe_transport: Optional transport for stream probes (tests)
    """
    cache = CacheStore()
    timeout = app_settings.fetch_timeout_sec

    feed_client = build_async_client(timeout, transport=feed_transport)
    probe_client = build_async_client(
        timeout,
        proxy_url=app_settings.proxy_url or None,
        transport=probe_transport,
    )

    collection_ttl = app_settings.collection_cache_ttl_sec
    aggregator = CatalogAggregator(
        StructuredFeedFetcher(
            feed_client,
            cache,
            app_settings.channels_url,
            app_settings.streams_url,
            cache_ttl=collection_ttl,
        ),
        PlaylistFetcher(feed_client, cache, app_settings.m3u_playlist_url, cache_ttl=collection_ttl),
        ChannelFilter.from_settings(app_settings),
    )
    verifier = StreamVerifier(
        cache,
        probe_client,
        default_user_agent=app_settings.default_user_agent,
        verdict_ttl=app_settings.verdict_cache_ttl_sec,
    )

    return AddonServices(
        settings=app_settings,
        cache=cache,
        feed_client=feed_client,
        probe_client=probe_client,
        catalog=CatalogService(aggregator, verifier),
        scheduler=RefreshScheduler(cache, aggregator, app_settings.fetch_interval_sec),
    )


# Global service graph
_services: AddonServices | None = None


def get_services() -> AddonServices:
    """
    Get or create the global service graph.

    Returns:
        The global AddonServices instance
    """
    global _services
    if _services is None:
        _services = build_services(settings)
        logger.debug("Service graph created")
    return _services


def get_catalog_service() -> CatalogService:
    """FastAPI dependency for the catalog operations."""
    return get_services().catalog


async def close_services() -> None:
    """Close clients and stop background jobs of the global graph."""
    global _services
    if _services is not None:
        await _services.aclose()
        _services = None


def reset_services() -> None:
    """
    Drop the global service graph without closing it (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _services
    _services = None
