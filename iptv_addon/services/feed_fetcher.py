"""
Structured Feed Fetcher

Retrieves the channel and stream collections of the JSON feed.
"""
import logging

import httpx

from iptv_addon.services.cache_store import CHANNELS_KEY, STREAMS_KEY, CacheStore
from iptv_addon.services.channel_types import ChannelRecord, StreamEntry
from iptv_addon.utils.http_client import SOURCE_ERRORS, fetch_json
from iptv_addon.utils.logging_helpers import (
    log_cache_fallback,
    log_source_failed,
    log_source_fetched,
)


logger = logging.getLogger(__name__)


def _expect_array(payload, url: str) -> list:
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array from {url}, got {type(payload).__name__}")
    return payload


class StructuredFeedFetcher:
    """
    Fetches the channel and stream collections.

    Channels are downloaded on every call and the last good collection is
    kept as a fallback. Streams are downloaded until the first success and
    then served from cache; a failure leaves the cache empty so the next
    call retries.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: CacheStore,
        channels_url: str,
        streams_url: str,
        *,
        cache_ttl: float = 0,
    ) -> None:
        self._client = client
        self._cache = cache
        self.channels_url = channels_url
        self.streams_url = streams_url
        self._cache_ttl = cache_ttl

    async def fetch_channels(self) -> list[ChannelRecord]:
        logger.info("Downloading channels")
        try:
            payload = _expect_array(await fetch_json(self._client, self.channels_url), self.channels_url)
            channels = [
                ChannelRecord.from_feed(item)
                for item in payload
                if isinstance(item, dict) and item.get("id")
            ]
        except SOURCE_ERRORS as e:
            log_source_failed(logger, "channels", e)
            cached = self._cache.get(CHANNELS_KEY)
            if cached is not None:
                log_cache_fallback(logger, "channels", len(cached))
                return cached
            return []

        self._cache.set(CHANNELS_KEY, channels, ttl=self._cache_ttl)
        log_source_fetched(logger, "channels", len(channels))
        return channels

    async def fetch_streams(self) -> list[StreamEntry]:
        cached = self._cache.get(STREAMS_KEY)
        if cached is not None:
            logger.debug("Streams served from cache (%s entries)", len(cached))
            return cached

        logger.info("Downloading streams data")
        try:
            payload = _expect_array(await fetch_json(self._client, self.streams_url), self.streams_url)
            streams = [
                StreamEntry.from_feed(item)
                for item in payload
                if isinstance(item, dict) and item.get("channel")
            ]
        except SOURCE_ERRORS as e:
            log_source_failed(logger, "streams", e)
            return []

        self._cache.set(STREAMS_KEY, streams, ttl=self._cache_ttl)
        log_source_fetched(logger, "streams", len(streams))
        return streams
