import logging

import httpx

from iptv_addon.services.cache_store import PLAYLIST_KEY, CacheStore
from iptv_addon.services.channel_types import ChannelRecord
from iptv_addon.services.playlist_parser import parse_playlist
from iptv_addon.utils.http_client import SOURCE_ERRORS, read_text_source
from iptv_addon.utils.logging_helpers import log_source_failed, log_source_fetched


logger = logging.getLogger(__name__)


class PlaylistFetcher:
    """Fetches and parses the playlist feed, caching only successful parses."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: CacheStore,
        source: str,
        *,
        cache_ttl: float = 0,
    ) -> None:
        self._client = client
        self._cache = cache
        self.source = source
        self._cache_ttl = cache_ttl

    @property
    def enabled(self) -> bool:
        return bool(self.source)

    async def fetch_channels(self) -> list[ChannelRecord]:
        if not self.enabled:
            return []

        cached = self._cache.get(PLAYLIST_KEY)
        if cached is not None:
            logger.debug("Playlist served from cache (%s entries)", len(cached))
            return cached

        try:
            text = await read_text_source(self._client, self.source)
            channels = parse_playlist(text)
        except SOURCE_ERRORS as e:
            log_source_failed(logger, "playlist", e)
            return []

        self._cache.set(PLAYLIST_KEY, channels, ttl=self._cache_ttl)
        log_source_fetched(logger, "playlist", len(channels))
        return channels
