"""
Channel Aggregator

Joins structured-feed channels with their streams, applies the configured
filter and merges the result with playlist-derived channels.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from iptv_addon.services.channel_types import ChannelRecord, StreamEntry
from iptv_addon.services.feed_fetcher import StructuredFeedFetcher
from iptv_addon.services.playlist_fetcher import PlaylistFetcher
from iptv_addon.utils.data_merging import merge_channel_sources
from iptv_addon.utils.logging_helpers import log_merge_summary

if TYPE_CHECKING:
    from iptv_addon.config import CustomSettings


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChannelFilter:
    """
    Configured country/language/category predicate for structured-feed channels.

    Every clause is applied only when its list is non-empty; all active
    clauses must pass.
    """
    include_countries: frozenset[str] = frozenset()
    exclude_countries: frozenset[str] = frozenset()
    include_languages: frozenset[str] = frozenset()
    exclude_languages: frozenset[str] = frozenset()
    exclude_categories: frozenset[str] = frozenset()

    @classmethod
    def from_settings(cls, settings: CustomSettings) -> ChannelFilter:
        return cls(
            include_countries=frozenset(settings.include_countries),
            exclude_countries=frozenset(settings.exclude_countries),
            include_languages=frozenset(settings.include_languages),
            exclude_languages=frozenset(settings.exclude_languages),
            exclude_categories=frozenset(settings.exclude_categories),
        )

    def matches(self, channel: ChannelRecord) -> bool:
        if self.include_countries and channel.country not in self.include_countries:
            return False
        if self.exclude_countries and channel.country in self.exclude_countries:
            return False
        if self.include_languages and self.include_languages.isdisjoint(channel.languages):
            return False
        if self.exclude_languages and not self.exclude_languages.isdisjoint(channel.languages):
            return False
        if self.exclude_categories and not self.exclude_categories.isdisjoint(channel.categories):
            return False
        return True


def attach_streams(
    channels: Iterable[ChannelRecord],
    streams: Sequence[StreamEntry],
    channel_filter: ChannelFilter,
) -> list[ChannelRecord]:
    """
    Filter feed channels and join each survivor with its stream.

    Channels with no stream entry, or whose entry has an empty URL, are dropped.
    """
    stream_map = {stream.channel: stream for stream in streams}
    joined = []
    for channel in channels:
        if not channel_filter.matches(channel):
            continue
        stream = stream_map.get(channel.id)
        if stream is None or not stream.url:
            continue
        joined.append(channel.with_stream(stream))
    return joined


class CatalogAggregator:
    """Produces the deduplicated, filtered channel collection."""

    def __init__(
        self,
        feed_fetcher: StructuredFeedFetcher,
        playlist_fetcher: PlaylistFetcher,
        channel_filter: ChannelFilter,
    ) -> None:
        self._feed = feed_fetcher
        self._playlist = playlist_fetcher
        self.channel_filter = channel_filter

    async def get_all_channels(self) -> list[ChannelRecord]:
        streams, channels, playlist_channels = await asyncio.gather(
            self._feed.fetch_streams(),
            self._feed.fetch_channels(),
            self._playlist.fetch_channels(),
        )

        feed_channels = attach_streams(channels, streams, self.channel_filter)
        merged = merge_channel_sources(playlist_channels, feed_channels)

        log_merge_summary(logger, len(playlist_channels), len(feed_channels), len(merged))
        return merged
