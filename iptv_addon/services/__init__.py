"""
Services package for the IPTV addon

This package contains the aggregation, caching and verification pipeline.
"""
from iptv_addon.services.aggregator import CatalogAggregator, ChannelFilter
from iptv_addon.services.cache_store import CacheStore
from iptv_addon.services.catalog_service import CatalogService
from iptv_addon.services.feed_fetcher import StructuredFeedFetcher
from iptv_addon.services.playlist_fetcher import PlaylistFetcher
from iptv_addon.services.playlist_parser import parse_playlist
from iptv_addon.services.scheduler_service import RefreshScheduler
from iptv_addon.services.stream_verifier import StreamVerifier

__all__ = [
    'CacheStore',
    'CatalogAggregator',
    'CatalogService',
    'ChannelFilter',
    'PlaylistFetcher',
    'RefreshScheduler',
    'StreamVerifier',
    'StructuredFeedFetcher',
    'parse_playlist',
]
