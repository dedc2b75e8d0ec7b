"""
Data merging utilities

This module merges channel records from the playlist and the structured feed.
"""
from __future__ import annotations

import logging
from collections.abc import MutableMapping, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from iptv_addon.services.channel_types import ChannelRecord

logger = logging.getLogger(__name__)


def merge_channels(
    existing_channels: MutableMapping[str, ChannelRecord],
    new_channels: Sequence[ChannelRecord]
) -> tuple[MutableMapping[str, ChannelRecord], int]:
    """
    Merge channels into an id-keyed table, replacing records that share an id.

    Records without a stream URL are not eligible and are skipped. A
    replaced id keeps the position of its first insertion.

    Args:
        existing_channels: Dictionary of existing channels (id -> ChannelRecord)
        new_channels: Records to merge; they take precedence over existing ones

    Returns:
        Tuple of (updated_channels_dict, count_of_replaced_channels)
    """
    replaced = 0

    for channel in new_channels:
        if not channel.stream_url:
            logger.debug("Skipping channel %s without stream URL", channel.id)
            continue
        if channel.id in existing_channels:
            replaced += 1
            logger.debug("Channel %s replaced by higher-precedence source", channel.id)
        existing_channels[channel.id] = channel

    return existing_channels, replaced


def merge_channel_sources(
    playlist_channels: Sequence[ChannelRecord],
    feed_channels: Sequence[ChannelRecord]
) -> list[ChannelRecord]:
    """
    Combine both sources into one list with unique ids.

    Precedence rule: a structured-feed record always wins over a playlist
    record with the same id, so playlist records are merged first.

    Args:
        playlist_channels: Records parsed from the playlist
        feed_channels: Filtered structured-feed records with streams attached

    Returns:
        Unique channels in order of first appearance
    """
    merged: dict[str, ChannelRecord] = {}
    merge_channels(merged, playlist_channels)
    _, overridden = merge_channels(merged, feed_channels)
    if overridden:
        logger.debug("%s playlist channels overridden by structured feed", overridden)
    return list(merged.values())
