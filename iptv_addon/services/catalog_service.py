"""
Catalog Service

Request-level operations used by the addon endpoints: catalog listing,
single-channel lookup and verified stream resolution.
"""
import logging

from iptv_addon.services.aggregator import CatalogAggregator
from iptv_addon.services.channel_types import ChannelRecord, StreamResult
from iptv_addon.services.stream_verifier import StreamVerifier


logger = logging.getLogger(__name__)

CONTENT_TYPE = "tv"
CATALOG_ID_PREFIX = "iptv-channels-"


def catalog_id_for_country(country: str) -> str:
    return f"{CATALOG_ID_PREFIX}{country}"


def country_from_catalog_id(catalog_id: str | None) -> str | None:
    """Country code carried by the trailing token of a catalog id."""
    if not catalog_id or not catalog_id.startswith(CATALOG_ID_PREFIX):
        return None
    return catalog_id.split("-")[-1].upper()


def filter_by_genre(channels: list[ChannelRecord], genre: str) -> list[ChannelRecord]:
    wanted = genre.lower()
    return [c for c in channels if any(category.lower() == wanted for category in c.categories)]


def filter_by_country(channels: list[ChannelRecord], country: str) -> list[ChannelRecord]:
    wanted = country.upper()
    return [c for c in channels if c.country.upper() == wanted]


class CatalogService:
    """Entry point for the protocol adapter; works on unprefixed channel ids."""

    def __init__(self, aggregator: CatalogAggregator, verifier: StreamVerifier) -> None:
        self.aggregator = aggregator
        self.verifier = verifier

    async def list_channels(
        self,
        content_type: str,
        catalog_id: str | None,
        genre: str | None = None
    ) -> list[ChannelRecord]:
        if content_type != CONTENT_TYPE:
            return []

        channels = await self.aggregator.get_all_channels()

        if genre:
            channels = filter_by_genre(channels, genre)

        country = country_from_catalog_id(catalog_id)
        if country:
            channels = filter_by_country(channels, country)

        logger.debug("Catalog %s (genre=%s): %s channels", catalog_id, genre, len(channels))
        return channels

    async def get_channel(self, channel_id: str) -> ChannelRecord | None:
        channels = await self.aggregator.get_all_channels()
        return next((c for c in channels if c.id == channel_id), None)

    async def get_verified_stream(
        self,
        channel_id: str,
        user_agent: str | None = None,
        referrer: str | None = None
    ) -> StreamResult | None:
        """
        Resolve a channel's stream URL, offered only if it verifies as reachable.

        Request headers supplied by the client take precedence over the
        hints carried by the channel record.
        """
        channel = await self.get_channel(channel_id)
        if channel is None or not channel.stream_url:
            return None

        is_valid = await self.verifier.verify(
            channel.stream_url,
            user_agent or channel.user_agent,
            referrer or channel.referrer,
        )
        if not is_valid:
            logger.info("Stream for %s failed verification", channel_id)
            return None

        return StreamResult(url=channel.stream_url, title=channel.name)
