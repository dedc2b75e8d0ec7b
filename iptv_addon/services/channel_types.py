"""
Shared dataclasses used across the channel aggregation pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


PROTOCOL_ID_PREFIX = "iptv-"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_optional_text(value: Any) -> str | None:
    text = _as_text(value)
    return text or None


def _as_tags(value: Any) -> tuple[str, ...]:
    """Normalize a feed list field into an ordered, duplicate-free tuple."""
    if isinstance(value, str):
        value = [value]
    if not value or not isinstance(value, (list, tuple)):
        return ()
    tags: list[str] = []
    for item in value:
        text = _as_text(item)
        if text and text not in tags:
            tags.append(text)
    return tuple(tags)


@dataclass(slots=True)
class ChannelRecord:
    """Canonical channel after normalization, keyed by unprefixed id."""
    id: str
    name: str
    logo: str | None = None
    categories: tuple[str, ...] = ()
    country: str = ""
    languages: tuple[str, ...] = ()
    stream_url: str | None = None
    user_agent: str | None = None
    referrer: str | None = None

    @classmethod
    def from_feed(cls, payload: dict[str, Any]) -> ChannelRecord:
        """Build a record from a structured-feed channel object (no stream yet)."""
        channel_id = _as_text(payload.get("id"))
        return cls(
            id=channel_id,
            name=_as_text(payload.get("name")) or channel_id,
            logo=_as_optional_text(payload.get("logo")),
            categories=_as_tags(payload.get("categories")),
            country=_as_text(payload.get("country")),
            languages=_as_tags(payload.get("languages")),
        )

    def with_stream(self, stream: StreamEntry) -> ChannelRecord:
        return replace(
            self,
            stream_url=stream.url,
            user_agent=stream.user_agent,
            referrer=stream.referrer,
        )


@dataclass(slots=True)
class StreamEntry:
    """Structured-feed stream object joined to a channel by id."""
    channel: str
    url: str
    user_agent: str | None = None
    referrer: str | None = None

    @classmethod
    def from_feed(cls, payload: dict[str, Any]) -> StreamEntry:
        return cls(
            channel=_as_text(payload.get("channel")),
            url=_as_text(payload.get("url")),
            user_agent=_as_optional_text(payload.get("user_agent")),
            referrer=_as_optional_text(payload.get("http_referrer") or payload.get("referrer")),
        )


@dataclass(slots=True)
class StreamResult:
    """Verified stream handed to the protocol layer."""
    url: str
    title: str


def to_protocol_id(channel_id: str) -> str:
    return f"{PROTOCOL_ID_PREFIX}{channel_id}"


def from_protocol_id(protocol_id: str) -> str | None:
    """Strip the namespace prefix; ids outside the namespace yield None."""
    if not protocol_id.startswith(PROTOCOL_ID_PREFIX):
        return None
    return protocol_id[len(PROTOCOL_ID_PREFIX):]


__all__ = [
    "PROTOCOL_ID_PREFIX",
    "ChannelRecord",
    "StreamEntry",
    "StreamResult",
    "to_protocol_id",
    "from_protocol_id",
]
