import logging
import re
from dataclasses import dataclass, field

from iptv_addon.services.channel_types import ChannelRecord

logger = logging.getLogger(__name__)

ENTRY_MARKER = "#EXTINF"
OPTION_MARKER = "#EXTVLCOPT:"

_ATTRIBUTE_RE = re.compile(r'([A-Za-z0-9_-]+)="([^"]*)"')
_NON_WORD_RE = re.compile(r"\W+", re.ASCII)
_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(slots=True)
class _PendingEntry:
    """Metadata line seen, URL line not yet reached."""
    name: str
    attributes: dict[str, str]
    options: dict[str, str] = field(default_factory=dict)


def parse_playlist(text: str) -> list[ChannelRecord]:
    """
    Parse an extended M3U playlist into channel records.

    Each #EXTINF line opens an entry; the next non-directive line is its
    stream URL. #EXTVLCOPT user-agent/referrer options in between are kept.
    Missing attributes default to empty and never fail the parse; an entry
    without a URL line gets an empty URL.

    Args:
        text: Full playlist document

    Returns:
        Records in document order (country and languages are always empty)
    """
    if not text:
        return []

    channels: list[ChannelRecord] = []
    pending: _PendingEntry | None = None

    for raw_line in _LINE_SPLIT_RE.split(text.lstrip("\ufeff")):
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(ENTRY_MARKER):
            if pending is not None:
                channels.append(_build_record(pending, ""))
            pending = _PendingEntry(
                name=_extract_name(line),
                attributes=_extract_attributes(line),
            )
        elif line.startswith("#"):
            if pending is not None and line.startswith(OPTION_MARKER):
                key, _, value = line[len(OPTION_MARKER):].partition("=")
                pending.options[key.strip().lower()] = value.strip()
        elif pending is not None:
            channels.append(_build_record(pending, line))
            pending = None

    if pending is not None:
        channels.append(_build_record(pending, ""))

    logger.debug("Parsed %s playlist entries", len(channels))
    return channels


def derive_channel_id(name: str) -> str:
    """Lowercase the name and collapse every run of non-word characters to '-'."""
    return _NON_WORD_RE.sub("-", name.lower())


def _extract_attributes(line: str) -> dict[str, str]:
    attributes = {}
    for key, value in _ATTRIBUTE_RE.findall(line):
        value = value.strip()
        if value:
            attributes[key.lower()] = value
    return attributes


def _extract_name(line: str) -> str:
    """Text after the first comma that sits outside a quoted attribute value."""
    # Not the last comma: display names such as "Channel, HD" keep their comma
    in_quotes = False
    for index, char in enumerate(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            return line[index + 1:].strip()
    return "Unknown"


def _build_record(entry: _PendingEntry, url: str) -> ChannelRecord:
    attributes = entry.attributes
    group = attributes.get("group-title")
    return ChannelRecord(
        id=attributes.get("tvg-id") or derive_channel_id(entry.name),
        name=entry.name,
        logo=attributes.get("tvg-logo"),
        categories=(group.lower(),) if group else (),
        country="",
        languages=(),
        stream_url=url,
        user_agent=entry.options.get("http-user-agent") or None,
        referrer=entry.options.get("http-referrer") or entry.options.get("http-referer") or None,
    )
