from pydantic import BaseModel, ConfigDict, Field

from iptv_addon.services.channel_types import ChannelRecord, StreamResult, to_protocol_id


GENRE_OPTIONS = [
    "animation", "business", "classic", "comedy", "cooking", "culture", "documentary", "education",
    "entertainment", "family", "kids", "legislative", "lifestyle", "movies", "music", "general",
    "religious", "news", "outdoor", "relax", "series", "science", "shop", "sports", "travel",
    "weather", "xxx", "auto",
]


class AddonModel(BaseModel):
    """Addon protocol models serialize with camelCase keys as written"""
    model_config = ConfigDict(populate_by_name=True)


class ExtraProperty(AddonModel):
    name: str
    isRequired: bool = False
    options: list[str] = Field(default_factory=list)


class CatalogDefinition(AddonModel):
    type: str = "tv"
    id: str = Field(..., description="Catalog id, e.g. 'iptv-channels-GR'")
    name: str
    extra: list[ExtraProperty] = Field(default_factory=list)


class BehaviorHints(AddonModel):
    configurable: bool = False
    configurationRequired: bool = False


class Manifest(AddonModel):
    """Addon manifest"""
    id: str
    name: str
    version: str
    description: str
    resources: list[str]
    types: list[str]
    catalogs: list[CatalogDefinition]
    idPrefixes: list[str]
    behaviorHints: BehaviorHints = Field(default_factory=BehaviorHints)
    logo: str | None = None
    icon: str | None = None
    background: str | None = None


class MetaPreview(AddonModel):
    """Catalog entry for a single channel"""
    id: str = Field(..., description="Prefixed channel id")
    type: str = "tv"
    name: str
    genres: list[str] = Field(default_factory=list)
    poster: str | None = None
    posterShape: str = "square"
    background: str | None = None
    logo: str | None = None

    @classmethod
    def from_channel(cls, channel: ChannelRecord) -> "MetaPreview":
        return cls(
            id=to_protocol_id(channel.id),
            name=channel.name,
            genres=list(channel.categories),
            poster=channel.logo,
            background=channel.logo,
            logo=channel.logo,
        )


class Stream(AddonModel):
    url: str
    title: str
    isRemote: bool | None = None

    @classmethod
    def from_result(cls, result: StreamResult) -> "Stream":
        return cls(url=result.url, title=result.title, isRemote=True)


class Meta(AddonModel):
    """Full channel details"""
    id: str
    type: str = "tv"
    name: str
    genres: list[str] = Field(default_factory=list)
    poster: str | None = None
    background: str | None = None
    streams: list[Stream] = Field(default_factory=list)

    @classmethod
    def from_channel(cls, channel: ChannelRecord) -> "Meta":
        return cls(
            id=to_protocol_id(channel.id),
            name=channel.name,
            genres=list(channel.categories),
            poster=channel.logo,
            background=channel.logo,
            streams=[Stream(url=channel.stream_url or "", title=channel.name)],
        )


class CatalogResponse(AddonModel):
    metas: list[MetaPreview]


class MetaResponse(AddonModel):
    meta: Meta | None


class StreamResponse(AddonModel):
    streams: list[Stream]
