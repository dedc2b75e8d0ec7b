from typing import Annotated
from urllib.parse import parse_qsl
import logging

from fastapi import APIRouter, Depends

from iptv_addon import __version__
from iptv_addon.config import CustomSettings, settings
from iptv_addon.dependencies import get_catalog_service, get_services
from iptv_addon.schemas import (
    GENRE_OPTIONS,
    CatalogDefinition,
    CatalogResponse,
    ExtraProperty,
    Manifest,
    Meta,
    MetaPreview,
    MetaResponse,
    Stream,
    StreamResponse,
)
from iptv_addon.services.catalog_service import CONTENT_TYPE, CatalogService, catalog_id_for_country
from iptv_addon.services.channel_types import PROTOCOL_ID_PREFIX, from_protocol_id


logger = logging.getLogger(__name__)

main_router = APIRouter()

CatalogDep = Annotated[CatalogService, Depends(get_catalog_service)]


def parse_extra(extra: str | None) -> dict[str, str]:
    """Parse an addon 'extra' path segment such as 'genre=News&skip=0'."""
    if not extra:
        return {}
    return dict(parse_qsl(extra, keep_blank_values=True))


def build_manifest(app_settings: CustomSettings) -> Manifest:
    """Manifest with one catalog per included country"""
    countries = app_settings.include_countries
    return Manifest(
        id="org.iptv",
        name="IPTV Addon",
        version=__version__,
        description=f"Watch live TV from {', '.join(countries)}",
        resources=["catalog", "meta", "stream"],
        types=[CONTENT_TYPE],
        catalogs=[
            CatalogDefinition(
                id=catalog_id_for_country(country),
                name=f"IPTV - {country}",
                extra=[ExtraProperty(name="genre", options=GENRE_OPTIONS)],
            )
            for country in countries
        ],
        idPrefixes=[PROTOCOL_ID_PREFIX],
        logo="https://dl.strem.io/addon-logo.png",
        icon="https://dl.strem.io/addon-logo.png",
        background="https://dl.strem.io/addon-background.jpg",
    )


@main_router.get("/")
async def root() -> dict:
    """Root endpoint with service information"""
    next_run = get_services().scheduler.get_next_run_time()

    return {
        "service": "IPTV Addon",
        "version": __version__,
        "next_scheduled_refresh": next_run.isoformat() if next_run else None,
        "endpoints": {
            "manifest": "/manifest.json - Addon manifest",
            "catalog": "/catalog/{type}/{id}.json - Channel catalog",
            "meta": "/meta/{type}/{id}.json - Channel details",
            "stream": "/stream/{type}/{id}.json - Verified stream",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health")
async def health_check() -> dict:
    """Health check endpoint"""
    services = get_services()
    next_run = services.scheduler.get_next_run_time()
    return {
        "status": "ok",
        "cached_keys": len(services.cache),
        "scheduler_running": services.scheduler.scheduler.running if services.scheduler.scheduler else False,
        "next_refresh": next_run.isoformat() if next_run else None
    }


@main_router.get("/manifest.json", response_model=Manifest, response_model_exclude_none=True)
async def manifest() -> Manifest:
    return build_manifest(settings)


@main_router.get("/catalog/{content_type}/{catalog_id}.json", response_model=CatalogResponse)
@main_router.get("/catalog/{content_type}/{catalog_id}/{extra:path}.json", response_model=CatalogResponse)
async def catalog(
    content_type: str,
    catalog_id: str,
    catalog_service: CatalogDep,
    extra: str | None = None
) -> CatalogResponse:
    """List channels of a country catalog, optionally narrowed by genre"""
    genre = parse_extra(extra).get("genre") or None
    channels = await catalog_service.list_channels(content_type, catalog_id, genre=genre)
    return CatalogResponse(metas=[MetaPreview.from_channel(c) for c in channels])


@main_router.get("/meta/{content_type}/{meta_id}.json", response_model=MetaResponse)
async def meta(content_type: str, meta_id: str, catalog_service: CatalogDep) -> MetaResponse:
    channel_id = from_protocol_id(meta_id)
    if channel_id is None:
        return MetaResponse(meta=None)

    channel = await catalog_service.get_channel(channel_id)
    if channel is None:
        logger.info("Meta requested for unknown channel %s", meta_id)
        return MetaResponse(meta=None)

    return MetaResponse(meta=Meta.from_channel(channel))


@main_router.get(
    "/stream/{content_type}/{stream_id}.json",
    response_model=StreamResponse,
    response_model_exclude_none=True,
)
@main_router.get(
    "/stream/{content_type}/{stream_id}/{extra:path}.json",
    response_model=StreamResponse,
    response_model_exclude_none=True,
)
async def stream(
    content_type: str,
    stream_id: str,
    catalog_service: CatalogDep,
    extra: str | None = None
) -> StreamResponse:
    """Offer the channel stream only after it verifies as reachable"""
    channel_id = from_protocol_id(stream_id)
    if channel_id is None:
        return StreamResponse(streams=[])

    options = parse_extra(extra)
    result = await catalog_service.get_verified_stream(
        channel_id,
        user_agent=options.get("userAgent") or None,
        referrer=options.get("httpReferrer") or None,
    )
    if result is None:
        return StreamResponse(streams=[])

    return StreamResponse(streams=[Stream.from_result(result)])
