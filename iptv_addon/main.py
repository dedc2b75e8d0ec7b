from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from iptv_addon import __version__
from iptv_addon.config import setup_logging
from iptv_addon.dependencies import close_services, get_services
from iptv_addon.routers import main_router


setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting IPTV Addon...")

    services = get_services()
    if services.settings.refresh_enabled:
        logger.info("Starting refresh scheduler...")
        services.scheduler.start()
    else:
        logger.info("Periodic refresh disabled; collection caches live until restart")

    logger.info("IPTV Addon started successfully")

    yield

    logger.info("Shutting down IPTV Addon...")
    try:
        await close_services()
    except Exception as e:
        logger.error(f"Error during shutdown: {e}", exc_info=True)
    logger.info("IPTV Addon stopped")


app = FastAPI(
    title="IPTV Addon",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(main_router)

