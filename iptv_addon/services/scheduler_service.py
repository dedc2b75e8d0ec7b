import logging
from datetime import datetime
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from iptv_addon.services.aggregator import CatalogAggregator
from iptv_addon.services.cache_store import COLLECTION_KEYS, CacheStore


logger = logging.getLogger(__name__)

JOB_ID = "collection_refresh"


class RefreshScheduler:
    """Periodically drops the collection caches and re-warms them"""

    def __init__(self, cache: CacheStore, aggregator: CatalogAggregator, interval_sec: float):
        self.cache = cache
        self.aggregator = aggregator
        self.interval_sec = interval_sec
        self.scheduler: AsyncIOScheduler | None = None

    async def refresh(self) -> int:
        """Invalidate collection caches and rebuild the channel list"""
        removed = self.cache.delete(*COLLECTION_KEYS)
        logger.info("Invalidated %s collection cache entries", removed)
        channels = await self.aggregator.get_all_channels()
        logger.info("Refresh complete: %s channels available", len(channels))
        return len(channels)

    async def _refresh_job(self) -> None:
        """Background job that runs the refresh"""
        logger.info("Scheduled collection refresh triggered")
        try:
            await self.refresh()
        except Exception as e:
            logger.error(f"Exception in scheduled refresh: {e}", exc_info=True)

    def start(self) -> None:
        """Start the scheduler with the refresh job"""
        if self.scheduler and self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler = AsyncIOScheduler(timezone='UTC')
        self.scheduler.add_job(
            self._refresh_job,
            trigger=IntervalTrigger(seconds=self.interval_sec),
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
        )

        self.scheduler.start()
        next_time = self.get_next_run_time()
        logger.info(
            "Scheduler started. Next refresh: %s",
            next_time.isoformat() if next_time else "unknown"
        )

    def shutdown(self) -> None:
        """Shutdown the scheduler"""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")
            self.scheduler = None

    def get_next_run_time(self) -> datetime | None:
        """Get next scheduled refresh time"""
        if not self.scheduler:
            return None
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
