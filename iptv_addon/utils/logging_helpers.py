"""
Structured logging helpers for consistent log formatting.
"""
import logging


def log_source_fetched(logger: logging.Logger, source_name: str, count: int) -> None:
    """
    Log a successful source fetch.

    Args:
        logger: Logger instance
        source_name: Human name of the source (e.g. "channels")
        count: Number of records retrieved
    """
    logger.info(f"Fetched {source_name}: {count} records")


def log_source_failed(logger: logging.Logger, source_name: str, error: Exception) -> None:
    """
    Log a failed source fetch without a traceback (failures are expected).

    Args:
        logger: Logger instance
        source_name: Human name of the source
        error: The exception that ended the fetch
    """
    logger.error(f"Failed to fetch {source_name}: {type(error).__name__}: {error}")


def log_cache_fallback(logger: logging.Logger, source_name: str, count: int) -> None:
    """Log that stale cached data is being served."""
    logger.warning(f"Serving {source_name} from cache ({count} records)")


def log_merge_summary(
    logger: logging.Logger,
    playlist_count: int,
    feed_count: int,
    merged_count: int
) -> None:
    """
    Log merge operation summary.

    Args:
        logger: Logger instance
        playlist_count: Playlist records offered to the merge
        feed_count: Filtered structured-feed records offered to the merge
        merged_count: Unique channels after the merge
    """
    logger.info(
        f"Merge summary - Playlist: {playlist_count}, Feed: {feed_count}, Unique channels: {merged_count}"
    )


def log_verdict(logger: logging.Logger, url: str, verdict: bool, reason: str) -> None:
    """Log a freshly computed stream verdict."""
    logger.info(f"Stream {'online' if verdict else 'offline'} ({reason}): {url}")
