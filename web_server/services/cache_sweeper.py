import asyncio
import logging

from pymongo.errors import PyMongoError

from services.recommendation_cache import RecommendationCache

logger = logging.getLogger(__name__)


async def sweep_once(cache: RecommendationCache) -> int:
    """One sweep pass. Failures are logged and reported as zero deletions."""
    try:
        deleted = await cache.sweep_expired()
    except PyMongoError as e:
        logger.warning("Match cache sweep failed: %s", e)
        return 0
    if deleted:
        logger.info("Swept %d expired match cache rows", deleted)
    return deleted


async def run_cache_sweeper(cache: RecommendationCache, interval_seconds: float) -> None:
    """Sweep expired rows forever. Runs until cancelled."""
    logger.info("Match cache sweeper started (every %ss)", interval_seconds)
    while True:
        await asyncio.sleep(interval_seconds)
        await sweep_once(cache)
