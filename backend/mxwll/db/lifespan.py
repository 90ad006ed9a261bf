import asyncio
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI

# For Redis client management
import redis.asyncio as aioredis

from mxwll.core.config import (
    REDIS_URL,
    TLE_REFRESH_GROUPS,
    TLE_REFRESH_INTERVAL_SECONDS,
)
from mxwll.domains.satellite.models.satellite_model import ConstellationGroup
from mxwll.domains.satellite.services.tle_cache import TLECache
from mxwll.domains.satellite.services.tle_service import (
    TLEService,
    refresh_tles_periodically,
)

logger = logging.getLogger(__name__)


async def initialize_redis_client(app: FastAPI, redis_url: Optional[str] = REDIS_URL):
    if not redis_url:
        app.state.redis = None
        logger.info("REDIS_URL not set, TLE cache will be kept in process memory")
        return

    logger.info(f"Attempting to connect to Redis at {redis_url}")
    try:
        redis_client = aioredis.Redis.from_url(
            redis_url, encoding="utf-8", decode_responses=False
        )
        await redis_client.ping()
        app.state.redis = redis_client
        logger.info(
            "Successfully connected to Redis and stored client in app.state.redis"
        )
    except Exception as e:
        app.state.redis = None
        logger.error(
            f"Failed to connect to Redis: {e}. Falling back to the in-process TLE cache."
        )


def resolve_refresh_groups(names: List[str]) -> List[ConstellationGroup]:
    groups = []
    for name in names:
        try:
            groups.append(ConstellationGroup(name.lower()))
        except ValueError:
            logger.warning(f"Ignoring unknown TLE refresh group '{name}'")
    return groups


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Context manager for FastAPI startup and shutdown logic."""
    logger.info("Application startup sequence initiated...")

    await initialize_redis_client(app)
    app.state.tle_service = TLEService(cache=TLECache(redis_client=app.state.redis))

    refresh_task = None
    refresh_groups = resolve_refresh_groups(TLE_REFRESH_GROUPS)
    if TLE_REFRESH_INTERVAL_SECONDS > 0 and refresh_groups:
        refresh_task = asyncio.create_task(
            refresh_tles_periodically(
                app.state.tle_service, refresh_groups, TLE_REFRESH_INTERVAL_SECONDS
            )
        )
    else:
        logger.info("Scheduled TLE refresh disabled, groups are fetched on demand")

    logger.info("Application startup complete.")

    yield

    if refresh_task is not None:
        refresh_task.cancel()
        try:
            await refresh_task
        except asyncio.CancelledError:
            logger.info("TLE refresh task stopped")

    if app.state.redis:
        logger.info("Closing Redis connection...")
        await app.state.redis.close()

    logger.info("Application shutdown complete.")
