import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from mxwll.core.config import TLE_CACHE_TTL_SECONDS, TLE_STALE_TTL_SECONDS

logger = logging.getLogger(__name__)


class CacheStatus(str, Enum):
    """How a cached read was served"""

    HIT = "HIT"
    MISS = "MISS"
    STALE = "STALE"


@dataclass(frozen=True)
class CacheEntry:
    data: str
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp


class TLECache:
    """Raw TLE listings per group, stored with the time they were fetched.

    Entries outlive the freshness TTL so an expired listing can still be
    served when the upstream fetch fails; they are dropped after the stale
    TTL. Uses redis when a client is given, otherwise a process-local dict.
    """

    def __init__(
        self,
        redis_client: Optional[Redis] = None,
        ttl_seconds: int = TLE_CACHE_TTL_SECONDS,
        stale_ttl_seconds: int = TLE_STALE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._redis = redis_client
        self._memory: Dict[str, CacheEntry] = {}
        self.ttl_seconds = ttl_seconds
        self.stale_ttl_seconds = stale_ttl_seconds
        self.clock = clock

    @staticmethod
    def _key(group: str) -> str:
        return f"cache:tle:{group}"

    def is_fresh(self, entry: CacheEntry) -> bool:
        return entry.age(self.clock()) < self.ttl_seconds

    async def get(self, group: str) -> Optional[CacheEntry]:
        key = self._key(group)

        if self._redis is None:
            entry = self._memory.get(key)
            if entry and entry.age(self.clock()) >= self.stale_ttl_seconds:
                del self._memory[key]
                return None
            return entry

        try:
            raw = await self._redis.get(key)
        except RedisError as e:
            logger.error(f"Redis error reading {key}: {e}")
            return None

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            payload = json.loads(raw)
            return CacheEntry(data=payload["data"], timestamp=float(payload["timestamp"]))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None

    async def set(self, group: str, data: str) -> CacheEntry:
        key = self._key(group)
        entry = CacheEntry(data=data, timestamp=self.clock())

        if self._redis is None:
            self._memory[key] = entry
            return entry

        try:
            await self._redis.set(
                key,
                json.dumps({"data": entry.data, "timestamp": entry.timestamp}),
                ex=self.stale_ttl_seconds,
            )
        except RedisError as e:
            # A failed write only costs a refetch next time
            logger.error(f"Redis error writing {key}: {e}")
        return entry
