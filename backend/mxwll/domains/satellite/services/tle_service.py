import asyncio
import logging
from typing import List, Dict, Iterable, Optional, Tuple

import aiohttp

from mxwll.core.config import (
    CELESTRAK_BASE_URL,
    TLE_FETCH_TIMEOUT_SECONDS,
    TLE_USER_AGENT,
)
from mxwll.domains.satellite.interfaces.tle_service_interface import (
    TLEServiceInterface,
)
from mxwll.domains.satellite.models.satellite_model import (
    CONSTELLATION_INFO,
    ConstellationGroup,
    TLEData,
)
from mxwll.domains.satellite.services.tle_cache import CacheStatus, TLECache
from mxwll.domains.satellite.services.tle_parser import parse_tle_text

logger = logging.getLogger(__name__)


class TLEFetchError(RuntimeError):
    """The upstream TLE source could not be read"""


def combine_cache_status(statuses: Iterable[CacheStatus]) -> CacheStatus:
    """Worst status across several reads: STALE over MISS over HIT"""
    statuses = list(statuses)
    if CacheStatus.STALE in statuses:
        return CacheStatus.STALE
    if not statuses or CacheStatus.MISS in statuses:
        return CacheStatus.MISS
    return CacheStatus.HIT


class TLEService(TLEServiceInterface):
    """CelesTrak TLE source with a freshness/stale-fallback cache"""

    def __init__(
        self,
        cache: Optional[TLECache] = None,
        base_url: str = CELESTRAK_BASE_URL,
        user_agent: str = TLE_USER_AGENT,
        timeout_seconds: float = TLE_FETCH_TIMEOUT_SECONDS,
    ):
        self._cache = cache or TLECache()
        self._base_url = base_url
        self._user_agent = user_agent
        self._timeout_seconds = timeout_seconds

    @property
    def cache(self) -> TLECache:
        return self._cache

    async def fetch_group_text(self, group: ConstellationGroup) -> str:
        """Fetch the three-line TLE listing of a group from CelesTrak"""
        celestrak_group = CONSTELLATION_INFO[group].celestrak_group
        params = {"GROUP": celestrak_group, "FORMAT": "tle"}

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout_seconds),
                headers={"User-Agent": self._user_agent},
            ) as session:
                async with session.get(self._base_url, params=params) as response:
                    if response.status != 200:
                        raise TLEFetchError(
                            f"CelesTrak returned {response.status} for group {celestrak_group}"
                        )
                    text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TLEFetchError(
                f"Error fetching group {celestrak_group} from CelesTrak: {e}"
            ) from e

        logger.info(f"Fetched {len(text)} bytes of TLE data for group {group.value}")
        return text

    async def get_group(
        self, group: ConstellationGroup
    ) -> Tuple[List[TLEData], CacheStatus]:
        """
        Records of one group.

        Fresh cache entries are served as HIT. Otherwise the group is refetched
        (MISS); if that fails an expired entry is served as STALE, and with no
        entry at all the fetch error propagates.
        """
        cached = await self._cache.get(group.value)
        if cached and self._cache.is_fresh(cached):
            return parse_tle_text(cached.data, group.value), CacheStatus.HIT

        try:
            text = await self.fetch_group_text(group)
        except TLEFetchError as e:
            if cached is None:
                raise
            logger.warning(f"Refresh failed for {group.value}, using stale data: {e}")
            return parse_tle_text(cached.data, group.value), CacheStatus.STALE

        await self._cache.set(group.value, text)
        return parse_tle_text(text, group.value), CacheStatus.MISS

    async def get_groups(
        self, groups: Iterable[ConstellationGroup]
    ) -> Tuple[Dict[str, List[TLEData]], CacheStatus]:
        results: Dict[str, List[TLEData]] = {}
        statuses = []

        for group in groups:
            try:
                records, status = await self.get_group(group)
            except TLEFetchError as e:
                logger.error(f"Failed to fetch {group.value}: {e}")
                continue
            results[group.value] = records
            statuses.append(status)

        return results, combine_cache_status(statuses)

    async def refresh_groups(self, groups: Iterable[ConstellationGroup]) -> int:
        refreshed = 0
        for group in groups:
            try:
                text = await self.fetch_group_text(group)
            except TLEFetchError as e:
                logger.error(f"Scheduled refresh of {group.value} failed: {e}")
                continue
            await self._cache.set(group.value, text)
            refreshed += 1
        return refreshed

    async def find_record(
        self, norad_id: str, groups: Iterable[ConstellationGroup]
    ) -> Optional[TLEData]:
        norad_id = norad_id.strip().lstrip("0") or "0"
        records_by_group, _ = await self.get_groups(groups)
        for records in records_by_group.values():
            for record in records:
                if (record.norad_id.lstrip("0") or "0") == norad_id:
                    return record
        return None


async def refresh_tles_periodically(
    tle_service: TLEServiceInterface,
    groups: List[ConstellationGroup],
    interval_seconds: float,
) -> None:
    """Keep the cache warm by refetching groups on a fixed interval until cancelled"""
    logger.info(
        f"Starting TLE refresh every {interval_seconds}s for {[g.value for g in groups]}"
    )
    while True:
        try:
            refreshed = await tle_service.refresh_groups(groups)
            logger.info(f"Refreshed {refreshed}/{len(groups)} TLE groups")
        except Exception as e:
            logger.error(f"Error during scheduled TLE refresh: {e}", exc_info=True)
        await asyncio.sleep(interval_seconds)
