from abc import ABC, abstractmethod
from typing import List, Dict, Iterable, Optional, Tuple

from mxwll.domains.satellite.models.satellite_model import ConstellationGroup, TLEData
from mxwll.domains.satellite.services.tle_cache import CacheStatus


class TLEServiceInterface(ABC):
    """TLE source interface, used to fetch and cache satellite element sets"""

    @abstractmethod
    async def fetch_group_text(self, group: ConstellationGroup) -> str:
        """Fetch the raw three-line TLE listing of a group from upstream"""
        pass

    @abstractmethod
    async def get_group(
        self, group: ConstellationGroup
    ) -> Tuple[List[TLEData], CacheStatus]:
        """Records of one group, served from cache when fresh"""
        pass

    @abstractmethod
    async def get_groups(
        self, groups: Iterable[ConstellationGroup]
    ) -> Tuple[Dict[str, List[TLEData]], CacheStatus]:
        """Records of several groups; groups that cannot be fetched are skipped"""
        pass

    @abstractmethod
    async def refresh_groups(self, groups: Iterable[ConstellationGroup]) -> int:
        """Refetch groups regardless of freshness, returning how many succeeded"""
        pass

    @abstractmethod
    async def find_record(
        self, norad_id: str, groups: Iterable[ConstellationGroup]
    ) -> Optional[TLEData]:
        """Look a satellite up by NORAD id across groups"""
        pass
