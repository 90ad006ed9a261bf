from abc import ABC, abstractmethod
from typing import List, Iterable, Optional, Tuple
from datetime import datetime

from skyfield.api import EarthSatellite
from skyfield.positionlib import Geocentric

from mxwll.domains.common.utils.result import Result
from mxwll.domains.satellite.models.satellite_model import (
    EciState,
    GeodeticPosition,
    OrbitalElementSet,
    OrbitPath,
    SatellitePosition,
    TLEData,
)


class OrbitServiceInterface(ABC):
    """Orbit propagation service interface"""

    @abstractmethod
    def propagate_eci(
        self, elements: OrbitalElementSet, when: datetime
    ) -> Result[EciState]:
        """Propagate an element set to a UTC instant in the inertial frame"""
        pass

    @abstractmethod
    def eci_to_geodetic(self, geocentric: Geocentric) -> Tuple[float, float, float]:
        """Convert a skyfield position to latitude, longitude and altitude"""
        pass

    @abstractmethod
    def propagate_geodetic(
        self,
        elements: OrbitalElementSet,
        when: datetime,
        satellite: Optional[EarthSatellite] = None,
    ) -> Result[GeodeticPosition]:
        """Propagate an element set and return its sub-satellite point"""
        pass

    @abstractmethod
    def propagate_position(
        self, record: TLEData, when: datetime
    ) -> Result[SatellitePosition]:
        """Parse, propagate and convert a single satellite record"""
        pass

    @abstractmethod
    def propagate_all_results(
        self, records: Iterable[TLEData], when: Optional[datetime] = None
    ) -> List[Result[SatellitePosition]]:
        """Propagate a batch, one result per record in input order"""
        pass

    @abstractmethod
    def propagate_all(
        self, records: Iterable[TLEData], when: Optional[datetime] = None
    ) -> List[SatellitePosition]:
        """Propagate a batch, keeping only the satellites that succeeded"""
        pass

    @abstractmethod
    def orbital_period_minutes(self, elements: OrbitalElementSet) -> float:
        """Orbital period derived from mean motion"""
        pass

    @abstractmethod
    def calculate_orbit_path(
        self,
        elements: OrbitalElementSet,
        duration_minutes: Optional[float] = None,
        num_points: int = 360,
        now: Optional[datetime] = None,
    ) -> OrbitPath:
        """Sample a ground track centred on the given instant"""
        pass
