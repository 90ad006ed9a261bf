from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Tuple

from pydantic import BaseModel, Field as PydanticField
from sgp4.api import Satrec


class ConstellationGroup(str, Enum):
    """Constellation groups offered by the tracker"""

    STATIONS = "stations"
    GPS = "gps"
    WEATHER = "weather"
    SCIENCE = "science"
    STARLINK = "starlink"
    ACTIVE = "active"


class ConstellationInfo(BaseModel):
    """Display metadata for a constellation group"""

    id: ConstellationGroup = PydanticField(..., description="Group identifier")
    name: str = PydanticField(..., description="Display name")
    description: str = PydanticField(..., description="Short description")
    color: str = PydanticField(..., description="Hex colour used by the globe")
    celestrak_group: str = PydanticField(..., description="CelesTrak GROUP value")


CONSTELLATION_INFO: Dict[ConstellationGroup, ConstellationInfo] = {
    info.id: info
    for info in [
        ConstellationInfo(
            id=ConstellationGroup.STATIONS,
            name="Space Stations",
            description="ISS, Tiangong, and other crewed spacecraft",
            color="#ff6b6b",
            celestrak_group="stations",
        ),
        ConstellationInfo(
            id=ConstellationGroup.GPS,
            name="GPS",
            description="Global Positioning System satellites",
            color="#4ecdc4",
            celestrak_group="gps-ops",
        ),
        ConstellationInfo(
            id=ConstellationGroup.WEATHER,
            name="Weather",
            description="Meteorological and Earth observation",
            color="#45b7d1",
            celestrak_group="weather",
        ),
        ConstellationInfo(
            id=ConstellationGroup.SCIENCE,
            name="Science",
            description="Scientific and research missions",
            color="#f7dc6f",
            celestrak_group="science",
        ),
        ConstellationInfo(
            id=ConstellationGroup.STARLINK,
            name="Starlink",
            description="SpaceX internet constellation",
            color="#95a5a6",
            celestrak_group="starlink",
        ),
        ConstellationInfo(
            id=ConstellationGroup.ACTIVE,
            name="Active",
            description="Every active satellite tracked by CelesTrak",
            color="#9b59b6",
            celestrak_group="active",
        ),
    ]
}


class TLEData(BaseModel):
    """A satellite record as delivered by the TLE source"""

    name: str = PydanticField(..., description="Satellite name")
    norad_id: str = PydanticField(..., description="NORAD catalog number")
    line1: str = PydanticField(..., description="TLE line 1")
    line2: str = PydanticField(..., description="TLE line 2")
    group: str = PydanticField(..., description="Constellation group")


@dataclass(frozen=True)
class OrbitalElementSet:
    """Parsed two-line element set together with its initialised SGP4 record.

    Angles are in degrees, ``mean_motion`` is in radians per minute (the unit
    SGP4 works in) and ``epoch`` is timezone-aware UTC.
    """

    norad_id: str
    classification: str
    international_designator: str
    epoch: datetime
    mean_motion: float
    mean_motion_rev_per_day: float
    eccentricity: float
    inclination_deg: float
    raan_deg: float
    argument_of_perigee_deg: float
    mean_anomaly_deg: float
    mean_motion_dot: float
    mean_motion_ddot: float
    bstar: float
    element_set_number: int
    revolution_number: int
    line1: str
    line2: str
    satrec: Satrec = field(repr=False, compare=False)
    name: str = ""
    group: str = ""

    @property
    def perigee_altitude_km(self) -> float:
        return self.satrec.altp * self.satrec.radiusearthkm

    @property
    def apogee_altitude_km(self) -> float:
        return self.satrec.alta * self.satrec.radiusearthkm


@dataclass(frozen=True)
class EciState:
    """Position (km) and velocity (km/s) in the Earth-centred inertial frame"""

    position: Tuple[float, float, float]
    velocity: Tuple[float, float, float]
    timestamp: datetime


@dataclass(frozen=True)
class GeodeticPosition:
    """Sub-satellite point and height above the WGS-84 ellipsoid"""

    latitude: float
    longitude: float
    altitude: float  # km
    velocity: float  # km/s
    timestamp: datetime


class SatellitePosition(BaseModel):
    """A satellite record joined with its position at one instant"""

    id: str = PydanticField(..., description="Record identifier (NORAD id)")
    name: str = PydanticField(..., description="Satellite name")
    norad_id: str = PydanticField(..., description="NORAD catalog number")
    latitude: float = PydanticField(..., description="Latitude in degrees")
    longitude: float = PydanticField(..., description="Longitude in degrees")
    altitude: float = PydanticField(..., description="Altitude in km")
    velocity: float = PydanticField(..., description="Inertial speed in km/s")
    group: str = PydanticField(..., description="Constellation group")
    line1: str = PydanticField(..., description="TLE line 1")
    line2: str = PydanticField(..., description="TLE line 2")
    timestamp: datetime = PydanticField(..., description="Propagation instant, UTC")


class OrbitPoint(BaseModel):
    """One sample of a ground track"""

    latitude: float = PydanticField(..., description="Latitude in degrees")
    longitude: float = PydanticField(..., description="Longitude in degrees")
    altitude: float = PydanticField(..., description="Altitude in km")
    time: datetime = PydanticField(..., description="Sample instant, UTC")


class OrbitPath(BaseModel):
    """Ground track sampled across a window centred on a reference instant"""

    norad_id: str = PydanticField(..., description="NORAD catalog number")
    name: str = PydanticField("", description="Satellite name")
    period_minutes: float = PydanticField(..., description="Orbital period used")
    period_fallback: bool = PydanticField(
        False, description="True when the default period replaced a degenerate one"
    )
    duration_minutes: float = PydanticField(..., description="Sampled window length")
    requested_points: int = PydanticField(..., description="Requested sample count")
    step_seconds: float = PydanticField(..., description="Time between samples")
    center_time: datetime = PydanticField(..., description="Window midpoint, UTC")
    start_time: datetime = PydanticField(..., description="First tick, UTC")
    end_time: datetime = PydanticField(..., description="Last tick, UTC")
    points: List[OrbitPoint] = PydanticField(..., description="Samples in order")
    segments: Optional[List[List[OrbitPoint]]] = PydanticField(
        None, description="Points split where the track crosses the antimeridian"
    )
