"""
Satellite domain DTOs (response payloads)
"""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from mxwll.domains.satellite.models.satellite_model import (
    SatellitePosition,
    TLEData,
)


class TLEGroupsResponse(BaseModel):
    """TLE records grouped by constellation"""

    satellites: Dict[str, List[TLEData]] = Field(..., description="Records per group")
    updated_at: datetime = Field(..., description="Response time, UTC")


class PositionsResponse(BaseModel):
    """Positions of every satellite that propagated at one instant"""

    timestamp: datetime = Field(..., description="Propagation instant, UTC")
    count: int = Field(..., description="Number of positions returned")
    excluded: int = Field(..., description="Records that failed to parse or propagate")
    counts: Dict[str, int] = Field(..., description="Positions per group")
    satellites: List[SatellitePosition] = Field(..., description="Positions")


class ObserverLocation(BaseModel):
    lat: float = Field(..., description="Latitude in degrees")
    lng: float = Field(..., description="Longitude in degrees")


class SatelliteAbove(BaseModel):
    """A satellite inside the observer's search cone"""

    id: int = Field(..., description="NORAD catalog number")
    name: str = Field(..., description="Cleaned display name")
    altitude: int = Field(..., description="Altitude in km, rounded")
    latitude: float = Field(..., description="Sub-satellite latitude")
    longitude: float = Field(..., description="Sub-satellite longitude")
    category: str = Field(..., description="Starlink, GPS, Weather, ISS or Other")
    elevation: float = Field(..., description="Elevation above the horizon, degrees")
    azimuth: float = Field(..., description="Azimuth, degrees")
    range_km: float = Field(..., description="Slant range, km")


class SatelliteCounts(BaseModel):
    total: int = 0
    starlink: int = 0
    gps: int = 0
    weather: int = 0
    iss: int = 0
    other: int = 0


class NearestSatellite(BaseModel):
    name: str
    altitude: int


class SatellitesAboveResponse(BaseModel):
    """Satellites currently above an observer"""

    timestamp: datetime = Field(..., description="Computation instant, UTC")
    location: ObserverLocation = Field(..., description="Rounded observer location")
    radius: float = Field(..., description="Search cone half-angle from zenith")
    satellites: List[SatelliteAbove] = Field(..., description="Highest first")
    counts: SatelliteCounts = Field(..., description="Counts per category")
    nearest: Optional[NearestSatellite] = Field(None, description="Lowest altitude")
