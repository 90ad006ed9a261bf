import logging
import math
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from skyfield.api import wgs84

from mxwll.core.config import MAX_SATELLITES_ABOVE
from mxwll.domains.coordinates.models.coordinate_model import GeoCoordinate
from mxwll.domains.satellite.models.dto import (
    NearestSatellite,
    ObserverLocation,
    SatelliteAbove,
    SatelliteCounts,
    SatellitesAboveResponse,
)
from mxwll.domains.satellite.models.satellite_model import TLEData
from mxwll.domains.satellite.services.orbit_service import (
    OrbitService,
    ensure_utc,
    satellite_for,
    ts,
)
from mxwll.domains.satellite.services.tle_parser import parse_record

logger = logging.getLogger(__name__)


def clean_satellite_name(name: str) -> str:
    """Tidy catalog names for display, e.g. STARLINK-1234 -> Starlink 1234"""
    name = re.sub(r"\[.\]", "", name, count=1)
    name = re.sub(r"STARLINK-(\d+)", r"Starlink \1", name, count=1)
    name = re.sub(r"GPS BIIR?-\d+ \(PRN (\d+)\)", r"GPS PRN \1", name, count=1)
    return name.strip()


def categorize_satellite(name: str) -> str:
    upper_name = name.upper()
    if "STARLINK" in upper_name:
        return "Starlink"
    if "GPS" in upper_name or "NAVSTAR" in upper_name:
        return "GPS"
    if "GOES" in upper_name or "NOAA" in upper_name or "METEOSAT" in upper_name:
        return "Weather"
    if "ISS" in upper_name or "ZARYA" in upper_name:
        return "ISS"
    return "Other"


class SatelliteVisibilityService:
    """Which satellites are above an observer right now"""

    def __init__(self, orbit_service: Optional[OrbitService] = None):
        self._orbit_service = orbit_service or OrbitService()

    def satellites_above(
        self,
        records: Iterable[TLEData],
        observer_location: GeoCoordinate,
        radius: float = 70.0,
        when: Optional[datetime] = None,
        limit: int = MAX_SATELLITES_ABOVE,
    ) -> SatellitesAboveResponse:
        """
        Satellites within ``radius`` degrees of the observer's zenith.

        The observer is rounded to 0.1 degree, so nearby users share results.
        """
        if ts is None:
            raise RuntimeError("Skyfield timescale unavailable, cannot compute visibility")
        if not 0 < radius <= 90:
            raise ValueError("radius must be in (0, 90] degrees")

        when = ensure_utc(when) if when else datetime.now(timezone.utc)
        lat = round(observer_location.latitude, 1)
        lng = round(observer_location.longitude, 1)
        min_elevation = 90.0 - radius

        observer = wgs84.latlon(
            latitude_degrees=lat,
            longitude_degrees=lng,
            elevation_m=observer_location.altitude or 0.0,
        )
        t = ts.from_datetime(when)
        observer_position = observer.at(t)

        above = []
        for record in records:
            parsed = parse_record(record)
            if parsed.is_failure():
                continue
            elements = parsed.data

            geocentric = satellite_for(elements).at(t)
            # set by skyfield when SGP4 reports an error, e.g. a decayed orbit
            if geocentric.message:
                continue

            alt, az, distance = (geocentric - observer_position).altaz()
            elevation = float(alt.degrees)
            if math.isnan(elevation) or elevation < min_elevation:
                continue

            latitude, longitude, altitude = self._orbit_service.eci_to_geodetic(
                geocentric
            )
            above.append(
                SatelliteAbove(
                    id=int(elements.norad_id),
                    name=clean_satellite_name(record.name),
                    altitude=round(altitude),
                    latitude=latitude,
                    longitude=longitude,
                    category=categorize_satellite(record.name),
                    elevation=elevation,
                    azimuth=float(az.degrees),
                    range_km=float(distance.km),
                )
            )

        counts = SatelliteCounts(total=len(above))
        for sat in above:
            field_name = sat.category.lower()
            setattr(counts, field_name, getattr(counts, field_name) + 1)

        nearest = min(above, key=lambda s: s.altitude, default=None)
        above.sort(key=lambda s: s.elevation, reverse=True)

        logger.debug(f"{len(above)} satellites above ({lat}, {lng}) at {when.isoformat()}")

        return SatellitesAboveResponse(
            timestamp=when,
            location=ObserverLocation(lat=lat, lng=lng),
            radius=radius,
            satellites=above[:limit],
            counts=counts,
            nearest=(
                NearestSatellite(name=nearest.name, altitude=nearest.altitude)
                if nearest
                else None
            ),
        )
