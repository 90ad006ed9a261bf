import dataclasses
import logging
import math
from typing import List, Iterable, Optional, Tuple
from datetime import datetime, timedelta, timezone

import numpy as np
from sgp4.api import SGP4_ERRORS, WGS72, Satrec, jday
from skyfield.api import EarthSatellite, load, wgs84
from skyfield.positionlib import Geocentric

from mxwll.core.config import MAX_ORBIT_DURATION_MINUTES, ORBIT_PATH_POINTS
from mxwll.domains.common.utils.result import Result, ErrorCode
from mxwll.domains.satellite.interfaces.orbit_service_interface import (
    OrbitServiceInterface,
)
from mxwll.domains.satellite.models.satellite_model import (
    EciState,
    GeodeticPosition,
    OrbitalElementSet,
    OrbitPath,
    OrbitPoint,
    SatellitePosition,
    TLEData,
)
from mxwll.domains.satellite.services.tle_parser import parse_record

logger = logging.getLogger(__name__)

# Assumed when mean motion is non-positive
DEFAULT_ORBITAL_PERIOD_MINUTES = 90.0

# Julian date of 1949-12-31 00:00 UT, the epoch origin sgp4init expects
SGP4_EPOCH_ORIGIN_JD = 2433281.5

# Global Skyfield timescale
try:
    ts = load.timescale(builtin=True)
except Exception as e:
    logger.error(f"Unable to load Skyfield timescale: {e}")
    ts = None


def ensure_utc(when: datetime) -> datetime:
    """
    Normalise a timestamp to UTC.

    Naive datetimes are rejected: sidereal time is a function of the UTC
    instant, so a local wall-clock time would silently skew longitudes by
    the local offset.
    """
    if when.tzinfo is None or when.tzinfo.utcoffset(when) is None:
        raise ValueError(
            f"Timestamp {when.isoformat()} has no timezone; pass an aware UTC datetime"
        )
    return when.astimezone(timezone.utc)


def satellite_for(elements: OrbitalElementSet) -> EarthSatellite:
    """Skyfield view of an element set, sharing its initialised SGP4 record"""
    if ts is None:
        raise RuntimeError("Skyfield timescale unavailable, cannot propagate")
    return EarthSatellite.from_satrec(elements.satrec, ts)


def with_mean_motion(elements: OrbitalElementSet, mean_motion: float) -> OrbitalElementSet:
    """
    Copy of an element set whose SGP4 record is re-initialised at another
    mean motion (rad/min), keeping every other element and the epoch.
    """
    source = elements.satrec
    satrec = Satrec()
    satrec.sgp4init(
        WGS72,
        "i",
        source.satnum,
        source.jdsatepoch + source.jdsatepochF - SGP4_EPOCH_ORIGIN_JD,
        source.bstar,
        source.ndot,
        source.nddot,
        source.ecco,
        source.argpo,
        source.inclo,
        source.mo,
        mean_motion,
        source.nodeo,
    )
    return dataclasses.replace(elements, satrec=satrec, mean_motion=mean_motion)


def normalize_longitude(longitude_deg: float) -> float:
    """Wrap a longitude into [-180, 180)"""
    return (longitude_deg + 180.0) % 360.0 - 180.0


def split_at_antimeridian(points: List[OrbitPoint]) -> List[List[OrbitPoint]]:
    """Split a ground track into polylines wherever it jumps across ±180° longitude"""
    segments: List[List[OrbitPoint]] = []
    current: List[OrbitPoint] = []

    for point in points:
        if current and abs(point.longitude - current[-1].longitude) > 180.0:
            segments.append(current)
            current = []
        current.append(point)

    if current:
        segments.append(current)
    return segments


class OrbitService(OrbitServiceInterface):
    """SGP4/SDP4 propagation and ground-track sampling.

    Every method is a pure function of its arguments: nothing is cached
    between calls, so a refresh timer may call them repeatedly and simply
    keep the latest result.
    """

    def propagate_eci(
        self, elements: OrbitalElementSet, when: datetime
    ) -> Result[EciState]:
        when = ensure_utc(when)
        jd, fr = jday(
            when.year,
            when.month,
            when.day,
            when.hour,
            when.minute,
            when.second + when.microsecond / 1e6,
        )

        error, position, velocity = elements.satrec.sgp4(jd, fr)

        if error != 0:
            return Result.failure(
                ErrorCode.PROPAGATION_ERROR,
                SGP4_ERRORS.get(error, f"SGP4 error code {error}"),
                {
                    "norad_id": elements.norad_id,
                    "name": elements.name,
                    "sgp4_error": error,
                    "decayed": error == 6,
                    "timestamp": when.isoformat(),
                },
            )

        if not all(math.isfinite(v) for v in (*position, *velocity)):
            return Result.failure(
                ErrorCode.PROPAGATION_ERROR,
                "SGP4 returned a non-finite state vector",
                {
                    "norad_id": elements.norad_id,
                    "name": elements.name,
                    "timestamp": when.isoformat(),
                },
            )

        return Result.success(
            EciState(
                position=tuple(float(v) for v in position),
                velocity=tuple(float(v) for v in velocity),
                timestamp=when,
            )
        )

    def eci_to_geodetic(self, geocentric: Geocentric) -> Tuple[float, float, float]:
        """
        Convert an Earth-centred inertial position to geodetic coordinates.

        Args:
            geocentric: Skyfield GCRS position, carrying the instant it is for

        Returns:
            (latitude_deg, longitude_deg, altitude_km) on the WGS-84 ellipsoid
        """
        latitude, longitude = wgs84.latlon_of(geocentric)
        height = wgs84.height_of(geocentric)
        return (
            float(latitude.degrees),
            normalize_longitude(float(longitude.degrees)),
            float(height.km),
        )

    def propagate_geodetic(
        self,
        elements: OrbitalElementSet,
        when: datetime,
        satellite: Optional[EarthSatellite] = None,
    ) -> Result[GeodeticPosition]:
        """
        Sub-satellite point at ``when``.

        SGP4 error codes are checked on the raw state first; the geodetic
        conversion then goes through skyfield. Pass ``satellite`` to reuse
        one skyfield satellite across many instants.
        """
        state = self.propagate_eci(elements, when)
        if state.is_failure():
            return state

        if satellite is None:
            satellite = satellite_for(elements)
        timestamp = state.data.timestamp
        geocentric = satellite.at(ts.from_datetime(timestamp))
        latitude, longitude, altitude = self.eci_to_geodetic(geocentric)

        return Result.success(
            GeodeticPosition(
                latitude=latitude,
                longitude=longitude,
                altitude=altitude,
                velocity=float(np.linalg.norm(state.data.velocity)),
                timestamp=timestamp,
            )
        )

    def propagate_position(
        self, record: TLEData, when: datetime
    ) -> Result[SatellitePosition]:
        parsed = parse_record(record)
        if parsed.is_failure():
            return parsed

        position = self.propagate_geodetic(parsed.data, when)
        if position.is_failure():
            return position

        geo = position.data
        return Result.success(
            SatellitePosition(
                id=record.norad_id,
                name=record.name,
                norad_id=record.norad_id,
                latitude=geo.latitude,
                longitude=geo.longitude,
                altitude=geo.altitude,
                velocity=geo.velocity,
                group=record.group,
                line1=record.line1,
                line2=record.line2,
                timestamp=geo.timestamp,
            )
        )

    def propagate_all_results(
        self, records: Iterable[TLEData], when: Optional[datetime] = None
    ) -> List[Result[SatellitePosition]]:
        """Propagate a batch and return one result per record, in input order"""
        when = ensure_utc(when) if when else datetime.now(timezone.utc)
        return [self.propagate_position(record, when) for record in records]

    def propagate_all(
        self, records: Iterable[TLEData], when: Optional[datetime] = None
    ) -> List[SatellitePosition]:
        results = self.propagate_all_results(records, when)
        positions = [result.data for result in results if result.is_success()]

        excluded = len(results) - len(positions)
        if excluded:
            for result in results:
                if result.is_failure():
                    logger.debug(
                        f"Excluding satellite {result.error.details}: "
                        f"{result.error.code} {result.error.message}"
                    )
            logger.info(
                f"Propagated {len(positions)} satellites, excluded {excluded}"
            )
        return positions

    def _period_minutes(self, elements: OrbitalElementSet) -> Tuple[float, bool]:
        mean_motion = elements.mean_motion
        if not math.isfinite(mean_motion) or mean_motion <= 0:
            logger.warning(
                f"Non-positive mean motion for {elements.norad_id}, "
                f"assuming a {DEFAULT_ORBITAL_PERIOD_MINUTES:g} minute period"
            )
            return DEFAULT_ORBITAL_PERIOD_MINUTES, True
        return 2.0 * math.pi / mean_motion, False

    def orbital_period_minutes(self, elements: OrbitalElementSet) -> float:
        return self._period_minutes(elements)[0]

    def calculate_orbit_path(
        self,
        elements: OrbitalElementSet,
        duration_minutes: Optional[float] = None,
        num_points: int = ORBIT_PATH_POINTS,
        now: Optional[datetime] = None,
    ) -> OrbitPath:
        """
        Sample a ground track centred on ``now``.

        The window starts half a duration before ``now`` so the path shows
        where the satellite has been as well as where it is going. Ticks that
        fail to propagate are skipped, leaving gaps. An element set with no
        usable mean motion is re-initialised at the fallback period so the
        path still has points.

        Args:
            elements: Element set to sample
            duration_minutes: Window length, defaults to one orbital period
            num_points: Number of ticks
            now: Window midpoint, defaults to the current time

        Returns:
            Path with at most ``num_points`` points
        """
        if num_points <= 0:
            raise ValueError("num_points must be positive")
        if duration_minutes is not None and duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")
        if duration_minutes is not None and duration_minutes > MAX_ORBIT_DURATION_MINUTES:
            raise ValueError(
                f"duration_minutes must not exceed {MAX_ORBIT_DURATION_MINUTES:g}"
            )

        now = ensure_utc(now) if now else datetime.now(timezone.utc)
        period, fallback = self._period_minutes(elements)
        if fallback:
            elements = with_mean_motion(elements, 2.0 * math.pi / period)
        if duration_minutes is not None:
            duration = duration_minutes
        else:
            duration = min(period, MAX_ORBIT_DURATION_MINUTES)

        satellite = satellite_for(elements)

        step_seconds = duration * 60.0 / num_points
        start_time = now - timedelta(minutes=duration / 2.0)

        points = []
        for i in range(num_points):
            tick = start_time + timedelta(seconds=i * step_seconds)
            result = self.propagate_geodetic(elements, tick, satellite=satellite)
            if result.is_failure():
                continue
            geo = result.data
            points.append(
                OrbitPoint(
                    latitude=geo.latitude,
                    longitude=geo.longitude,
                    altitude=geo.altitude,
                    time=tick,
                )
            )

        if len(points) < num_points:
            logger.debug(
                f"Orbit path for {elements.norad_id}: "
                f"{num_points - len(points)} of {num_points} ticks failed"
            )

        return OrbitPath(
            norad_id=elements.norad_id,
            name=elements.name,
            period_minutes=period,
            period_fallback=fallback,
            duration_minutes=duration,
            requested_points=num_points,
            step_seconds=step_seconds,
            center_time=now,
            start_time=start_time,
            end_time=start_time + timedelta(seconds=(num_points - 1) * step_seconds),
            points=points,
            segments=split_at_antimeridian(points),
        )
