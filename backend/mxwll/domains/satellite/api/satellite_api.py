import logging
from typing import List, Optional
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Query, Path, Response, status
from fastapi.concurrency import run_in_threadpool

from mxwll.api.dependencies import (
    get_orbit_service,
    get_tle_service,
    get_visibility_service,
)
from mxwll.core.config import (
    DEFAULT_OBSERVER_LAT,
    DEFAULT_OBSERVER_LON,
    MAX_ORBIT_DURATION_MINUTES,
    MAX_ORBIT_PATH_POINTS,
    ORBIT_PATH_POINTS,
)
from mxwll.domains.coordinates.models.coordinate_model import GeoCoordinate
from mxwll.domains.common.utils.result import Error, ErrorCode, Result
from mxwll.domains.satellite.interfaces.tle_service_interface import (
    TLEServiceInterface,
)
from mxwll.domains.satellite.models.dto import (
    PositionsResponse,
    SatellitesAboveResponse,
    TLEGroupsResponse,
)
from mxwll.domains.satellite.models.satellite_model import (
    CONSTELLATION_INFO,
    ConstellationGroup,
    ConstellationInfo,
    OrbitPath,
    SatellitePosition,
    TLEData,
)
from mxwll.domains.satellite.services.orbit_service import OrbitService, ensure_utc
from mxwll.domains.satellite.services.tle_parser import parse_record
from mxwll.domains.satellite.services.visibility_service import (
    SatelliteVisibilityService,
)

logger = logging.getLogger(__name__)
router = APIRouter()

CACHE_STATUS_HEADER = "X-Cache-Status"


def parse_groups(
    groups: Optional[str], default: Optional[str] = None
) -> List[ConstellationGroup]:
    """Turn a comma separated query value into known groups, rejecting empty input"""
    raw = groups if groups else default
    requested = [g.strip().lower() for g in (raw or "").split(",") if g.strip()]
    if not requested:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "No groups specified"},
        )

    valid = [g.value for g in ConstellationGroup]
    selected = []
    for name in requested:
        if name in valid and ConstellationGroup(name) not in selected:
            selected.append(ConstellationGroup(name))

    if not selected:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "No valid groups specified", "valid": valid},
        )
    return selected


def resolve_timestamp(timestamp: Optional[datetime]) -> datetime:
    if timestamp is None:
        return datetime.now(timezone.utc)
    try:
        return ensure_utc(timestamp)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def failure_detail(result: Result) -> dict:
    error = result.error
    return {"code": error.code, "message": error.message, "details": error.details}


async def find_record_or_404(
    tle_service: TLEServiceInterface,
    norad_id: str,
    groups: List[ConstellationGroup],
) -> TLEData:
    record = await tle_service.find_record(norad_id, groups)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=Error.build(
                ErrorCode.NOT_FOUND,
                f"No satellite with NORAD id {norad_id} in groups "
                f"{','.join(g.value for g in groups)}",
                {"norad_id": norad_id},
            ).model_dump(),
        )
    return record


@router.get("/groups", response_model=List[ConstellationInfo])
async def get_constellation_groups():
    """Constellation groups and their display metadata"""
    return list(CONSTELLATION_INFO.values())


@router.get("/", response_model=TLEGroupsResponse)
async def get_satellite_tles(
    response: Response,
    groups: Optional[str] = Query(None, description="Comma separated groups"),
    tle_service: TLEServiceInterface = Depends(get_tle_service),
):
    """TLE records for the requested constellation groups"""
    selected = parse_groups(groups)
    try:
        records, cache_status = await tle_service.get_groups(selected)
    except Exception as e:
        logger.error(f"Satellite API error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch satellite data",
        )

    response.headers[CACHE_STATUS_HEADER] = cache_status.value
    return TLEGroupsResponse(satellites=records, updated_at=datetime.now(timezone.utc))


@router.get("/positions", response_model=PositionsResponse)
async def get_satellite_positions(
    response: Response,
    groups: Optional[str] = Query(None, description="Comma separated groups"),
    timestamp: Optional[datetime] = Query(None, description="Instant, ISO 8601 with offset"),
    tle_service: TLEServiceInterface = Depends(get_tle_service),
    orbit_service: OrbitService = Depends(get_orbit_service),
):
    """Positions of every satellite in the groups at one instant"""
    selected = parse_groups(groups, default=ConstellationGroup.STATIONS.value)
    when = resolve_timestamp(timestamp)

    try:
        records_by_group, cache_status = await tle_service.get_groups(selected)
        records = [r for group in records_by_group.values() for r in group]
        results = await run_in_threadpool(
            orbit_service.propagate_all_results, records, when
        )
    except Exception as e:
        logger.error(f"Error propagating satellite positions: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error propagating satellite positions: {str(e)}",
        )

    positions = [r.data for r in results if r.is_success()]
    counts = {group: 0 for group in records_by_group}
    for position in positions:
        counts[position.group] = counts.get(position.group, 0) + 1

    response.headers[CACHE_STATUS_HEADER] = cache_status.value
    return PositionsResponse(
        timestamp=when,
        count=len(positions),
        excluded=len(results) - len(positions),
        counts=counts,
        satellites=positions,
    )


@router.get("/above", response_model=SatellitesAboveResponse)
async def get_satellites_above(
    lat: float = Query(DEFAULT_OBSERVER_LAT, ge=-90, le=90, description="Latitude"),
    lng: float = Query(DEFAULT_OBSERVER_LON, ge=-180, le=180, description="Longitude"),
    radius: float = Query(70.0, gt=0, le=90, description="Degrees from zenith"),
    groups: Optional[str] = Query(None, description="Comma separated groups"),
    timestamp: Optional[datetime] = Query(None, description="Instant, ISO 8601 with offset"),
    tle_service: TLEServiceInterface = Depends(get_tle_service),
    visibility_service: SatelliteVisibilityService = Depends(get_visibility_service),
):
    """Satellites currently above a location"""
    selected = parse_groups(groups, default=ConstellationGroup.ACTIVE.value)
    when = resolve_timestamp(timestamp)

    try:
        records_by_group, _ = await tle_service.get_groups(selected)
        records = [r for group in records_by_group.values() for r in group]
        return await run_in_threadpool(
            visibility_service.satellites_above,
            records,
            GeoCoordinate(latitude=lat, longitude=lng),
            radius=radius,
            when=when,
        )
    except ValueError as e:
        logger.error(f"Value error computing satellites above: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Satellites above error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error computing satellites above: {str(e)}",
        )


@router.get("/{norad_id}/position", response_model=SatellitePosition)
async def get_satellite_position(
    norad_id: str = Path(..., description="NORAD catalog number"),
    groups: Optional[str] = Query(None, description="Groups to search"),
    timestamp: Optional[datetime] = Query(None, description="Instant, ISO 8601 with offset"),
    tle_service: TLEServiceInterface = Depends(get_tle_service),
    orbit_service: OrbitService = Depends(get_orbit_service),
):
    """Position of one satellite"""
    selected = parse_groups(groups, default=ConstellationGroup.STATIONS.value)
    when = resolve_timestamp(timestamp)
    record = await find_record_or_404(tle_service, norad_id, selected)

    result = await run_in_threadpool(orbit_service.propagate_position, record, when)
    if result.is_failure():
        logger.warning(f"Position unavailable for {norad_id}: {result.error.message}")
        raise HTTPException(
            status_code=422,
            detail=failure_detail(result),
        )
    return result.data


@router.get("/{norad_id}/orbit", response_model=OrbitPath)
async def get_satellite_orbit(
    norad_id: str = Path(..., description="NORAD catalog number"),
    groups: Optional[str] = Query(None, description="Groups to search"),
    duration_minutes: Optional[float] = Query(
        None,
        gt=0,
        le=MAX_ORBIT_DURATION_MINUTES,
        description="Window length, defaults to one orbital period",
    ),
    num_points: int = Query(
        ORBIT_PATH_POINTS, gt=0, le=MAX_ORBIT_PATH_POINTS, description="Sample count"
    ),
    timestamp: Optional[datetime] = Query(None, description="Window midpoint"),
    include_segments: bool = Query(True, description="Split at the antimeridian"),
    tle_service: TLEServiceInterface = Depends(get_tle_service),
    orbit_service: OrbitService = Depends(get_orbit_service),
):
    """Ground track centred on the requested instant"""
    selected = parse_groups(groups, default=ConstellationGroup.STATIONS.value)
    when = resolve_timestamp(timestamp)
    record = await find_record_or_404(tle_service, norad_id, selected)

    parsed = parse_record(record)
    if parsed.is_failure():
        raise HTTPException(
            status_code=422,
            detail=failure_detail(parsed),
        )

    try:
        path = await run_in_threadpool(
            orbit_service.calculate_orbit_path,
            parsed.data,
            duration_minutes=duration_minutes,
            num_points=num_points,
            now=when,
        )
    except ValueError as e:
        logger.error(f"Value error computing orbit path: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not include_segments:
        path.segments = None
    return path
