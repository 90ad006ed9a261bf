from typing import Optional
from fastapi import Request
from redis.asyncio import Redis as AsyncRedis

from mxwll.domains.satellite.interfaces.tle_service_interface import (
    TLEServiceInterface,
)
from mxwll.domains.satellite.services.orbit_service import OrbitService
from mxwll.domains.satellite.services.tle_cache import TLECache
from mxwll.domains.satellite.services.tle_service import TLEService
from mxwll.domains.satellite.services.visibility_service import (
    SatelliteVisibilityService,
)

_orbit_service = OrbitService()
_visibility_service = SatelliteVisibilityService(orbit_service=_orbit_service)


async def get_redis_client(request: Request) -> Optional[AsyncRedis]:
    if hasattr(request.app.state, "redis") and request.app.state.redis:
        return request.app.state.redis
    return None  # Services fall back to the in-process cache


async def get_tle_service(request: Request) -> TLEServiceInterface:
    service = getattr(request.app.state, "tle_service", None)
    if service is None:
        # Lifespan did not run (e.g. a bare TestClient); build one on first use
        redis_client = await get_redis_client(request)
        service = TLEService(cache=TLECache(redis_client=redis_client))
        request.app.state.tle_service = service
    return service


def get_orbit_service() -> OrbitService:
    return _orbit_service


def get_visibility_service() -> SatelliteVisibilityService:
    return _visibility_service
