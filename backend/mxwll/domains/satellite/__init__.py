"""
Satellite domain

TLE parsing and caching, SGP4 propagation, geodetic conversion, ground tracks
and visibility from an observer.
"""

from mxwll.domains.satellite.models.satellite_model import (
    ConstellationGroup,
    TLEData,
    OrbitalElementSet,
    EciState,
    GeodeticPosition,
    SatellitePosition,
    OrbitPoint,
    OrbitPath,
)
from mxwll.domains.satellite.services.tle_cache import CacheStatus, TLECache
from mxwll.domains.satellite.interfaces.orbit_service_interface import (
    OrbitServiceInterface,
)
from mxwll.domains.satellite.interfaces.tle_service_interface import TLEServiceInterface
from mxwll.domains.satellite.services.orbit_service import OrbitService
from mxwll.domains.satellite.services.tle_service import TLEService
from mxwll.domains.satellite.services.visibility_service import (
    SatelliteVisibilityService,
)
