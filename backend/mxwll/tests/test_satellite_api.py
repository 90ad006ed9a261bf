"""
Test suite for satellite API endpoints
"""

import pytest
from fastapi.testclient import TestClient

from mxwll.api.dependencies import get_tle_service
from mxwll.domains.satellite.services.tle_cache import TLECache
from mxwll.domains.satellite.services.tle_service import TLEFetchError, TLEService
from mxwll.main import app

from tle_samples import DECAYED_LINE2, ISS_LINE1, ZERO_MEAN_MOTION_LINE2

client = TestClient(app)

EPOCH = "2014-01-20T22:23:04Z"


class CannedTLEService(TLEService):
    """TLE service that serves fixed listings instead of calling CelesTrak"""

    def __init__(self, listings):
        super().__init__(cache=TLECache())
        self.listings = listings

    async def fetch_group_text(self, group):
        if group.value not in self.listings:
            raise TLEFetchError(f"CelesTrak returned 503 for group {group.value}")
        return self.listings[group.value]


@pytest.fixture(autouse=True)
def canned_tles(stations_text):
    service = CannedTLEService(
        {
            "stations": stations_text,
            "science": "\n".join(["DECAYED", ISS_LINE1, DECAYED_LINE2]),
            "gps": "\n".join(["STALLED", ISS_LINE1, ZERO_MEAN_MOTION_LINE2]),
        }
    )
    app.dependency_overrides[get_tle_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def test_ping():
    response = client.get("/ping")
    assert response.status_code == 200
    assert response.json() == {"message": "pong"}


def test_constellation_groups():
    """Every group is listed with its display metadata"""
    response = client.get("/api/v1/satellites/groups")

    assert response.status_code == 200
    groups = {g["id"]: g for g in response.json()}
    assert set(groups) == {"stations", "gps", "weather", "science", "starlink", "active"}
    assert groups["gps"]["celestrak_group"] == "gps-ops"


def test_tles_require_groups():
    response = client.get("/api/v1/satellites/")

    assert response.status_code == 400
    assert response.json()["detail"] == {"error": "No groups specified"}


def test_tles_reject_unknown_groups():
    response = client.get("/api/v1/satellites/?groups=bogus,,nothing")

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "No valid groups specified"
    assert "stations" in detail["valid"]


def test_tles_cache_status_header():
    """First read is a MISS, the next one is served from cache"""
    first = client.get("/api/v1/satellites/?groups=stations")
    second = client.get("/api/v1/satellites/?groups=stations")

    assert first.status_code == 200
    assert first.headers["X-Cache-Status"] == "MISS"
    assert second.headers["X-Cache-Status"] == "HIT"

    data = first.json()
    assert "updated_at" in data
    assert [r["norad_id"] for r in data["satellites"]["stations"]] == ["25544", "28474"]


def test_tles_skip_unavailable_groups():
    response = client.get("/api/v1/satellites/?groups=stations,weather")

    assert response.status_code == 200
    assert list(response.json()["satellites"]) == ["stations"]


def test_positions():
    response = client.get(
        "/api/v1/satellites/positions", params={"groups": "stations", "timestamp": EPOCH}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert data["excluded"] == 0
    assert data["counts"] == {"stations": 2}
    for satellite in data["satellites"]:
        assert -90 <= satellite["latitude"] <= 90
        assert -180 <= satellite["longitude"] < 180
        assert satellite["altitude"] > 0


def test_positions_count_exclusions():
    response = client.get(
        "/api/v1/satellites/positions",
        params={"groups": "stations,science", "timestamp": EPOCH},
    )

    data = response.json()
    assert data["count"] == 2
    assert data["excluded"] == 1
    assert data["counts"] == {"stations": 2, "science": 0}


def test_positions_reject_naive_timestamp():
    response = client.get(
        "/api/v1/satellites/positions",
        params={"groups": "stations", "timestamp": "2014-01-20T22:23:04"},
    )

    assert response.status_code == 400


def test_satellite_position():
    response = client.get(
        "/api/v1/satellites/25544/position", params={"timestamp": EPOCH}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["norad_id"] == "25544"
    assert data["name"] == "ISS (ZARYA)"
    assert 380 < data["altitude"] < 470


def test_satellite_position_unknown():
    response = client.get("/api/v1/satellites/99999/position")
    assert response.status_code == 404
    detail = response.json()["detail"]
    assert detail["code"] == "NOT_FOUND"
    assert detail["details"] == {"norad_id": "99999"}


def test_satellite_position_propagation_failure():
    """A decayed element set is reported, not turned into a position"""
    response = client.get(
        "/api/v1/satellites/25544/position",
        params={"groups": "science", "timestamp": EPOCH},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "PROPAGATION_ERROR"


def test_satellite_orbit():
    response = client.get(
        "/api/v1/satellites/25544/orbit",
        params={"num_points": 30, "timestamp": EPOCH},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["norad_id"] == "25544"
    assert data["period_fallback"] is False
    assert data["requested_points"] == 30
    assert len(data["points"]) == 30
    assert sum(len(s) for s in data["segments"]) == 30


def test_satellite_orbit_without_segments():
    response = client.get(
        "/api/v1/satellites/25544/orbit",
        params={
            "num_points": 10,
            "duration_minutes": 20,
            "timestamp": EPOCH,
            "include_segments": "false",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["duration_minutes"] == 20
    assert data["segments"] is None


def test_satellite_orbit_zero_mean_motion_uses_fallback():
    response = client.get(
        "/api/v1/satellites/25544/orbit",
        params={"groups": "gps", "num_points": 45, "timestamp": EPOCH},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["period_fallback"] is True
    assert data["duration_minutes"] == 90.0
    assert len(data["points"]) == 45


@pytest.mark.parametrize("duration_minutes", [1e10, 20000])
def test_satellite_orbit_rejects_huge_durations(duration_minutes):
    response = client.get(
        "/api/v1/satellites/25544/orbit",
        params={"duration_minutes": duration_minutes, "timestamp": EPOCH},
    )
    assert response.status_code == 422


@pytest.mark.parametrize("num_points", [0, 100000])
def test_satellite_orbit_rejects_bad_point_counts(num_points):
    response = client.get(
        "/api/v1/satellites/25544/orbit", params={"num_points": num_points}
    )
    assert response.status_code == 422


def test_satellites_above():
    response = client.get(
        "/api/v1/satellites/above",
        params={
            "lat": 12.345,
            "lng": -45.678,
            "radius": 90,
            "groups": "stations",
            "timestamp": EPOCH,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["location"] == {"lat": 12.3, "lng": -45.7}
    assert data["radius"] == 90
    assert data["counts"]["total"] == len(data["satellites"])
    elevations = [s["elevation"] for s in data["satellites"]]
    assert elevations == sorted(elevations, reverse=True)
    assert all(e >= 0 for e in elevations)


def test_satellites_above_rejects_bad_radius():
    response = client.get(
        "/api/v1/satellites/above", params={"radius": 0, "groups": "stations"}
    )
    assert response.status_code == 422


def test_lifespan_builds_tle_service():
    with TestClient(app) as lifespan_client:
        assert lifespan_client.get("/").status_code == 200
        assert isinstance(app.state.tle_service, TLEService)
