"""
Shared TLE fixtures
"""

import pytest

from mxwll.domains.satellite.models.satellite_model import TLEData

from tle_samples import (
    BAD_CHECKSUM_LINE1,
    DECAYED_LINE2,
    GPS_LINE1,
    GPS_LINE2,
    GPS_NAME,
    ISS_EPOCH,
    ISS_LINE1,
    ISS_LINE2,
    ISS_NAME,
    STARLINK_LINE1,
    STARLINK_LINE2,
    STARLINK_NAME,
)


@pytest.fixture
def iss_record():
    return TLEData(
        name=ISS_NAME,
        norad_id="25544",
        line1=ISS_LINE1,
        line2=ISS_LINE2,
        group="stations",
    )


@pytest.fixture
def starlink_record():
    return TLEData(
        name=STARLINK_NAME,
        norad_id="44713",
        line1=STARLINK_LINE1,
        line2=STARLINK_LINE2,
        group="starlink",
    )


@pytest.fixture
def gps_record():
    return TLEData(
        name=GPS_NAME,
        norad_id="28474",
        line1=GPS_LINE1,
        line2=GPS_LINE2,
        group="gps",
    )


@pytest.fixture
def decayed_record():
    return TLEData(
        name="DECAYED",
        norad_id="25544",
        line1=ISS_LINE1,
        line2=DECAYED_LINE2,
        group="stations",
    )


@pytest.fixture
def malformed_record():
    return TLEData(
        name="BROKEN",
        norad_id="25544",
        line1=BAD_CHECKSUM_LINE1,
        line2=ISS_LINE2,
        group="stations",
    )


@pytest.fixture
def iss_epoch():
    return ISS_EPOCH


@pytest.fixture
def stations_text():
    """Three-line listing as served by CelesTrak"""
    return "\r\n".join(
        [
            ISS_NAME,
            ISS_LINE1,
            ISS_LINE2,
            GPS_NAME,
            GPS_LINE1,
            GPS_LINE2,
        ]
    ) + "\r\n"
