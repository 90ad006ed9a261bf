"""
Test suite for two-line element parsing
"""

import math
from datetime import datetime, timezone

import pytest

from mxwll.domains.common.utils.result import ErrorCode
from mxwll.domains.satellite.services.tle_parser import (
    TLEParseError,
    compute_checksum,
    parse_elements,
    parse_exponential_notation,
    parse_record,
    parse_tle_lines,
    parse_tle_text,
)

from tle_samples import (
    BAD_CHECKSUM_LINE1,
    GPS_LINE1,
    GPS_LINE2,
    ISS_LINE1,
    ISS_LINE2,
    NON_NUMERIC_LINE2,
    STARLINK_LINE2,
)


def test_parse_iss_fields():
    """Fixed-column fields of a well-formed TLE are decoded"""
    elements = parse_tle_lines(ISS_LINE1, ISS_LINE2, name="ISS (ZARYA)  ", group="stations")

    assert elements.norad_id == "25544"
    assert elements.name == "ISS (ZARYA)"
    assert elements.group == "stations"
    assert elements.classification == "U"
    assert elements.international_designator == "98067A"
    assert elements.inclination_deg == pytest.approx(51.6498)
    assert elements.raan_deg == pytest.approx(109.4756)
    assert elements.eccentricity == pytest.approx(0.0003572)
    assert elements.argument_of_perigee_deg == pytest.approx(55.9686)
    assert elements.mean_anomaly_deg == pytest.approx(274.8005)
    assert elements.mean_motion_rev_per_day == pytest.approx(15.49815350)
    assert elements.mean_motion_dot == pytest.approx(9.878e-5)
    assert elements.mean_motion_ddot == 0.0
    assert elements.bstar == pytest.approx(1.82e-4)
    assert elements.element_set_number == 508
    assert elements.revolution_number == 86847


def test_parse_epoch_is_utc():
    """Epoch year and fractional day become an aware UTC datetime"""
    elements = parse_tle_lines(ISS_LINE1, ISS_LINE2)
    expected = datetime(2014, 1, 20, 22, 23, 4, tzinfo=timezone.utc)

    assert elements.epoch.tzinfo is not None
    assert abs((elements.epoch - expected).total_seconds()) < 0.01


def test_mean_motion_in_radians_per_minute():
    """Mean motion is the un-Kozai'd value SGP4 propagates with, in rad/min"""
    elements = parse_tle_lines(ISS_LINE1, ISS_LINE2)
    expected = 15.49815350 * 2 * math.pi / 1440.0

    assert elements.mean_motion == pytest.approx(expected, rel=1e-3)
    assert elements.mean_motion == elements.satrec.no_unkozai
    assert elements.mean_motion != elements.satrec.no_kozai


def test_parse_deep_space_record():
    """A half-day orbit with a negative first derivative parses"""
    elements = parse_tle_lines(GPS_LINE1, GPS_LINE2)

    assert elements.norad_id == "28474"
    assert elements.mean_motion_dot == pytest.approx(-2.9e-7)
    assert elements.bstar == 0.0
    assert elements.perigee_altitude_km > 19000
    assert elements.apogee_altitude_km < 21500


def test_trailing_whitespace_is_ignored():
    elements = parse_tle_lines(ISS_LINE1 + "  ", ISS_LINE2 + "\n")
    assert elements.line1 == ISS_LINE1
    assert elements.line2 == ISS_LINE2


def test_checksum_matches_published_lines():
    """Computed checksums agree with the last column of real TLEs"""
    for line in (ISS_LINE1, ISS_LINE2, GPS_LINE1, GPS_LINE2):
        assert compute_checksum(line) == int(line[-1])


def test_checksum_counts_minus_as_one():
    assert compute_checksum("-" * 68 + "0") == 68 % 10


def test_exponential_notation():
    assert parse_exponential_notation(" 12345-3") == pytest.approx(0.12345e-3)
    assert parse_exponential_notation("-11606-4") == pytest.approx(-0.11606e-4)
    assert parse_exponential_notation(" 00000+0") == 0.0
    assert parse_exponential_notation("        ") == 0.0


def test_exponential_notation_rejects_garbage():
    with pytest.raises(ValueError):
        parse_exponential_notation(" 12A45-3")


def test_bad_checksum_rejected():
    with pytest.raises(TLEParseError, match="checksum"):
        parse_tle_lines(BAD_CHECKSUM_LINE1, ISS_LINE2)


def test_wrong_length_rejected():
    with pytest.raises(TLEParseError, match="69 characters"):
        parse_tle_lines(ISS_LINE1[:-5], ISS_LINE2)


def test_wrong_line_number_rejected():
    """Swapped lines fail the line-number prefix check"""
    with pytest.raises(TLEParseError, match="must start with"):
        parse_tle_lines(ISS_LINE2, ISS_LINE1)


def test_non_numeric_field_rejected():
    with pytest.raises(TLEParseError, match="line 2"):
        parse_tle_lines(ISS_LINE1, NON_NUMERIC_LINE2)


def test_catalog_number_mismatch_rejected():
    with pytest.raises(TLEParseError, match="mismatch"):
        parse_tle_lines(ISS_LINE1, STARLINK_LINE2)


def test_parse_elements_wraps_errors():
    """Batch callers get a PARSE_ERROR result instead of an exception"""
    result = parse_elements(BAD_CHECKSUM_LINE1, ISS_LINE2, name="ISS")

    assert result.is_failure()
    assert result.error.code == ErrorCode.PARSE_ERROR.value
    assert result.error.details["norad_id"] == "25544"
    assert result.data is None


def test_parse_record(iss_record):
    result = parse_record(iss_record)

    assert result.is_success()
    assert result.data.name == iss_record.name
    assert result.data.group == "stations"


def test_parse_tle_text(stations_text):
    """A CelesTrak listing splits into name/line1/line2 records"""
    records = parse_tle_text(stations_text, "stations")

    assert [r.norad_id for r in records] == ["25544", "28474"]
    assert records[0].name == "ISS (ZARYA)"
    assert records[0].line1 == ISS_LINE1
    assert records[1].line2 == GPS_LINE2
    assert all(r.group == "stations" for r in records)


def test_parse_tle_text_skips_malformed_blocks():
    text = "\n".join(
        ["BROKEN", "x" * 69, "y" * 69, "ISS (ZARYA)", ISS_LINE1, ISS_LINE2]
    )
    records = parse_tle_text(text, "stations")

    assert len(records) == 1
    assert records[0].norad_id == "25544"


def test_parse_tle_text_empty():
    assert parse_tle_text("", "stations") == []
    assert parse_tle_text("   \n", "stations") == []
