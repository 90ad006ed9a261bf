"""
Two-Line Element (TLE) parsing.

Line 0 (optional): Satellite name
Line 1: Catalog number, epoch, mean motion derivatives, BSTAR drag term
Line 2: Inclination, RAAN, eccentricity, argument of perigee, mean anomaly, mean motion

Both data lines are fixed width (69 columns) and end in a modulo-10 checksum.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List

from sgp4.api import Satrec

from mxwll.domains.common.utils.result import Result, ErrorCode
from mxwll.domains.satellite.models.satellite_model import OrbitalElementSet, TLEData

logger = logging.getLogger(__name__)

TLE_LINE_LENGTH = 69


class TLEParseError(ValueError):
    """Malformed two-line element text"""


def compute_checksum(line: str) -> int:
    """Modulo-10 checksum of the first 68 columns: digits count their value, '-' counts 1."""
    total = 0
    for char in line[: TLE_LINE_LENGTH - 1]:
        if char.isdigit():
            total += int(char)
        elif char == "-":
            total += 1
    return total % 10


def parse_exponential_notation(field: str) -> float:
    """
    Decode TLE implied-decimal notation.

    ' 12345-3' means 0.12345e-3, '-11606-4' means -0.11606e-4.
    """
    text = field.strip()
    if not text:
        return 0.0

    sign = -1.0 if text[0] == "-" else 1.0
    text = text.lstrip("+-")
    if len(text) < 3 or text[-2] not in "+-":
        raise ValueError(f"invalid exponential field '{field}'")

    mantissa, exponent = text[:-2], text[-2:]
    return sign * float("0." + mantissa) * 10.0 ** int(exponent)


def _check_line(line: str, number: int) -> None:
    if len(line) != TLE_LINE_LENGTH:
        raise TLEParseError(
            f"Line {number} must be {TLE_LINE_LENGTH} characters, got {len(line)}"
        )
    if not line.startswith(f"{number} "):
        raise TLEParseError(f"Line {number} must start with '{number} '")
    if not line[-1].isdigit():
        raise TLEParseError(f"Line {number} has a non-numeric checksum")
    expected = compute_checksum(line)
    if int(line[-1]) != expected:
        raise TLEParseError(
            f"Line {number} checksum mismatch: expected {expected}, found {line[-1]}"
        )


def _epoch_from_fields(year_field: str, day_field: str) -> datetime:
    two_digit_year = int(year_field)
    # Two-digit years cover 1957-2056
    year = two_digit_year + (2000 if two_digit_year < 57 else 1900)
    day_of_year = float(day_field)
    return datetime(year, 1, 1, tzinfo=timezone.utc) + timedelta(days=day_of_year - 1)


def parse_tle_lines(
    line1: str, line2: str, name: str = "", group: str = ""
) -> OrbitalElementSet:
    """
    Parse a two-line element set.

    Args:
        line1: First line of the TLE
        line2: Second line of the TLE
        name: Satellite name (line 0), may be empty
        group: Constellation group the record belongs to

    Returns:
        Parsed, immutable element set with an initialised SGP4 record

    Raises:
        TLEParseError: wrong length, wrong line number, bad checksum,
            mismatched catalog numbers or non-numeric fields
    """
    line1 = line1.rstrip()
    line2 = line2.rstrip()
    _check_line(line1, 1)
    _check_line(line2, 2)

    try:
        catalog_number = int(line1[2:7])
        classification = line1[7].strip() or "U"
        international_designator = line1[9:17].strip()
        epoch = _epoch_from_fields(line1[18:20], line1[20:32])
        mean_motion_dot = float(line1[33:43])
        mean_motion_ddot = parse_exponential_notation(line1[44:52])
        bstar = parse_exponential_notation(line1[53:61])
        element_set_number = int(line1[64:68])
    except ValueError as e:
        raise TLEParseError(f"Error parsing TLE line 1: {e}") from e

    try:
        if int(line2[2:7]) != catalog_number:
            raise TLEParseError("Catalog number mismatch between lines")
        inclination_deg = float(line2[8:16])
        raan_deg = float(line2[17:25])
        eccentricity_field = line2[26:33].strip()
        if not eccentricity_field.isdigit():
            raise ValueError(f"invalid eccentricity '{eccentricity_field}'")
        eccentricity = float("0." + eccentricity_field)
        argument_of_perigee_deg = float(line2[34:42])
        mean_anomaly_deg = float(line2[43:51])
        mean_motion_rev_per_day = float(line2[52:63])
        revolution_field = line2[63:68].strip()
        revolution_number = int(revolution_field) if revolution_field else 0
    except TLEParseError:
        raise
    except ValueError as e:
        raise TLEParseError(f"Error parsing TLE line 2: {e}") from e

    try:
        satrec = Satrec.twoline2rv(line1, line2)
    except (ValueError, RuntimeError) as e:
        raise TLEParseError(f"SGP4 rejected the element set: {e}") from e

    return OrbitalElementSet(
        norad_id=str(catalog_number),
        classification=classification,
        international_designator=international_designator,
        epoch=epoch,
        mean_motion=satrec.no_unkozai,
        mean_motion_rev_per_day=mean_motion_rev_per_day,
        eccentricity=eccentricity,
        inclination_deg=inclination_deg,
        raan_deg=raan_deg,
        argument_of_perigee_deg=argument_of_perigee_deg,
        mean_anomaly_deg=mean_anomaly_deg,
        mean_motion_dot=mean_motion_dot,
        mean_motion_ddot=mean_motion_ddot,
        bstar=bstar,
        element_set_number=element_set_number,
        revolution_number=revolution_number,
        line1=line1,
        line2=line2,
        satrec=satrec,
        name=name.strip(),
        group=group,
    )


def parse_elements(
    line1: str, line2: str, name: str = "", group: str = ""
) -> Result[OrbitalElementSet]:
    """Parse a TLE into a result instead of raising, for batch callers"""
    try:
        return Result.success(parse_tle_lines(line1, line2, name=name, group=group))
    except TLEParseError as e:
        return Result.failure(
            ErrorCode.PARSE_ERROR,
            str(e),
            {"name": name.strip(), "norad_id": line1[2:7].strip()},
        )


def parse_record(record: TLEData) -> Result[OrbitalElementSet]:
    return parse_elements(
        record.line1, record.line2, name=record.name, group=record.group
    )


def parse_tle_text(tle_text: str, group: str) -> List[TLEData]:
    """
    Split a three-line (name, line 1, line 2) TLE listing into records.

    Triples whose data lines do not start with '1 ' and '2 ' are skipped;
    field-level validation happens later in parse_elements.
    """
    lines = tle_text.strip().splitlines()
    records = []

    for i in range(0, len(lines) - 2, 3):
        name = lines[i].strip()
        line1 = lines[i + 1].strip()
        line2 = lines[i + 2].strip()

        if not line1.startswith("1 ") or not line2.startswith("2 "):
            logger.debug(f"Skipping malformed TLE block starting at line {i}: {name}")
            continue

        records.append(
            TLEData(
                name=name,
                norad_id=line1[2:7].strip(),
                line1=line1,
                line2=line2,
                group=group,
            )
        )

    return records
