"""
Real element sets used across the test suite
"""

from datetime import datetime, timezone

ISS_NAME = "ISS (ZARYA)"
ISS_LINE1 = "1 25544U 98067A   14020.93268519  .00009878  00000-0  18200-3 0  5082"
ISS_LINE2 = "2 25544  51.6498 109.4756 0003572  55.9686 274.8005 15.49815350868473"
# 2014-01-20T22:23:04Z
ISS_EPOCH = datetime(2014, 1, 20, 22, 23, 4, tzinfo=timezone.utc)

STARLINK_NAME = "STARLINK-1007"
STARLINK_LINE1 = "1 44713U 19074A   21275.50886752  .00001156  00000-0  93328-4 0  9990"
STARLINK_LINE2 = "2 44713  53.0534 123.4578 0001387  87.6543 272.4623 15.06380957106897"

GPS_NAME = "GPS BIIR-11 (PRN 19)"
GPS_LINE1 = "1 28474U 04045A   14020.50000000 -.00000029  00000-0  00000+0 0  9991"
GPS_LINE2 = "2 28474  54.6750 196.4540 0111850 219.8000 139.4000  2.00569000 68002"

# Eccentricity 0.9 puts perigee below the surface
DECAYED_LINE2 = "2 25544  51.6498 109.4756 9000000  55.9686   0.0000 15.49815350868479"
# ISS elements with the mean motion field zeroed
ZERO_MEAN_MOTION_LINE2 = "2 25544  51.6498 109.4756 0003572  55.9686 274.8005  0.00000000868472"
# Valid checksum, but the inclination is not a number
NON_NUMERIC_LINE2 = "2 25544  51.6A98 109.4756 0003572  55.9686 274.8005 15.49815350868479"
BAD_CHECKSUM_LINE1 = ISS_LINE1[:-1] + "3"
