import os
import logging
from typing import List, Optional

# --- Logging Setup ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# --- Environment helpers ---
def get_float_env(var_name: str, default: Optional[float] = None) -> Optional[float]:
    value = os.getenv(var_name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            logger.warning(
                f"Environment variable {var_name} ('{value}') is not a valid float. Ignoring."
            )
    return default


def get_int_env(var_name: str, default: int) -> int:
    value = os.getenv(var_name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            logger.warning(
                f"Environment variable {var_name} ('{value}') is not a valid integer. Ignoring."
            )
    return default


def get_list_env(var_name: str, default: List[str]) -> List[str]:
    value = os.getenv(var_name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


# --- TLE source ---
CELESTRAK_BASE_URL = os.getenv(
    "CELESTRAK_BASE_URL", "https://celestrak.org/NORAD/elements/gp.php"
)
TLE_USER_AGENT = os.getenv("TLE_USER_AGENT", "MXWLL-Satellite-Tracker/1.0")
TLE_FETCH_TIMEOUT_SECONDS = get_float_env("TLE_FETCH_TIMEOUT_SECONDS", 20.0)

# TLE data doesn't change that frequently
TLE_CACHE_TTL_SECONDS = get_int_env("TLE_CACHE_TTL_SECONDS", 60 * 60)
# How long an expired entry is kept as a fallback for failed refreshes
TLE_STALE_TTL_SECONDS = get_int_env("TLE_STALE_TTL_SECONDS", 7 * 24 * 60 * 60)

# 0 disables the background refresh task
TLE_REFRESH_INTERVAL_SECONDS = get_int_env("TLE_REFRESH_INTERVAL_SECONDS", 0)
TLE_REFRESH_GROUPS = get_list_env("TLE_REFRESH_GROUPS", ["stations"])

# Unset means an in-process cache
REDIS_URL = os.getenv("REDIS_URL")

# --- Propagation ---
ORBIT_PATH_POINTS = get_int_env("ORBIT_PATH_POINTS", 360)
MAX_ORBIT_PATH_POINTS = get_int_env("MAX_ORBIT_PATH_POINTS", 5000)
# Longest ground-track window, one week
MAX_ORBIT_DURATION_MINUTES = get_float_env("MAX_ORBIT_DURATION_MINUTES", 7 * 24 * 60.0)

# --- Default Observer Configuration ---
DEFAULT_OBSERVER_LAT = get_float_env("DEFAULT_OBSERVER_LAT", 51.5)
DEFAULT_OBSERVER_LON = get_float_env("DEFAULT_OBSERVER_LON", -0.1)
MAX_SATELLITES_ABOVE = get_int_env("MAX_SATELLITES_ABOVE", 100)

# --- HTTP ---
CORS_ORIGINS = get_list_env(
    "CORS_ORIGINS",
    [
        "http://localhost",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
)

logger.info(f"TLE source: {CELESTRAK_BASE_URL} (cache TTL {TLE_CACHE_TTL_SECONDS}s)")
logger.info(
    f"Default Observer: LAT={DEFAULT_OBSERVER_LAT}, LON={DEFAULT_OBSERVER_LON}"
)
