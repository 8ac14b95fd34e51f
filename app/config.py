import os
from dotenv import load_dotenv
from loguru import logger
from app.utils.logger import config as configure_logger

# Load .env as early as possible so all downstream imports see the intended env
load_dotenv()

# Configure logger after env is loaded (LOG_LEVEL honored)
configure_logger()


def _as_bool(val: str | None, default: bool) -> bool:
    if val is None:
        return default
    v = val.strip().lower()
    return v in ("1", "true", "yes", "on")


def _as_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}; using default {default!r}.")
        return default


def _as_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}; using default {default!r}.")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive; using default {default!r}.")
        return default
    return value


# --- Server ---
GRABBER_RELOAD = _as_bool(os.getenv("GRABBER_RELOAD", None), False)
GRABBER_HOST = os.getenv("GRABBER_HOST", "0.0.0.0").strip() or "0.0.0.0"
GRABBER_PORT = _as_int("GRABBER_PORT", 3000) or 3000

# --- CORS ---
# The browser extension calls us from its own chrome-extension:// origin, so
# the default is to allow every origin.
CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]
CORS_ALLOW_CREDENTIALS = _as_bool(os.getenv("CORS_ALLOW_CREDENTIALS", None), False)
logger.debug(
    f"CORS_ORIGINS={CORS_ORIGINS}, CORS_ALLOW_CREDENTIALS={CORS_ALLOW_CREDENTIALS}"
)

# --- Outbound HTTP ---
# Applied to every call towards Radarr, Sonarr and qBittorrent.
HTTP_TIMEOUT_SECONDS = _as_float("HTTP_TIMEOUT_SECONDS", 10.0)
logger.debug(f"HTTP_TIMEOUT_SECONDS={HTTP_TIMEOUT_SECONDS}")

# --- Connection fallbacks ---
# Request headers win; these are only used when a header is absent.
RADARR_URL = os.getenv("RADARR_URL", "").strip()
RADARR_API_KEY = os.getenv("RADARR_API_KEY", "").strip()
RADARR_QUALITY_PROFILE_ID = _as_int("RADARR_QUALITY_PROFILE_ID", None)
RADARR_ROOT_FOLDER = os.getenv("RADARR_ROOT_FOLDER", "").strip()
RADARR_MINIMUM_AVAILABILITY = (
    os.getenv("RADARR_MINIMUM_AVAILABILITY", "released").strip() or "released"
)

SONARR_URL = os.getenv("SONARR_URL", "").strip()
SONARR_API_KEY = os.getenv("SONARR_API_KEY", "").strip()
SONARR_QUALITY_PROFILE_ID = _as_int("SONARR_QUALITY_PROFILE_ID", None)
SONARR_ROOT_FOLDER = os.getenv("SONARR_ROOT_FOLDER", "").strip()

QBIT_URL = os.getenv("QBIT_URL", "").strip()
QBIT_USERNAME = os.getenv("QBIT_USERNAME", "admin").strip()
QBIT_PASSWORD = os.getenv("QBIT_PASSWORD", "")

# --- Download categories ---
QBIT_MOVIE_CATEGORY = os.getenv("QBIT_MOVIE_CATEGORY", "radarr").strip() or "radarr"
QBIT_TV_CATEGORY = os.getenv("QBIT_TV_CATEGORY", "sonarr").strip() or "sonarr"
logger.debug(
    f"QBIT_MOVIE_CATEGORY={QBIT_MOVIE_CATEGORY}, QBIT_TV_CATEGORY={QBIT_TV_CATEGORY}"
)
