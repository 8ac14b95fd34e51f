from __future__ import annotations

from dotenv import load_dotenv
from loguru import logger

from app.utils.logger import config as configure_logger, mask_secret
from app import config as cfg


def init() -> None:
    """Initialize environment and logging early.

    - Loads .env
    - Configures loguru
    - Logs which connection fallbacks are configured (secrets masked)
    """
    load_dotenv()
    configure_logger()
    logger.info(
        "Env fallbacks: radarr={} (key {}), sonarr={} (key {}), qbit={} (user {})".format(
            cfg.RADARR_URL or "<none>",
            mask_secret(cfg.RADARR_API_KEY),
            cfg.SONARR_URL or "<none>",
            mask_secret(cfg.SONARR_API_KEY),
            cfg.QBIT_URL or "<none>",
            cfg.QBIT_USERNAME or "<none>",
        )
    )
