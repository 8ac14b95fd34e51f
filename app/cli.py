from __future__ import annotations

import os
import sys
from loguru import logger

from app.config import GRABBER_HOST, GRABBER_PORT, GRABBER_RELOAD


def run_server(app_obj):
    """Run the Uvicorn server.

    - Reload is off unless GRABBER_RELOAD is set
    - Packaged (frozen) runs never reload
    """
    import uvicorn

    is_frozen = getattr(sys, "frozen", False) or hasattr(sys, "_MEIPASS")
    reload_env = os.environ.get("GRABBER_RELOAD")
    if reload_env is not None:
        reload_flag = reload_env == "1" or reload_env.lower() == "true"
    else:
        reload_flag = GRABBER_RELOAD
    reload_flag = reload_flag and not is_frozen

    logger.info(f"Movie Grabber relay listening on http://{GRABBER_HOST}:{GRABBER_PORT}")
    if reload_flag:
        logger.info("Uvicorn reload enabled (development mode).")
        uvicorn.run(
            "app.main:app",
            host=GRABBER_HOST,
            port=GRABBER_PORT,
            reload=True,
        )
    else:
        uvicorn.run(
            app_obj,
            host=GRABBER_HOST,
            port=GRABBER_PORT,
            reload=False,
        )


def main() -> None:
    from app.main import app

    run_server(app)
