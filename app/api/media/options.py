from __future__ import annotations

from fastapi import Request
from loguru import logger

from app.core.grabber import list_catalog_options

from . import router
from .common import radarr_config, respond, sonarr_config


@router.get("/config/profiles")
def get_profiles(request: Request):
    """Quality profiles and root folders of Radarr and Sonarr.

    Used by the extension's options page; an unconfigured or unreachable
    catalog shows up as an ``error`` entry instead of failing the request.
    """
    logger.debug("Catalog profiles requested.")
    data = list_catalog_options(radarr_config(request), sonarr_config(request))
    return respond(True, data=data)
