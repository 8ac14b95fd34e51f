from __future__ import annotations

from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from app import config as cfg
from app.core.errors import ConfigMissingError
from app.domain.models import ArrConfig, QBitConfig


class ApiResponse(BaseModel):
    success: bool
    message: str = ""
    data: Any = None


def respond(
    success: bool, message: str = "", data: Any = None, status_code: int = 200
) -> JSONResponse:
    body = ApiResponse(success=success, message=message, data=data)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status_code)


def _header(request: Request, name: str) -> str:
    return (request.headers.get(name) or "").strip()


def _int_or_none(raw: str, label: str) -> Optional[int]:
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {label}={raw!r}")
        return None


def _arr_config(
    request: Request,
    prefix: str,
    url: str,
    api_key: str,
    profile_id: Optional[int],
    root_folder: str,
) -> Optional[ArrConfig]:
    url = _header(request, f"X-{prefix}-Url") or url
    api_key = _header(request, f"X-{prefix}-Key") or api_key
    if not url or not api_key:
        return None
    header_profile = _int_or_none(
        _header(request, f"X-{prefix}-Quality-Profile"), f"X-{prefix}-Quality-Profile"
    )
    return ArrConfig(
        url=url,
        api_key=api_key,
        quality_profile_id=header_profile or profile_id,
        root_folder_path=_header(request, f"X-{prefix}-Root-Folder") or root_folder or None,
    )


def radarr_config(request: Request) -> Optional[ArrConfig]:
    """Radarr connection from X-Radarr-* headers, falling back to RADARR_* env."""
    return _arr_config(
        request,
        "Radarr",
        cfg.RADARR_URL,
        cfg.RADARR_API_KEY,
        cfg.RADARR_QUALITY_PROFILE_ID,
        cfg.RADARR_ROOT_FOLDER,
    )


def sonarr_config(request: Request) -> Optional[ArrConfig]:
    return _arr_config(
        request,
        "Sonarr",
        cfg.SONARR_URL,
        cfg.SONARR_API_KEY,
        cfg.SONARR_QUALITY_PROFILE_ID,
        cfg.SONARR_ROOT_FOLDER,
    )


def qbit_config(request: Request) -> Optional[QBitConfig]:
    url = _header(request, "X-Qbit-Url") or cfg.QBIT_URL
    if not url:
        return None
    return QBitConfig(
        url=url,
        username=_header(request, "X-Qbit-Username") or cfg.QBIT_USERNAME,
        password=request.headers.get("X-Qbit-Password") or cfg.QBIT_PASSWORD,
    )


def require_radarr(request: Request) -> ArrConfig:
    config = radarr_config(request)
    if config is None:
        raise ConfigMissingError("Radarr")
    return config


def require_sonarr(request: Request) -> ArrConfig:
    config = sonarr_config(request)
    if config is None:
        raise ConfigMissingError("Sonarr")
    return config
