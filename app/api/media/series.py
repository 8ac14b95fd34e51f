from __future__ import annotations

from typing import Optional

from fastapi import Request
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from app.core.grabber import lookup_and_add_series, series_status

from . import router
from .common import require_sonarr, respond


class AddSeriesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    year: Optional[int] = None
    tvdb_id: Optional[int] = Field(default=None, alias="tvdbId")
    quality_profile_id: Optional[int] = Field(default=None, alias="qualityProfileId")
    root_folder_path: Optional[str] = Field(default=None, alias="rootFolderPath")


@router.post("/series/add")
def add_series(body: AddSeriesRequest, request: Request):
    logger.info(f"Add series request: title='{body.title}', year={body.year}, tvdb={body.tvdb_id}")
    config = require_sonarr(request).with_overrides(
        quality_profile_id=body.quality_profile_id,
        root_folder_path=body.root_folder_path,
    )
    result = lookup_and_add_series(
        config,
        body.title,
        year=body.year,
        tvdb_id=str(body.tvdb_id) if body.tvdb_id else None,
    )
    return respond(
        result.success,
        result.message,
        {"series": result.added, "alreadyExists": result.already_exists},
    )


@router.get("/series/status/{title}")
def get_series_status(title: str, request: Request):
    config = require_sonarr(request)
    return respond(True, data=series_status(config, title))
