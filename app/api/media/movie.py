from __future__ import annotations

from typing import Optional

from fastapi import Request
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from app.core.grabber import lookup_and_add_movie, movie_status

from . import router
from .common import require_radarr, respond


class AddMovieRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    year: Optional[int] = None
    imdb_id: Optional[str] = Field(default=None, alias="imdbId", pattern=r"^tt\d{7,}$")
    quality_profile_id: Optional[int] = Field(default=None, alias="qualityProfileId")
    root_folder_path: Optional[str] = Field(default=None, alias="rootFolderPath")


@router.post("/movie/add")
def add_movie(body: AddMovieRequest, request: Request):
    """Look the movie up in Radarr and add it unless it is already tracked."""
    logger.info(f"Add movie request: title='{body.title}', year={body.year}, imdb={body.imdb_id}")
    config = require_radarr(request).with_overrides(
        quality_profile_id=body.quality_profile_id,
        root_folder_path=body.root_folder_path,
    )
    result = lookup_and_add_movie(config, body.title, year=body.year, imdb_id=body.imdb_id)
    return respond(
        result.success,
        result.message,
        {"movie": result.added, "alreadyExists": result.already_exists},
    )


@router.get("/movie/status/{query}")
def get_movie_status(query: str, request: Request):
    """Whether Radarr tracks the movie; ``query`` is an IMDb id or a title."""
    config = require_radarr(request)
    return respond(True, data=movie_status(config, query))
