from __future__ import annotations

from typing import Optional

from fastapi import Request
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from app.core.grabber import add_magnet, summarize
from app.domain.models import MediaType
from app.utils.magnet import parse_magnet_uri, scan_magnet_links

from . import router
from .common import qbit_config, radarr_config, respond, sonarr_config

_STATUS_BY_STATE = {"ok": 200, "partial": 207, "failed": 502}


class AddMagnetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    magnet_uri: str = Field(alias="magnetUri", pattern=r"^magnet:\?")
    title: str = Field(min_length=1)
    type: MediaType
    category: Optional[str] = None


class ParseMagnetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    magnet_uri: str = Field(alias="magnetUri")


class ScanRequest(BaseModel):
    html: str = ""


@router.post("/magnet/add")
def add_magnet_route(body: AddMagnetRequest, request: Request):
    """
    1. Look up the title in Radarr or Sonarr and add it if not present
    2. Send the magnet link to qBittorrent with the right category

    Answers 200 when both steps worked, 207 when only one did, 502 when none did.
    """
    arr = radarr_config(request) if body.type == MediaType.MOVIE else sonarr_config(request)
    outcome = add_magnet(
        body.magnet_uri,
        body.title,
        body.type,
        category=body.category,
        arr_config=arr,
        qbit_config=qbit_config(request),
    )
    return respond(
        outcome.state == "ok",
        summarize(outcome, body.type),
        {
            "state": outcome.state,
            "arr": outcome.arr.message,
            "arrOk": outcome.arr.ok,
            "qbit": outcome.qbit.message,
            "qbitOk": outcome.qbit.ok,
        },
        status_code=_STATUS_BY_STATE[outcome.state],
    )


@router.post("/magnet/parse")
def parse_magnet_route(body: ParseMagnetRequest):
    info = parse_magnet_uri(body.magnet_uri.strip())
    if info is None:
        return respond(
            False,
            "Not a magnet link or it carries neither a name nor an info-hash",
            status_code=400,
        )
    return respond(True, data=info.to_dict())


@router.post("/magnet/scan")
def scan_magnets_route(body: ScanRequest):
    """Parse every magnet link found in a page's HTML."""
    found = scan_magnet_links(body.html)
    logger.info(f"Scan found {len(found)} magnet(s)")
    return respond(True, f"{len(found)} magnet link(s) found", [m.to_dict() for m in found])
