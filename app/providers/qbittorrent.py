from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from app.core.errors import RejectedError, UpstreamHTTPError
from app.domain.models import QBitConfig
from app.utils import http_client

SERVICE = "qBittorrent"


@dataclass
class QBittorrentClient:
    """qBittorrent Web API v2 client using cookie (SID) authentication."""

    config: QBitConfig

    def _url(self, path: str) -> str:
        return f"{self.config.url}/api/v2{path}"

    def _post(self, path: str, data: dict, sid: Optional[str] = None):
        headers = {"Referer": self.config.url}
        if sid:
            headers["Cookie"] = f"SID={sid}"
        return http_client.post(SERVICE, self._url(path), data=data, headers=headers)

    def login(self) -> str:
        """Authenticate and return the session id.

        Raises:
            UpstreamHTTPError: Non-2xx answer (e.g. 403 when the IP is banned).
            RejectedError: Wrong credentials or no SID cookie returned.
        """
        resp = self._post(
            "/auth/login",
            {"username": self.config.username, "password": self.config.password},
        )
        if not 200 <= resp.status_code < 300:
            raise UpstreamHTTPError(
                SERVICE, resp.status_code, "login failed", (resp.text or "").strip()
            )
        if (resp.text or "").strip() != "Ok.":
            logger.warning(f"qBittorrent login rejected for user '{self.config.username}'")
            raise RejectedError("qBittorrent login failed: invalid credentials")
        sid = resp.cookies.get("SID")
        if not sid:
            raise RejectedError("qBittorrent login succeeded but no SID cookie returned")
        logger.debug("qBittorrent login ok")
        return sid

    def ensure_category(self, sid: str, category: str) -> None:
        """Create the category; an already existing one is fine."""
        resp = self._post(
            "/torrents/createCategory", {"category": category, "savePath": ""}, sid
        )
        if resp.status_code == 409:
            logger.debug(f"qBittorrent category '{category}' already exists")
            return
        if not 200 <= resp.status_code < 300:
            raise UpstreamHTTPError(
                SERVICE,
                resp.status_code,
                f"create category '{category}' failed",
                (resp.text or "").strip(),
            )
        logger.debug(f"qBittorrent category '{category}' ensured")

    def add_magnet(self, sid: str, magnet_uri: str, category: Optional[str] = None) -> None:
        data = {"urls": magnet_uri}
        if category:
            data["category"] = category
        resp = self._post("/torrents/add", data, sid)
        if not 200 <= resp.status_code < 300:
            raise UpstreamHTTPError(
                SERVICE, resp.status_code, "add magnet failed", (resp.text or "").strip()
            )
        if (resp.text or "").strip() == "Fails.":
            raise RejectedError("qBittorrent rejected the magnet link")


def send_magnet(config: QBitConfig, magnet_uri: str, category: Optional[str] = None) -> None:
    """Login, make sure the category exists and submit the magnet."""
    client = QBittorrentClient(config)
    sid = client.login()
    if category:
        client.ensure_category(sid, category)
    client.add_magnet(sid, magnet_uri, category)
    logger.success(f"Magnet sent to qBittorrent (category: {category or '<none>'})")
