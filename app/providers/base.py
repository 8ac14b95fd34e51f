from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional

from loguru import logger

from app.core.errors import UpstreamHTTPError
from app.domain.models import ArrConfig
from app.utils import http_client

# Upstream bodies can be whole HTML error pages; keep messages readable.
_MAX_ERROR_BODY = 500


@dataclass
class CatalogClient:
    """Base class for the Radarr/Sonarr v3 REST clients.

    The client is stateless apart from the immutable connection config it was
    built with. Subclasses define which endpoint holds the items, which field
    carries the stable external identifier and how an add payload looks.

    Attributes:
        config: Base URL, API key and optional profile/folder overrides.
        service: Human-readable service name used in messages ("Radarr").
        item_path: API path of the item collection ("/movie", "/series").
        id_field: Candidate field holding the external id ("tmdbId", "tvdbId").
    """

    config: ArrConfig

    service: ClassVar[str] = "Catalog"
    item_path: ClassVar[str] = ""
    id_field: ClassVar[str] = ""

    def _url(self, path: str) -> str:
        return f"{self.config.url}/api/v3{path}"

    def _call(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Issue one API call and decode the JSON answer.

        Raises:
            UpstreamHTTPError: Non-2xx status or an undecodable body.
            NetworkError: Transport failure (see http_client.request).
        """
        resp = http_client.request(
            self.service,
            method,
            self._url(path),
            params=params,
            json=json,
            headers={"X-Api-Key": self.config.api_key, "Accept": "application/json"},
        )
        if not 200 <= resp.status_code < 300:
            body = (resp.text or "").strip()[:_MAX_ERROR_BODY]
            logger.warning(
                f"{self.service} {method} {path} -> HTTP {resp.status_code}: {body}"
            )
            raise UpstreamHTTPError(self.service, resp.status_code, resp.reason or "", body)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamHTTPError(
                self.service, resp.status_code, "invalid JSON response"
            ) from e

    @staticmethod
    def _as_list(payload: Any) -> List[Dict[str, Any]]:
        if payload is None:
            return []
        if isinstance(payload, list):
            return [p for p in payload if isinstance(p, dict)]
        if isinstance(payload, dict):
            return [payload]
        return []

    # --- Lookup ---

    def lookup(self, term: str) -> List[Dict[str, Any]]:
        """Search the catalog's metadata source by free text."""
        return self._as_list(
            self._call("GET", f"{self.item_path}/lookup", params={"term": term})
        )

    def lookup_by_id(self, external_id: str) -> List[Dict[str, Any]]:
        """Exact lookup by external id; by default the id is used as search term."""
        return self.lookup(str(external_id))

    def lookup_candidates(
        self, title: str, external_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Lookup by exact external id when given, otherwise by title.

        An unknown id answered with HTTP 404 counts as zero results.
        """
        if external_id:
            try:
                return self.lookup_by_id(external_id)
            except UpstreamHTTPError as e:
                if e.status == 404:
                    return []
                raise
        return self.lookup(title)

    # --- Library ---

    def list_existing(self) -> List[Dict[str, Any]]:
        return self._as_list(self._call("GET", self.item_path))

    def external_id(self, item: Dict[str, Any]) -> Any:
        return item.get(self.id_field)

    def find_existing(self, external_id: Any) -> Optional[Dict[str, Any]]:
        if external_id in (None, "", 0):
            return None
        for item in self.list_existing():
            if self.external_id(item) == external_id:
                return item
        return None

    # --- Configuration helpers ---

    def list_profiles(self) -> List[Dict[str, Any]]:
        return self._as_list(self._call("GET", "/qualityprofile"))

    def list_folders(self) -> List[Dict[str, Any]]:
        return self._as_list(self._call("GET", "/rootfolder"))

    # --- Add ---

    def build_payload(
        self, item: Dict[str, Any], quality_profile_id: int, root_folder_path: str
    ) -> Dict[str, Any]:
        """The lookup record, monitored, with profile and folder set.

        Subclasses add their search-on-add options.
        """
        payload = dict(item)
        payload.update(
            {
                "monitored": True,
                "qualityProfileId": quality_profile_id,
                "rootFolderPath": root_folder_path,
            }
        )
        return payload

    def add(
        self, item: Dict[str, Any], quality_profile_id: int, root_folder_path: str
    ) -> Dict[str, Any]:
        payload = self.build_payload(item, quality_profile_id, root_folder_path)
        logger.info(
            f"{self.service}: adding '{item.get('title')}' ({item.get('year')}) "
            f"{self.id_field}={self.external_id(item)} profile={quality_profile_id} folder={root_folder_path}"
        )
        added = self._call("POST", self.item_path, json=payload)
        return added if isinstance(added, dict) else payload
