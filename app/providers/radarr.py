from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List

from app.config import RADARR_MINIMUM_AVAILABILITY

from .base import CatalogClient


@dataclass
class RadarrClient(CatalogClient):
    """Radarr v3 client. Movies are keyed by their TMDB id."""

    service: ClassVar[str] = "Radarr"
    item_path: ClassVar[str] = "/movie"
    id_field: ClassVar[str] = "tmdbId"

    def lookup_by_id(self, external_id: str) -> List[Dict[str, Any]]:
        # Radarr answers the IMDb lookup with a single object, not a list.
        return self._as_list(
            self._call("GET", "/movie/lookup/imdb", params={"imdbId": external_id})
        )

    def build_payload(
        self, item: Dict[str, Any], quality_profile_id: int, root_folder_path: str
    ) -> Dict[str, Any]:
        payload = super().build_payload(item, quality_profile_id, root_folder_path)
        payload.update(
            {
                "minimumAvailability": item.get("minimumAvailability")
                or RADARR_MINIMUM_AVAILABILITY,
                "addOptions": {
                    "monitor": "movieOnly",
                    "searchForMovie": True,
                },
            }
        )
        return payload
