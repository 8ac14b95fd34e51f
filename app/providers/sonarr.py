from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List

from .base import CatalogClient


@dataclass
class SonarrClient(CatalogClient):
    """Sonarr v3 client. Series are keyed by their TVDB id."""

    service: ClassVar[str] = "Sonarr"
    item_path: ClassVar[str] = "/series"
    id_field: ClassVar[str] = "tvdbId"

    def lookup_by_id(self, external_id: str) -> List[Dict[str, Any]]:
        term = str(external_id)
        if not term.lower().startswith("tvdb:"):
            term = f"tvdb:{term}"
        return self.lookup(term)

    def build_payload(
        self, item: Dict[str, Any], quality_profile_id: int, root_folder_path: str
    ) -> Dict[str, Any]:
        payload = super().build_payload(item, quality_profile_id, root_folder_path)
        payload.update(
            {
                "seasonFolder": True,
                "addOptions": {
                    "monitor": "all",
                    "searchForMissingEpisodes": True,
                    "searchForCutoffUnmetEpisodes": False,
                },
            }
        )
        return payload
