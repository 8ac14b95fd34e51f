"""Clients for the catalog services and the download client."""

from app.domain.models import ArrConfig, MediaType

from .base import CatalogClient
from .radarr import RadarrClient
from .sonarr import SonarrClient
from .qbittorrent import QBittorrentClient, send_magnet

_CATALOG_FACTORIES = {
    MediaType.MOVIE: RadarrClient,
    MediaType.SERIES: SonarrClient,
}


def get_catalog_client(media_type: MediaType, config: ArrConfig) -> CatalogClient:
    """Return the catalog client responsible for the given media type.

    Parameters:
        media_type (MediaType): movie -> Radarr, series -> Sonarr.
        config (ArrConfig): Connection info for that catalog.
    """
    return _CATALOG_FACTORIES[MediaType(media_type)](config)


__all__ = [
    "CatalogClient",
    "RadarrClient",
    "SonarrClient",
    "QBittorrentClient",
    "get_catalog_client",
    "send_magnet",
]
