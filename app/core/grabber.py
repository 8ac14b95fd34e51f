"""Lookup-and-add orchestration and the combined add-magnet operation.

The same five steps run for movies (Radarr) and series (Sonarr):

1. lookup by external id or by title
2. pick the candidate matching the requested year, else the first one
3. stop early when the catalog already tracks the external id
4. fill in the first quality profile / root folder when none was given
5. add with monitoring and search-on-add enabled
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import re
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from app.config import QBIT_MOVIE_CATEGORY, QBIT_TV_CATEGORY
from app.core.errors import (
    ConfigMissingError,
    GrabberError,
    NoDefaultAvailableError,
    NotFoundError,
)
from app.domain.models import (
    AddOutcome,
    ArrConfig,
    BranchOutcome,
    CombinedOutcome,
    MediaType,
    QBitConfig,
)
from app.providers import (
    CatalogClient,
    RadarrClient,
    SonarrClient,
    get_catalog_client,
    send_magnet,
)
from app.utils.naming import split_title_year

_IMDB_ID_RE = re.compile(r"^tt\d{7,}$")

_NOUNS = {"Radarr": "movie", "Sonarr": "series"}
_SEARCH_WHAT = {"Radarr": "downloads", "Sonarr": "episodes"}


def select_match(
    candidates: List[Dict[str, Any]], year: Optional[int] = None
) -> Dict[str, Any]:
    """Prefer the candidate whose year equals ``year``; fall back to the first one.

    The catalog returns candidates ranked by relevance, so the first entry is
    the best guess when the year does not disambiguate.
    """
    if year and len(candidates) > 1:
        for candidate in candidates:
            try:
                if int(candidate.get("year") or 0) == int(year):
                    return candidate
            except (TypeError, ValueError):
                continue
    return candidates[0]


def resolve_defaults(client: CatalogClient) -> Tuple[int, str]:
    """Return the (quality profile id, root folder path) to add with.

    Explicit values from the config win. Otherwise the first profile/folder the
    catalog offers is used.

    Raises:
        NoDefaultAvailableError: The catalog has no profile or no root folder.
    """
    profile_id = client.config.quality_profile_id
    folder = client.config.root_folder_path
    if not profile_id:
        profiles = client.list_profiles()
        if not profiles or profiles[0].get("id") is None:
            raise NoDefaultAvailableError(client.service, "quality profile")
        profile_id = int(profiles[0]["id"])
        logger.debug(
            f"{client.service}: defaulting to quality profile '{profiles[0].get('name')}' ({profile_id})"
        )
    if not folder:
        folders = client.list_folders()
        if not folders or not folders[0].get("path"):
            raise NoDefaultAvailableError(client.service, "root folder")
        folder = str(folders[0]["path"])
        logger.debug(f"{client.service}: defaulting to root folder '{folder}'")
    return profile_id, folder


def lookup_and_add(
    client: CatalogClient,
    title: str,
    year: Optional[int] = None,
    external_id: Optional[str] = None,
) -> AddOutcome:
    """Make sure the title is tracked by the catalog; idempotent per external id.

    Raises:
        NotFoundError: The lookup returned no candidates.
        NoDefaultAvailableError: No profile/folder could be resolved.
        UpstreamHTTPError, NetworkError: Catalog call failures.
    """
    service = client.service
    noun = _NOUNS.get(service, "title")
    logger.info(
        f"{service}: lookup-and-add title='{title}', year={year}, id={external_id or '<none>'}"
    )

    candidates = client.lookup_candidates(title, external_id)
    if not candidates:
        raise NotFoundError(f'No {noun} found for "{title}"')

    match = select_match(candidates, year)
    match_id = client.external_id(match)
    logger.debug(
        f"{service}: {len(candidates)} candidate(s); picked '{match.get('title')}' ({match.get('year')}) {client.id_field}={match_id}"
    )

    if client.find_existing(match_id) is not None:
        logger.info(f"{service}: '{match.get('title')}' already tracked")
        return AddOutcome(
            success=True,
            message=f'"{match.get("title")}" already exists in {service}',
            already_exists=True,
        )

    profile_id, folder = resolve_defaults(client)
    added = client.add(match, profile_id, folder)
    logger.success(f"{service}: added '{added.get('title')}' ({added.get('year')})")
    return AddOutcome(
        success=True,
        message=(
            f'"{added.get("title")}" ({added.get("year")}) added to {service}, '
            f"searching for {_SEARCH_WHAT.get(service, 'downloads')}"
        ),
        added=added,
    )


def lookup_and_add_movie(
    config: ArrConfig,
    title: str,
    year: Optional[int] = None,
    imdb_id: Optional[str] = None,
) -> AddOutcome:
    return lookup_and_add(RadarrClient(config), title, year=year, external_id=imdb_id)


def lookup_and_add_series(
    config: ArrConfig,
    title: str,
    year: Optional[int] = None,
    tvdb_id: Optional[str] = None,
) -> AddOutcome:
    return lookup_and_add(SonarrClient(config), title, year=year, external_id=tvdb_id)


def movie_status(config: ArrConfig, query: str) -> Dict[str, Any]:
    """Report whether Radarr tracks the movie given by IMDb id or title."""
    client = RadarrClient(config)
    if _IMDB_ID_RE.match(query or ""):
        candidates = client.lookup_candidates(query, external_id=query)
    else:
        candidates = client.lookup(query)
    if not candidates:
        return {"exists": False}
    movie = candidates[0]
    found = client.find_existing(client.external_id(movie))
    status = None
    if found is not None:
        status = "downloaded" if found.get("hasFile") else "monitored"
    return {"exists": found is not None, "title": movie.get("title"), "status": status}


def series_status(config: ArrConfig, title: str) -> Dict[str, Any]:
    """Report whether Sonarr tracks a series with exactly this title (case-insensitive)."""
    client = SonarrClient(config)
    wanted = (title or "").strip().lower()
    for series in client.list_existing():
        if str(series.get("title") or "").lower() == wanted:
            return {"exists": True, "title": series.get("title")}
    return {"exists": False, "title": None}


def _catalog_options(client: CatalogClient) -> Dict[str, Any]:
    with ThreadPoolExecutor(max_workers=2) as pool:
        profiles_f = pool.submit(client.list_profiles)
        folders_f = pool.submit(client.list_folders)
        profiles = profiles_f.result()
        folders = folders_f.result()
    return {
        "profiles": [{"id": p.get("id"), "name": p.get("name")} for p in profiles],
        "rootFolders": [
            {"id": f.get("id"), "path": f.get("path"), "freeSpace": f.get("freeSpace")}
            for f in folders
        ],
    }


def _options_slot(
    service: str, config: Optional[ArrConfig], client_cls: type[CatalogClient]
) -> Dict[str, Any]:
    if config is None:
        return {"error": f"{service} not configured"}
    try:
        return _catalog_options(client_cls(config))
    except GrabberError as e:
        logger.warning(f"{service} options unavailable: {e}")
        return {"error": f"{service} unreachable: {e}"}


def list_catalog_options(
    radarr: Optional[ArrConfig], sonarr: Optional[ArrConfig]
) -> Dict[str, Any]:
    """Quality profiles and root folders of both catalogs.

    Both catalogs are queried concurrently; a failure only fills that
    catalog's slot with an ``error`` entry.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        radarr_f = pool.submit(_options_slot, "Radarr", radarr, RadarrClient)
        sonarr_f = pool.submit(_options_slot, "Sonarr", sonarr, SonarrClient)
        return {"radarr": radarr_f.result(), "sonarr": sonarr_f.result()}


def default_category(media_type: MediaType) -> str:
    return QBIT_MOVIE_CATEGORY if MediaType(media_type) == MediaType.MOVIE else QBIT_TV_CATEGORY


def _run_branch(label: str, fn) -> BranchOutcome:
    try:
        return BranchOutcome(ok=True, message=fn())
    except GrabberError as e:
        logger.warning(f"{label} failed: {e}")
        return BranchOutcome(ok=False, message=str(e))
    except Exception as e:
        logger.exception(f"{label} failed unexpectedly: {e}")
        return BranchOutcome(ok=False, message=f"unexpected error: {type(e).__name__}")


def add_magnet(
    magnet_uri: str,
    title: str,
    media_type: MediaType,
    *,
    category: Optional[str] = None,
    arr_config: Optional[ArrConfig] = None,
    qbit_config: Optional[QBitConfig] = None,
) -> CombinedOutcome:
    """Register the title with its catalog, then hand the magnet to qBittorrent.

    The two branches run one after the other and never abort each other; a
    missing config only fails its own branch.
    """
    media_type = MediaType(media_type)
    search_title, year = split_title_year(title)
    service = "Radarr" if media_type == MediaType.MOVIE else "Sonarr"
    cat = category or default_category(media_type)

    def _arr() -> str:
        if arr_config is None:
            raise ConfigMissingError(service)
        client = get_catalog_client(media_type, arr_config)
        return lookup_and_add(client, search_title, year=year).message

    def _qbit() -> str:
        if qbit_config is None:
            raise ConfigMissingError("qBittorrent")
        send_magnet(qbit_config, magnet_uri, cat)
        return f"Magnet sent to qBittorrent (category: {cat})"

    outcome = CombinedOutcome(
        arr=_run_branch(f"{service} add for '{title}'", _arr),
        qbit=_run_branch("qBittorrent add", _qbit),
    )
    logger.info(f"add-magnet '{title}' finished: {outcome.state}")
    return outcome


def summarize(outcome: CombinedOutcome, media_type: MediaType) -> str:
    """User-facing one-liner covering both branches."""
    service = "Radarr" if MediaType(media_type) == MediaType.MOVIE else "Sonarr"
    parts = [
        f"{service}: {outcome.arr.message}"
        if outcome.arr.ok
        else f"{service} failed: {outcome.arr.message}",
        outcome.qbit.message
        if outcome.qbit.ok
        else f"qBittorrent failed: {outcome.qbit.message}",
    ]
    return " | ".join(parts)
