from __future__ import annotations

from typing import Dict, List, Optional
import re
import urllib.parse

from bs4 import BeautifulSoup  # type: ignore
from loguru import logger

from app.domain.models import MagnetInfo, MediaType
from app.utils.naming import clean_torrent_name, is_tv_show

MAGNET_PREFIX = "magnet:?"

_BTIH_RE = re.compile(r"urn:btih:([a-f0-9]{40}|[a-z2-7]{32})", re.IGNORECASE)
_BARE_MAGNET_RE = re.compile(r"magnet:\?[^\s\"'<>]+", re.IGNORECASE)


def _flatten_params(magnet: str) -> Dict[str, str]:
    qs = magnet[len(MAGNET_PREFIX) :]
    params = urllib.parse.parse_qs(qs, keep_blank_values=False, strict_parsing=False)
    flat: Dict[str, str] = {}
    for k, v in params.items():
        if not v:
            continue
        flat[k] = v[0]
    return flat


def extract_info_hash(xt: str) -> str:
    """Return the lowercased BitTorrent info-hash from an ``xt`` value, or ``""``."""
    m = _BTIH_RE.search(xt or "")
    return m.group(1).lower() if m else ""


def parse_magnet_uri(magnet: str) -> Optional[MagnetInfo]:
    """
    Parse a magnet URI into a MagnetInfo.

    Parameters:
        magnet (str): Raw URI, expected to start with "magnet:?".

    Returns:
        MagnetInfo | None: None when the input is not a magnet URI or carries
        neither a display name nor an info-hash.
    """
    if not magnet or not magnet.startswith(MAGNET_PREFIX):
        logger.debug("Rejecting non-magnet input")
        return None

    flat = _flatten_params(magnet)
    display_name = flat.get("dn", "").strip()
    info_hash = extract_info_hash(flat.get("xt", ""))

    if not display_name and not info_hash:
        logger.debug("Magnet carries neither dn nor a usable xt")
        return None

    info = MagnetInfo(
        magnet_uri=magnet,
        info_hash=info_hash,
        raw_title=display_name,
        clean_title=clean_torrent_name(display_name),
        inferred_type=MediaType.SERIES if is_tv_show(display_name) else MediaType.MOVIE,
    )
    logger.debug(
        f"Parsed magnet: hash={info.info_hash or '<none>'}, title='{info.clean_title}', type={info.inferred_type}"
    )
    return info


def scan_magnet_links(html: str) -> List[MagnetInfo]:
    """
    Find every magnet link on a page and parse it.

    Looks at ``<a href="magnet:...">`` anchors first, then at bare magnet URIs
    in the remaining text. Results are de-duplicated by info-hash (or by the
    URI itself when no hash is present) and keep the order of first appearance.
    """
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    raw: List[str] = []
    for a in soup.select('a[href^="magnet:"]'):
        href = a.get("href")
        if href:
            raw.append(str(href).strip())
    raw.extend(m.group(0) for m in _BARE_MAGNET_RE.finditer(soup.get_text(" ")))

    seen: set[str] = set()
    results: List[MagnetInfo] = []
    for uri in raw:
        info = parse_magnet_uri(uri)
        if info is None:
            continue
        key = info.info_hash or info.magnet_uri
        if key in seen:
            continue
        seen.add(key)
        results.append(info)
    logger.info(f"Magnet scan: {len(raw)} link(s) found, {len(results)} unique")
    return results
