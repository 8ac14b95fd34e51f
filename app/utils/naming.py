from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import re
import urllib.parse

from loguru import logger


@dataclass(frozen=True)
class ReleaseMarker:
    """A named pattern whose first hit marks where the real title ends.

    Soft markers are words that also occur in real titles ("The Sparks
    Brothers", "A Proper Man"); they only end the title after the release year.
    """

    name: str
    pattern: re.Pattern[str]
    soft: bool = False

    def find(self, text: str, start: int = 0) -> Optional[int]:
        m = self.pattern.search(text, start)
        return m.start() if m else None


def _marker(name: str, regex: str, soft: bool = False) -> ReleaseMarker:
    return ReleaseMarker(name, re.compile(regex, re.IGNORECASE), soft)


# Order matters: when two markers hit at the same position the earlier entry wins.
RELEASE_MARKERS: Tuple[ReleaseMarker, ...] = (
    _marker("resolution", r"\b(?:480p|576p|720p|1080p|1080i|2160p|4k|uhd)\b"),
    _marker(
        "source",
        r"\b(?:blu-?ray|bdrip|brrip|bdremux|remux|web-?dl|web-?rip|hdrip|dvdrip|"
        r"dvdscr|hdtv|pdtv|hdcam|hdts|telesync|amzn|dsnp|hmax|atvp)\b",
    ),
    _marker(
        "codec",
        r"\b(?:x26[45]|h\s?26[45]|hevc|avc|xvid|divx|av1|10bit|8bit|hdr10|hdr)\b",
    ),
    _marker("audio", r"\b(?:aac\d?|e?ac3|dts(?:-?hd)?|ddp?\d|flac|mp3|truehd|atmos)\b"),
    _marker(
        "group",
        r"\b(?:yify|yts|rarbg|sparks|geckos|fgt|evo|etrg|stuttershit|ettv|eztv|"
        r"tgx|galaxyrg|qxr|psa)\b",
        soft=True,
    ),
    _marker(
        "edition",
        r"\b(?:remastered|extended|unrated|proper|repack|director'?s\s+cut|imax|uncut)\b",
        soft=True,
    ),
    _marker(
        "language",
        r"\b(?:multi|dual\s?audio|hindi|tamil|telugu|malayalam|kannada|esubs?|"
        r"subbed|dubbed|vostfr|truefrench|latino)\b",
        soft=True,
    ),
    _marker("episode", r"\bS\d{1,2}E\d{1,3}\b"),
    _marker("season", r"\bS\d{2}\b"),
    _marker("season_word", r"\bSeason\s+\d+"),
    _marker("complete_season", r"\bComplete\s+Season"),
)

_TV_PATTERNS: Tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bS\d{1,2}E\d{1,3}\b",  # S01E01
        r"\bS\d{2}\b",  # S01 season pack
        r"\b\d{1,2}x\d{2}\b",  # 1x01
        r"\bSeason\s*\d+",
        r"\bComplete\s+Season",
        r"\bSeries\s*\d+",
        r"\bMini-?Series\b",
        r"\bE\d{2}\b",
    )
)

_SEPARATORS_RE = re.compile(r"[._]")
_YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")
_TRAILING_YEAR_RE = re.compile(r"^(.*?)\s*\(((?:19|20)\d{2})\)\s*$")

# Leading [tag], (tag with letters) or {tag}. A bracketed bare year is kept.
_LEADING_TAG_RE = re.compile(
    r"^\s*(?:\[(?!\s*(?:19|20)\d{2}\s*\])[^\]]*\]|\((?=[^)]*[A-Za-z])[^)]*\)|\{[^}]*\})\s*"
)
_SITE_TLD_RE = re.compile(
    r"^\s*www\s+[^\s-]+\s+(?:com|net|org|to|mx|lt|am|me|io|cc|ws|se|pink|click|"
    r"bond|cfd|lol|vip|xyz|in|uk|nz)\b\s*",
    re.IGNORECASE,
)
# Words are whitespace separated so a long dash-less name fails in linear time.
_SITE_DASH_RE = re.compile(
    r"^\s*www\s+(?:[^\s-]+\s+){0,3}[^\s-]+\s*-\s*", re.IGNORECASE
)
_COLOR_LABEL_RE = re.compile(
    r"^\s*(?:pink|red|blue|green|black|white|gold|silver|orange|purple)\s+-\s*",
    re.IGNORECASE,
)
_LEADING_DASH_RE = re.compile(r"^\s*-+\s*")

_RESIDUAL_RE = re.compile(
    r"\b(?:480p|576p|720p|1080p|2160p|x26[45]|h\s?26[45]|hevc|xvid|divx|10bit|web-?dl|web-?rip|blu-?ray)\b",
    re.IGNORECASE,
)
_EMPTY_BRACKETS_RE = re.compile(r"\(\s*\)|\[\s*\]|\{\s*\}")
_WS_RE = re.compile(r"\s+")


def _strip_prefixes(text: str) -> str:
    while True:
        before = text
        for rx in (_LEADING_TAG_RE, _SITE_TLD_RE, _SITE_DASH_RE, _COLOR_LABEL_RE):
            text = rx.sub("", text, count=1)
        text = _LEADING_DASH_RE.sub("", text, count=1)
        if text == before:
            return text


def find_release_marker(
    text: str, soft_from: Optional[int] = 0
) -> Optional[Tuple[str, int]]:
    """
    Locate the earliest release marker in ``text``.

    Every marker in RELEASE_MARKERS is evaluated; the lowest position wins and
    ties go to the marker listed first. Matches at position 0 are ignored since
    cutting there would leave nothing of the title. Soft markers only count at
    or after ``soft_from``, and not at all when it is None.

    Returns:
        (marker name, position) or None when no marker applies.
    """
    best: Optional[Tuple[str, int]] = None
    for marker in RELEASE_MARKERS:
        if marker.soft:
            if soft_from is None:
                continue
            pos = marker.find(text, soft_from)
        else:
            pos = marker.find(text)
        if pos is None or pos == 0:
            continue
        if best is None or pos < best[1]:
            best = (marker.name, pos)
    return best


def _pick_year(text: str, cut: int) -> Optional[re.Match[str]]:
    # A year that opens the title is part of it (e.g. "1917"), not a release year.
    candidates = [m for m in _YEAR_RE.finditer(text) if m.start() > 0]
    if not candidates:
        return None
    in_body = [m for m in candidates if m.end() <= cut]
    if len(in_body) > 1:
        # "Blade Runner 2049 2017": the last year before the markers is the release year.
        return in_body[-1]
    return candidates[0]


def _remove_span(text: str, start: int, end: int) -> str:
    left, right = text[:start], text[end:]
    stripped = left.rstrip()
    if stripped.endswith(("(", "[")):
        left = stripped[:-1]
    stripped = right.lstrip()
    if stripped.startswith((")", "]")):
        right = stripped[1:]
    return f"{left} {right}"


def _trim_edges(text: str) -> str:
    while True:
        before = text
        text = re.sub(r"^[\s\-\])}]+", "", text)
        text = re.sub(r"[\s\-\[({]+$", "", text)
        if text.endswith(")") and text.count(")") > text.count("("):
            text = text[:-1]
        if text.endswith("]") and text.count("]") > text.count("["):
            text = text[:-1]
        if text.startswith("(") and text.count("(") > text.count(")"):
            text = text[1:]
        if text.startswith("[") and text.count("[") > text.count("]"):
            text = text[1:]
        if text == before:
            return text


def clean_torrent_name(name: str) -> str:
    """
    Turn a torrent display name into a human-readable title.

    Strips site prefixes, quality/codec/audio tags, release groups and
    season markers, then re-appends the release year as ``"Title (YYYY)"``.
    The function is pure and stable on its own output.

    The release year is the last year before the first release marker, so a
    year-like title word survives ("Blade Runner 2049 2017" keeps "2049").
    A year opening the name is never the release year ("1917"). Group,
    edition and language words only cut the name after that year. If nothing
    but quality tags remain, the name is returned with just its prefixes and
    whitespace cleaned ("1080p" stays "1080p").

    Example:
        >>> clean_torrent_name("The.Matrix.1999.1080p.BluRay.x264-GROUP")
        'The Matrix (1999)'
    """
    cleaned = urllib.parse.unquote(name or "")
    cleaned = _SEPARATORS_RE.sub(" ", cleaned)
    cleaned = _strip_prefixes(cleaned)

    hard = find_release_marker(cleaned, soft_from=None)
    year_match = _pick_year(cleaned, hard[1] if hard else len(cleaned))
    year = year_match.group(1) if year_match else ""
    marker = find_release_marker(cleaned, soft_from=year_match.end() if year_match else 0)
    cut = marker[1] if marker else len(cleaned)

    if marker:
        logger.debug(f"Release marker '{marker[0]}' at {cut} in '{cleaned}'")
        cleaned = cleaned[:cut]

    if year_match and year_match.end() <= len(cleaned):
        head = cleaned[: year_match.start()]
        tail = cleaned[year_match.end() :]
        # Words after the year are junk unless the year leads the name ("[2019] Title").
        if re.search(r"[A-Za-z0-9]", head) and re.search(r"[A-Za-z0-9]", tail):
            cleaned = cleaned[: year_match.end()]
        cleaned = _remove_span(cleaned, year_match.start(), year_match.end())

    unstripped = _trim_edges(_WS_RE.sub(" ", cleaned).strip())
    cleaned = _RESIDUAL_RE.sub(" ", cleaned)
    cleaned = _EMPTY_BRACKETS_RE.sub(" ", cleaned)
    cleaned = _WS_RE.sub(" ", cleaned).strip()
    cleaned = _trim_edges(cleaned) or unstripped

    return f"{cleaned} ({year})" if year else cleaned


def is_tv_show(name: str) -> bool:
    """Whether a torrent name looks like an episode, season pack or series."""
    text = _SEPARATORS_RE.sub(" ", urllib.parse.unquote(name or ""))
    return any(p.search(text) for p in _TV_PATTERNS)


def split_title_year(title: str) -> Tuple[str, Optional[int]]:
    """Split ``"The Matrix (1999)"`` into ``("The Matrix", 1999)``."""
    m = _TRAILING_YEAR_RE.match(title or "")
    if not m:
        return (title or "").strip(), None
    return m.group(1).strip(), int(m.group(2))
