"""Domain value objects shared by the normalizer, the service clients and the API.

Everything here is a plain dataclass. Connection configs are frozen so a
request-level override always produces a new value instead of mutating the
one the caller holds.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Dict, Optional


class MediaType(StrEnum):
    MOVIE = "movie"
    SERIES = "series"


@dataclass(frozen=True)
class MagnetInfo:
    """A parsed magnet link.

    Attributes:
        magnet_uri: The URI exactly as received.
        info_hash: Lowercased 40-hex or 32-base32 BitTorrent hash, empty if absent.
        raw_title: Decoded ``dn`` display name.
        clean_title: Display name with release metadata stripped, e.g. ``The Matrix (1999)``.
        inferred_type: ``series`` when the name carries season/episode markers.
    """

    magnet_uri: str
    info_hash: str
    raw_title: str
    clean_title: str
    inferred_type: MediaType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "magnetUri": self.magnet_uri,
            "infoHash": self.info_hash,
            "title": self.raw_title,
            "cleanTitle": self.clean_title,
            "type": str(self.inferred_type),
        }


@dataclass(frozen=True)
class ArrConfig:
    """Connection info for one Radarr/Sonarr instance."""

    url: str
    api_key: str
    quality_profile_id: Optional[int] = None
    root_folder_path: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", self.url.rstrip("/"))

    def with_overrides(
        self,
        *,
        quality_profile_id: Optional[int] = None,
        root_folder_path: Optional[str] = None,
    ) -> "ArrConfig":
        """Return a copy with the given non-empty values replaced."""
        changes: Dict[str, Any] = {}
        if quality_profile_id:
            changes["quality_profile_id"] = quality_profile_id
        if root_folder_path:
            changes["root_folder_path"] = root_folder_path
        return replace(self, **changes) if changes else self


@dataclass(frozen=True)
class QBitConfig:
    url: str
    username: str
    password: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", self.url.rstrip("/"))


@dataclass
class AddOutcome:
    """Result of a lookup-and-add run."""

    success: bool
    message: str
    already_exists: bool = False
    added: Optional[Dict[str, Any]] = None


@dataclass
class BranchOutcome:
    ok: bool
    message: str


@dataclass
class CombinedOutcome:
    """Outcome of the two independent branches of an add-magnet request."""

    arr: BranchOutcome
    qbit: BranchOutcome

    @property
    def state(self) -> str:
        if self.arr.ok and self.qbit.ok:
            return "ok"
        if self.arr.ok or self.qbit.ok:
            return "partial"
        return "failed"
