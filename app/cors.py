from __future__ import annotations

import re

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

# Browser extensions call from their own scheme, e.g. chrome-extension://<id>.
_EXTENSION_SCHEMES = ("chrome-extension", "moz-extension", "safari-web-extension")


def _split_origins(origins: list[str]) -> tuple[list[str], str | None]:
    """Separate exact origins from ``<scheme>://*`` extension wildcards.

    Returns the exact origins and a regex matching any wildcarded extension
    scheme (None when there is none).
    """
    exact: list[str] = []
    schemes: list[str] = []
    for origin in origins:
        scheme, sep, rest = origin.partition("://")
        if sep and rest == "*" and scheme in _EXTENSION_SCHEMES:
            schemes.append(re.escape(scheme))
        else:
            exact.append(origin)
    if not schemes:
        return exact, None
    return exact, rf"^(?:{'|'.join(schemes)})://[A-Za-z0-9_-]+$"


def apply_cors_middleware(
    app: FastAPI,
    *,
    origins: list[str],
    allow_credentials: bool,
) -> None:
    """Apply CORSMiddleware for the extension's origin.

    - No middleware if origins is empty.
    - Wildcard origins ("*") always disable credentials.
    - ``chrome-extension://*`` style entries allow any extension id of that scheme.
    - Only GET/POST are needed by the extension.
    """

    if not origins:
        return

    is_wildcard = "*" in origins
    exact, extension_regex = _split_origins(origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if is_wildcard else exact,
        allow_origin_regex=None if is_wildcard else extension_regex,
        allow_credentials=False if is_wildcard else allow_credentials,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
