import json as _json
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple
from urllib.parse import urlsplit

import pytest
from fastapi.testclient import TestClient

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


class FakeResponse:
    """Just enough of requests.Response for the service clients."""

    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = None,
        text: Optional[str] = None,
        cookies: Optional[dict] = None,
        reason: str = "",
    ):
        self.status_code = status_code
        self._json = json_data
        if text is None:
            text = _json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.content = text.encode("utf-8")
        self.cookies = cookies or {}
        self.reason = reason

    def json(self):
        return _json.loads(self.text)


class FakeSession:
    """Routes outbound calls to per-host handlers and records every call."""

    def __init__(self):
        self.handlers: List[Tuple[str, Any]] = []
        self.calls: List[dict] = []

    def mount(self, base_url: str, handler: Any) -> None:
        self.handlers.append((base_url.rstrip("/"), handler))

    def request(self, method: str, url: str, timeout=None, **kwargs):
        self.calls.append({"method": method, "url": url, "timeout": timeout, **kwargs})
        for base, handler in self.handlers:
            if url.startswith(base):
                if isinstance(handler, BaseException):
                    raise handler
                return handler(method, url[len(base):], **kwargs)
        raise AssertionError(f"unexpected outbound call: {method} {url}")

    def calls_to(self, method: str, path_suffix: str) -> List[dict]:
        return [
            c
            for c in self.calls
            if c["method"] == method and urlsplit(c["url"]).path.endswith(path_suffix)
        ]


class FakeCatalog:
    """In-memory Radarr/Sonarr v3 API."""

    def __init__(
        self,
        item_path: str,
        id_field: str,
        candidates: Optional[list] = None,
        profiles: Optional[list] = None,
        folders: Optional[list] = None,
        existing: Optional[list] = None,
        by_imdb: Optional[dict] = None,
        add_status: int = 201,
    ):
        self.item_path = item_path
        self.id_field = id_field
        self.candidates = candidates or []
        self.profiles = [{"id": 4, "name": "HD-1080p"}] if profiles is None else profiles
        self.folders = [{"id": 1, "path": "/media", "freeSpace": 100}] if folders is None else folders
        self.existing = list(existing or [])
        self.by_imdb = by_imdb or {}
        self.add_status = add_status
        self.added: List[dict] = []
        self.lookup_terms: List[str] = []

    def __call__(self, method: str, path: str, params=None, json=None, headers=None, **_):
        assert headers and headers.get("X-Api-Key"), "API key header missing"
        assert path.startswith("/api/v3"), path
        path = path[len("/api/v3"):]
        if method == "GET" and path == f"{self.item_path}/lookup":
            term = (params or {}).get("term", "")
            self.lookup_terms.append(term)
            return FakeResponse(200, self.candidates)
        if method == "GET" and path == "/movie/lookup/imdb":
            found = self.by_imdb.get((params or {}).get("imdbId"))
            if found is None:
                return FakeResponse(404, text='{"message":"NotFound"}', reason="Not Found")
            return FakeResponse(200, found)
        if method == "GET" and path == self.item_path:
            return FakeResponse(200, self.existing)
        if method == "POST" and path == self.item_path:
            if self.add_status >= 300:
                return FakeResponse(self.add_status, text="[{\"errorMessage\":\"boom\"}]", reason="Bad Request")
            record = dict(json, id=len(self.existing) + 1)
            self.added.append(json)
            self.existing.append(record)
            return FakeResponse(self.add_status, record)
        if method == "GET" and path == "/qualityprofile":
            return FakeResponse(200, self.profiles)
        if method == "GET" and path == "/rootfolder":
            return FakeResponse(200, self.folders)
        return FakeResponse(404, text="not found", reason="Not Found")


class FakeQBit:
    """In-memory qBittorrent Web API v2."""

    def __init__(self, password: str = "secret", add_body: str = "Ok.", category_status: int = 200):
        self.password = password
        self.add_body = add_body
        self.category_status = category_status
        self.categories: List[str] = []
        self.torrents: List[dict] = []

    def __call__(self, method: str, path: str, data=None, headers=None, **_):
        data = data or {}
        if path == "/api/v2/auth/login":
            if data.get("password") != self.password:
                return FakeResponse(200, text="Fails.")
            return FakeResponse(200, text="Ok.", cookies={"SID": "sid-123"})
        assert (headers or {}).get("Cookie") == "SID=sid-123", "session cookie missing"
        if path == "/api/v2/torrents/createCategory":
            if data["category"] in self.categories:
                return FakeResponse(409, text="Category already exists")
            self.categories.append(data["category"])
            return FakeResponse(self.category_status, text="")
        if path == "/api/v2/torrents/add":
            if self.add_body == "Ok.":
                self.torrents.append(dict(data))
            return FakeResponse(200, text=self.add_body)
        return FakeResponse(404, text="not found")


RADARR = "http://radarr.local:7878"
SONARR = "http://sonarr.local:8989"
QBIT = "http://qbit.local:8080"


@pytest.fixture
def fake_http(monkeypatch):
    from app.utils import http_client

    fake = FakeSession()
    monkeypatch.setattr(http_client, "get_session", lambda: fake)
    return fake


@pytest.fixture
def client(monkeypatch, fake_http):
    for name in (
        "RADARR_URL",
        "RADARR_API_KEY",
        "RADARR_QUALITY_PROFILE_ID",
        "RADARR_ROOT_FOLDER",
        "SONARR_URL",
        "SONARR_API_KEY",
        "SONARR_QUALITY_PROFILE_ID",
        "SONARR_ROOT_FOLDER",
        "QBIT_URL",
        "QBIT_PASSWORD",
        "QBIT_MOVIE_CATEGORY",
        "QBIT_TV_CATEGORY",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    # Fresh imports so module-level config reflects the environment above
    for m in [m for m in sys.modules if m == "app" or m.startswith("app.")]:
        del sys.modules[m]

    from app.main import app
    from app.utils import http_client

    monkeypatch.setattr(http_client, "get_session", lambda: fake_http)

    with TestClient(app) as c:
        yield c


def radarr_headers(**extra: str) -> dict:
    headers = {"X-Radarr-Url": RADARR + "/", "X-Radarr-Key": "rkey"}
    headers.update(extra)
    return headers


def sonarr_headers(**extra: str) -> dict:
    headers = {"X-Sonarr-Url": SONARR, "X-Sonarr-Key": "skey"}
    headers.update(extra)
    return headers


def qbit_headers(password: str = "secret") -> dict:
    return {"X-Qbit-Url": QBIT, "X-Qbit-Username": "admin", "X-Qbit-Password": password}
