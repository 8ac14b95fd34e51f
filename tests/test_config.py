import importlib
import sys


def _reload_config():
    import app

    if "app.config" in sys.modules:
        del sys.modules["app.config"]
    if hasattr(app, "config"):
        delattr(app, "config")
    return importlib.import_module("app.config")


def test_cors_origins_parsing(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "  chrome-extension://abc , , http://localhost:5173 ,, ")
    cfg = _reload_config()

    assert cfg.CORS_ORIGINS == ["chrome-extension://abc", "http://localhost:5173"]


def test_defaults(monkeypatch):
    for name in (
        "CORS_ORIGINS",
        "HTTP_TIMEOUT_SECONDS",
        "GRABBER_PORT",
        "QBIT_USERNAME",
        "QBIT_MOVIE_CATEGORY",
        "QBIT_TV_CATEGORY",
        "RADARR_MINIMUM_AVAILABILITY",
    ):
        monkeypatch.delenv(name, raising=False)
    cfg = _reload_config()

    assert cfg.CORS_ORIGINS == ["*"]
    assert cfg.HTTP_TIMEOUT_SECONDS == 10.0
    assert cfg.GRABBER_PORT == 3000
    assert cfg.QBIT_USERNAME == "admin"
    assert cfg.QBIT_MOVIE_CATEGORY == "radarr"
    assert cfg.QBIT_TV_CATEGORY == "sonarr"
    assert cfg.RADARR_MINIMUM_AVAILABILITY == "released"


def test_invalid_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("GRABBER_PORT", "http")
    monkeypatch.setenv("RADARR_QUALITY_PROFILE_ID", "HD")
    cfg = _reload_config()

    assert cfg.HTTP_TIMEOUT_SECONDS == 10.0
    assert cfg.GRABBER_PORT == 3000
    assert cfg.RADARR_QUALITY_PROFILE_ID is None


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "0")
    cfg = _reload_config()
    assert cfg.HTTP_TIMEOUT_SECONDS == 10.0

    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "2.5")
    cfg = _reload_config()
    assert cfg.HTTP_TIMEOUT_SECONDS == 2.5


def test_blank_category_uses_default(monkeypatch):
    monkeypatch.setenv("QBIT_TV_CATEGORY", "   ")
    monkeypatch.setenv("RADARR_QUALITY_PROFILE_ID", "6")
    cfg = _reload_config()

    assert cfg.QBIT_TV_CATEGORY == "sonarr"
    assert cfg.RADARR_QUALITY_PROFILE_ID == 6
