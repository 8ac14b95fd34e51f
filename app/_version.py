from pathlib import Path

DIST_NAME = "movie-grabber-relay"
DEFAULT_VERSION = "0.0.0"


def _version_file() -> Path:
    return Path(__file__).resolve().parents[1].joinpath("VERSION")


def get_version() -> str:
    """Version from the VERSION file in a source checkout, else the installed
    distribution's metadata, else DEFAULT_VERSION."""
    vfile = _version_file()
    if vfile.exists():
        text = vfile.read_text().strip()
        if text:
            return text
    try:
        from importlib.metadata import version as _dist_version

        return _dist_version(DIST_NAME)
    except Exception:
        return DEFAULT_VERSION


__version__ = get_version()
