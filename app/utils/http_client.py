from __future__ import annotations

from typing import Any, Optional
import requests
from requests.adapters import HTTPAdapter
from loguru import logger

from app.config import HTTP_TIMEOUT_SECONDS
from app.core.errors import ConfigMissingError, NetworkError

_SESSION: Optional[requests.Session] = None

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "failed to resolve",
    "nameresolutionerror",
    "no address associated with hostname",
)
_REFUSED_MARKERS = (
    "connection refused",
    "errno 111",
    "actively refused",
    "winerror 10061",
)


def _build_session() -> requests.Session:
    s = requests.Session()
    # No retries: a repeated POST could add the same title twice.
    adapter = HTTPAdapter(max_retries=0, pool_connections=10, pool_maxsize=20)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update({"User-Agent": "movie-grabber-relay"})
    return s


def get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_session()
    return _SESSION


def close_session() -> None:
    global _SESSION
    if _SESSION is not None:
        _SESSION.close()
        _SESSION = None


def classify_connection_error(exc: BaseException) -> str:
    """Map a transport exception to ``timeout``, ``dns``, ``refused`` or ``connection``."""
    if isinstance(exc, requests.exceptions.Timeout):
        return "timeout"
    msg = str(exc).lower()
    if any(m in msg for m in _DNS_MARKERS):
        return "dns"
    if any(m in msg for m in _REFUSED_MARKERS):
        return "refused"
    if "timed out" in msg:
        return "timeout"
    return "connection"


def request(
    service: str,
    method: str,
    url: str,
    *,
    timeout: float | int | None = None,
    **kwargs: Any,
) -> requests.Response:
    """Send one request with the bounded timeout and typed transport errors.

    HTTP status codes are not checked here; callers decide what a non-2xx
    answer means for their service.

    Raises:
        ConfigMissingError: The URL is malformed (e.g. missing scheme).
        NetworkError: Connection refused, DNS failure, timeout or other transport error.
    """
    s = get_session()
    effective_timeout = timeout if timeout is not None else HTTP_TIMEOUT_SECONDS
    logger.debug(f"{service} {method} {url} (timeout={effective_timeout}s)")
    try:
        return s.request(method, url, timeout=effective_timeout, **kwargs)
    except (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
    ) as e:
        logger.warning(f"{service}: invalid URL {url!r}: {e}")
        raise ConfigMissingError(service, f"Invalid URL: {url}") from e
    except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
        kind = classify_connection_error(e)
        logger.warning(f"{service} {method} {url} failed ({kind}): {e}")
        raise NetworkError(service, kind, url, detail=str(e)) from e


def get(service: str, url: str, **kwargs: Any) -> requests.Response:
    return request(service, "GET", url, **kwargs)


def post(service: str, url: str, **kwargs: Any) -> requests.Response:
    return request(service, "POST", url, **kwargs)
