from __future__ import annotations


class GrabberError(Exception):
    """Base class for failures that are reported to the caller as-is."""

    status_code = 500


class ConfigMissingError(GrabberError):
    """Required connection info (url, api key) is absent."""

    status_code = 400

    _HINTS = {
        "Radarr": "Provide X-Radarr-Url and X-Radarr-Key headers or set RADARR_URL and RADARR_API_KEY.",
        "Sonarr": "Provide X-Sonarr-Url and X-Sonarr-Key headers or set SONARR_URL and SONARR_API_KEY.",
        "qBittorrent": "Provide the X-Qbit-Url header or set QBIT_URL.",
    }

    def __init__(self, service: str, hint: str = "") -> None:
        self.service = service
        hint = hint or self._HINTS.get(service, "")
        message = f"Missing {service} configuration."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class NotFoundError(GrabberError):
    status_code = 404


class NoDefaultAvailableError(GrabberError):
    """The catalog offered no quality profile or root folder to fall back to."""

    status_code = 409

    def __init__(self, service: str, what: str) -> None:
        self.service = service
        self.what = what
        super().__init__(
            f"{service} has no {what} configured; set one in {service} or pass it explicitly"
        )


class RejectedError(GrabberError):
    """The service answered the call but refused the operation."""

    status_code = 422


class UpstreamHTTPError(GrabberError):
    status_code = 502

    def __init__(self, service: str, status: int, reason: str = "", body: str = "") -> None:
        self.service = service
        self.status = status
        self.reason = reason
        self.body = body
        text = f"{service} API error {status}"
        if reason:
            text = f"{text}: {reason}"
        if body:
            text = f"{text} - {body}"
        super().__init__(text)


class NetworkError(GrabberError):
    """Connection refused, name resolution failure, timeout or another transport error.

    ``kind`` is one of ``refused``, ``dns``, ``timeout`` or ``connection``.
    """

    status_code = 502

    _DESCRIPTIONS = {
        "refused": "connection refused",
        "dns": "host name could not be resolved",
        "timeout": "request timed out",
        "connection": "connection failed",
    }

    def __init__(self, service: str, kind: str, url: str, detail: str = "") -> None:
        self.service = service
        self.kind = kind
        self.url = url
        if kind == "timeout":
            self.status_code = 504
        what = self._DESCRIPTIONS.get(kind, self._DESCRIPTIONS["connection"])
        text = f"Cannot reach {service} at {url}: {what}"
        if detail and kind == "connection":
            text = f"{text} ({detail})"
        super().__init__(text)
