import os
import re
import sys
from loguru import logger

# key=value / key: value pairs whose value must never reach a log sink
_SECRET_RE = re.compile(
    r"(?i)\b(api[_-]?key|apikey|password|x-api-key|x-\w+-key|sid)(\s*[=:]\s*)([^\s&,;'\"]+)"
)


def redact(text: str) -> str:
    """Mask API keys, passwords and session ids in a log line."""
    return _SECRET_RE.sub(r"\1\2***", text)


def _redact_record(record) -> bool:
    record["message"] = redact(record["message"])
    return True


def config():
    """
    Configure the global Loguru logger. Keeps this function lightweight so it
    can be imported across the codebase without side-effects.

    Level comes from LOG_LEVEL (default INFO). Every message passes through
    ``redact`` before it is written.
    """
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        colorize=True,
        filter=_redact_record,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )


def mask_secret(value: str | None) -> str:
    """Return a log-safe placeholder for an API key or password."""
    if not value:
        return "<none>"
    return "<set>"
