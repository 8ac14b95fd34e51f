from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.errors import GrabberError


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid request: " + "; ".join(parts)


def install_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"success": false, "message": ...}``.

    - GrabberError subclasses use their own status code and message.
    - Request validation errors answer 400.
    - Anything else is logged with its traceback and answers a generic 500.
    """

    @app.exception_handler(GrabberError)
    async def _grabber_error(request: Request, exc: GrabberError):
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
        return JSONResponse(
            {"success": False, "message": str(exc)}, status_code=exc.status_code
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning(f"{request.method} {request.url.path} -> 400: {message}")
        return JSONResponse({"success": False, "message": message}, status_code=400)

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            {"success": False, "message": "Unexpected server error"}, status_code=500
        )
