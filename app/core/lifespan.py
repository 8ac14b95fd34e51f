from __future__ import annotations

from contextlib import asynccontextmanager

from loguru import logger
from fastapi import FastAPI

from app._version import __version__
from app.config import HTTP_TIMEOUT_SECONDS
from app.utils.http_client import close_session


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Movie Grabber relay {__version__} starting (outbound timeout {HTTP_TIMEOUT_SECONDS}s)"
    )
    try:
        yield
    finally:
        close_session()
        logger.info("Movie Grabber relay stopped.")
