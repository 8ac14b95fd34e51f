from __future__ import annotations

from fastapi import APIRouter

from app.utils.logger import config as configure_logger

# Configure logging once
configure_logger()

# Shared router for the extension-facing endpoints
router = APIRouter(prefix="/api")

# Import submodules to register routes on the shared router
from . import movie  # noqa: F401,E402
from . import series  # noqa: F401,E402
from . import magnet  # noqa: F401,E402
from . import options  # noqa: F401,E402

__all__ = ["router"]
