from datetime import datetime, timezone

from fastapi import FastAPI

from app.core.bootstrap import init
from app.core.lifespan import lifespan
from app.config import CORS_ORIGINS, CORS_ALLOW_CREDENTIALS
from app.cors import apply_cors_middleware
from app.api.errors import install_exception_handlers
from app.api.media import router as media_router

init()

app = FastAPI(title="Movie Grabber Relay", lifespan=lifespan)
apply_cors_middleware(
    app, origins=CORS_ORIGINS, allow_credentials=CORS_ALLOW_CREDENTIALS
)
install_exception_handlers(app)
app.include_router(media_router)  # Radarr / Sonarr / qBittorrent relay


# Healthcheck endpoint for the extension and monitoring
@app.get("/health")
async def healthcheck():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    from app.cli import run_server

    run_server(app)
