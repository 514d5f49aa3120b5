"""Chirpy - short message API."""
from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from chirpy.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: create tables
    from chirpy.database import Base, engine

    # Import all models so they're registered with Base
    from chirpy import models  # noqa: F401

    if engine.url.get_backend_name() == "sqlite" and engine.url.database not in (None, "", ":memory:"):
        Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)

    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.app_name} started (platform={settings.platform or 'default'})")

    yield


app = FastAPI(
    title=settings.app_name,
    description="Post chirps, log in, stay logged in",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/api/healthz", response_class=PlainTextResponse)
def health_check():
    """Health check endpoint."""
    return "OK\n"


# Import and include routers
from chirpy.api import admin, auth, users, webhooks  # noqa: E402
from chirpy.api.errors import register_exception_handlers  # noqa: E402

register_exception_handlers(app)

app.include_router(users.router, prefix="/api")
app.include_router(auth.router, prefix="/api")
app.include_router(webhooks.router, prefix="/api")
app.include_router(admin.router)
