"""
linkcite FastAPI Application
============================

HTTP entry point for citation generation.

Usage:
    # Development
    uvicorn linkcite.app:app --reload --port 8000

    # Production
    uvicorn linkcite.app:app --host 0.0.0.0 --port 8000 --workers 4
"""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables
env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from linkcite import __version__
from linkcite.api import citation_router
from linkcite.api.citation_router import get_settings
from linkcite.log_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.log_json)

log = structlog.get_logger()
log.info("Environment variables loaded", env_file=str(env_file))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown.

    Logs the effective configuration on startup; nothing needs to be
    released on shutdown.
    """
    log.info(
        "linkcite API starting",
        version=__version__,
        priority=[s.value for s in settings.priority_config().default],
        styles=[s.value for s in settings.default_styles],
        layout=settings.infobox_layout.value,
    )
    yield
    log.info("linkcite API stopped")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Citations from multi-source web page metadata",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(citation_router)


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# Root endpoint
@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "generate": "/citations/generate",
            "format": "/citations/format",
            "formats": "/citations/formats",
        },
    }


# Export for uvicorn
__all__ = ["app"]
