"""FastAPI application entry point.

Run with:
    uvicorn api.main:app --reload --port 8000

Routes:
    POST /api/frameworks/import   import the standards with a chosen scale
    GET  /api/health              liveness check
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings
from api.routers import frameworks
from ccss_import import __version__
from ccss_import.utils.logging_config import setup_logging

settings = get_settings()
setup_logging(verbose=settings.debug)

app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Admin API that imports the Common Core standards as competency frameworks.",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# Admin frontend runs on its own dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(frameworks.router, prefix="/api/frameworks", tags=["Frameworks"])


@app.get("/api/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": settings.api_version,
        "importer_version": __version__,
        "store": "memory" if settings.dry_run else "database",
    }
