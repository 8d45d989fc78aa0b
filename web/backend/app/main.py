"""FastAPI application for the AI Family Night content-safety backend.

Provides REST API endpoints wrapping the familynight package for:
- Moderated content generation for each game
- Output moderation and input validation
- Security log review, statistics and export
- Family settings (Grandma Mode)
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Ensure the familynight package is importable by adding the project root to sys.path.
_project_root = str(Path(__file__).resolve().parents[3])
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from familynight import __version__
from familynight.errors import InvalidInputError, UnknownGameContextError
from web.backend.app.dependencies import close_shared_clients
from web.backend.app.routers import generate, moderation, security, settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the shared HTTP clients on shutdown."""
    yield
    await close_shared_clients()


app = FastAPI(
    title="Family Night Safety API",
    description=(
        "REST API for the AI Family Night content-safety pipeline. "
        "Provides endpoints for moderated generation, moderation, input "
        "validation, the security log and family settings."
    ),
    version=__version__,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(generate.router)
app.include_router(moderation.router)
app.include_router(security.router)
app.include_router(settings.router)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(UnknownGameContextError)
async def unknown_game_handler(request: Request, exc: UnknownGameContextError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "Family Night Safety API",
        "version": __version__,
        "description": "Content-safety pipeline REST API",
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
