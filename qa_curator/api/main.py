"""
FastAPI application for qa-curator.

Provides the REST API behind the browser UI:
- Domain profiles and local backend discovery
- Curation rounds against the cloud or local backend
- Dataset review (edit/delete) and export

State is a single in-memory session on ``app.state``; there is no
persistence and no authentication.
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from config import Settings, get_settings
from qa_curator import __version__
from qa_curator.api.routers import backend_router, curation_router
from qa_curator.core.errors import CurationError, InputValidationError
from qa_curator.curation.session import CurationSession
from qa_curator.generation.curator import QACurator


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with a fresh session and curator."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown events."""
        logger.remove()
        logger.add(sys.stderr, level=settings.log_level)
        logger.info(f"Starting qa-curator API (session {app.state.session.dataset_id})")

        yield

        logger.info("Shutting down qa-curator API...")
        await app.state.curator.close()

    app = FastAPI(
        title="QA Curator",
        description="Curate question-answer datasets from source text with a cloud or local LLM.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session = CurationSession.create(settings)
    app.state.curator = QACurator(settings=settings)

    # CORS middleware for the local browser UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CurationError)
    async def curation_error_handler(request: Request, exc: CurationError) -> JSONResponse:
        status_code = 422 if isinstance(exc, InputValidationError) else 502
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    app.include_router(backend_router.router, tags=["backend"])
    app.include_router(curation_router.router, tags=["curation"])
    return app


app = create_app()
