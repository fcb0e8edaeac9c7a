"""Build the sigtrail FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sigtrail_api.config import Settings
from sigtrail_api.routes import health, tools, verify

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Assemble the API around settings.

    Probes are served at the root; everything else under settings.api_prefix.
    Settings are read from SIGTRAIL_* environment variables unless given,
    and stored on app.state for the routes.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="sigtrail",
        description="Verify container image signatures, SBOM attestations and build provenance",
        version=settings.version,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["health"])
    for module, tag in ((tools, "tools"), (verify, "verify")):
        app.include_router(module.router, prefix=settings.api_prefix, tags=[tag])

    logger.info(
        "sigtrail API %s (commit %s, built %s)",
        settings.version,
        settings.git_commit,
        settings.build_time,
    )
    return app
