"""Health check endpoints for Kubernetes probes."""

from __future__ import annotations

import platform
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.requests import Request

from sigtrail_api.models import HealthResponse
from sigtrail_core.deps import missing_dependencies
from sigtrail_verify.cosign import REQUIRED_TOOLS

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
@router.get("/health", response_model=HealthResponse, include_in_schema=False)
async def health(request: Request) -> HealthResponse:
    """Liveness probe. Returns build metadata if the process is running."""
    settings = request.app.state.settings
    return HealthResponse(
        status="healthy",
        version=settings.version,
        build_time=settings.build_time,
        git_commit=settings.git_commit,
        python_version=platform.python_version(),
        timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )


@router.get("/readyz")
async def ready() -> dict:
    """Readiness probe. Ready once every external verification tool is on PATH."""
    missing = missing_dependencies(REQUIRED_TOOLS)
    if missing:
        return {"status": "not ready", "missing_tools": missing}
    return {"status": "ready"}
