"""Pydantic models for API request and response bodies."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ParamInfo(BaseModel):
    """Parameter declaration for a tool."""

    name: str
    description: str
    type: str
    required: bool
    default: Any = None
    choices: list[str] | None = None


class ToolInfo(BaseModel):
    """Information about an available tool (returned by GET /api/tools)."""

    name: str
    description: str
    version: str
    required_tools: list[str] = []
    missing_tools: list[str] = []
    params: list[ParamInfo]


class VerifyRequest(BaseModel):
    """Request body for POST /api/verify."""

    image: str
    identity_regexp: str | None = None
    oidc_issuer: str | None = None


class PackageInfo(BaseModel):
    name: str
    version_info: str


class PredicateInfo(BaseModel):
    predicate_type: str
    package_count: int
    top_packages: list[PackageInfo]
    decode_error: str | None = None


class AttemptInfo(BaseModel):
    selector: str | None
    succeeded: bool
    failure_kind: str | None = None


class CheckInfo(BaseModel):
    """One evidence check outcome."""

    kind: str
    required: bool
    succeeded: bool
    matched_variant: str | None = None
    failure_kind: str | None = None
    attempts: list[AttemptInfo]
    payload: PredicateInfo | None = None
    raw_output: str = ""


class VerifyResponse(BaseModel):
    """Response body for POST /api/verify."""

    image: str
    repository: str
    digest: str
    overall_success: bool
    checks: list[CheckInfo]


class HealthResponse(BaseModel):
    """Build metadata returned by GET /healthz."""

    status: str
    version: str
    build_time: str
    git_commit: str
    python_version: str
    timestamp: str
