"""Image verification endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException
from fastapi.requests import Request

from sigtrail_api.models import VerifyRequest, VerifyResponse
from sigtrail_verify.cosign import CosignVerifier, TrustPolicy, Verifier, ensure_tools
from sigtrail_verify.errors import MalformedReferenceError, MissingToolError
from sigtrail_verify.pipeline import VerificationPipeline
from sigtrail_verify.reference import parse_reference

logger = logging.getLogger(__name__)

router = APIRouter()

VerifierFactory = Callable[[TrustPolicy], Verifier]


def get_verifier_factory(request: Request) -> VerifierFactory:
    """Return a cosign verifier factory, or 503 if cosign is not installed."""
    settings = request.app.state.settings
    try:
        ensure_tools()
    except MissingToolError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    def factory(policy: TrustPolicy) -> Verifier:
        return CosignVerifier(policy=policy, timeout=settings.command_timeout_seconds)

    return factory


@router.post("/verify", response_model=VerifyResponse)
async def verify_image(
    req: VerifyRequest,
    request: Request,
    make_verifier: VerifierFactory = Depends(get_verifier_factory),
) -> VerifyResponse:
    """Verify an image's signature, SBOM attestation and build provenance.

    Responds 200 with the full report whether or not verification passed;
    overall_success carries the verdict.
    """
    settings = request.app.state.settings
    try:
        ref = parse_reference(req.image)
    except MalformedReferenceError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    policy = TrustPolicy(
        identity_regexp=req.identity_regexp or settings.identity_regexp,
        oidc_issuer=req.oidc_issuer or settings.oidc_issuer,
    )
    pipeline = VerificationPipeline(make_verifier(policy))

    # cosign calls block; keep them off the event loop
    report = await asyncio.to_thread(pipeline.run, ref)
    logger.info("Verified %s: overall_success=%s", ref, report.overall_success)

    return VerifyResponse.model_validate(report.to_dict())
