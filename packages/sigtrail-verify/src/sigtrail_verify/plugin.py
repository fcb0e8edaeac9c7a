"""ToolPlugin implementation for image supply-chain verification."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from sigtrail_core.context import ExecutionContext
from sigtrail_core.plugin import ResultStatus, ToolParam, ToolResult

from sigtrail_verify.cosign import (
    DEFAULT_TIMEOUT,
    INSTALL_HINTS,
    REQUIRED_TOOLS,
    CosignVerifier,
    TrustPolicy,
    ensure_tools,
)
from sigtrail_verify.errors import (
    MalformedReferenceError,
    MissingToolError,
    VerificationCancelled,
)
from sigtrail_verify.pipeline import VerificationPipeline
from sigtrail_verify.reference import parse_reference
from sigtrail_verify.report import RenderOptions, SummaryReporter, render_json

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

DIGEST_HINT = "Use: docker inspect <image> --format='{{.RepoDigests}}'"


class VerifyPlugin:
    """sigtrail plugin for verify - check an image's signature, SBOM and provenance."""

    name = "verify"
    description = "Verify an image's keyless signature, SBOM attestation and build provenance"
    version = __version__
    required_tools = REQUIRED_TOOLS

    def get_params(self) -> list[ToolParam]:
        """Declare parameters for verify."""
        return [
            ToolParam(
                name="image",
                description="Image reference pinned by digest (repository@sha256:...)",
                required=True,
                positional=True,
            ),
            ToolParam(
                name="certificate-identity-regexp",
                description="Signing certificate identity regexp (default: https://github.com/.*)",
            ),
            ToolParam(
                name="certificate-oidc-issuer",
                description="Signing certificate OIDC issuer (default: GitHub Actions)",
            ),
            ToolParam(
                name="timeout",
                description=f"Seconds allowed per cosign call, 0 = no limit (default: {DEFAULT_TIMEOUT})",
                type="int",
            ),
            ToolParam(
                name="format",
                description="Report format",
                default="text",
                choices=["text", "json"],
            ),
            ToolParam(
                name="output",
                description="Also write the JSON report to this file",
                type="path",
            ),
            ToolParam(
                name="color",
                description="Colorize the text report (default: when stdout is a terminal)",
                type="bool",
            ),
            ToolParam(
                name="verbose",
                description="Log each cosign invocation",
                type="bool",
                default=False,
            ),
        ]

    def run(self, args: dict[str, Any], ctx: ExecutionContext) -> ToolResult:
        """Execute verification of a single image."""
        config = ctx.config or {}

        if args.get("verbose"):
            logging.getLogger("sigtrail_verify").setLevel(logging.DEBUG)

        # Checked once, before any evidence is collected
        try:
            ensure_tools()
        except MissingToolError as e:
            hints = "\n".join(f"  {INSTALL_HINTS.get(t, t)}" for t in e.tools)
            return ToolResult(
                status=ResultStatus.FAILURE,
                summary=str(e),
                data={"output": f"{e}\n\nInstall with:\n{hints}"},
            )

        try:
            ref = parse_reference(args.get("image") or "")
        except MalformedReferenceError as e:
            return ToolResult(
                status=ResultStatus.FAILURE,
                summary=str(e),
                data={"output": f"Error: {e}\n{DIGEST_HINT}"},
            )

        policy = TrustPolicy.from_config(
            config,
            identity_regexp=args.get("certificate_identity_regexp"),
            oidc_issuer=args.get("certificate_oidc_issuer"),
        )
        timeout = args.get("timeout")
        if timeout is None:
            timeout = ctx.setting("timeout", DEFAULT_TIMEOUT)
        try:
            timeout = int(timeout)
        except (TypeError, ValueError):
            return ToolResult(
                status=ResultStatus.FAILURE,
                summary=f"Invalid timeout {timeout!r}: expected whole seconds",
            )

        verifier = CosignVerifier(policy=policy, timeout=timeout)
        logger.debug(
            "Trust policy: identity=%s issuer=%s timeout=%s",
            policy.identity_regexp,
            policy.oidc_issuer,
            timeout,
        )

        try:
            report = VerificationPipeline(verifier).run(ref, ctx=ctx)
        except VerificationCancelled as e:
            return ToolResult(status=ResultStatus.CANCELLED, summary=str(e))

        if args.get("format") == "json":
            output = render_json(report)
        else:
            color = args.get("color")
            if color is None:
                color = ctx.setting("color", sys.stdout.isatty())
            output = SummaryReporter(RenderOptions(color=bool(color))).render(report)

        artifacts = {}
        output_file = args.get("output")
        if output_file:
            output_path = Path(output_file)
            try:
                output_path.write_text(render_json(report) + "\n")
            except OSError as e:
                logger.error("Could not write report to %s: %s", output_path, e)
            else:
                artifacts["report"] = str(output_path.resolve())

        passed = sum(1 for o in report.outcomes if o.succeeded)
        if report.overall_success:
            status = ResultStatus.SUCCESS
            verdict = "verified"
        else:
            status = ResultStatus.FAILURE
            verdict = "verification failed"

        return ToolResult(
            status=status,
            summary=f"{ref}: {verdict} ({passed}/{len(report.outcomes)} checks passed)",
            data={
                "output": output,
                "report": report.to_dict(),
            },
            artifacts=artifacts,
        )
