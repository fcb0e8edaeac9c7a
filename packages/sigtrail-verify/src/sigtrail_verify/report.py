"""Render a VerificationReport for humans (boxed text) or machines (JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass

from sigtrail_verify.checks import CheckKind, CheckOutcome
from sigtrail_verify.error_patterns import FailureKind
from sigtrail_verify.pipeline import VerificationReport

WIDTH = 80

# Raw output lines shown per check, matching cosign's usual verbosity
SIGNATURE_OUTPUT_LINES = 20
ATTESTATION_OUTPUT_LINES = 5

_FAILURE_REASONS = {
    FailureKind.NETWORK: "network error reaching the registry or transparency log",
    FailureKind.ACCESS_DENIED: "registry denied access",
    FailureKind.TIMEOUT: "cosign timed out",
    FailureKind.TOOL_ERROR: "cosign could not be executed",
}

_SUCCESS_MESSAGES = {
    CheckKind.SIGNATURE: "Signature verified",
    CheckKind.SBOM: "SBOM attestation verified",
    CheckKind.PROVENANCE: "Build provenance attestation found",
}

_FAILURE_MESSAGES = {
    CheckKind.SIGNATURE: "Signature verification FAILED",
    CheckKind.SBOM: "No SBOM attestation found (optional)",
    CheckKind.PROVENANCE: "No explicit provenance attestation (optional, may be embedded in image)",
}


@dataclass(frozen=True)
class Palette:
    green: str = ""
    red: str = ""
    yellow: str = ""
    blue: str = ""
    reset: str = ""


ANSI_PALETTE = Palette(
    green="\033[0;32m",
    red="\033[0;31m",
    yellow="\033[1;33m",
    blue="\033[0;34m",
    reset="\033[0m",
)
PLAIN_PALETTE = Palette()


@dataclass(frozen=True)
class RenderOptions:
    color: bool = False
    signature_lines: int = SIGNATURE_OUTPUT_LINES
    attestation_lines: int = ATTESTATION_OUTPUT_LINES

    @property
    def palette(self) -> Palette:
        return ANSI_PALETTE if self.color else PLAIN_PALETTE


def head_lines(text: str, n: int) -> list[str]:
    """First n lines of text, blank ones included."""
    return text.splitlines()[:n]


class SummaryReporter:
    """Turns a VerificationReport into console text. Never raises on report content."""

    def __init__(self, options: RenderOptions | None = None):
        self.options = options or RenderOptions()

    def render(self, report: VerificationReport) -> str:
        out: list[str] = []

        out.append("═" * WIDTH)
        out.append("  SUPPLY CHAIN VERIFICATION")
        out.append("═" * WIDTH)
        out.append(f"  Image: {report.reference}")

        for step, outcome in enumerate(report.outcomes, 1):
            out.extend(self._render_outcome(step, len(report.outcomes), outcome))

        out.extend(self._render_summary(report))
        return "\n".join(out)

    def _render_outcome(self, step: int, total: int, outcome: CheckOutcome) -> list[str]:
        p = self.options.palette
        policy = "required" if outcome.required else "optional"
        lines = [
            "",
            f"  {p.blue}┌─ [{step}/{total}] {_title(outcome.kind)} ({policy}){p.reset}",
            "  │",
        ]

        limit = (
            self.options.signature_lines
            if outcome.kind == CheckKind.SIGNATURE
            else self.options.attestation_lines
        )
        for raw in head_lines(outcome.raw_output, limit):
            lines.append(f"  │  {raw}")

        if len(outcome.attempts) > 1:
            lines.append("  │")
            lines.append("  │  Tried:")
            for attempt in outcome.attempts:
                mark = "✓" if attempt.succeeded else "✗"
                lines.append(f"  │    {mark} {attempt.selector}")

        if outcome.kind == CheckKind.SBOM:
            lines.append("  │")
            lines.extend(self._render_sbom(outcome))

        lines.append("  │")
        lines.append(self._status_line(outcome))
        return lines

    def _render_sbom(self, outcome: CheckOutcome) -> list[str]:
        p = self.options.palette
        predicate = outcome.payload
        if not outcome.succeeded or predicate is None or not predicate.decoded:
            return [f"  │  {p.yellow}No SBOM data available{p.reset}"]

        lines = [
            f"  │  SBOM Format:   {predicate.predicate_type}",
            f"  │  Package Count: {predicate.package_count}",
        ]
        if predicate.top_packages:
            lines.append(f"  │  Top {len(predicate.top_packages)} packages:")
            for pkg in predicate.top_packages:
                lines.append(f"  │    - {pkg}")
        return lines

    def _status_line(self, outcome: CheckOutcome) -> str:
        p = self.options.palette
        if outcome.succeeded:
            message = _SUCCESS_MESSAGES[outcome.kind]
            if outcome.kind == CheckKind.PROVENANCE and outcome.matched_variant:
                message += f" ({outcome.matched_variant})"
            return f"  └─ {p.green}✓ {message}{p.reset}"

        if outcome.inconclusive:
            reason = _FAILURE_REASONS[outcome.failure_kind]
            color = p.red if outcome.required else p.yellow
            return f"  └─ {color}✗ Could not verify {_title(outcome.kind).lower()}: {reason}{p.reset}"

        if outcome.required:
            return f"  └─ {p.red}✗ {_FAILURE_MESSAGES[outcome.kind]}{p.reset}"
        return f"  └─ {p.yellow}○ {_FAILURE_MESSAGES[outcome.kind]}{p.reset}"

    def _render_summary(self, report: VerificationReport) -> list[str]:
        p = self.options.palette
        passed = sum(1 for o in report.outcomes if o.succeeded)
        if report.overall_success:
            verdict = f"{p.green}✓ VERIFIED{p.reset}"
        else:
            verdict = f"{p.red}✗ VERIFICATION FAILED{p.reset}"

        return [
            "",
            "═" * WIDTH,
            "  SUMMARY",
            "═" * WIDTH,
            f"  Repository:  {report.reference.repository}",
            f"  Digest:      {report.reference.digest}",
            f"  Checks:      {passed}/{len(report.outcomes)} passed",
            f"  Result:      {verdict}",
            "",
            "  To pull this verified image:" if report.overall_success else "  Image:",
            f"    docker pull {report.reference}",
            "═" * WIDTH,
        ]


def render_json(report: VerificationReport) -> str:
    """Machine-readable rendering of the full report."""
    return json.dumps(report.to_dict(), indent=2)


def _title(kind: CheckKind) -> str:
    return {
        CheckKind.SIGNATURE: "Cosign signature",
        CheckKind.SBOM: "SBOM attestation",
        CheckKind.PROVENANCE: "Build provenance",
    }[kind]
