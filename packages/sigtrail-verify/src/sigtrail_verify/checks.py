"""Evidence checks: signature, SBOM attestation and build provenance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from sigtrail_verify.cosign import Verifier, VerifyResult
from sigtrail_verify.error_patterns import FailureKind
from sigtrail_verify.payload import AttestationPredicate, decode_envelope
from sigtrail_verify.reference import ImageReference

logger = logging.getLogger(__name__)

# Raw cosign output kept per outcome
MAX_RAW_OUTPUT_CHARS = 16_384

SBOM_TYPE = "spdxjson"
SLSA_PROVENANCE_TYPE = "slsaprovenance"
SLSA_V1_PROVENANCE_TYPE = "https://slsa.dev/provenance/v1"


class CheckKind(str, Enum):
    SIGNATURE = "signature"
    SBOM = "sbom"
    PROVENANCE = "provenance"


@dataclass(frozen=True)
class EvidenceCheckSpec:
    """Static description of one check.

    Attributes:
        kind: Which evidence this check looks for.
        required: Whether a failure fails the whole report.
        variants_to_try: Type selectors tried in order until one succeeds.
                         None selects bare signature verification.
        decode_payload: Decode the envelope of a successful attempt.
        title: Heading used in reports.
    """

    kind: CheckKind
    required: bool
    variants_to_try: tuple[Optional[str], ...]
    decode_payload: bool = False
    title: str = ""


SIGNATURE_CHECK = EvidenceCheckSpec(
    kind=CheckKind.SIGNATURE,
    required=True,
    variants_to_try=(None,),
    title="Cosign signature",
)

SBOM_CHECK = EvidenceCheckSpec(
    kind=CheckKind.SBOM,
    required=False,
    variants_to_try=(SBOM_TYPE,),
    decode_payload=True,
    title="SBOM attestation",
)

# Toolchains publish the same guarantee under either predicate type
PROVENANCE_CHECK = EvidenceCheckSpec(
    kind=CheckKind.PROVENANCE,
    required=False,
    variants_to_try=(SLSA_PROVENANCE_TYPE, SLSA_V1_PROVENANCE_TYPE),
    title="Build provenance",
)

# Signature first: it anchors the identity the attestations are checked against
DEFAULT_CHECKS: tuple[EvidenceCheckSpec, ...] = (SIGNATURE_CHECK, SBOM_CHECK, PROVENANCE_CHECK)


@dataclass(frozen=True)
class AttemptRecord:
    selector: Optional[str]
    succeeded: bool
    failure_kind: Optional[FailureKind] = None


@dataclass(frozen=True)
class CheckOutcome:
    """Result of running one EvidenceCheckSpec against one image."""

    kind: CheckKind
    required: bool
    succeeded: bool
    raw_output: str = ""
    payload: Optional[AttestationPredicate] = None
    matched_variant: Optional[str] = None
    attempts: tuple[AttemptRecord, ...] = field(default_factory=tuple)
    failure_kind: Optional[FailureKind] = None

    @property
    def inconclusive(self) -> bool:
        """Failed for reasons unrelated to the evidence (network, tooling)."""
        return self.failure_kind is not None and self.failure_kind.is_inconclusive

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "required": self.required,
            "succeeded": self.succeeded,
            "matched_variant": self.matched_variant,
            "failure_kind": self.failure_kind.value if self.failure_kind else None,
            "attempts": [
                {
                    "selector": a.selector,
                    "succeeded": a.succeeded,
                    "failure_kind": a.failure_kind.value if a.failure_kind else None,
                }
                for a in self.attempts
            ],
            "payload": self.payload.to_dict() if self.payload else None,
            "raw_output": self.raw_output,
        }


def bound_output(text: str, limit: int = MAX_RAW_OUTPUT_CHARS) -> str:
    """Trim text to at most limit characters."""
    if len(text) <= limit:
        return text
    return text[:limit] + "\n... (truncated)"


class EvidenceCheck:
    """Runs one EvidenceCheckSpec through a Verifier."""

    def __init__(self, spec: EvidenceCheckSpec, verifier: Verifier):
        self.spec = spec
        self.verifier = verifier

    def run(self, ref: ImageReference) -> CheckOutcome:
        """Try each variant in order, stopping at the first success.

        Verification failures are returned as data, never raised.
        """
        attempts: list[AttemptRecord] = []
        last: Optional[VerifyResult] = None

        for selector in self.spec.variants_to_try:
            result = self.verifier.verify(ref, selector)
            attempts.append(AttemptRecord(selector, result.success, result.failure_kind))
            last = result

            if result.success:
                payload = decode_envelope(result.envelope) if self.spec.decode_payload else None
                logger.debug("%s verified via %s", self.spec.kind.value, selector or "signature")
                return CheckOutcome(
                    kind=self.spec.kind,
                    required=self.spec.required,
                    succeeded=True,
                    raw_output=bound_output(result.output),
                    payload=payload,
                    matched_variant=selector,
                    attempts=tuple(attempts),
                )

            logger.debug(
                "%s not verified via %s, %d variant(s) left",
                self.spec.kind.value,
                selector or "signature",
                len(self.spec.variants_to_try) - len(attempts),
            )

        return CheckOutcome(
            kind=self.spec.kind,
            required=self.spec.required,
            succeeded=False,
            raw_output=bound_output(last.output) if last else "",
            attempts=tuple(attempts),
            failure_kind=_combined_failure(attempts),
        )


def _combined_failure(attempts: list[AttemptRecord]) -> FailureKind:
    # Absence is only proven when no attempt was inconclusive
    for attempt in attempts:
        if attempt.failure_kind is not None and attempt.failure_kind.is_inconclusive:
            return attempt.failure_kind
    return FailureKind.NOT_VERIFIED
