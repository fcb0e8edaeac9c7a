"""Run every evidence check against one image and aggregate the outcomes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from sigtrail_core.context import ExecutionContext

from sigtrail_verify.checks import (
    DEFAULT_CHECKS,
    CheckKind,
    CheckOutcome,
    EvidenceCheck,
    EvidenceCheckSpec,
)
from sigtrail_verify.cosign import Verifier
from sigtrail_verify.errors import VerificationCancelled
from sigtrail_verify.reference import ImageReference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationReport:
    """Outcomes of one pipeline run, in execution order."""

    reference: ImageReference
    outcomes: tuple[CheckOutcome, ...]

    @property
    def overall_success(self) -> bool:
        """True iff every required check succeeded. Optional checks never count."""
        return all(o.succeeded for o in self.outcomes if o.required)

    def outcome(self, kind: CheckKind) -> Optional[CheckOutcome]:
        for o in self.outcomes:
            if o.kind == kind:
                return o
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "image": str(self.reference),
            "repository": self.reference.repository,
            "digest": self.reference.digest,
            "overall_success": self.overall_success,
            "checks": [o.to_dict() for o in self.outcomes],
        }


class VerificationPipeline:
    """Drives EvidenceChecks sequentially through a Verifier.

    Every configured check runs even after a required one fails; missing
    evidence on one axis is still worth reporting on the others.
    """

    def __init__(self, verifier: Verifier, checks: Sequence[EvidenceCheckSpec] = DEFAULT_CHECKS):
        self.verifier = verifier
        self.checks = tuple(checks)

    def run(
        self,
        ref: ImageReference,
        checks: Optional[Sequence[EvidenceCheckSpec]] = None,
        ctx: Optional[ExecutionContext] = None,
    ) -> VerificationReport:
        """
        Run the checks against ref.

        Args:
            ref: Digest-pinned image
            checks: Override the configured checks for this run
            ctx: Optional context for progress and cancellation; cancellation
                 is honoured between checks only

        Returns:
            VerificationReport with one outcome per check

        Raises:
            VerificationCancelled: If ctx was cancelled before a check started
        """
        specs = tuple(checks) if checks is not None else self.checks
        outcomes: list[CheckOutcome] = []

        for i, spec in enumerate(specs):
            if ctx is not None:
                if ctx.is_cancelled:
                    raise VerificationCancelled(completed=i, total=len(specs))
                ctx.progress(i / len(specs), f"Verifying {spec.title or spec.kind.value} ({i + 1}/{len(specs)})")

            outcome = EvidenceCheck(spec, self.verifier).run(ref)
            outcomes.append(outcome)
            logger.info(
                "%s check %s for %s",
                spec.kind.value,
                "passed" if outcome.succeeded else "failed",
                ref,
            )

        if ctx is not None:
            ctx.progress(1.0, "Verification complete")

        return VerificationReport(reference=ref, outcomes=tuple(outcomes))
