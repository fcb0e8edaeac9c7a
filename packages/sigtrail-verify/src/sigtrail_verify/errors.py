"""Exceptions raised by the verification pipeline.

Only MalformedReferenceError and MissingToolError abort a run. Individual
check failures are recorded on the CheckOutcome, and PayloadDecodeFailure
never escapes the payload codec.
"""

from __future__ import annotations


class VerificationError(Exception):
    """Base class for sigtrail verification errors."""


class MalformedReferenceError(VerificationError, ValueError):
    """Image reference does not pin a digest (image@sha256:...)."""

    def __init__(self, raw: str, reason: str = "image must include a digest (image@sha256:...)"):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Malformed image reference '{raw}': {reason}")


class MissingToolError(VerificationError):
    """A required external tool is not installed."""

    def __init__(self, tools: list[str]):
        self.tools = list(tools)
        super().__init__(f"Missing required tools: {', '.join(self.tools)}")


class VerificationCancelled(VerificationError):
    """Cancellation was requested between two evidence checks."""

    def __init__(self, completed: int, total: int):
        self.completed = completed
        self.total = total
        super().__init__(f"Cancelled after {completed}/{total} checks")


class PayloadDecodeFailure(VerificationError):
    """One stage of attestation payload decoding failed."""

    def __init__(self, stage: str, detail: str):
        self.stage = stage
        self.detail = detail
        super().__init__(f"{stage}: {detail}")
