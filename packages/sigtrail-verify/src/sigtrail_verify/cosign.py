"""cosign adapter: the external signature/attestation verification capability.

The pipeline only sees the Verifier protocol; CosignVerifier is the
production implementation that shells out to the cosign CLI.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from sigtrail_core.deps import missing_dependencies

from sigtrail_verify.error_patterns import (
    EXEC_ERROR_PREFIX,
    TIMEOUT_SENTINEL,
    FailureKind,
    classify_failure,
)
from sigtrail_verify.errors import MissingToolError
from sigtrail_verify.reference import ImageReference

logger = logging.getLogger(__name__)

# Required external tools
REQUIRED_TOOLS = ["cosign"]

INSTALL_HINTS = {
    "cosign": "brew install cosign  # or: go install github.com/sigstore/cosign/v2/cmd/cosign@latest",
}

# Keyless trust policy for images built by GitHub Actions
DEFAULT_IDENTITY_REGEXP = "https://github.com/.*"
GITHUB_ACTIONS_ISSUER = "https://token.actions.githubusercontent.com"

DEFAULT_TIMEOUT = 300


@dataclass(frozen=True)
class TrustPolicy:
    """Certificate identity and OIDC issuer a keyless signature must match."""

    identity_regexp: str = DEFAULT_IDENTITY_REGEXP
    oidc_issuer: str = GITHUB_ACTIONS_ISSUER

    @classmethod
    def from_config(cls, config: dict[str, Any], **overrides: Optional[str]) -> "TrustPolicy":
        """Build a policy from config values; non-empty overrides win."""
        identity = overrides.get("identity_regexp") or config.get("identity_regexp")
        issuer = overrides.get("oidc_issuer") or config.get("oidc_issuer")
        return cls(
            identity_regexp=identity or DEFAULT_IDENTITY_REGEXP,
            oidc_issuer=issuer or GITHUB_ACTIONS_ISSUER,
        )


@dataclass(frozen=True)
class VerifyResult:
    """Outcome of one verification call.

    Attributes:
        success: cosign exited zero.
        output: Combined stderr and stdout, as a terminal would show it.
        envelope: stdout alone; for attestations, the JSON envelope(s).
        failure_kind: Classification of the failure, None on success.
    """

    success: bool
    output: str
    envelope: str = ""
    failure_kind: Optional[FailureKind] = None


class Verifier(Protocol):
    """Signature/attestation verification capability."""

    def verify(self, ref: ImageReference, type_selector: Optional[str] = None) -> VerifyResult:
        """Verify the bare signature (no selector) or an attestation of the given type."""
        ...


def ensure_tools(required: Optional[list[str]] = None) -> None:
    """
    Check that the external tools are installed.

    Raises:
        MissingToolError: Listing every missing tool
    """
    missing = missing_dependencies(required if required is not None else REQUIRED_TOOLS)
    if missing:
        raise MissingToolError(missing)


def run_cmd(args: list[str], timeout: Optional[int] = DEFAULT_TIMEOUT) -> tuple[bool, str, str]:
    """Run a command and return (success, stdout, stderr).

    A timeout yields stderr == "timeout"; a command that cannot be started
    yields stderr starting with "failed to execute".
    """
    try:
        result = subprocess.run(
            args, capture_output=True, text=True, timeout=timeout or None
        )
        return result.returncode == 0, result.stdout, result.stderr
    except subprocess.TimeoutExpired:
        return False, "", TIMEOUT_SENTINEL
    except OSError as e:
        return False, "", f"{EXEC_ERROR_PREFIX} {args[0]}: {e}"


class CosignVerifier:
    """Verifier backed by the cosign CLI."""

    def __init__(
        self,
        policy: Optional[TrustPolicy] = None,
        timeout: Optional[int] = DEFAULT_TIMEOUT,
        cosign_path: str = "cosign",
    ):
        """
        Args:
            policy: Keyless identity/issuer policy (default: GitHub Actions)
            timeout: Seconds per cosign invocation; 0 or None disables
            cosign_path: cosign executable name or path
        """
        self.policy = policy or TrustPolicy()
        self.timeout = timeout
        self.cosign_path = cosign_path

    def build_command(self, ref: ImageReference, type_selector: Optional[str] = None) -> list[str]:
        if type_selector is None:
            cmd = [self.cosign_path, "verify"]
        else:
            cmd = [self.cosign_path, "verify-attestation", "--type", type_selector]
        cmd += [
            "--certificate-identity-regexp", self.policy.identity_regexp,
            "--certificate-oidc-issuer", self.policy.oidc_issuer,
            str(ref),
        ]
        return cmd

    def verify(self, ref: ImageReference, type_selector: Optional[str] = None) -> VerifyResult:
        cmd = self.build_command(ref, type_selector)
        logger.debug("Running: %s", " ".join(cmd))

        success, stdout, stderr = run_cmd(cmd, timeout=self.timeout)
        output = "\n".join(part.rstrip("\n") for part in (stderr, stdout) if part)

        if success:
            return VerifyResult(success=True, output=output, envelope=stdout)

        failure_kind = classify_failure(stderr)
        logger.debug(
            "cosign %s failed for %s (%s)",
            type_selector or "signature",
            ref,
            failure_kind.value,
        )
        return VerifyResult(
            success=False,
            output=output,
            envelope=stdout,
            failure_kind=failure_kind,
        )
