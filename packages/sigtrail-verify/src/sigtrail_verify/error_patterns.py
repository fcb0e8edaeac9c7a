"""
Error pattern constants for cosign verification output.

A failed cosign run is either a genuine verification failure (no matching
signature or attestation, identity mismatch) or an infrastructure problem
that says nothing about the image. Only the former may be reported as
"not signed".
"""

from enum import Enum

# Sentinels produced by run_cmd
TIMEOUT_SENTINEL = "timeout"
EXEC_ERROR_PREFIX = "failed to execute"

# Registry authentication/authorization failures. No bare status codes:
# cosign echoes the digest, and hex digests contain digit runs.
AUTH_ERROR_PATTERNS = [
    "unauthorized",
    "forbidden",
    "authentication required",
    "access denied",
    "denied: ",
    "no basic auth credentials",
    "not authorized",
]

# Rate limiting
RATE_LIMIT_PATTERNS = [
    "toomanyrequests",
    "rate limit",
    "too many requests",
]

# Connection/network failures, including Rekor/Fulcio outages
CONNECTION_ERROR_PATTERNS = [
    "no such host",
    "connection refused",
    "connection reset",
    "dial tcp",
    "i/o timeout",
    "tls handshake timeout",
    "context deadline exceeded",
    "network is unreachable",
    "502 bad gateway",
    "503 service unavailable",
    "504 gateway timeout",
]


class FailureKind(str, Enum):
    """Why a single cosign invocation did not succeed."""

    NOT_VERIFIED = "not_verified"
    NETWORK = "network"
    ACCESS_DENIED = "access_denied"
    TIMEOUT = "timeout"
    TOOL_ERROR = "tool_error"

    @property
    def is_inconclusive(self) -> bool:
        """True when the failure says nothing about the evidence itself."""
        return self is not FailureKind.NOT_VERIFIED


def is_auth_error(stderr: str) -> bool:
    """Check if error is due to registry authentication/authorization failure."""
    stderr_lower = stderr.lower()
    return any(pattern in stderr_lower for pattern in AUTH_ERROR_PATTERNS)


def is_rate_limit_error(stderr: str) -> bool:
    stderr_lower = stderr.lower()
    return any(pattern in stderr_lower for pattern in RATE_LIMIT_PATTERNS)


def is_connection_error(stderr: str) -> bool:
    stderr_lower = stderr.lower()
    return any(pattern in stderr_lower for pattern in CONNECTION_ERROR_PATTERNS)


def classify_failure(stderr: str) -> FailureKind:
    """
    Classify a failed cosign invocation from its stderr.

    Args:
        stderr: Error output from cosign, or a run_cmd sentinel

    Returns:
        FailureKind, NOT_VERIFIED when nothing infrastructural matched
    """
    if stderr == TIMEOUT_SENTINEL:
        return FailureKind.TIMEOUT

    if stderr.startswith(EXEC_ERROR_PREFIX):
        return FailureKind.TOOL_ERROR

    if is_rate_limit_error(stderr) or is_connection_error(stderr):
        return FailureKind.NETWORK

    if is_auth_error(stderr):
        return FailureKind.ACCESS_DENIED

    return FailureKind.NOT_VERIFIED
