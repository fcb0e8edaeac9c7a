"""
Shared pytest fixtures for sigtrail-verify tests.
"""

import base64
import json

import pytest

from sigtrail_verify.cosign import VerifyResult
from sigtrail_verify.error_patterns import FailureKind
from sigtrail_verify.reference import ImageReference


class FakeVerifier:
    """Verifier returning canned results per type selector and recording calls."""

    def __init__(self, results=None, default=None):
        self.results = dict(results or {})
        self.default = default or VerifyResult(
            success=False,
            output="Error: no matching attestations",
            failure_kind=FailureKind.NOT_VERIFIED,
        )
        self.calls = []

    def verify(self, ref, type_selector=None):
        self.calls.append((str(ref), type_selector))
        result = self.results.get(type_selector, self.default)
        if isinstance(result, bool):
            result = _ok() if result else self.default
        return result


def _ok(output="Verification for image --\nThe following checks were performed", envelope=""):
    return VerifyResult(success=True, output=output, envelope=envelope)


def _envelope(statement) -> str:
    if not isinstance(statement, (bytes, str)):
        statement = json.dumps(statement)
    if isinstance(statement, str):
        statement = statement.encode()
    payload = base64.b64encode(statement).decode()
    return json.dumps({"payloadType": "application/vnd.in-toto+json", "payload": payload, "signatures": []})


def _sbom_statement(count: int) -> dict:
    return {
        "_type": "https://in-toto.io/Statement/v0.1",
        "predicateType": "https://spdx.dev/Document",
        "subject": [{"name": "ghcr.io/org/app", "digest": {"sha256": "deadbeef"}}],
        "predicate": {
            "spdxVersion": "SPDX-2.3",
            "packages": [
                {"name": f"pkg-{i}", "versionInfo": f"1.{i}.0"} for i in range(count)
            ],
        },
    }


@pytest.fixture
def ref():
    """Digest-pinned reference used across tests."""
    return ImageReference(repository="ghcr.io/org/app", digest="sha256:deadbeef")


@pytest.fixture
def fake_verifier():
    """Factory for FakeVerifier instances."""
    return FakeVerifier


@pytest.fixture
def ok_result():
    """Factory for successful VerifyResults."""
    return _ok


@pytest.fixture
def failed_result():
    """Factory for failed VerifyResults."""

    def _failed(kind=FailureKind.NOT_VERIFIED, output="Error: no matching signatures"):
        return VerifyResult(success=False, output=output, failure_kind=kind)

    return _failed


@pytest.fixture
def make_envelope():
    """Wrap an in-toto statement (dict, str or bytes) in a DSSE envelope."""
    return _envelope


@pytest.fixture
def sbom_statement():
    """Factory for SPDX statements with N packages."""
    return _sbom_statement
