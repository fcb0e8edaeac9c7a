"""Decode cosign attestation envelopes into predicates.

cosign verify-attestation prints one DSSE envelope per matching attestation:

    {"payloadType": "application/vnd.in-toto+json", "payload": "<base64>", "signatures": [...]}

The base64 payload is an in-toto statement whose predicateType and predicate
shape depend on the tool that produced it. Decoding is tolerant: any stage
failing yields EMPTY_PREDICATE instead of an exception.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from sigtrail_verify.errors import PayloadDecodeFailure

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

# Packages shown in summaries; the full list is kept for counting
TOP_PACKAGES_DISPLAY = 5


@dataclass(frozen=True)
class PackageRef:
    name: str
    version_info: str = UNKNOWN

    def __str__(self) -> str:
        return f"{self.name}@{self.version_info}"


@dataclass(frozen=True)
class AttestationPredicate:
    """Decoded attestation statement.

    Attributes:
        predicate_type: The statement's predicateType, or "unknown".
        packages: Every entry of predicate.packages, in source order.
        raw: The predicate map as decoded, for fields not modelled here.
        decode_error: Why decoding stopped early, if it did. Diagnostic only.
    """

    predicate_type: str = UNKNOWN
    packages: tuple[PackageRef, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict)
    decode_error: Optional[str] = field(default=None, compare=False)

    @property
    def decoded(self) -> bool:
        return self.decode_error is None

    @property
    def package_count(self) -> int:
        return len(self.packages)

    @property
    def top_packages(self) -> tuple[PackageRef, ...]:
        return self.packages[:TOP_PACKAGES_DISPLAY]

    def to_dict(self) -> dict[str, Any]:
        return {
            "predicate_type": self.predicate_type,
            "package_count": self.package_count,
            "top_packages": [
                {"name": p.name, "version_info": p.version_info} for p in self.top_packages
            ],
            "decode_error": self.decode_error,
        }


EMPTY_PREDICATE = AttestationPredicate()


def decode_envelope(envelope: Union[bytes, str, None]) -> AttestationPredicate:
    """
    Decode an attestation envelope into an AttestationPredicate.

    Stages: extract 'payload' -> base64 decode -> JSON parse -> project.
    Never raises; a failing stage returns the empty predicate with
    decode_error set.

    Args:
        envelope: cosign verify-attestation stdout (one JSON document, or
                  one per line)

    Returns:
        Decoded predicate, or the empty predicate
    """
    try:
        payload_b64 = _extract_payload(envelope)
        statement_bytes = _b64decode(payload_b64)
        statement = _parse_statement(statement_bytes)
    except PayloadDecodeFailure as e:
        logger.debug("Attestation payload not decoded: %s", e)
        return AttestationPredicate(decode_error=str(e))

    return _project(statement)


def _extract_payload(envelope: Union[bytes, str, None]) -> str:
    if envelope is None:
        raise PayloadDecodeFailure("extract", "no envelope")

    if isinstance(envelope, bytes):
        try:
            envelope = envelope.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PayloadDecodeFailure("extract", f"envelope is not UTF-8: {e}") from e

    text = envelope.strip()
    if not text:
        raise PayloadDecodeFailure("extract", "empty envelope")

    # Whole document first, then newline-delimited documents
    candidates = [text] + [line.strip() for line in text.splitlines() if line.strip()]
    for candidate in candidates:
        try:
            doc = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(doc, dict) and isinstance(doc.get("payload"), str):
            return doc["payload"]

    raise PayloadDecodeFailure("extract", "no JSON object with a string 'payload' field")


def _b64decode(payload_b64: str) -> bytes:
    try:
        return base64.b64decode(payload_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PayloadDecodeFailure("base64", str(e)) from e


def _parse_statement(statement_bytes: bytes) -> dict[str, Any]:
    try:
        statement = json.loads(statement_bytes)
    except ValueError as e:
        raise PayloadDecodeFailure("json", str(e)) from e
    if not isinstance(statement, dict):
        raise PayloadDecodeFailure("json", f"statement is {type(statement).__name__}, not an object")
    return statement


def _project(statement: dict[str, Any]) -> AttestationPredicate:
    predicate_type = statement.get("predicateType")
    if not isinstance(predicate_type, str) or not predicate_type:
        predicate_type = UNKNOWN

    predicate = statement.get("predicate")
    if not isinstance(predicate, dict):
        predicate = {}

    raw_packages = predicate.get("packages")
    if not isinstance(raw_packages, list):
        raw_packages = []

    return AttestationPredicate(
        predicate_type=predicate_type,
        packages=tuple(_package_ref(entry) for entry in raw_packages),
        raw=predicate,
    )


def _package_ref(entry: Any) -> PackageRef:
    if not isinstance(entry, dict):
        return PackageRef(name=UNKNOWN)
    name = entry.get("name")
    version = entry.get("versionInfo")
    return PackageRef(
        name=str(name) if name is not None else UNKNOWN,
        version_info=str(version) if version is not None else UNKNOWN,
    )
