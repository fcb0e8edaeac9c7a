"""Tests for attestation envelope decoding."""

import base64
import json

from sigtrail_verify.payload import (
    EMPTY_PREDICATE,
    TOP_PACKAGES_DISPLAY,
    UNKNOWN,
    AttestationPredicate,
    PackageRef,
    decode_envelope,
)


class TestDecodeEnvelope:
    """Tests for decode_envelope."""

    def test_decodes_sbom_statement(self, make_envelope, sbom_statement) -> None:
        predicate = decode_envelope(make_envelope(sbom_statement(3)))

        assert predicate.decoded
        assert predicate.predicate_type == "https://spdx.dev/Document"
        assert predicate.package_count == 3
        assert predicate.packages[0] == PackageRef("pkg-0", "1.0.0")
        assert predicate.raw["spdxVersion"] == "SPDX-2.3"

    def test_keeps_all_packages_but_displays_top_five(self, make_envelope, sbom_statement) -> None:
        predicate = decode_envelope(make_envelope(sbom_statement(7)))

        assert predicate.package_count == 7
        assert len(predicate.top_packages) == TOP_PACKAGES_DISPLAY == 5
        assert [p.name for p in predicate.top_packages] == [f"pkg-{i}" for i in range(5)]

    def test_accepts_bytes(self, make_envelope, sbom_statement) -> None:
        envelope = make_envelope(sbom_statement(1)).encode()
        assert decode_envelope(envelope).package_count == 1

    def test_newline_delimited_envelopes_use_first(self, make_envelope, sbom_statement) -> None:
        envelope = make_envelope(sbom_statement(2)) + "\n" + make_envelope(sbom_statement(4)) + "\n"
        assert decode_envelope(envelope).package_count == 2

    def test_skips_non_json_lines(self, make_envelope, sbom_statement) -> None:
        envelope = "Verification for ghcr.io/org/app@sha256:deadbeef --\n" + make_envelope(sbom_statement(2))
        assert decode_envelope(envelope).package_count == 2

    def test_missing_fields_default_to_unknown(self, make_envelope) -> None:
        statement = {"predicate": {"packages": [{"name": "zlib"}, {"versionInfo": "1.0"}, "junk"]}}
        predicate = decode_envelope(make_envelope(statement))

        assert predicate.predicate_type == UNKNOWN
        assert predicate.packages == (
            PackageRef("zlib", UNKNOWN),
            PackageRef(UNKNOWN, "1.0"),
            PackageRef(UNKNOWN, UNKNOWN),
        )

    def test_non_list_packages_treated_as_empty(self, make_envelope) -> None:
        statement = {"predicateType": "https://slsa.dev/provenance/v1", "predicate": {"packages": "nope"}}
        predicate = decode_envelope(make_envelope(statement))

        assert predicate.decoded
        assert predicate.predicate_type == "https://slsa.dev/provenance/v1"
        assert predicate.package_count == 0

    def test_non_object_predicate(self, make_envelope) -> None:
        predicate = decode_envelope(make_envelope({"predicateType": "x", "predicate": [1, 2]}))
        assert predicate.raw == {}
        assert predicate.packages == ()


class TestMalformedEnvelopes:
    """Every decoding stage fails soft to the empty predicate."""

    def test_none(self) -> None:
        predicate = decode_envelope(None)
        assert predicate == EMPTY_PREDICATE
        assert not predicate.decoded

    def test_empty_string(self) -> None:
        assert decode_envelope("   \n") == EMPTY_PREDICATE

    def test_not_json(self) -> None:
        predicate = decode_envelope("Error: no matching attestations")
        assert predicate == EMPTY_PREDICATE
        assert predicate.decode_error.startswith("extract")

    def test_no_payload_field(self) -> None:
        assert decode_envelope(json.dumps({"payloadType": "x"})) == EMPTY_PREDICATE

    def test_payload_not_string(self) -> None:
        assert decode_envelope(json.dumps({"payload": 42})) == EMPTY_PREDICATE

    def test_invalid_base64(self) -> None:
        predicate = decode_envelope(json.dumps({"payload": "!!!not base64!!!"}))
        assert predicate == EMPTY_PREDICATE
        assert predicate.decode_error.startswith("base64")

    def test_payload_not_json(self) -> None:
        payload = base64.b64encode(b"plain text").decode()
        predicate = decode_envelope(json.dumps({"payload": payload}))
        assert predicate == EMPTY_PREDICATE
        assert predicate.decode_error.startswith("json")

    def test_statement_not_object(self, make_envelope) -> None:
        assert decode_envelope(make_envelope("[1, 2, 3]")) == EMPTY_PREDICATE

    def test_invalid_utf8_bytes(self) -> None:
        assert decode_envelope(b"\xff\xfe\x00") == EMPTY_PREDICATE


class TestAttestationPredicate:
    """Tests for the predicate value type."""

    def test_empty_predicate_defaults(self) -> None:
        assert EMPTY_PREDICATE.predicate_type == "unknown"
        assert EMPTY_PREDICATE.package_count == 0
        assert EMPTY_PREDICATE.top_packages == ()

    def test_to_dict(self) -> None:
        predicate = AttestationPredicate(
            predicate_type="https://spdx.dev/Document",
            packages=(PackageRef("busybox", "1.36.1"),),
        )
        assert predicate.to_dict() == {
            "predicate_type": "https://spdx.dev/Document",
            "package_count": 1,
            "top_packages": [{"name": "busybox", "version_info": "1.36.1"}],
            "decode_error": None,
        }

    def test_package_str(self) -> None:
        assert str(PackageRef("openssl", "3.1.4")) == "openssl@3.1.4"
