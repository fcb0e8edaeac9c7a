"""Digest-pinned container image references."""

from __future__ import annotations

from dataclasses import dataclass

from sigtrail_verify.errors import MalformedReferenceError


@dataclass(frozen=True)
class ImageReference:
    """
    Image reference pinned to a content digest.

    Mutable tags are not a trust anchor, so a reference without a digest
    can never be constructed through parse().
    """

    repository: str
    """Registry and image name, e.g. 'ghcr.io/org/app'."""

    digest: str
    """Algorithm-prefixed content hash, e.g. 'sha256:deadbeef'."""

    @classmethod
    def parse(cls, raw: str) -> "ImageReference":
        """
        Split 'repository@digest' at the single '@'.

        The digest format is not checked here; cosign fails the checks if
        the digest does not resolve.

        Examples:
            ghcr.io/org/app@sha256:abc -> repository='ghcr.io/org/app', digest='sha256:abc'
            ghcr.io/org/app:1.0        -> MalformedReferenceError

        Raises:
            MalformedReferenceError: If there is no '@' or more than one.
        """
        repository, sep, digest = raw.partition("@")
        if not sep:
            raise MalformedReferenceError(raw)
        if "@" in digest:
            raise MalformedReferenceError(raw, "more than one '@' in reference")
        return cls(repository=repository, digest=digest)

    def __str__(self) -> str:
        return f"{self.repository}@{self.digest}"


def parse_reference(raw: str) -> ImageReference:
    """Parse a user-supplied image string. See ImageReference.parse."""
    return ImageReference.parse(raw)
