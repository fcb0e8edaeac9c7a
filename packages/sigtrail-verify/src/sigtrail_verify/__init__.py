"""sigtrail plugin: verify - check a container image's supply-chain evidence."""

from sigtrail_verify.plugin import VerifyPlugin


def create_plugin() -> VerifyPlugin:
    """Entry point for sigtrail plugin discovery."""
    return VerifyPlugin()
