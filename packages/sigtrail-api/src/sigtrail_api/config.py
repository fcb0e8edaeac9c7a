"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings

from sigtrail_verify.cosign import DEFAULT_IDENTITY_REGEXP, DEFAULT_TIMEOUT, GITHUB_ACTIONS_ISSUER


class Settings(BaseSettings):
    """sigtrail API settings.

    All values can be overridden via environment variables with the
    SIGTRAIL_ prefix. Example: SIGTRAIL_OIDC_ISSUER=https://accounts.google.com
    """

    cors_origins: list[str] = ["http://localhost:5173"]
    api_prefix: str = "/api"

    # Default keyless trust policy; requests may override per call
    identity_regexp: str = DEFAULT_IDENTITY_REGEXP
    oidc_issuer: str = GITHUB_ACTIONS_ISSUER
    command_timeout_seconds: int = DEFAULT_TIMEOUT

    # Build metadata reported by /healthz, injected at image build time
    version: str = "dev"
    build_time: str = "unknown"
    git_commit: str = "unknown"

    model_config = {"env_prefix": "SIGTRAIL_"}
