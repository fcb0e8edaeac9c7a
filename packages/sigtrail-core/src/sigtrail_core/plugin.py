"""Tool plugin contract shared by the sigtrail CLI and API."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sigtrail_core.context import ExecutionContext


class ResultStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PARTIAL = "partial"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ToolResult:
    """What a plugin run hands back to its front end.

    Attributes:
        status: Verdict of the run; the CLI maps it to an exit code.
        summary: One line, e.g. "ghcr.io/org/app@sha256:...: verified (3/3 checks passed)".
        data: JSON-serializable payload. A rendered report under "output"
              is printed by the CLI instead of the summary.
        artifacts: Files written by the run, by name (e.g. "report").
    """

    status: ResultStatus
    summary: str
    data: dict[str, Any] = field(default_factory=dict)
    artifacts: dict[str, str] = field(default_factory=dict)

    @property
    def output(self) -> Optional[str]:
        return self.data.get("output") or None


ParamType = Literal["str", "int", "float", "bool", "path"]


@dataclass(frozen=True)
class ToolParam:
    """One input a tool accepts, declared once for both argparse and the API.

    Attributes:
        name: Hyphenated name; "--name" on the command line unless positional.
        description: Help text.
        type: "str", "int", "float", "bool" (a --flag/--no-flag pair) or "path".
        required: Must be supplied by the caller.
        default: Value when not supplied. A bool param left at None means
                 "not given", so the tool can fall back to its config.
        choices: Allowed values, if restricted.
        positional: Taken as a bare argument, e.g. the image reference.
    """

    name: str
    description: str
    type: ParamType = "str"
    required: bool = False
    default: Any = None
    choices: Optional[list[str]] = None
    positional: bool = False

    @property
    def dest(self) -> str:
        """Key under which the value reaches ToolPlugin.run."""
        return self.name.replace("-", "_")

    @property
    def flag(self) -> str:
        return f"--{self.name}"


@runtime_checkable
class ToolPlugin(Protocol):
    """Contract for a sigtrail tool.

    Tools are plain classes exposed through the "sigtrail.plugins" entry
    point group. The shipped one is sigtrail_verify.plugin.VerifyPlugin:

        class VerifyPlugin:
            name = "verify"
            description = "Verify an image's signature, SBOM and provenance"
            version = "0.1.0"
            required_tools = ["cosign"]

            def get_params(self) -> list[ToolParam]:
                return [ToolParam(name="image", description="...", required=True, positional=True)]

            def run(self, args: dict[str, Any], ctx: ExecutionContext) -> ToolResult:
                ...

    required_tools names the external executables the tool shells out to;
    `sigtrail version` and the API readiness probe report on them.
    """

    name: str
    description: str
    version: str
    required_tools: list[str]

    def get_params(self) -> list[ToolParam]:
        ...

    def run(self, args: dict[str, Any], ctx: ExecutionContext) -> ToolResult:
        """Run the tool once.

        Args:
            args: Parameter values keyed by ToolParam.dest, already converted
                  to the declared types. Unsupplied optional params are None
                  or their default.
            ctx: Config, progress reporting and cancellation for this run.
        """
        ...
