"""sigtrail core: plugin protocol and shared utilities."""

from sigtrail_core.context import ExecutionContext
from sigtrail_core.plugin import ResultStatus, ToolParam, ToolPlugin, ToolResult

__all__ = [
    "ExecutionContext",
    "ResultStatus",
    "ToolParam",
    "ToolPlugin",
    "ToolResult",
]
