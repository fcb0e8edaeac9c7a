"""Installed tool plugins, for clients that build forms from ToolParams."""

from __future__ import annotations

from fastapi import APIRouter

from sigtrail_api.models import ParamInfo, ToolInfo
from sigtrail_core.deps import missing_dependencies
from sigtrail_core.plugin import ToolParam, ToolPlugin
from sigtrail_core.registry import discover_plugins

router = APIRouter()


def _param_info(param: ToolParam) -> ParamInfo:
    return ParamInfo(
        name=param.name,
        description=param.description,
        type=param.type,
        required=param.required,
        default=param.default,
        choices=param.choices,
    )


def tool_info(plugin: ToolPlugin) -> ToolInfo:
    required = list(plugin.required_tools)
    return ToolInfo(
        name=plugin.name,
        description=plugin.description,
        version=plugin.version,
        required_tools=required,
        missing_tools=missing_dependencies(required),
        params=[_param_info(p) for p in plugin.get_params()],
    )


@router.get("/tools", response_model=list[ToolInfo])
async def list_tools() -> list[ToolInfo]:
    """Every discovered plugin, by name, with the executables it still lacks."""
    plugins = discover_plugins()
    return [tool_info(plugins[name]) for name in sorted(plugins)]
