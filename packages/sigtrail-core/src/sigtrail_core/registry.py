"""Find installed tool plugins through package entry points.

A package ships a tool by declaring a factory in its metadata:

    [project.entry-points."sigtrail.plugins"]
    verify = "sigtrail_verify:create_plugin"
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Optional

from sigtrail_core.plugin import ToolPlugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "sigtrail.plugins"


def _instantiate(ep: importlib.metadata.EntryPoint) -> Optional[ToolPlugin]:
    try:
        plugin = ep.load()()
    except Exception:
        logger.exception("Plugin entry point '%s' (%s) failed to load", ep.name, ep.value)
        return None

    if not isinstance(plugin, ToolPlugin):
        logger.warning(
            "Plugin entry point '%s' produced a %s, not a ToolPlugin; ignored",
            ep.name,
            type(plugin).__name__,
        )
        return None
    return plugin


def discover_plugins() -> dict[str, ToolPlugin]:
    """
    Instantiate every plugin registered under ENTRY_POINT_GROUP.

    A plugin that fails to load is logged and left out; the rest still load.
    When two entry points produce the same tool name the first one wins.

    Returns:
        Plugins keyed by their name attribute
    """
    plugins: dict[str, ToolPlugin] = {}

    for ep in importlib.metadata.entry_points().select(group=ENTRY_POINT_GROUP):
        plugin = _instantiate(ep)
        if plugin is None:
            continue
        if plugin.name in plugins:
            logger.warning("Tool name '%s' from entry point '%s' already taken; ignored", plugin.name, ep.name)
            continue
        plugins[plugin.name] = plugin
        logger.debug("Loaded tool %s %s from '%s'", plugin.name, plugin.version, ep.name)

    return plugins
