"""sigtrail command line.

    sigtrail                              list tools
    sigtrail verify IMAGE@DIGEST [opts]   verify one image (see --help)
    sigtrail version                      versions and external tool paths
    sigtrail serve [--host H --port P]    HTTP API (needs the api extra)
    sigtrail -V | --version               short version
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable

from sigtrail_cli import __version__
from sigtrail_cli.runner import add_params_to_parser, configure_logging, run_plugin
from sigtrail_core.deps import check_dependencies
from sigtrail_core.plugin import ToolPlugin
from sigtrail_core.registry import discover_plugins

Plugins = dict[str, ToolPlugin]


def show_help(plugins: Plugins) -> None:
    print(f"sigtrail v{__version__}: container image supply-chain verification\n")
    print("Usage: sigtrail <tool> [options]\n")
    print("Available tools:")
    if not plugins:
        print("  (none installed)")
    for name in sorted(plugins):
        print(f"  {name:<20} {plugins[name].description}")
    print("\nBuilt-in commands:")
    for name, (_, summary) in sorted(BUILTINS.items()):
        print(f"  {name:<20} {summary}")
    print("\nGlobal options:")
    print(f"  {'-V, --version':<20} Show version (short)")
    print(f"  {'-h, --help':<20} Show this help")
    print("\nRun 'sigtrail <tool> --help' for tool options.")


def _version(plugins: Plugins, argv: list[str]) -> int:
    print(f"sigtrail v{__version__}")
    for name in sorted(plugins):
        plugin = plugins[name]
        print(f"  {name:<20} {plugin.version}")
        for dep in check_dependencies(list(plugin.required_tools)):
            print(f"    {dep.name}: {dep.path or 'NOT FOUND'}")
    return 0


def _serve(plugins: Plugins, argv: list[str]) -> int:
    try:
        import uvicorn

        from sigtrail_api.app import create_app
    except ImportError:
        print("Error: the HTTP API needs extra packages.")
        print("Install them with: pip install 'sigtrail[api]'")
        return 1

    parser = argparse.ArgumentParser(prog="sigtrail serve", description="Serve the verification API")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")
    opts = parser.parse_args(argv)

    uvicorn.run(create_app(), host=opts.host, port=opts.port)
    return 0


# name -> (handler, help line)
BUILTINS: dict[str, tuple[Callable[[Plugins, list[str]], int], str]] = {
    "version": (_version, "Show sigtrail, plugin and external tool versions"),
    "serve": (_serve, "Start the HTTP API (requires sigtrail[api])"),
}


def _run_tool(plugin: ToolPlugin, argv: list[str]) -> int:
    parser = argparse.ArgumentParser(prog=f"sigtrail {plugin.name}", description=plugin.description)
    add_params_to_parser(parser, plugin.get_params())
    return run_plugin(plugin, vars(parser.parse_args(argv)))


def _dispatch(plugins: Plugins, argv: list[str]) -> int:
    if not argv or argv[0] in ("-h", "--help"):
        show_help(plugins)
        return 0

    command, rest = argv[0], argv[1:]

    if command in ("-V", "--version"):
        print(f"sigtrail {__version__}")
        return 0

    if command in BUILTINS:
        handler, _ = BUILTINS[command]
        return handler(plugins, rest)

    if command in plugins:
        return _run_tool(plugins[command], rest)

    print(f"Unknown tool: {command}\n")
    show_help(plugins)
    return 1


def main() -> None:
    configure_logging()
    sys.exit(_dispatch(discover_plugins(), sys.argv[1:]))


if __name__ == "__main__":
    main()
