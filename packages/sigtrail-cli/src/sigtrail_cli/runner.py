"""Drive one tool plugin from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import Any

import yaml

from sigtrail_core.context import ExecutionContext
from sigtrail_core.plugin import ResultStatus, ToolParam, ToolPlugin, ToolResult

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "sigtrail" / "config.yaml"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# argparse converters per ToolParam.type; bool is handled by BooleanOptionalAction
_CONVERTERS: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "path": Path,
}

EXIT_CODES: dict[ResultStatus, int] = {
    ResultStatus.SUCCESS: 0,
    ResultStatus.FAILURE: 1,
    ResultStatus.PARTIAL: 2,
    ResultStatus.CANCELLED: 130,
}
EXIT_INTERRUPTED = EXIT_CODES[ResultStatus.CANCELLED]


def _argument(param: ToolParam) -> tuple[str, dict[str, Any]]:
    """argparse name and keyword arguments for one ToolParam."""
    kwargs: dict[str, Any] = {"help": param.description}

    if param.type == "bool":
        # --x / --no-x; the default may be None so the tool can tell "unset"
        kwargs.update(action=argparse.BooleanOptionalAction, default=param.default)
        return param.flag, kwargs

    kwargs["type"] = _CONVERTERS.get(param.type, str)
    if param.choices:
        kwargs["choices"] = param.choices

    if param.positional:
        kwargs["metavar"] = param.name.upper()
        if not param.required:
            kwargs.update(nargs="?", default=param.default)
        return param.dest, kwargs

    kwargs["required"] = param.required
    if param.default is not None:
        kwargs["default"] = param.default
    return param.flag, kwargs


def add_params_to_parser(parser: argparse.ArgumentParser, params: list[ToolParam]) -> None:
    """Declare every ToolParam on parser. Values land under ToolParam.dest."""
    for param in params:
        name, kwargs = _argument(param)
        parser.add_argument(name, **kwargs)


def _console_progress(fraction: float, message: str) -> None:
    print(f"  [{int(fraction * 100):3d}%] {message}", file=sys.stderr, flush=True)


def load_config(path: Path = CONFIG_PATH) -> dict[str, Any]:
    """
    Read the user's YAML config.

    Recognised keys: identity_regexp, oidc_issuer, timeout, color. A missing
    file is normal; an unreadable or malformed one is logged and ignored so a
    bad config never blocks verification with built-in defaults.
    """
    if not path.exists():
        return {}
    try:
        config = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return {}
    if config is None:
        return {}
    if not isinstance(config, dict):
        logger.warning("Ignoring config file %s: expected a mapping, got %s", path, type(config).__name__)
        return {}
    return config


def configure_logging() -> None:
    """Warnings and errors to stderr. Tools raise their own loggers for --verbose."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)


def _print_result(result: ToolResult) -> None:
    # A rendered report replaces the one-line summary
    print(f"\n{result.output or result.summary}")
    if result.artifacts:
        print("\nArtifacts:")
        for name, path in result.artifacts.items():
            print(f"  {name}: {path}")


def run_plugin(plugin: ToolPlugin, args: dict[str, Any]) -> int:
    """
    Run plugin with console progress and the user's config.

    Args:
        plugin: Tool to run
        args: Parsed arguments keyed by ToolParam.dest

    Returns:
        Process exit code (see EXIT_CODES); 130 on Ctrl-C, 1 if the tool raised
    """
    ctx = ExecutionContext(
        config=load_config(),
        on_progress=_console_progress,
        cancel_event=threading.Event(),
    )

    try:
        result = plugin.run(args, ctx)
    except KeyboardInterrupt:
        ctx.cancel_event.set()
        print("\nCancelled.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.debug("%s raised", plugin.name, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_result(result)
    return EXIT_CODES.get(result.status, 1)
