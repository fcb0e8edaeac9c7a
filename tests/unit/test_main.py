"""Tests for the sigtrail CLI entry point."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from sigtrail_cli import __version__
from sigtrail_cli.main import main


def _run_main(argv, plugins):
    with patch("sys.argv", ["sigtrail", *argv]), \
         patch("sigtrail_cli.main.discover_plugins", return_value=plugins):
        with pytest.raises(SystemExit) as exc_info:
            main()
    return exc_info.value.code


def test_no_args_shows_help(mock_plugin, capsys):
    assert _run_main([], {"mock": mock_plugin}) == 0

    out = capsys.readouterr().out
    assert "Usage: sigtrail <tool>" in out
    assert "mock" in out
    assert "Mock plugin for testing" in out


def test_help_flag(mock_plugin, capsys):
    assert _run_main(["--help"], {"mock": mock_plugin}) == 0
    assert "Available tools:" in capsys.readouterr().out


def test_short_version(capsys):
    assert _run_main(["-V"], {}) == 0
    assert capsys.readouterr().out.strip() == f"sigtrail {__version__}"


def test_version_lists_plugins_and_tools(mock_plugin, capsys):
    with patch("shutil.which", return_value=None):
        assert _run_main(["version"], {"mock": mock_plugin}) == 0

    out = capsys.readouterr().out
    assert f"sigtrail v{__version__}" in out
    assert "mock" in out
    assert "cosign: NOT FOUND" in out


def test_unknown_tool(capsys):
    assert _run_main(["nope"], {}) == 1
    assert "Unknown tool: nope" in capsys.readouterr().out


def test_dispatches_to_plugin(mock_plugin, capsys):
    with patch("sigtrail_cli.runner.load_config", return_value={}):
        code = _run_main(["mock", "--input", "hello"], {"mock": mock_plugin})

    assert code == 0
    assert "Processed: hello" in capsys.readouterr().out


def test_verify_without_digest_exits_nonzero(capsys):
    from sigtrail_verify import create_plugin

    with patch("sigtrail_cli.runner.load_config", return_value={}), \
         patch("sigtrail_verify.plugin.ensure_tools"), \
         patch("sigtrail_verify.plugin.CosignVerifier") as mock_verifier:
        code = _run_main(["verify", "ghcr.io/org/app"], {"verify": create_plugin()})

    assert code == 1
    assert "Malformed image reference" in capsys.readouterr().out
    mock_verifier.assert_not_called()


def test_missing_required_param(mock_plugin):
    assert _run_main(["mock"], {"mock": mock_plugin}) == 2
