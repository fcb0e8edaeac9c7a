"""Pytest configuration and fixtures."""

import pytest


@pytest.fixture
def sample_tool_params():
    """Sample tool parameters for testing."""
    from sigtrail_core.plugin import ToolParam

    return [
        ToolParam(name="image", description="Image reference", required=True, positional=True),
        ToolParam(name="timeout", description="Seconds per call", type="int", default=300),
        ToolParam(name="format", description="Report format", default="text", choices=["text", "json"]),
        ToolParam(name="color", description="Colorize output", type="bool"),
        ToolParam(name="verbose", description="Verbose output", type="bool", default=False),
    ]


@pytest.fixture
def mock_plugin():
    """Mock plugin for testing."""
    from sigtrail_core.plugin import ResultStatus, ToolParam, ToolResult

    class MockPlugin:
        name = "mock"
        description = "Mock plugin for testing"
        version = "0.1.0"
        required_tools = ["cosign"]

        def get_params(self):
            return [
                ToolParam(name="input", description="Input value", required=True),
            ]

        def run(self, args, ctx):
            return ToolResult(
                status=ResultStatus.SUCCESS,
                summary=f"Processed: {args['input']}",
                data={"input": args["input"]},
            )

    return MockPlugin()
