"""Tests for the ToolPlugin protocol."""

from sigtrail_core.plugin import ResultStatus, ToolParam, ToolPlugin, ToolResult


def test_tool_param_creation():
    """Test ToolParam creation."""
    param = ToolParam(
        name="format",
        description="Report format",
        type="str",
        required=True,
        default="text",
        choices=["text", "json"],
    )

    assert param.name == "format"
    assert param.description == "Report format"
    assert param.type == "str"
    assert param.required is True
    assert param.default == "text"
    assert param.choices == ["text", "json"]


def test_tool_param_defaults():
    """Test ToolParam default values."""
    param = ToolParam(name="test", description="Test parameter")

    assert param.type == "str"
    assert param.required is False
    assert param.default is None
    assert param.choices is None
    assert param.positional is False


def test_tool_param_positional():
    """Test positional ToolParam."""
    param = ToolParam(name="image", description="Image", required=True, positional=True)

    assert param.positional is True


def test_tool_result_creation():
    """Test ToolResult creation."""
    result = ToolResult(
        status=ResultStatus.SUCCESS,
        summary="ghcr.io/org/app@sha256:deadbeef: verified (3/3 checks passed)",
        data={"report": {"overall_success": True}},
        artifacts={"report": "/tmp/report.json"},
    )

    assert result.status == ResultStatus.SUCCESS
    assert result.summary.endswith("(3/3 checks passed)")
    assert result.data == {"report": {"overall_success": True}}
    assert result.artifacts == {"report": "/tmp/report.json"}


def test_tool_result_defaults():
    """Test ToolResult default values."""
    result = ToolResult(status=ResultStatus.SUCCESS, summary="Done")

    assert result.data == {}
    assert result.artifacts == {}


def test_result_status_values():
    """Test ResultStatus string values."""
    assert [s.value for s in ResultStatus] == ["success", "failure", "partial", "cancelled"]


def test_plugin_protocol_compliance(mock_plugin):
    """Test that mock plugin implements ToolPlugin protocol."""
    assert isinstance(mock_plugin, ToolPlugin)
    assert hasattr(mock_plugin, "name")
    assert hasattr(mock_plugin, "description")
    assert hasattr(mock_plugin, "version")
    assert mock_plugin.required_tools == ["cosign"]
    assert callable(mock_plugin.get_params)
    assert callable(mock_plugin.run)


def test_object_without_run_is_not_a_plugin():
    """Test that incomplete objects fail the protocol check."""

    class NotAPlugin:
        name = "broken"
        description = "Missing run"
        version = "0.0.1"
        required_tools = []

        def get_params(self):
            return []

    assert not isinstance(NotAPlugin(), ToolPlugin)


def test_plugin_get_params(mock_plugin):
    """Test plugin parameter declaration."""
    params = mock_plugin.get_params()

    assert len(params) == 1
    assert params[0].name == "input"
    assert params[0].required is True


def test_plugin_run(mock_plugin):
    """Test plugin execution."""
    from sigtrail_core.context import ExecutionContext

    ctx = ExecutionContext()
    args = {"input": "test-value"}

    result = mock_plugin.run(args, ctx)

    assert result.status == ResultStatus.SUCCESS
    assert "test-value" in result.summary
    assert result.data["input"] == "test-value"


def test_tool_param_dest_and_flag():
    """Test argparse naming derived from ToolParam.name."""
    param = ToolParam(name="certificate-oidc-issuer", description="Issuer")

    assert param.dest == "certificate_oidc_issuer"
    assert param.flag == "--certificate-oidc-issuer"


def test_tool_result_output():
    """Test the rendered report accessor."""
    assert ToolResult(ResultStatus.SUCCESS, "ok", data={"output": "report"}).output == "report"
    assert ToolResult(ResultStatus.SUCCESS, "ok", data={"output": ""}).output is None
    assert ToolResult(ResultStatus.SUCCESS, "ok").output is None
