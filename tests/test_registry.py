"""
Unit tests for the tool registry.
"""

import pytest
from unittest.mock import Mock, patch

from mcp4git.outcomes import ErrorKind, ToolOutcome
from mcp4git.registry import ToolDefaults, ToolDescriptor, ToolRegistry, build_registry


def descriptor(handler, **overrides):
    fields = {
        "name": "echo",
        "description": "Echo arguments",
        "input_schema": {
            "type": "object",
            "properties": {
                "owner": {"type": "string"},
                "repo": {"type": "string"},
                "branchName": {"type": "string"},
                "per_page": {"type": "integer", "default": 10, "minimum": 1, "maximum": 100},
                "state": {"type": "string", "enum": ["open", "closed"], "default": "open"},
                "draft": {"type": "boolean"},
            },
            "required": ["repo"],
        },
        "handler": handler,
        "config_defaults": {"owner": "owner"},
        "argument_names": {"branchName": "branch_name"},
    }
    fields.update(overrides)
    return ToolDescriptor(**fields)


@pytest.fixture
def handler():
    return Mock(return_value=ToolOutcome.success("ok"))


@pytest.fixture
def registry(tool_defaults, handler):
    registry = ToolRegistry(tool_defaults)
    registry.register(descriptor(handler))
    return registry


class TestRegistration:
    """Test registering tools."""

    def test_duplicate_name_rejected(self, registry, handler):
        with pytest.raises(ValueError, match="already registered"):
            registry.register(descriptor(handler))

    def test_unknown_default_field_rejected(self, tool_defaults, handler):
        registry = ToolRegistry(tool_defaults)
        with pytest.raises(ValueError, match="unknown default"):
            registry.register(descriptor(handler, config_defaults={"owner": "organisation"}))

    def test_build_registry_registers_all_tools(self, tool_defaults):
        registry = build_registry(tool_defaults)

        assert len(registry.tools) == 13
        assert registry.get_tool("create_pull_request") is not None

    def test_defaults_from_config(self):
        defaults = ToolDefaults.from_config()
        assert defaults == ToolDefaults(owner="test_user", branch="main")


class TestListTools:
    """Test the tool listing."""

    def test_configured_defaults_appear_in_schema(self, registry):
        (tool,) = registry.list_tools()

        assert tool["name"] == "echo"
        assert tool["inputSchema"]["type"] == "object"
        assert tool["inputSchema"]["properties"]["owner"]["default"] == "test_user"
        assert tool["inputSchema"]["required"] == ["repo"]

    def test_listing_does_not_mutate_descriptor(self, registry):
        registry.list_tools()
        assert "default" not in registry.get_tool("echo").input_schema["properties"]["owner"]

    def test_source_branch_default_is_default_branch(self, tool_defaults):
        registry = build_registry(tool_defaults)
        tools = {tool["name"]: tool for tool in registry.list_tools()}

        properties = tools["create_branch"]["inputSchema"]["properties"]
        assert properties["sourceBranch"]["default"] == "main"
        assert tools["create_pull_request"]["inputSchema"]["properties"]["base"]["default"] == "main"


class TestInvoke:
    """Test validation and dispatch."""

    def test_defaults_and_renaming(self, registry, handler):
        result = registry.invoke("echo", {"repo": "demo", "branchName": "feature"})

        assert result == {"content": [{"type": "text", "text": "ok"}]}
        handler.assert_called_once_with(
            owner="test_user", repo="demo", branch_name="feature", per_page=10, state="open"
        )

    def test_explicit_owner_wins(self, registry, handler):
        registry.invoke("echo", {"repo": "demo", "owner": "octocat"})
        assert handler.call_args.kwargs["owner"] == "octocat"

    def test_null_treated_as_missing(self, registry, handler):
        registry.invoke("echo", {"repo": "demo", "owner": None})
        assert handler.call_args.kwargs["owner"] == "test_user"

    def test_missing_required_argument(self, registry, handler):
        result = registry.invoke("echo", {})

        text = result["content"][0]["text"]
        assert "missing required argument 'repo'" in text
        handler.assert_not_called()

    def test_wrong_type(self, registry, handler):
        result = registry.invoke("echo", {"repo": 42})

        assert "must be of type string" in result["content"][0]["text"]
        handler.assert_not_called()

    def test_bool_is_not_an_integer(self, registry, handler):
        result = registry.invoke("echo", {"repo": "demo", "per_page": True})

        assert "must be of type integer" in result["content"][0]["text"]

    def test_integral_float_accepted(self, registry, handler):
        registry.invoke("echo", {"repo": "demo", "per_page": 20.0})
        assert handler.call_args.kwargs["per_page"] == 20

    @pytest.mark.parametrize("given, expected", [(0, 1), (-5, 1), (500, 100), (50, 50)])
    def test_page_size_clamped(self, registry, handler, given, expected):
        registry.invoke("echo", {"repo": "demo", "per_page": given})
        assert handler.call_args.kwargs["per_page"] == expected

    def test_enum_violation(self, registry, handler):
        result = registry.invoke("echo", {"repo": "demo", "state": "merged"})

        assert "must be one of 'open', 'closed'" in result["content"][0]["text"]
        handler.assert_not_called()

    def test_unknown_arguments_dropped(self, registry, handler):
        registry.invoke("echo", {"repo": "demo", "colour": "blue"})
        assert "colour" not in handler.call_args.kwargs

    def test_arguments_must_be_object(self, registry, handler):
        result = registry.invoke("echo", ["demo"])

        assert "arguments must be an object" in result["content"][0]["text"]

    def test_unknown_tool(self, registry):
        result = registry.invoke("nope", {})

        text = result["content"][0]["text"]
        assert text.startswith("❌ Error: Unknown tool 'nope'")
        assert "echo" in text

    def test_handler_exception_becomes_result(self, tool_defaults):
        registry = ToolRegistry(tool_defaults)
        registry.register(descriptor(Mock(side_effect=KeyError("sha"))))

        result = registry.invoke("echo", {"repo": "demo"})

        assert len(result["content"]) == 1
        assert "Unknown error occurred while running 'echo'" in result["content"][0]["text"]

    @pytest.mark.parametrize("returned", [None, "plain text", {"content": []}])
    def test_handler_returning_no_outcome_becomes_result(self, tool_defaults, returned):
        """A handler that returns something other than an outcome still yields a text block."""
        registry = ToolRegistry(tool_defaults)
        registry.register(descriptor(Mock(return_value=returned)))

        result = registry.invoke("echo", {"repo": "demo"})

        assert len(result["content"]) == 1
        assert "Unknown error occurred while running 'echo'" in result["content"][0]["text"]

    def test_failure_outcome_is_flattened(self, tool_defaults):
        registry = ToolRegistry(tool_defaults)
        failure = ToolOutcome.failure(ErrorKind.NOT_FOUND, "❌ gone")
        registry.register(descriptor(Mock(return_value=failure)))

        assert registry.invoke("echo", {"repo": "demo"}) == {"content": [{"type": "text", "text": "❌ gone"}]}

    def test_empty_text_still_yields_a_block(self, tool_defaults):
        registry = ToolRegistry(tool_defaults)
        registry.register(descriptor(Mock(return_value=ToolOutcome.success(""))))

        result = registry.invoke("echo", {"repo": "demo"})

        assert result["content"][0]["text"]

    @patch("mcp4git.tools.github_api")
    def test_real_tool_receives_defaults(self, mock_api, tool_defaults):
        """sourceBranch falls back to the default branch end to end."""
        mock_api.get_json.return_value = {"object": {"sha": "abc"}}
        mock_api.make_request.return_value.json.return_value = {"object": {"sha": "abc"}}
        mock_api.url.side_effect = lambda path: f"https://api.github.com{path}"
        registry = build_registry(tool_defaults)

        registry.invoke("create_branch", {"repo": "demo", "branchName": "feature"})

        mock_api.get_json.assert_called_once_with("/repos/test_user/demo/git/ref/heads/main")

    @patch("mcp4git.tools.github_api")
    def test_omitted_source_branch_matches_explicit_main(self, mock_api, tool_defaults):
        """Leaving out sourceBranch makes the same GitHub calls as passing "main"."""
        mock_api.get_json.return_value = {"object": {"sha": "abc"}}
        mock_api.make_request.return_value.json.return_value = {"object": {"sha": "abc"}}
        mock_api.url.side_effect = lambda path: f"https://api.github.com{path}"
        registry = build_registry(tool_defaults)

        omitted = registry.invoke("create_branch", {"repo": "demo", "branchName": "feature"})
        omitted_calls = list(mock_api.mock_calls)
        mock_api.reset_mock()
        explicit = registry.invoke(
            "create_branch", {"repo": "demo", "branchName": "feature", "sourceBranch": "main"}
        )

        assert mock_api.mock_calls == omitted_calls
        assert omitted == explicit
        mock_api.make_request.assert_called_once_with(
            "POST",
            "https://api.github.com/repos/test_user/demo/git/refs",
            data={"ref": "refs/heads/feature", "sha": "abc"},
        )


if __name__ == "__main__":
    pytest.main([__file__])
