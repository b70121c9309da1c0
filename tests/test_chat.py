"""
Unit tests for the chat client.
"""

import io

import mcp.types as types
import pytest
from openai import OpenAIError
from rich.console import Console
from unittest.mock import Mock

from mcp4git.chat import ChatState, GitChat, Turn, to_openai_tools
from mcp4git.mcp_client import MCPClientError
from mcp4git.resources import SYSTEM_INSTRUCTION


def model_reply(content=None, tool_calls=None):
    message = Mock()
    message.content = content
    message.tool_calls = tool_calls
    response = Mock()
    response.choices = [Mock(message=message)]
    return response


def tool_result(text):
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)])


def function_call(name, arguments):
    call = Mock()
    call.function.name = name
    call.function.arguments = arguments
    return call


@pytest.fixture
def mcp():
    client = Mock()
    client.list_tools.return_value = [
        types.Tool(name="fetch_repo", description="Fetch a repo", inputSchema={"type": "object", "properties": {}})
    ]
    client.call_tool.return_value = tool_result("**Repository:** test_user/demo")
    return client


@pytest.fixture
def llm():
    return Mock()


@pytest.fixture
def chat(mcp, llm):
    return GitChat(mcp, llm_client=llm, model="gemini-test", console=Console(file=io.StringIO()))


class TestToOpenAITools:
    def test_conversion(self):
        tools = to_openai_tools([types.Tool(name="x", description="d", inputSchema={"type": "object"})])
        assert tools == [
            {"type": "function", "function": {"name": "x", "description": "d", "parameters": {"type": "object"}}}
        ]


class TestSubmit:
    """Test the conversation state machine."""

    def test_blank_input_is_refused(self, chat, llm):
        assert chat.submit("   ") is None
        assert chat.history == []
        llm.chat.completions.create.assert_not_called()

    def test_busy_client_refuses_input(self, chat, llm):
        chat.state = ChatState.AWAITING_MODEL

        assert chat.submit("hello") is None
        assert chat.history == []

    def test_plain_reply(self, chat, llm):
        llm.chat.completions.create.return_value = model_reply("Hi there!")

        turn = chat.submit("hello")

        assert turn == Turn("model", "Hi there!")
        assert chat.history == [Turn("user", "hello"), Turn("model", "Hi there!")]
        assert chat.state is ChatState.IDLE
        request = llm.chat.completions.create.call_args.kwargs
        assert request["model"] == "gemini-test"
        assert request["messages"][0] == {"role": "system", "content": SYSTEM_INSTRUCTION}
        assert request["messages"][1] == {"role": "user", "content": "hello"}

    def test_full_history_is_resent(self, chat, llm):
        llm.chat.completions.create.side_effect = [model_reply("one"), model_reply("two")]

        chat.submit("first")
        chat.submit("second")

        messages = llm.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[2]["content"] == "one"

    def test_function_call_runs_tool(self, chat, llm, mcp):
        llm.chat.completions.create.return_value = model_reply(
            tool_calls=[function_call("fetch_repo", '{"repo": "demo"}')]
        )
        states = []
        mcp.call_tool.side_effect = lambda name, args: states.append(chat.state) or tool_result(
            "**Repository:** test_user/demo"
        )

        turn = chat.submit("show demo")

        mcp.call_tool.assert_called_once_with("fetch_repo", {"repo": "demo"})
        assert states == [ChatState.AWAITING_TOOL]
        assert turn == Turn("model", "**Repository:** test_user/demo")
        assert chat.state is ChatState.IDLE
        # The tool result is recorded, the model is not asked again
        assert llm.chat.completions.create.call_count == 1

    def test_tools_are_offered_after_refresh(self, chat, llm):
        chat.refresh_tools()
        llm.chat.completions.create.return_value = model_reply("ok")

        chat.submit("hi")

        request = llm.chat.completions.create.call_args.kwargs
        assert request["tools"][0]["function"]["name"] == "fetch_repo"
        assert request["tool_choice"] == "auto"

    def test_model_failure_becomes_error_turn(self, chat, llm):
        llm.chat.completions.create.side_effect = OpenAIError("quota exhausted")

        turn = chat.submit("hello")

        assert turn.role == "model"
        assert turn.text.startswith("Error")
        assert "quota exhausted" in turn.text
        assert chat.state is ChatState.IDLE

    def test_malformed_model_reply_becomes_error_turn(self, chat, llm):
        """A reply without choices still gives the transcript a model turn."""
        response = Mock()
        response.choices = []
        llm.chat.completions.create.return_value = response

        turn = chat.submit("hello")

        assert turn.role == "model"
        assert turn.text.startswith("Error")
        assert [t.role for t in chat.history] == ["user", "model"]
        assert chat.state is ChatState.IDLE

    def test_tool_failure_becomes_error_turn(self, chat, llm, mcp):
        llm.chat.completions.create.return_value = model_reply(tool_calls=[function_call("fetch_repo", "{}")])
        mcp.call_tool.side_effect = MCPClientError("Timed out after 30s waiting for tools/call")

        turn = chat.submit("show demo")

        assert turn.text.startswith("Error calling tool")
        assert chat.state is ChatState.IDLE

    def test_bad_function_arguments(self, chat, llm, mcp):
        llm.chat.completions.create.return_value = model_reply(tool_calls=[function_call("fetch_repo", "{oops")])

        turn = chat.submit("show demo")

        assert turn.text.startswith("Error parsing arguments for fetch_repo")
        mcp.call_tool.assert_not_called()


class TestSlashCommands:
    """Test client commands."""

    def test_exit(self, chat):
        assert chat.execute_slash_command("exit", []) is True
        assert chat.execute_slash_command("quit", []) is True

    def test_clear(self, chat):
        chat.history = [Turn("user", "hello")]

        assert chat.execute_slash_command("clear", []) is False
        assert chat.history == []

    def test_tools_lists_server_tools(self, chat, mcp):
        chat.execute_slash_command("tools", [])

        mcp.list_tools.assert_called_once()
        assert "fetch_repo" in chat.console.file.getvalue()

    def test_model_switch(self, chat):
        chat.execute_slash_command("model", ["gemini-2.5-pro"])
        assert chat.model == "gemini-2.5-pro"

    def test_repos_is_sent_to_the_model(self, chat, llm):
        llm.chat.completions.create.return_value = model_reply("Here are your repositories")

        chat.execute_slash_command("repos", [])

        assert chat.history[0] == Turn("user", "List my repositories")

    def test_unknown_command_suggests(self, chat, llm):
        assert chat.execute_slash_command("hel", []) is False
        assert "Did you mean" in chat.console.file.getvalue()
        llm.chat.completions.create.assert_not_called()

    def test_help(self, chat):
        chat.execute_slash_command("help", [])
        assert "Available Commands" in chat.console.file.getvalue()


if __name__ == "__main__":
    pytest.main([__file__])
