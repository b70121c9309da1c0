"""
Chat interface for MCP4Git.

This module provides the interactive chat client: the user talks to a
language model, and function calls proposed by the model are executed on
the MCP4Git server through ``MCPClient``.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Dict, Any, Optional

import mcp.types as types
from openai import OpenAI, OpenAIError
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.status import Status
from rich.table import Table

from .config import config
from .commands import command_registry, command_parser, command_converter
from .mcp_client import MCPClient, MCPClientError, first_text
from .resources import SYSTEM_INSTRUCTION

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import HTML

logger = logging.getLogger(__name__)


class ChatState(Enum):
    """Where the client is in the current exchange."""

    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"
    AWAITING_TOOL = "awaiting_tool"


@dataclass(frozen=True)
class Turn:
    """One entry of the conversation."""

    role: str  # "user" or "model"
    text: str


def to_openai_tools(mcp_tools: List[types.Tool]) -> List[Dict[str, Any]]:
    """Convert MCP tool descriptors into OpenAI function declarations."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description or "",
                "parameters": tool.inputSchema,
            },
        }
        for tool in mcp_tools
    ]


class SlashCommandCompleter(Completer):
    def __init__(self, commands):
        self.commands = commands

    def get_completions(self, document, complete_event):
        word = document.get_word_before_cursor()
        if document.text.startswith("/"):
            for cmd in self.commands:
                if cmd.startswith(word):
                    yield Completion(cmd, start_position=-len(word))


class GitChat:
    """Chat interface that routes model function calls to the MCP server."""

    def __init__(
        self,
        mcp_client: MCPClient,
        llm_client: Optional[OpenAI] = None,
        model: Optional[str] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the chat interface."""
        self.console = console or Console()

        # Suppress httpx logging to keep output clean
        logging.getLogger("httpx").setLevel(logging.WARNING)

        self.mcp = mcp_client
        self.client = llm_client or OpenAI(
            base_url=config.llm_base_url,
            api_key=config.gemini_api_key,
            # No timeout for AI requests - users can manually abort with Ctrl+C
        )
        self.model = model or config.model_name
        self.history: List[Turn] = []
        self.state = ChatState.IDLE
        self.tools: List[Dict[str, Any]] = []
        logger.info("Chat interface initialized")

    def refresh_tools(self) -> None:
        """Fetch tool schemas from the server for the next model calls."""
        self.tools = to_openai_tools(self.mcp.list_tools())

    def clear(self) -> None:
        self.history = []
        self.state = ChatState.IDLE

    def _build_messages(self) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": SYSTEM_INSTRUCTION}]
        for turn in self.history:
            role = "user" if turn.role == "user" else "assistant"
            messages.append({"role": role, "content": turn.text})
        return messages

    def submit(self, text: str) -> Optional[Turn]:
        """
        Send a user message and record the reply.

        The full history is sent to the model with the system instruction and
        tool schemas. If the model asks for a function call, the tool runs on
        the MCP server and its first text block becomes the model's turn.

        Args:
            text: The user's message

        Returns:
            The model turn that was appended, or None if the message was
            refused (blank, or an exchange is already in progress)
        """
        if not text or not text.strip():
            return None
        if self.state is not ChatState.IDLE:
            logger.warning(f"Ignoring message while {self.state.value}")
            return None

        self.history.append(Turn("user", text.strip()))
        self.state = ChatState.AWAITING_MODEL
        try:
            reply_text = self._exchange()
        except OpenAIError as e:
            logger.error(f"Language model request failed: {e}")
            reply_text = f"Error from language model: {e}"
        except MCPClientError as e:
            logger.error(f"Tool call failed: {e}")
            reply_text = f"Error calling tool: {e}"
        except Exception as e:
            logger.exception("Unexpected error while answering")
            reply_text = f"Error while answering: {e}"
        finally:
            self.state = ChatState.IDLE

        turn = Turn("model", reply_text)
        self.history.append(turn)
        return turn

    def _exchange(self) -> str:
        request: Dict[str, Any] = {"model": self.model, "messages": self._build_messages()}
        if self.tools:
            request["tools"] = self.tools
            request["tool_choice"] = "auto"

        response = self.client.chat.completions.create(**request)
        message = response.choices[0].message

        if message.tool_calls:
            if len(message.tool_calls) > 1:
                logger.info(f"Model proposed {len(message.tool_calls)} calls, running the first")
            self.state = ChatState.AWAITING_TOOL
            return self._execute_tool(message.tool_calls[0])

        content = message.content or ""
        if not content.strip():
            logger.warning("Model returned an empty response")
            return "(no response)"
        return content

    def _execute_tool(self, tool_call) -> str:
        """Run a function call on the MCP server and return its text."""
        function_name = tool_call.function.name

        try:
            function_args = json.loads(tool_call.function.arguments or "{}")
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing tool arguments: {e}")
            return f"Error parsing arguments for {function_name}: {e}"

        logger.debug(f"Tool call {function_name}({function_args})")
        result = self.mcp.call_tool(function_name, function_args)
        return first_text(result) or "(no output)"

    def _display_welcome(self) -> None:
        """Display the server's welcome prompt, or a short fallback."""
        try:
            prompt = self.mcp.get_prompt("github_assistant")
            welcome_text = prompt.messages[0].content.text
        except (MCPClientError, IndexError, AttributeError) as e:
            logger.debug(f"Welcome prompt unavailable: {e}")
            welcome_text = "# Welcome to MCP4Git! 🚀\n\nAsk me anything about your GitHub repositories."

        welcome_text += "\n\nType `/help` for client commands."
        self.console.print(
            Panel(
                Markdown(welcome_text),
                title="[bold cyan]MCP4Git[/bold cyan]",
                subtitle=f"[dim]{self.model} · {len(self.tools)} tools[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def _display_command_help(self, command_name: Optional[str] = None) -> None:
        """Display help for one command or all of them."""
        if command_name:
            cmd = command_registry.get_command(command_name)
            if not cmd:
                self._report_unknown_command(command_name)
                return

            content = f"## /{cmd.name}\n\n{cmd.description}\n\n**Usage:** `{cmd.usage}`\n\n**Examples:**\n"
            content += "\n".join(f"- `{example}`" for example in cmd.examples)
            if cmd.aliases:
                content += f"\n\n**Aliases:** {', '.join(f'`/{alias}`' for alias in cmd.aliases)}"
            title = "[bold green]Command Help[/bold green]"
        else:
            content = "# Available Commands\n\n"
            for category, commands in command_registry.get_commands_by_category().items():
                content += f"## {category.value}\n\n"
                for cmd in commands:
                    aliases_str = f" (aliases: {', '.join(cmd.aliases)})" if cmd.aliases else ""
                    content += f"- **`/{cmd.name}`** - {cmd.description}{aliases_str}\n"
                content += "\n"
            content += "Anything that is not a slash command is sent to the model."
            title = "[bold green]Command Reference[/bold green]"

        self.console.print(Panel(Markdown(content), title=title, border_style="green", padding=(1, 2)))

    def _display_tools(self) -> None:
        try:
            tools = self.mcp.list_tools()
        except MCPClientError as e:
            self.console.print(f"[red]❌ Could not list tools: {e}[/red]")
            return

        self.tools = to_openai_tools(tools)
        table = Table(title=f"MCP Tools ({len(tools)})")
        table.add_column("Tool", style="cyan")
        table.add_column("Description")
        for tool in tools:
            table.add_row(tool.name, tool.description or "")
        self.console.print(table)

    def _report_unknown_command(self, command_name: str) -> None:
        similar = command_registry.find_similar_commands(command_name)
        self.console.print(f"[red]Unknown command: [bold]/{command_name}[/bold][/red]")
        if similar:
            self.console.print(f"[yellow]Did you mean: [bold]{', '.join(similar)}[/bold]?[/yellow]")

    def execute_slash_command(self, command_name: str, args: List[str]) -> bool:
        """
        Execute a slash command.

        Returns:
            True if the session should end, False otherwise
        """
        cmd = command_registry.get_command(command_name)

        if not cmd:
            self._report_unknown_command(command_name)
            return False

        if cmd.name == "help":
            self._display_command_help(args[0] if args else None)
        elif cmd.name == "clear":
            self.clear()
            self.console.clear()
            self.console.print("[green]✅ Conversation history cleared[/green]")
        elif cmd.name == "exit":
            self.console.print("[yellow]👋 Goodbye![/yellow]")
            return True
        elif cmd.name == "model":
            if not args:
                self.console.print("[red]Model name required[/red]")
                self.console.print(f"[yellow]Usage: [bold]{cmd.usage}[/bold][/yellow]")
            else:
                old_model, self.model = self.model, args[0]
                self.console.print(
                    f"[green]✅ Model switched from [bold]{old_model}[/bold] to [bold]{self.model}[/bold][/green]"
                )
        elif cmd.name == "tools":
            self._display_tools()
        else:
            message = command_converter.convert_to_natural_language(cmd, args)
            if message:
                self._respond(message)

        return False

    def _get_user_input(self, session: PromptSession) -> str:
        """Get user input with command auto-completion."""
        try:
            return session.prompt(HTML("<ansicyan><b>You</b></ansicyan>: ")).strip()
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[yellow]Session ended by user[/yellow]")
            return "/exit"

    def _display_turn(self, turn: Turn) -> None:
        self.console.print("[bold green]🤖 Assistant:[/bold green]")
        self.console.print()
        if turn.text.startswith("Error"):
            self.console.print(f"[red]❌ {turn.text}[/red]")
        else:
            self.console.print(Markdown(turn.text))
        self.console.print()

    def _respond(self, text: str) -> None:
        with Status("[cyan]🤔 Thinking...", console=self.console):
            turn = self.submit(text)
        if turn is not None:
            self._display_turn(turn)

    def run(self) -> None:
        """Run the main chat loop."""
        try:
            self.refresh_tools()
        except MCPClientError as e:
            self.console.print(f"[yellow]⚠️  Could not load tools, continuing without them: {e}[/yellow]")

        self._display_welcome()
        session: PromptSession = PromptSession(
            completer=SlashCommandCompleter(list(command_registry.commands.keys()))
        )

        while True:
            try:
                user_input = self._get_user_input(session)
                if not user_input:
                    continue

                is_command, command_name, args = command_parser.parse_command(user_input)
                if is_command:
                    if self.execute_slash_command(command_name, args):
                        break
                else:
                    self._respond(user_input)

            except KeyboardInterrupt:
                self.console.print("\n[yellow]Session interrupted by user[/yellow]")
                break
            except Exception as e:
                error_msg = f"Unexpected error in chat loop: {str(e)}"
                logger.error(error_msg)
                self.console.print(f"[red]❌ Error: {error_msg}[/red]")
                self.console.print("[yellow]You can continue chatting or type '/exit' to quit[/yellow]")


def run_chat(server_url: Optional[str] = None, model: Optional[str] = None) -> None:
    """Connect to the MCP server and run the interactive chat until the user exits."""
    mcp_client = MCPClient(server_url)
    mcp_client.connect()
    try:
        GitChat(mcp_client, model=model).run()
    finally:
        mcp_client.close()
