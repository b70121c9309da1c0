"""
Command system for MCP4Git chat slash commands.

This module provides the command registry, parsing, and conversion logic
for the slash commands understood by the chat client. Slash commands
control the client itself and are never forwarded to the model as typed.
"""

import logging
from typing import List, Dict, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class CommandCategory(Enum):
    """Categories for organizing commands."""

    REPO = "🏗️  Repository"
    SERVER = "🔌 Server"
    SYSTEM = "⚙️  System"


@dataclass
class Command:
    """Represents a slash command."""

    name: str
    description: str
    category: CommandCategory
    usage: str
    examples: List[str]
    aliases: List[str] = field(default_factory=list)


class CommandRegistry:
    """Registry for all available slash commands."""

    def __init__(self):
        self.commands: Dict[str, Command] = {}
        self._register_commands()

    def _register_commands(self):
        """Register all available commands."""
        commands = [
            # System/Client Control Commands
            Command(
                name="help",
                description="Show help information",
                category=CommandCategory.SYSTEM,
                usage="/help [command]",
                examples=["/help", "/help tools"],
                aliases=["h", "?"],
            ),
            Command(
                name="clear",
                description="Clear conversation history",
                category=CommandCategory.SYSTEM,
                usage="/clear",
                examples=["/clear"],
                aliases=["cls", "reset"],
            ),
            Command(
                name="exit",
                description="Exit the application",
                category=CommandCategory.SYSTEM,
                usage="/exit",
                examples=["/exit"],
                aliases=["quit", "bye"],
            ),
            Command(
                name="model",
                description="Switch AI model for this session",
                category=CommandCategory.SYSTEM,
                usage="/model <model_name>",
                examples=["/model gemini-2.0-flash", "/model gemini-2.5-pro"],
                aliases=["switch-model"],
            ),
            # MCP server commands
            Command(
                name="tools",
                description="List the tools offered by the MCP server",
                category=CommandCategory.SERVER,
                usage="/tools",
                examples=["/tools"],
                aliases=["list-tools"],
            ),
            # Convenience Commands
            Command(
                name="repos",
                description="Quick list of your repositories",
                category=CommandCategory.REPO,
                usage="/repos [username]",
                examples=["/repos", "/repos octocat"],
                aliases=["repositories"],
            ),
        ]

        for cmd in commands:
            self.commands[cmd.name] = cmd
            for alias in cmd.aliases:
                self.commands[alias] = cmd

    def get_command(self, name: str) -> Optional[Command]:
        """Get a command by name or alias."""
        return self.commands.get(name.lower())

    def get_commands_by_category(self) -> Dict[CommandCategory, List[Command]]:
        """Get all commands organized by category."""
        categorized: Dict[CommandCategory, List[Command]] = {}
        seen = set()

        for cmd in self.commands.values():
            if cmd.name in seen:
                continue
            seen.add(cmd.name)

            if cmd.category not in categorized:
                categorized[cmd.category] = []
            categorized[cmd.category].append(cmd)

        return categorized

    def find_similar_commands(self, name: str) -> List[str]:
        """Find similar command names for suggestions."""
        name_lower = name.lower()
        similar = []

        for cmd_name in self.commands.keys():
            if name_lower in cmd_name or cmd_name.startswith(name_lower):
                similar.append(cmd_name)

        return sorted(similar)[:5]  # Return top 5 matches


class CommandParser:
    """Parser for slash commands."""

    @staticmethod
    def parse_command(user_input: str) -> Tuple[bool, Optional[str], List[str]]:
        """
        Parse user input to check if it's a slash command.

        Args:
            user_input: The user's input string

        Returns:
            (is_command, command_name, args)
        """
        if not user_input.startswith("/"):
            return False, None, []

        # Remove the leading slash and split
        parts = user_input[1:].split()
        if not parts:
            return False, None, []

        command_name = parts[0]
        args = parts[1:]

        return True, command_name, args


class CommandConverter:
    """Converts convenience commands to natural language for the model."""

    @staticmethod
    def convert_to_natural_language(cmd: Command, args: List[str]) -> Optional[str]:
        """Convert a slash command to a chat message, or None for client-only commands."""
        if cmd.name == "repos":
            if args:
                return f"List the repositories of GitHub user {args[0]}"
            return "List my repositories"

        return None


# Global instances for easy access
command_registry = CommandRegistry()
command_parser = CommandParser()
command_converter = CommandConverter()
