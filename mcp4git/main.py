#!/usr/bin/env python3
"""
MCP4Git - GitHub tools over the Model Context Protocol.

This is the main entry point for the MCP4Git application. ``mcp4git serve``
runs the MCP server, ``mcp4git chat`` starts the interactive chat client
that talks to it.
"""

import argparse
import logging
import os
import sys

from rich.console import Console
from rich.table import Table

from . import __version__
from .config import config
from .github_api import github_api

logger = logging.getLogger(__name__)


def setup_argument_parser() -> argparse.ArgumentParser:
    """Set up command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="mcp4git",
        description="MCP4Git - GitHub tools for language models over MCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve                         # Start the MCP server
  %(prog)s serve --port 8080             # Start the server on another port
  %(prog)s chat                          # Start interactive chat
  %(prog)s chat --model gemini-2.5-pro   # Chat with a specific model
  %(prog)s --config-test                 # Check configuration and exit

Environment Variables:
  GITHUB_TOKEN     - Your GitHub personal access token (required)
  GITHUB_USERNAME  - Your GitHub username, the default owner (required)
  GEMINI_API_KEY   - Your Gemini API key (required for chat)
  DEFAULT_BRANCH   - Branch used when none is given (default: main)
  MODEL_NAME       - AI model to use (default: gemini-2.0-flash)
  MCP_SERVER_URL   - Server the chat client connects to
  LOG_LEVEL        - Logging level (default: INFO)
        """,
    )

    parser.add_argument("--version", action="version", version=f"MCP4Git v{__version__}")

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default: LOG_LEVEL or INFO)",
    )

    parser.add_argument("--config-test", action="store_true", help="Test configuration and exit")

    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the MCP server")
    serve.add_argument("--host", default=None, help="Interface to bind (default: SERVER_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on (default: SERVER_PORT)")

    chat = subparsers.add_parser("chat", help="Start the interactive chat client")
    chat.add_argument("--server-url", default=None, help="MCP server URL (default: MCP_SERVER_URL)")
    chat.add_argument("--model", default=None, help="AI model to use (default: MODEL_NAME)")

    return parser


def check_configuration() -> bool:
    """Print the configuration and check GitHub connectivity."""
    console = Console()
    console.print("[bold cyan]Testing Configuration...[/bold cyan]")

    table = Table(title="Configuration Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Value", style="yellow")

    table.add_row(
        "GitHub Token",
        "✓ Set" if config.github_token else "✗ Missing",
        "***" if config.github_token else "Not set",
    )
    table.add_row(
        "GitHub Username",
        "✓ Set" if config.github_username else "✗ Missing",
        config.github_username or "Not set",
    )
    table.add_row(
        "Gemini API Key",
        "✓ Set" if config.gemini_api_key else "✗ Missing (chat only)",
        "***" if config.gemini_api_key else "Not set",
    )
    table.add_row("Default Branch", "✓ Set", config.default_branch)
    table.add_row("Model Name", "✓ Set", config.model_name)
    table.add_row("Server", "✓ Set", f"{config.server_host}:{config.server_port}")
    table.add_row("MCP Server URL", "✓ Set", config.mcp_server_url)
    table.add_row("Log Level", "✓ Set", config.log_level)
    console.print(table)

    if not all([config.github_token, config.github_username]):
        console.print("[red]❌ Configuration incomplete. Please check your environment variables.[/red]")
        return False

    console.print("\n[bold cyan]Testing GitHub API Connection...[/bold cyan]")
    try:
        user_data = github_api.get_json("/user")
    except Exception as e:
        console.print(f"[red]❌ GitHub API connection failed: {str(e)}[/red]")
        return False

    console.print("[green]✓ GitHub API connection successful[/green]")
    console.print(f"[green]✓ Authenticated as: {user_data.get('login', 'Unknown')}[/green]")
    console.print("\n[bold green]🎉 All checks passed! Configuration is working correctly.[/bold green]")
    return True


def main(argv=None):
    """Main entry point for the application."""
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level
    config.setup_logging()

    try:
        if args.config_test:
            success = check_configuration()
            sys.exit(0 if success else 1)

        if args.command == "serve":
            from .server import run_server

            run_server(host=args.host, port=args.port)
        elif args.command == "chat":
            from .chat import run_chat

            logger.info(f"Starting chat with model: {args.model or config.model_name}")
            run_chat(server_url=args.server_url, model=args.model)
        else:
            parser.print_help()
            sys.exit(2)

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        print("\nGoodbye! 👋")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Application error: {str(e)}")
        print(f"Error: {str(e)}")
        sys.exit(1)
    finally:
        github_api.close()


if __name__ == "__main__":
    main()
