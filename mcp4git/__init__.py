"""
MCP4Git - GitHub tools for language models over the Model Context Protocol.

This package provides an MCP server exposing GitHub repository operations as
tools, and a command-line chat client that lets a language model call them.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mcp4git")
except PackageNotFoundError:
    # Package not installed
    __version__ = "1.0.0"
__description__ = "GitHub tools for language models over the Model Context Protocol"

# Main modules
from . import config
from . import github_api
from . import tools
from . import registry

__all__ = ["config", "github_api", "tools", "registry"]
