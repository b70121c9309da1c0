"""
MCP server definition for MCP4Git.

``create_mcp_server`` builds an MCP SDK ``Server`` whose tools come from a
``ToolRegistry`` and whose resources and prompts come from ``resources``.
The SDK takes care of JSON-RPC framing, initialization and error replies.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import anyio.to_thread
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl

from . import __version__
from .registry import ToolRegistry
from .resources import get_prompt, list_prompts, list_resources, read_resource

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp4git"


def unknown_item(kind: str, name: Any) -> McpError:
    return McpError(types.ErrorData(code=types.INVALID_PARAMS, message=f"Unknown {kind}: {name}"))


def to_text_content(result: Dict[str, Any]) -> List[types.TextContent]:
    """Convert a registry result into MCP text content blocks."""
    return [types.TextContent(type="text", text=block["text"]) for block in result["content"]]


def create_mcp_server(registry: ToolRegistry) -> Server:
    """
    Create the MCP server for a tool registry.

    Args:
        registry: Registry providing the tools and the configured defaults

    Returns:
        A server ready to ``run`` on a pair of session streams
    """
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return [
            types.Tool(name=tool["name"], description=tool["description"], inputSchema=tool["inputSchema"])
            for tool in registry.list_tools()
        ]

    # The registry validates arguments itself so it can apply defaults and clamp page sizes
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        logger.debug(f"tools/call {name}")
        # Tool functions block on HTTP calls
        result = await anyio.to_thread.run_sync(registry.invoke, name, arguments)
        return to_text_content(result)

    @server.list_resources()
    async def handle_list_resources() -> List[types.Resource]:
        return [types.Resource(**resource) for resource in list_resources()]

    @server.read_resource()
    async def handle_read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        result = read_resource(str(uri))
        if result is None:
            raise unknown_item("resource", uri)
        return [
            ReadResourceContents(content=content["text"], mime_type=content["mimeType"])
            for content in result["contents"]
        ]

    @server.list_prompts()
    async def handle_list_prompts() -> List[types.Prompt]:
        return [
            types.Prompt(
                name=prompt["name"],
                description=prompt["description"],
                arguments=[types.PromptArgument(**argument) for argument in prompt["arguments"]],
            )
            for prompt in list_prompts()
        ]

    @server.get_prompt()
    async def handle_get_prompt(name: str, arguments: Optional[Dict[str, str]]) -> types.GetPromptResult:
        defaults = registry.defaults
        result = get_prompt(name, owner=defaults.owner, branch=defaults.branch)
        if result is None:
            raise unknown_item("prompt", name)
        return types.GetPromptResult(
            description=result["description"],
            messages=[
                types.PromptMessage(role=message["role"], content=types.TextContent(**message["content"]))
                for message in result["messages"]
            ],
        )

    return server
