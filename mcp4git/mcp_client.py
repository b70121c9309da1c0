"""
Client side of the MCP server-sent events transport.

The chat loop is synchronous, so ``MCPClient`` runs the MCP SDK's
``sse_client`` and ``ClientSession`` on an event loop in a background thread
(an anyio blocking portal) and exposes blocking calls on top of them.
"""

import logging
from contextlib import ExitStack
from datetime import timedelta
from typing import Any, Dict, List, Optional

import mcp.types as types
from anyio.from_thread import BlockingPortal, start_blocking_portal
from mcp import ClientSession
from mcp.client.sse import sse_client
from mcp.shared.exceptions import McpError

from . import __version__
from .config import config

logger = logging.getLogger(__name__)

CLIENT_NAME = "mcp4git-chat"


class MCPClientError(Exception):
    """Raised when the MCP server cannot be reached or answers with an error."""


def first_text(result: types.CallToolResult) -> str:
    """Return the first text block of a tool result."""
    for block in result.content:
        if isinstance(block, types.TextContent):
            return block.text
    return ""


class MCPClient:
    """Blocking MCP client over server-sent events."""

    def __init__(self, server_url: Optional[str] = None, timeout: Optional[float] = None):
        self.server_url = (server_url or config.mcp_server_url).rstrip("/")
        self.timeout = timeout or config.api_timeout

        self.session: Optional[ClientSession] = None
        self.server_info: Optional[types.Implementation] = None
        self.tools: List[types.Tool] = []

        self._portal: Optional[BlockingPortal] = None
        self._stack = ExitStack()

    @property
    def connected(self) -> bool:
        return self.session is not None

    def connect(self) -> "MCPClient":
        """
        Open the event stream and initialize an MCP session on it.

        Raises:
            MCPClientError: If the server is unreachable or initialization fails
        """
        sse_url = f"{self.server_url}/sse"
        logger.info(f"Connecting to MCP server at {sse_url}")

        try:
            self._portal = self._stack.enter_context(start_blocking_portal())
            read_stream, write_stream = self._stack.enter_context(
                self._portal.wrap_async_context_manager(sse_client(sse_url, timeout=self.timeout))
            )
            session = self._stack.enter_context(
                self._portal.wrap_async_context_manager(
                    ClientSession(
                        read_stream,
                        write_stream,
                        read_timeout_seconds=timedelta(seconds=self.timeout),
                        client_info=types.Implementation(name=CLIENT_NAME, version=__version__),
                    )
                )
            )
            result = self._portal.call(session.initialize)
        except Exception as e:
            self._shutdown()
            raise MCPClientError(f"Could not connect to MCP server at {self.server_url}: {e}") from e

        self.session = session
        self.server_info = result.serverInfo
        logger.info(f"Connected to {result.serverInfo.name} {result.serverInfo.version}")
        return self

    def _run(self, method: str, *args: Any) -> Any:
        """Run a ``ClientSession`` coroutine method on the portal and wait for its result."""
        if self.session is None or self._portal is None:
            raise MCPClientError("Not connected to an MCP server")

        try:
            return self._portal.call(getattr(self.session, method), *args)
        except McpError as e:
            raise MCPClientError(f"{method} failed: {e.error.message}") from e
        except Exception as e:
            # Transport failures surface as httpx or anyio errors
            raise MCPClientError(f"{method} failed: {e}") from e

    def list_tools(self) -> List[types.Tool]:
        """Fetch and cache the server's tool descriptors."""
        self.tools = self._run("list_tools").tools
        logger.info(f"Server offers {len(self.tools)} tools")
        return self.tools

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> types.CallToolResult:
        """Invoke a tool and return its result (content blocks)."""
        logger.info(f"Calling tool {name}")
        return self._run("call_tool", name, arguments or {})

    def get_prompt(self, name: str) -> types.GetPromptResult:
        return self._run("get_prompt", name)

    def _shutdown(self) -> None:
        stack, self._stack = self._stack, ExitStack()
        self._portal = None
        try:
            stack.close()
        except Exception as e:
            logger.warning(f"Error while closing the MCP connection: {e}")

    def close(self) -> None:
        """Close the session and its event stream; the server drops the session with it."""
        self.session = None
        self._shutdown()
        logger.info("Disconnected from MCP server")

    def __enter__(self) -> "MCPClient":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
