"""
FastAPI application serving MCP over server-sent events.

Clients open ``GET /sse`` to receive an endpoint event carrying their session
id, then post JSON-RPC messages to ``/messages?sessionId=<id>``. Each stream
runs its own MCP server session; responses are delivered on the stream.
"""

import logging
from typing import Any, Dict, Optional

import anyio
import mcp.types as types
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from mcp.server.lowlevel import Server
from mcp.shared.message import SessionMessage
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse
from starlette.types import Receive, Scope, Send

from .config import config
from .protocol import create_mcp_server
from .registry import ToolRegistry, build_registry
from .transport import MESSAGES_PATH, SessionNotFoundError, SessionRegistry, route_message

logger = logging.getLogger(__name__)

NO_TRANSPORT_MESSAGE = "No transport found for sessionId"


class EventStreamEndpoint:
    """
    ASGI endpoint behind ``GET /sse``.

    Each connection registers a session, runs the MCP server on that
    session's streams and relays server messages as ``message`` events after
    an initial ``endpoint`` event. The session is removed from the registry
    however the connection ends, including a client that is gone before the
    first event is written.
    """

    def __init__(self, server: Server, sessions: SessionRegistry, keepalive_seconds: float):
        self.server = server
        self.sessions = sessions
        self.keepalive_seconds = keepalive_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        read_writer, read_stream = anyio.create_memory_object_stream(0)
        write_stream, write_reader = anyio.create_memory_object_stream(0)
        event_writer, event_reader = anyio.create_memory_object_stream(0)

        session = self.sessions.open(read_writer)
        try:
            async def send_events() -> None:
                async with event_writer, write_reader:
                    await event_writer.send({"event": "endpoint", "data": session.endpoint})
                    async for session_message in write_reader:
                        await event_writer.send(
                            {
                                "event": "message",
                                "data": session_message.message.model_dump_json(by_alias=True, exclude_none=True),
                            }
                        )

            async with anyio.create_task_group() as task_group:
                task_group.start_soon(
                    self.server.run, read_stream, write_stream, self.server.create_initialization_options()
                )
                response = EventSourceResponse(
                    event_reader, data_sender_callable=send_events, ping=self.keepalive_seconds
                )
                await response(scope, receive, send)
                task_group.cancel_scope.cancel()
        finally:
            self.sessions.close(session.session_id)
            read_writer.close()


def create_app(
    registry: Optional[ToolRegistry] = None, keepalive_seconds: Optional[float] = None
) -> FastAPI:
    """Build the MCP server application."""
    registry = registry or build_registry()
    if keepalive_seconds is None:
        keepalive_seconds = config.sse_keepalive_seconds

    app = FastAPI(title="MCP4Git", description="MCP server exposing GitHub tools")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.sessions = SessionRegistry()
    app.state.mcp_server = create_mcp_server(registry)
    app.add_route(
        "/sse",
        EventStreamEndpoint(app.state.mcp_server, app.state.sessions, keepalive_seconds),
        methods=["GET"],
    )

    @app.post(MESSAGES_PATH)
    async def post_message(request: Request, session_id: Optional[str] = Query(None, alias="sessionId")):
        """Accept a JSON-RPC message for an open session."""
        sessions: SessionRegistry = app.state.sessions
        if sessions.lookup(session_id) is None:
            logger.warning(f"Message posted for unknown session {session_id}")
            return PlainTextResponse(NO_TRANSPORT_MESSAGE, status_code=400)

        body = await request.body()
        try:
            message = types.JSONRPCMessage.model_validate_json(body)
        except ValidationError as e:
            logger.warning(f"Invalid message posted to session {session_id}: {e}")
            return PlainTextResponse("Invalid JSON-RPC message", status_code=400)

        try:
            await route_message(sessions, session_id, SessionMessage(message))
        except SessionNotFoundError:
            return PlainTextResponse(NO_TRANSPORT_MESSAGE, status_code=400)

        return PlainTextResponse("Accepted", status_code=202)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "sessions": len(app.state.sessions)}

    logger.info(f"MCP server app created with {len(registry.tools)} tools")
    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the MCP server with uvicorn until interrupted."""
    import uvicorn

    host = host or config.server_host
    port = port or config.server_port

    app = create_app()
    logger.info(f"Starting MCP server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=config.log_level.lower())
