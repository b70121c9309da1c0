"""
Session bookkeeping for the SSE transport.

Every open ``GET /sse`` stream owns one ``Session``: the write end of the
stream its MCP server session reads client messages from. Messages posted to
``/messages?sessionId=...`` are routed to the matching session.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

import anyio
from anyio.streams.memory import MemoryObjectSendStream
from mcp.shared.message import SessionMessage

logger = logging.getLogger(__name__)

MESSAGES_PATH = "/messages"


class SessionNotFoundError(LookupError):
    """Raised when a message targets a session that is not open."""

    def __init__(self, session_id: Optional[str]):
        self.session_id = session_id
        super().__init__(f"No transport found for sessionId: {session_id}")


@dataclass
class Session:
    """One open event stream and the writer feeding its MCP server session."""

    session_id: str
    writer: "MemoryObjectSendStream[SessionMessage]"

    @property
    def endpoint(self) -> str:
        return f"{MESSAGES_PATH}?sessionId={self.session_id}"

    async def send(self, message: SessionMessage) -> None:
        await self.writer.send(message)


class SessionRegistry:
    """Maps session ids to open sessions. Only touched from the event loop."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def open(self, writer: "MemoryObjectSendStream[SessionMessage]") -> Session:
        session_id = uuid.uuid4().hex
        while session_id in self._sessions:
            session_id = uuid.uuid4().hex

        session = Session(session_id, writer)
        self._sessions[session_id] = session
        logger.info(f"Session {session_id} opened ({len(self._sessions)} active)")
        return session

    def lookup(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> None:
        """Forget a session. Closing an unknown id is a no-op."""
        if self._sessions.pop(session_id, None) is not None:
            logger.info(f"Session {session_id} closed ({len(self._sessions)} active)")

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions


async def route_message(sessions: SessionRegistry, session_id: Optional[str], message: SessionMessage) -> None:
    """
    Deliver a client message to its session's MCP server.

    The response, if any, is written by the server on the session's stream.

    Raises:
        SessionNotFoundError: If no open session has this id, or its stream
            closed before the message could be handed over
    """
    session = sessions.lookup(session_id)
    if session is None:
        logger.warning(f"Rejected message for unknown session {session_id}")
        raise SessionNotFoundError(session_id)

    try:
        await session.send(message)
    except (anyio.BrokenResourceError, anyio.ClosedResourceError):
        logger.info(f"Session {session_id} closed before its message was delivered")
        raise SessionNotFoundError(session_id) from None
