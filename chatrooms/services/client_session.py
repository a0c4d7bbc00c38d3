# chatrooms/services/client_session.py

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping
from uuid import UUID

from fastapi import WebSocket, WebSocketDisconnect

from chatrooms.core.config import settings
from chatrooms.core.exceptions import SessionStateError
from chatrooms.models.models import ChatMessage
from chatrooms.services.broadcaster import BroadcastDispatcher
from chatrooms.services.connection_manager import ConnectionManager

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    CONNECTING = "connecting"
    ATTACHED = "attached"
    CLOSED = "closed"


# ============================================================================
# CLIENT SESSION
# ============================================================================

class ClientSession:
    """
    One live WebSocket connection bound to a single room.

    Lifecycle:
        CONNECTING -> ATTACHED -> CLOSED

        - attach() is the only way into ATTACHED and may run once
        - close() is terminal; a closed session is never reused
        - close() detaches from the ConnectionManager before anything else,
          so the registry never keeps a handle for a dead connection

    The room and username are fixed for the whole lifetime of the session.
    The username is whatever the client presented; it is not checked
    against registered accounts.
    """

    def __init__(
        self,
        websocket: WebSocket,
        room_id: UUID,
        username: str,
        connection_manager: ConnectionManager,
        dispatcher: BroadcastDispatcher,
    ) -> None:
        self.websocket = websocket
        self.room_id = room_id
        self.username = username
        self.connection_manager = connection_manager
        self.dispatcher = dispatcher
        self.state = SessionState.CONNECTING

    def __repr__(self) -> str:
        return f"ClientSession(room_id={self.room_id}, username={self.username!r}, state={self.state.value})"

    async def attach(self) -> None:
        if self.state is not SessionState.CONNECTING:
            raise SessionStateError(f"Cannot attach a session in state {self.state.value}")
        await self.connection_manager.attach(self.room_id, self)
        self.state = SessionState.ATTACHED

    async def close(self) -> None:
        """Detach from the room and mark the session closed. Idempotent."""
        if self.state is SessionState.CLOSED:
            return
        await self.connection_manager.detach(self.room_id, self)
        self.state = SessionState.CLOSED

    async def handle_frame(self, frame: Mapping[str, Any]) -> None:
        """
        Handle one inbound ASGI ``websocket.receive`` frame.

        Text frames are broadcast to the room. Anything else gets a
        diagnostic reply on this connection only; the session stays attached.
        """
        if self.state is not SessionState.ATTACHED:
            raise SessionStateError(f"Cannot handle frames in state {self.state.value}")

        text = frame.get("text")
        if text is not None:
            await self.dispatcher.dispatch(self.room_id, self.username, text)
            return

        logger.warning("Non-text frame from %s in room %s", self.username, self.room_id)
        await self.websocket.send_text(settings.NON_TEXT_REPLY)

    async def deliver(self, message: ChatMessage) -> bool:
        """
        Write a broadcast message to this connection.

        Only the content goes on the wire. Returns False without sending
        when the session is already closed; transport errors propagate.
        """
        if self.state is SessionState.CLOSED:
            return False
        await self.websocket.send_text(message.content)
        return True

    async def run(self) -> None:
        """
        Serve the connection until the peer goes away.

        The websocket must already be accepted. Whatever ends the loop, the
        session is closed on the way out.
        """
        await self.attach()
        try:
            while True:
                frame = await self.websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    break
                await self.handle_frame(frame)
        except WebSocketDisconnect:
            pass
        except Exception as e:
            logger.error("WebSocket error for %s in room %s: %s", self.username, self.room_id, e)
        finally:
            await self.close()
