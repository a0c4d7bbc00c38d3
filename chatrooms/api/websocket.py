# chatrooms/api/websocket.py

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, status

from chatrooms.core.config import settings
from chatrooms.core.exceptions import InvalidRoomIdError
from chatrooms.core.state import AppState, get_ws_state
from chatrooms.services.client_session import ClientSession

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_room_id(raw_value: Optional[str]) -> UUID:
    """
    Parse the ``roomId`` query parameter.

    Accepted forms: simple (32 hex digits), hyphenated, braced
    ``{...}`` and ``urn:uuid:...``. Hyphens anywhere else are rejected.

    Raises:
        InvalidRoomIdError: if it is missing or not a UUID
    """
    if not raw_value:
        raise InvalidRoomIdError(raw_value)
    try:
        parsed = UUID(raw_value)
    except ValueError:
        raise InvalidRoomIdError(raw_value) from None

    hyphenated = str(parsed)
    accepted_forms = (parsed.hex, hyphenated, "{%s}" % hyphenated, "urn:uuid:" + hyphenated)
    if raw_value.lower() not in accepted_forms:
        raise InvalidRoomIdError(raw_value)
    return parsed

# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@router.websocket("/ws/")
async def websocket_endpoint(
    websocket: WebSocket,
    room_id: Optional[str] = Query(None, alias="roomId"),
    username: Optional[str] = Query(None),
    state: AppState = Depends(get_ws_state),
):
    """
    WebSocket endpoint for real-time chat in a single room.

    Protocol:
    =========

    Connect:
        /ws/?roomId=<uuid>&username=<name>

        - roomId is required and must be a UUID; otherwise the handshake is
          refused (close code 1008) and no session is created
        - username is optional and defaults to DEFAULT_USERNAME

    Client -> Server:
        Any text frame is a chat message for the room.
        A binary frame is answered with NON_TEXT_REPLY and otherwise ignored.

    Server -> Client:
        The raw content of every message broadcast in the room, including
        the client's own messages.

    Lifecycle:
    ==========
    1. Room id parsed, connection accepted
    2. Session attached to the room
    3. Frames handled until the client disconnects
    4. Session detached from the room
    """
    try:
        parsed_room_id = parse_room_id(room_id)
    except InvalidRoomIdError as e:
        logger.warning("Rejected WebSocket connection: %s", e)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Invalid roomId")
        return

    await websocket.accept()

    session = ClientSession(
        websocket=websocket,
        room_id=parsed_room_id,
        username=username if username is not None else settings.DEFAULT_USERNAME,
        connection_manager=state.connection_manager,
        dispatcher=state.dispatcher,
    )
    await session.run()
