# chatrooms/services/broadcaster.py

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional
from uuid import UUID

from chatrooms.models.models import ChatMessage
from chatrooms.services.connection_manager import ConnectionManager
from chatrooms.services.room_manager import RoomManager

logger = logging.getLogger(__name__)

# ============================================================================
# BROADCAST DISPATCHER
# ============================================================================

class BroadcastDispatcher:
    """
    Fans one inbound text frame out to every session in the room.

    Flow (once per inbound text frame):
        1. Snapshot the room's attached sessions (registry lock released afterwards)
        2. Build one immutable ChatMessage
        3. Deliver it to every session in the snapshot, sender included
        4. Append it to the room's history

    Steps 1-4 run under a per-room send lock, so two messages for the same
    room never overtake each other: every recipient sees them in the order
    they are recorded in history. The send lock is separate from the
    ConnectionManager lock, so attach/detach never wait on a fan-out, and
    rooms never wait on each other.

    A recipient whose connection is already gone does not stop the loop:
    the failure is logged and the next recipient is served. Delivery and
    history are not transactional; a message that was delivered stays
    delivered even if the history append is skipped.
    """

    def __init__(self, connection_manager: ConnectionManager, room_manager: RoomManager) -> None:
        self.connection_manager = connection_manager
        self.room_manager = room_manager
        # Map: room_id -> lock serializing fan-out in that room
        self._send_locks: Dict[UUID, asyncio.Lock] = {}
        # Metrics
        self.messages_dispatched: int = 0

    def _send_lock(self, room_id: UUID) -> asyncio.Lock:
        return self._send_locks.setdefault(room_id, asyncio.Lock())

    async def dispatch(self, room_id: UUID, sender: str, content: str) -> Optional[ChatMessage]:
        """
        Broadcast ``content`` from ``sender`` to room ``room_id``.

        Returns:
            The ChatMessage that was broadcast, or None when the room had no
            attached sessions (nothing sent, nothing recorded).
        """
        async with self._send_lock(room_id):
            sessions = await self.connection_manager.snapshot(room_id)
            if not sessions:
                logger.info("[routing] Skipped broadcast: room=%s has 0 sessions", room_id)
                return None

            message = ChatMessage(room_id=room_id, sender=sender, content=content)

            logger.info("📨 Broadcasting to room %s: %d clients", room_id, len(sessions))

            for session in sessions:
                try:
                    await session.deliver(message)
                except Exception as e:
                    logger.warning("Delivery to %s in room %s failed: %s", session.username, room_id, e)

            self.room_manager.append_message(room_id, message)
            self.messages_dispatched += 1
            return message
