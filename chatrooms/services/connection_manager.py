# chatrooms/services/connection_manager.py

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Dict, List, Set
from uuid import UUID

if TYPE_CHECKING:
    from chatrooms.services.client_session import ClientSession

logger = logging.getLogger(__name__)

# ============================================================================
# SESSION REGISTRY
# ============================================================================

class ConnectionManager:
    """
    Tracks which live client sessions are attached to which room.

    Data Structures:
        rooms: Maps room_id -> Set of ClientSession handles attached to it
               Example: {UUID("..."): {session1, session2}}

    Sessions are compared by identity, so two connections from the same
    username are two distinct handles. A room with no attached sessions has
    no entry at all.

    Locking:
        All reads and writes of ``rooms`` happen under one asyncio.Lock, and
        the lock is never held across an ``await`` on the network. Fan-out
        works on the list returned by ``snapshot()`` after the lock is
        released, so attach/detach never wait on a slow recipient.
    """

    def __init__(self) -> None:
        # Map: room_id -> Set[ClientSession]
        self.rooms: Dict[UUID, Set["ClientSession"]] = {}
        self._lock = asyncio.Lock()

    async def attach(self, room_id: UUID, session: "ClientSession") -> None:
        """Register a session under a room, creating the room entry if needed."""
        async with self._lock:
            sessions = self.rooms.setdefault(room_id, set())
            sessions.add(session)
            member_count = len(sessions)

        logger.info("→ %s attached to room %s (%s online)", session.username, room_id, member_count)

    async def detach(self, room_id: UUID, session: "ClientSession") -> None:
        """
        Remove a session from a room.

        Safe to call for a session that is already gone, which covers a
        connection that closes twice.
        """
        async with self._lock:
            sessions = self.rooms.get(room_id)
            if sessions is None or session not in sessions:
                return
            sessions.discard(session)
            member_count = len(sessions)
            # Clean up empty rooms from memory
            if not sessions:
                del self.rooms[room_id]

        logger.info("✗ %s detached from room %s (%s online)", session.username, room_id, member_count)

    async def snapshot(self, room_id: UUID) -> List["ClientSession"]:
        """Copy of the sessions currently attached to a room (empty if none)."""
        async with self._lock:
            return list(self.rooms.get(room_id, ()))

    def connection_count(self) -> int:
        return sum(len(sessions) for sessions in self.rooms.values())

    def active_room_count(self) -> int:
        return len(self.rooms)

    def get_rooms_info(self) -> Dict[str, dict]:
        """
        Online member count for every room that has attached sessions.

        Used by the /metrics endpoint and for debugging.
        """
        return {
            str(room_id): {"member_count": len(sessions)}
            for room_id, sessions in list(self.rooms.items())
        }
