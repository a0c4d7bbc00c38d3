# chatrooms/services/room_manager.py

from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict, List, Optional
from uuid import UUID

from chatrooms.core.exceptions import RoomNotFoundError
from chatrooms.models.models import ChatMessage, Room

logger = logging.getLogger(__name__)

# ============================================================================
# ROOM REGISTRY
# ============================================================================
class RoomManager:
    """
    Owns every room created during the process lifetime.

    Rooms live in memory only and are never deleted. Each room keeps its
    declared participant roster (people who may or may not be online) and
    its append-only message history.

    Every public method returns deep copies, so callers can never mutate
    the stored rooms behind the registry's lock.

    Attributes:
        rooms: Dictionary mapping room_id -> Room object

    Usage:
        room_manager = RoomManager()
        room = room_manager.create_room("general", "alice")
        room_manager.add_participant(room.id, "bob")
        all_rooms = room_manager.list_rooms()
    """

    def __init__(self) -> None:
        self.rooms: Dict[UUID, Room] = {}
        self._lock = threading.Lock()

    def create_room(self, name: str, creator: str) -> Room:
        """
        Create a new room with an empty roster and history.

        Args:
            name: Room display name (duplicates allowed)
            creator: Username of creator

        Returns:
            Room: Snapshot of the newly created room
        """
        room = Room(
            id=uuid.uuid4(),
            name=name,
            created_by=creator,
        )
        with self._lock:
            self.rooms[room.id] = room
            snapshot = room.model_copy(deep=True)
        logger.info("✓ Created room '%s' (%s) by %s", name, room.id, creator)
        return snapshot

    def add_participant(self, room_id: UUID, username: str) -> Room:
        """
        Add a username to the room's declared participants.

        Adding an existing participant is a no-op.

        Raises:
            RoomNotFoundError: if the room was never created
        """
        with self._lock:
            room = self.rooms.get(room_id)
            if room is None:
                raise RoomNotFoundError(room_id)
            room.participants.add(username)
            return room.model_copy(deep=True)

    def get_room(self, room_id: UUID) -> Optional[Room]:
        """
        Get a room by ID.

        Returns:
            Room snapshot if found, None otherwise
        """
        with self._lock:
            room = self.rooms.get(room_id)
            return room.model_copy(deep=True) if room else None

    def list_rooms(self) -> List[Room]:
        """Snapshot of all rooms, in creation order."""
        with self._lock:
            return [room.model_copy(deep=True) for room in self.rooms.values()]

    def append_message(self, room_id: UUID, message: ChatMessage) -> bool:
        """
        Append a message to the room's history.

        Unknown rooms are skipped without raising.

        Returns:
            True if the message was recorded, False if the room does not exist
        """
        with self._lock:
            room = self.rooms.get(room_id)
            if room is None:
                logger.debug("Dropped message for unknown room %s", room_id)
                return False
            room.message_log.append(message)
            return True

    def room_count(self) -> int:
        with self._lock:
            return len(self.rooms)
