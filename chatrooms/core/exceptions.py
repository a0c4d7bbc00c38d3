# chatrooms/core/exceptions.py

from __future__ import annotations


class ChatError(Exception):
    """Base class for errors raised by the chat services."""
    pass


class RoomNotFoundError(ChatError):
    """Raised when a room id does not belong to any created room."""
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room not found: {room_id}")


class InvalidRoomIdError(ChatError):
    """Raised when a connection request carries a missing or unparseable room id."""
    def __init__(self, raw_value: str | None):
        self.raw_value = raw_value
        super().__init__(f"Invalid roomId: {raw_value!r}")


class SessionStateError(ChatError):
    """Raised on an illegal client session transition (e.g. attaching twice)."""
    pass


class UserAlreadyExistsError(ChatError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User already exists: {username}")
