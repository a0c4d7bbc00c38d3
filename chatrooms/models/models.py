# chatrooms/models/models.py
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Set

class ChatMessage(BaseModel):
    """One broadcast message. Never mutated once the dispatcher builds it."""
    model_config = ConfigDict(frozen=True)

    room_id: UUID
    sender: str
    content: str

class Room(BaseModel):
    id: UUID
    name: str
    created_by: str
    participants: Set[str] = Field(default_factory=set)
    message_log: List[ChatMessage] = Field(default_factory=list)

class CreateRoomRequest(BaseModel):
    name: str
    creator: str

class AddParticipantRequest(BaseModel):
    room_id: UUID
    username: str

class UserRegistration(BaseModel):
    username: str
    password: str

class UserLogin(BaseModel):
    username: str
    password: str
