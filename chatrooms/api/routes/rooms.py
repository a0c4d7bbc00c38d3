# chatrooms/api/routes/rooms.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from chatrooms.core.exceptions import RoomNotFoundError
from chatrooms.core.state import AppState, get_state
from chatrooms.models.models import AddParticipantRequest, CreateRoomRequest, Room

router = APIRouter()

# ============================================================================
# ROOM ENDPOINTS
# ============================================================================

@router.get("/list_rooms", response_model=List[Room])
async def list_rooms(state: AppState = Depends(get_state)):
    """
    List all rooms, with their participants and message history.

    Returns:
        List[Room]: Every room created since startup
    """
    return state.room_manager.list_rooms()

@router.post("/create_room", response_model=Room)
async def create_room(request: CreateRoomRequest, state: AppState = Depends(get_state)):
    """
    Create a new chatroom.

    Room names are not required to be unique; every room gets a fresh id.

    Args:
        request: CreateRoomRequest with name and creator

    Returns:
        Room: The newly created room
    """
    return state.room_manager.create_room(name=request.name, creator=request.creator)

@router.post("/add_user", response_model=Room)
async def add_participant(request: AddParticipantRequest, state: AppState = Depends(get_state)):
    """
    Add a user to a room's participant list.

    Adding a user who is already a participant changes nothing.

    Raises:
        HTTPException: 404 if room not found
    """
    try:
        return state.room_manager.add_participant(request.room_id, request.username)
    except RoomNotFoundError:
        raise HTTPException(status_code=404, detail="Room not found")

@router.get("/rooms/{room_id}", response_model=Room)
async def get_room(room_id: UUID, state: AppState = Depends(get_state)):
    """
    Get details of a specific room, including its message history.

    Raises:
        HTTPException: 404 if room not found
    """
    room = state.room_manager.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room
