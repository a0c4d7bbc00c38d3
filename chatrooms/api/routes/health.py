# chatrooms/api/routes/health.py

from fastapi import APIRouter, Depends

from chatrooms.core.state import AppState, get_state

router = APIRouter()

@router.get("/health")
async def health(state: AppState = Depends(get_state)):
    """
    Health check endpoint.

    Returns current system status, connection counts, and room counts.

    Returns:
        dict: Status, connection count, room count, active room count
    """
    return {
        "status": "healthy",
        "connections": state.connection_manager.connection_count(),
        "rooms": state.room_manager.room_count(),
        "active_rooms_with_members": state.connection_manager.active_room_count(),
    }
