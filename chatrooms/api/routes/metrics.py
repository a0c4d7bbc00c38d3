# chatrooms/api/routes/metrics.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from chatrooms.core.state import AppState, get_state

router = APIRouter()

@router.get("/metrics")
async def get_metrics(state: AppState = Depends(get_state)):
    """
    Traffic and capacity metrics.

    Example Response:
        {
            "total_messages": 1200,
            "uptime_hours": 3.5,
            "messages_per_second": 0.1,
            "daily_messages_projected": 8228,
            "concurrent_connections": 42,
            "total_rooms": 7,
            "active_rooms_with_members": 3,
            "rooms": {"<room-id>": {"member_count": 12}}
        }
    """
    uptime_seconds = (datetime.now(timezone.utc) - state.app_start_time).total_seconds()
    total_messages = state.dispatcher.messages_dispatched

    if uptime_seconds > 0:
        messages_per_second = total_messages / uptime_seconds
        daily_messages = int(messages_per_second * 86400)
    else:
        messages_per_second = 0
        daily_messages = 0

    return {
        # Statistics
        "total_messages": total_messages,
        "uptime_hours": round(uptime_seconds / 3600, 2) if uptime_seconds > 0 else 0,
        "messages_per_second": round(messages_per_second, 2),
        "daily_messages_projected": daily_messages,

        # Capacity
        "concurrent_connections": state.connection_manager.connection_count(),
        "total_rooms": state.room_manager.room_count(),
        "active_rooms_with_members": state.connection_manager.active_room_count(),
        "rooms": state.connection_manager.get_rooms_info(),
    }
