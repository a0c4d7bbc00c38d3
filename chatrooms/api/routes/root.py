# chatrooms/api/routes/root.py

from fastapi import APIRouter

from chatrooms.core.config import settings

router = APIRouter()


@router.get("/")
async def root():
    """
    Root endpoint - API information.

    Returns basic info about the API and its features.
    """
    return {
        "message": settings.APP_TITLE,
        "version": "1.0",
        "features": ["accounts", "room_creation", "participants", "realtime_broadcast", "room_history"],
        "endpoints": {
            "websocket": "/ws/?roomId=<uuid>&username=<name>",
            "register": "/register",
            "login": "/login",
            "create_room": "/create_room",
            "add_user": "/add_user",
            "list_rooms": "/list_rooms",
            "room": "/rooms/{room_id}",
            "health": "/health",
            "metrics": "/metrics",
        },
    }
