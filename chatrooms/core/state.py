# chatrooms/core/state.py
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Request, WebSocket

from chatrooms.services.auth_service import AccountStore
from chatrooms.services.broadcaster import BroadcastDispatcher
from chatrooms.services.connection_manager import ConnectionManager
from chatrooms.services.room_manager import RoomManager


class AppState:
    """
    App state shared by every request and connection handler.

    One instance is created per application (see ``create_app``) and stored
    on ``app.state.chat``; handlers reach it through ``get_state`` /
    ``get_ws_state`` instead of module globals.
    """

    def __init__(self, account_store: AccountStore | None = None) -> None:
        self.room_manager = RoomManager()
        self.connection_manager = ConnectionManager()
        self.dispatcher = BroadcastDispatcher(
            connection_manager=self.connection_manager,
            room_manager=self.room_manager,
        )
        self.account_store = account_store or AccountStore()

        # Metrics
        self.app_start_time: datetime = datetime.now(timezone.utc)


def get_state(request: Request) -> AppState:
    """FastAPI dependency for HTTP routes."""
    return request.app.state.chat


def get_ws_state(websocket: WebSocket) -> AppState:
    """FastAPI dependency for WebSocket routes."""
    return websocket.app.state.chat
