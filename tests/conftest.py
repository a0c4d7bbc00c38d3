"""Test configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient

from chatrooms.core.state import AppState
from chatrooms.main import create_app
from chatrooms.services.auth_service import AccountStore
from chatrooms.services.broadcaster import BroadcastDispatcher
from chatrooms.services.client_session import ClientSession
from chatrooms.services.connection_manager import ConnectionManager
from chatrooms.services.room_manager import RoomManager


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self, fail_on_send=False):
        self.sent_messages = []
        self.fail_on_send = fail_on_send

    async def send_text(self, message):
        if self.fail_on_send:
            raise RuntimeError("Cannot call 'send' once a close message has been sent.")
        self.sent_messages.append(message)


# ----------------------------------------------------------------------------
# Setup
# ----------------------------------------------------------------------------

@pytest.fixture
def websocket_factory():
    return MockWebSocket


@pytest.fixture
def room_manager():
    return RoomManager()


@pytest.fixture
def connection_manager():
    return ConnectionManager()


@pytest.fixture
def dispatcher(connection_manager, room_manager):
    return BroadcastDispatcher(connection_manager, room_manager)


@pytest.fixture
def make_session(connection_manager, dispatcher):
    """Factory for sessions bound to the shared registries."""
    def _make(room_id, username="alice", websocket=None):
        return ClientSession(
            websocket=websocket or MockWebSocket(),
            room_id=room_id,
            username=username,
            connection_manager=connection_manager,
            dispatcher=dispatcher,
        )
    return _make


@pytest.fixture
def app_state():
    # Few PBKDF2 rounds keep the HTTP tests fast
    return AppState(account_store=AccountStore(iterations=1000))


@pytest.fixture
def client(app_state):
    with TestClient(create_app(app_state)) as test_client:
        yield test_client
