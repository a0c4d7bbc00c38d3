# chatrooms/main.py

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatrooms.core.config import settings
from chatrooms.core.logging import setup_logging, get_logger
from chatrooms.core.state import AppState
from chatrooms.api.routes import root, health, metrics, rooms, auth
from chatrooms.api import websocket as websocket_module

# Configure logging first
setup_logging()
logger = get_logger(__name__)


def create_app(state: AppState | None = None) -> FastAPI:
    """Build the FastAPI app with its own registries."""
    app = FastAPI(title=settings.APP_TITLE)
    app.state.chat = state or AppState()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # REST routes
    app.include_router(root.router)
    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(auth.router)
    app.include_router(rooms.router)

    # WebSocket routes
    app.include_router(websocket_module.router)

    logger.info("🚀 Application ready - %s", settings.APP_TITLE)
    return app


app = create_app()


def main() -> None:
    import uvicorn
    uvicorn.run("chatrooms.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
