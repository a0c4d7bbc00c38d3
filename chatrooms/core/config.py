# chatrooms/core/config.py
import os
from typing import List
from dotenv import load_dotenv

class Settings:
    """
    Setup environment variables.
        - HOST / PORT where uvicorn binds the server
        - DEFAULT_USERNAME substituted when a WebSocket connects without a username
        - CORS_ALLOW_ORIGINS comma separated list of allowed origins ("*" for any)
        - NON_TEXT_REPLY the diagnostic sent back when a client sends a binary frame
        - PASSWORD_HASH_ITERATIONS PBKDF2 rounds used by the account store
        - LOG_LEVEL root logging level (DEBUG, INFO, WARNING, ...)
    """

    # Load environment variables from the .env file
    load_dotenv()

    APP_TITLE: str = os.getenv("APP_TITLE", "Chatrooms - Multi-room Chat")

    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8080"))

    DEFAULT_USERNAME: str = os.getenv("DEFAULT_USERNAME", "guest")
    NON_TEXT_REPLY: str = os.getenv("NON_TEXT_REPLY", "Received non-text message.")

    CORS_ALLOW_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    PASSWORD_HASH_ITERATIONS: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", "200000"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
