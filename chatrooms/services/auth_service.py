"""
Account store - username/password registration and login.

Features:
- PBKDF2-HMAC-SHA256 password hashing with a per-user random salt
- Constant-time digest comparison
- In-memory only (accounts are lost on restart)

Accounts are independent of chat sessions: a WebSocket username is never
checked against this store.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import threading
from dataclasses import dataclass
from typing import Dict

from chatrooms.core.config import settings
from chatrooms.core.exceptions import UserAlreadyExistsError
from chatrooms.core.logging import get_logger

logger = get_logger(__name__)

SALT_BYTES = 16


@dataclass(frozen=True)
class StoredCredential:
    salt: bytes
    digest: bytes


def hash_password(password: str, salt: bytes, iterations: int | None = None) -> bytes:
    """PBKDF2-HMAC-SHA256 password hash."""
    return hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations or settings.PASSWORD_HASH_ITERATIONS,
    )


class AccountStore:
    def __init__(self, iterations: int | None = None) -> None:
        self.iterations = iterations or settings.PASSWORD_HASH_ITERATIONS
        self._accounts: Dict[str, StoredCredential] = {}
        self._lock = threading.Lock()

    def register(self, username: str, password: str) -> None:
        """
        Create an account.

        Raises:
            UserAlreadyExistsError: if the username is taken
        """
        salt = secrets.token_bytes(SALT_BYTES)
        credential = StoredCredential(salt=salt, digest=hash_password(password, salt, self.iterations))

        with self._lock:
            if username in self._accounts:
                raise UserAlreadyExistsError(username)
            self._accounts[username] = credential

        logger.info("User registered: %s", username)

    def verify(self, username: str, password: str) -> bool:
        """Check a username/password pair. Unknown users simply fail."""
        with self._lock:
            credential = self._accounts.get(username)
        if credential is None:
            return False
        candidate = hash_password(password, credential.salt, self.iterations)
        return hmac.compare_digest(candidate, credential.digest)

    def __contains__(self, username: str) -> bool:
        with self._lock:
            return username in self._accounts

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
