# chatrooms/api/routes/auth.py

from fastapi import APIRouter, Depends, HTTPException, status

from chatrooms.core.exceptions import UserAlreadyExistsError
from chatrooms.core.logging import get_logger
from chatrooms.core.state import AppState, get_state
from chatrooms.models.models import UserLogin, UserRegistration

logger = get_logger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/register")
def register_user(form: UserRegistration, state: AppState = Depends(get_state)):
    """
    Register a new account. 409 if the username is taken.

    Plain ``def``: the password hash must run in the threadpool, off the
    event loop.
    """
    try:
        state.account_store.register(form.username, form.password)
    except UserAlreadyExistsError:
        raise HTTPException(status.HTTP_409_CONFLICT, "User already exists")
    return {"status": "success", "message": "User registered successfully"}


@router.post("/login")
def login_user(form: UserLogin, state: AppState = Depends(get_state)):
    """Check credentials. 401 on unknown user or wrong password."""
    if not state.account_store.verify(form.username, form.password):
        logger.info("Failed login for %s", form.username)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")
    return {"status": "success", "message": "Login successful"}
