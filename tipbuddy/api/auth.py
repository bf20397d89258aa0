"""Account routes: register, login, logout and the current user."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import logging
import secrets

from tipbuddy.config import settings
from tipbuddy.database import get_db
from tipbuddy.models.user import User
from tipbuddy.services.auth_service import AuthService
from tipbuddy.services.demo_data_seeder import DEMO_USERNAME, DemoDataSeeder
from tipbuddy.api.dependencies import (
    SESSION_COOKIE,
    get_current_user,
    get_demo_data_seeder,
    get_session_id,
    sessions
)
from tipbuddy.api.schemas import LoginRequest, RegisterRequest, user_to_dict


# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix=f"{settings.api_prefix}/auth", tags=["auth"])


@router.post("/register")
async def register(
    body: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new account.

    Returns:
        200 on success, 400 with the policy or duplicate errors otherwise
    """
    user = User(
        username=body.username,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name
    )
    result = AuthService(db).create_user(user, body.password)

    if not result.success:
        return JSONResponse(status_code=400, content={"errors": result.errors})

    return JSONResponse(content={"message": "Registration successful"})


@router.post("/login")
async def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    seeder: DemoDataSeeder = Depends(get_demo_data_seeder)
):
    """
    Log a user in and set the session cookie.

    Logging in as the demo user first tops up its history to today.

    Returns:
        200 with the session cookie on success, 401 otherwise
    """
    user = AuthService(db).authenticate(body.username, body.password)

    if not user:
        return JSONResponse(status_code=401, content={"message": "Invalid username or password"})

    if user.username == DEMO_USERNAME:
        try:
            seeder.fill_history(user.id)
        except Exception as e:
            logger.error(f"Failed to refresh demo data on login: {str(e)}", exc_info=True)

    session_id = secrets.token_urlsafe(32)
    sessions[session_id] = user.id

    response = JSONResponse(content={"message": "Login successful"})
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_id,
        httponly=settings.session_cookie_httponly,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        max_age=settings.session_max_age
    )

    return response


@router.post("/logout")
async def logout(request: Request):
    """Log the current session out."""
    session_id = get_session_id(request)

    if session_id:
        sessions.pop(session_id, None)

    response = JSONResponse(content={"message": "Logged out successfully."})
    response.delete_cookie(SESSION_COOKIE)

    return response


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    """Get the logged-in user."""
    return JSONResponse(content=user_to_dict(user))
