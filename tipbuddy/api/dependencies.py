"""Shared request dependencies: sessions, current user, services."""
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import Dict, Optional

from tipbuddy.database import get_db
from tipbuddy.models.user import User
from tipbuddy.services.auth_service import AuthService
from tipbuddy.services.demo_data_seeder import DemoDataSeeder


SESSION_COOKIE = "session_id"

# Session storage (in-memory, maps session ID to user ID)
sessions: Dict[str, str] = {}


def get_session_id(request: Request) -> Optional[str]:
    """
    Get session ID from cookie.

    Args:
        request: FastAPI request object

    Returns:
        Session ID if exists, None otherwise
    """
    return request.cookies.get(SESSION_COOKIE)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user.

    Args:
        request: FastAPI request object
        db: Database session

    Returns:
        User object

    Raises:
        HTTPException: If not authenticated
    """
    session_id = get_session_id(request)

    if not session_id or session_id not in sessions:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = AuthService(db).get_user_by_id(sessions[session_id])

    if not user:
        # Invalid session, remove it
        sessions.pop(session_id, None)
        raise HTTPException(status_code=401, detail="Not authenticated")

    return user


def get_demo_data_seeder(db: Session = Depends(get_db)) -> DemoDataSeeder:
    """Build the demo data seeder for the request's session."""
    return DemoDataSeeder(db)
