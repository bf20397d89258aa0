"""Database models package."""
from tipbuddy.models.user import User
from tipbuddy.models.shift import Shift

__all__ = [
    "User",
    "Shift",
]
