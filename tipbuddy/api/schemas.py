"""Request bodies and response formatting for the JSON API.

Shift payloads use camelCase keys; dates are sent as UTC ISO-8601 strings
with millisecond precision and a trailing ``Z``.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tipbuddy.models.shift import Shift
from tipbuddy.models.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LoginRequest(CamelModel):
    username: str
    password: str


class ShiftRequest(CamelModel):
    date: datetime
    credit_tips: float = Field(ge=0)
    cash_tips: float = Field(0.0, ge=0)
    tipout: float = Field(0.0, ge=0)
    hours_worked: Optional[int] = Field(None, ge=0, le=24)


class UpdateShiftRequest(ShiftRequest):
    id: str


def format_utc(value: datetime) -> str:
    """Format a stored UTC datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return f"{value.strftime('%Y-%m-%dT%H:%M:%S')}.{value.microsecond // 1000:03d}Z"


def shift_to_dict(shift: Shift) -> Dict[str, Any]:
    """Serialize a shift for API responses."""
    return {
        "id": shift.id,
        "date": format_utc(shift.date),
        "creditTips": shift.credit_tips,
        "cashTips": shift.cash_tips,
        "tipout": shift.tipout,
        "hoursWorked": shift.hours_worked
    }


def user_to_dict(user: User) -> Dict[str, Any]:
    """Serialize the current user for the ``me`` endpoint."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name
    }
