"""Shift routes, scoped to the logged-in user."""
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional

from tipbuddy.config import settings
from tipbuddy.database import get_db
from tipbuddy.models.user import User
from tipbuddy.services.shift_service import ShiftService
from tipbuddy.exceptions import ResourceNotFoundError
from tipbuddy.api.dependencies import get_current_user
from tipbuddy.api.schemas import ShiftRequest, UpdateShiftRequest, shift_to_dict


# Create router
router = APIRouter(prefix=f"{settings.api_prefix}/shifts", tags=["shifts"])


@router.get("")
async def get_shifts(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the user's shifts.

    Args:
        start_date: Optional inclusive lower bound
        end_date: Optional exclusive upper bound
    """
    shifts = ShiftService(db).get_shifts(user.id, start_date, end_date)
    return JSONResponse(content=[shift_to_dict(shift) for shift in shifts])


@router.get("/{shift_id}")
async def get_shift(
    shift_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get one of the user's shifts."""
    shift = ShiftService(db).get_shift(shift_id)

    if shift is None or shift.user_id != user.id:
        raise ResourceNotFoundError("shift", shift_id)

    return JSONResponse(content=shift_to_dict(shift))


@router.post("", status_code=201)
async def create_shift(
    body: ShiftRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record a new shift for the user."""
    shift = ShiftService(db).create_shift(
        user_id=user.id,
        date=body.date,
        credit_tips=body.credit_tips,
        cash_tips=body.cash_tips,
        tipout=body.tipout,
        hours_worked=body.hours_worked
    )

    return JSONResponse(
        status_code=201,
        content=shift_to_dict(shift),
        headers={"Location": f"{router.prefix}/{shift.id}"}
    )


@router.put("/{shift_id}", status_code=204)
async def update_shift(
    shift_id: str,
    body: UpdateShiftRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Replace the values of one of the user's shifts."""
    if shift_id != body.id:
        raise HTTPException(status_code=400, detail="Shift ID in path and body do not match")

    ShiftService(db).update_shift(
        shift_id,
        user.id,
        date=body.date,
        credit_tips=body.credit_tips,
        cash_tips=body.cash_tips,
        tipout=body.tipout,
        hours_worked=body.hours_worked
    )

    return Response(status_code=204)


@router.delete("/{shift_id}", status_code=204)
async def delete_shift(
    shift_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete one of the user's shifts."""
    ShiftService(db).delete_shift(shift_id, user.id)
    return Response(status_code=204)
