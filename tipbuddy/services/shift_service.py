"""Shift persistence service."""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import datetime, timezone
import logging
import uuid

from tipbuddy.models.shift import Shift
from tipbuddy.exceptions import InvalidDateRangeError, InvalidRangeError, MissingFieldError, ResourceNotFoundError


# Configure logging
logger = logging.getLogger(__name__)


UPDATABLE_FIELDS = ("date", "credit_tips", "cash_tips", "tipout", "hours_worked")


def to_naive_utc(value: datetime) -> datetime:
    """Normalize a datetime to the naive UTC form shifts are stored in."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ShiftService:
    """Service for storing and querying shifts."""

    def __init__(self, db: Session):
        """
        Initialize shift service.

        Args:
            db: Database session
        """
        self.db = db

    def get_shifts(
        self,
        user_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> List[Shift]:
        """
        Get a user's shifts, optionally within a date range.

        Args:
            user_id: Owner of the shifts
            start_date: Optional start, shifts on or after it are included
            end_date: Optional end, shifts strictly before it are included

        Returns:
            List of Shift objects ordered by date

        Raises:
            InvalidDateRangeError: If start_date is after end_date
        """
        if start_date is not None:
            start_date = to_naive_utc(start_date)
        if end_date is not None:
            end_date = to_naive_utc(end_date)

        if start_date is not None and end_date is not None and start_date > end_date:
            raise InvalidDateRangeError(start_date, end_date)

        query = self.db.query(Shift).filter(Shift.user_id == user_id)

        if start_date is not None:
            query = query.filter(Shift.date >= start_date)

        if end_date is not None:
            query = query.filter(Shift.date < end_date)

        return query.order_by(Shift.date.asc()).all()

    def get_shift(self, shift_id: str) -> Optional[Shift]:
        """Get a shift by ID, None if it does not exist."""
        if not shift_id:
            return None
        return self.db.query(Shift).filter(Shift.id == shift_id).first()

    def exists(self, shift_id: str) -> bool:
        """Check whether a shift exists."""
        return self.get_shift(shift_id) is not None

    def add_shift(self, shift: Shift) -> Shift:
        """
        Persist a new shift.

        Args:
            shift: Unsaved Shift object

        Returns:
            The saved and refreshed Shift
        """
        shift.date = to_naive_utc(shift.date)
        shift.validate()

        try:
            self.db.add(shift)
            self.db.commit()
            self.db.refresh(shift)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving shift {shift.id}: {str(e)}")
            raise

        return shift

    def create_shift(
        self,
        user_id: str,
        date: datetime,
        credit_tips: float,
        cash_tips: float = 0.0,
        tipout: float = 0.0,
        hours_worked: Optional[int] = None
    ) -> Shift:
        """
        Create a shift from individual values.

        Raises:
            MissingFieldError: If no date is given
            InvalidRangeError: If an amount is negative or hours are out of range
        """
        if date is None:
            raise MissingFieldError("date")

        self._validate_amounts(credit_tips=credit_tips, cash_tips=cash_tips, tipout=tipout)
        self._validate_hours(hours_worked)

        shift = Shift(
            id=str(uuid.uuid4()),
            user_id=user_id,
            date=date,
            credit_tips=credit_tips,
            cash_tips=cash_tips,
            tipout=tipout,
            hours_worked=hours_worked,
            created_at=datetime.utcnow()
        )
        return self.add_shift(shift)

    def update_shift(self, shift_id: str, user_id: str, **fields) -> Shift:
        """
        Update fields of a user's shift.

        Args:
            shift_id: ID of the shift
            user_id: Owner the shift must belong to
            **fields: Any of date, credit_tips, cash_tips, tipout, hours_worked

        Returns:
            The updated Shift

        Raises:
            ResourceNotFoundError: If the shift does not exist or belongs to someone else
            InvalidRangeError: If an amount is negative or hours are out of range
        """
        shift = self._get_owned_shift(shift_id, user_id)

        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update shift fields: {', '.join(sorted(unknown))}")

        self._validate_amounts(**{k: v for k, v in fields.items() if k in ("credit_tips", "cash_tips", "tipout")})
        if "hours_worked" in fields:
            self._validate_hours(fields["hours_worked"])

        for name, value in fields.items():
            if name == "date":
                value = to_naive_utc(value)
            setattr(shift, name, value)

        try:
            self.db.commit()
            self.db.refresh(shift)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return shift

    def delete_shift(self, shift_id: str, user_id: str) -> None:
        """
        Delete one of a user's shifts.

        Raises:
            ResourceNotFoundError: If the shift does not exist or belongs to someone else
        """
        shift = self._get_owned_shift(shift_id, user_id)

        try:
            self.db.delete(shift)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def delete_shifts_for_user(self, user_id: str) -> int:
        """
        Delete every shift of a user in a single statement.

        Args:
            user_id: Owner of the shifts

        Returns:
            Number of deleted shifts
        """
        try:
            deleted = self.db.query(Shift).filter(
                Shift.user_id == user_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting shifts for user {user_id}: {str(e)}")
            raise

        logger.info(f"Deleted {deleted} shifts for user {user_id}")
        return deleted

    def _get_owned_shift(self, shift_id: str, user_id: str) -> Shift:
        shift = self.get_shift(shift_id)
        if shift is None or shift.user_id != user_id:
            raise ResourceNotFoundError("shift", shift_id)
        return shift

    @staticmethod
    def _validate_amounts(**amounts) -> None:
        for name, value in amounts.items():
            if value is not None and value < 0:
                raise InvalidRangeError(name, value, 0)

    @staticmethod
    def _validate_hours(hours_worked: Optional[int]) -> None:
        if hours_worked is not None and not 0 <= hours_worked <= 24:
            raise InvalidRangeError("hours_worked", hours_worked, 0, 24)
