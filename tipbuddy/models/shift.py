"""Shift model for worked shifts and their tips."""
from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from tipbuddy.database import Base


class Shift(Base):
    """Shift model representing one worked shift.

    ``date`` is the UTC instant the shift started, stored without tzinfo.
    The local calendar day a shift belongs to is always derived from it
    through the time zone service.
    """

    __tablename__ = "shifts"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)
    credit_tips = Column(Float, nullable=False, default=0.0)
    cash_tips = Column(Float, nullable=False, default=0.0)
    tipout = Column(Float, nullable=False, default=0.0)
    hours_worked = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="shifts")

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, date={self.date}, user_id={self.user_id}, hours={self.hours_worked})>"

    def validate(self) -> None:
        """Validate shift data."""
        if not self.id:
            raise ValueError("Shift ID is required")
        if not self.user_id:
            raise ValueError("User ID is required")
        if not self.date:
            raise ValueError("Shift date is required")
        if not isinstance(self.date, datetime):
            raise ValueError("Shift date must be a datetime object")
        for field_name in ("credit_tips", "cash_tips", "tipout"):
            value = getattr(self, field_name)
            if value is not None and value < 0:
                raise ValueError(f"{field_name} must be non-negative")
        if self.hours_worked is not None and not 0 <= self.hours_worked <= 24:
            raise ValueError("Hours worked must be between 0 and 24")
