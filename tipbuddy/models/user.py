"""User model for account holders."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from tipbuddy.database import Base


class User(Base):
    """User model representing a tip-tracking account."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    shifts = relationship("Shift", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"

    def validate(self) -> None:
        """Validate user data."""
        if not self.id:
            raise ValueError("User ID is required")
        if not self.username:
            raise ValueError("Username is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")
