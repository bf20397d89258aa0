"""Account service for user registration, lookup and authentication."""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from dataclasses import dataclass, field
from typing import List, Optional
import hashlib
import logging
import secrets
import uuid

from tipbuddy.models.user import User
from tipbuddy.exceptions import DuplicateUsernameError, MissingFieldError


# Configure logging
logger = logging.getLogger(__name__)


PASSWORD_MIN_LENGTH = 6
PBKDF2_ITERATIONS = 100000


@dataclass
class AccountResult:
    """Outcome of an account operation that may fail on policy grounds."""
    success: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "AccountResult":
        return cls(success=True)

    @classmethod
    def failed(cls, *errors: str) -> "AccountResult":
        return cls(success=False, errors=list(errors))


def check_password_policy(password: str) -> List[str]:
    """
    Check a password against the account password policy.

    Args:
        password: Plain text password

    Returns:
        List of policy violations, empty when the password is acceptable
    """
    password = password or ""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Passwords must be at least {PASSWORD_MIN_LENGTH} characters.")
    if not any(c.isdigit() for c in password):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not any(c.islower() for c in password):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not any(c.isupper() for c in password):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")
    if all(c.isalnum() for c in password):
        errors.append("Passwords must have at least one non alphanumeric character.")
    return errors


class AuthService:
    """Service for handling account operations."""

    def __init__(self, db: Session):
        """
        Initialize authentication service.

        Args:
            db: Database session
        """
        self.db = db

    def find_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.

        Args:
            username: Username to look up

        Returns:
            User object if found, None otherwise
        """
        if not username:
            return None

        return self.db.query(User).filter(User.username == username).first()

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID, None if not found."""
        if not user_id:
            return None

        return self.db.query(User).filter(User.id == user_id).first()

    def create_user(self, user: User, password: str) -> AccountResult:
        """
        Create a new account with the given password.

        Args:
            user: Unsaved User; its ID is generated when missing
            password: Plain text password, checked against the policy

        Returns:
            AccountResult with the reasons when creation was refused
        """
        if not user.username:
            return AccountResult.failed(MissingFieldError("Username").message)

        if self.find_by_username(user.username):
            return AccountResult.failed(DuplicateUsernameError(user.username).message)

        policy_errors = check_password_policy(password)
        if policy_errors:
            return AccountResult.failed(*policy_errors)

        if not user.id:
            user.id = str(uuid.uuid4())
        user.password_hash = self.hash_password(password)
        user.validate()

        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating user {user.username}: {str(e)}")
            return AccountResult.failed(str(e))

        logger.info(f"Created user {user.username} (ID: {user.id})")
        return AccountResult.ok()

    def delete_user(self, user: User) -> AccountResult:
        """
        Delete an account and, through the cascade, its shifts.

        Args:
            user: User to delete

        Returns:
            AccountResult of the deletion
        """
        try:
            self.db.delete(user)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting user {user.id}: {str(e)}")
            return AccountResult.failed(str(e))

        logger.info(f"Deleted user {user.username} (ID: {user.id})")
        return AccountResult.ok()

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Authenticate a user by username and password.

        Args:
            username: Username
            password: Password (plain text)

        Returns:
            User object if authentication successful, None otherwise
        """
        if not username or not password:
            return None

        user = self.find_by_username(username)
        if not user:
            return None

        if not self.verify_password(password, user.password_hash):
            return None

        return user

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a password using PBKDF2-HMAC-SHA256.

        Args:
            password: Plain text password

        Returns:
            Hashed password in format: salt$hash
        """
        if not password:
            raise ValueError("Password is required")

        salt = secrets.token_hex(32)
        pwd_hash = hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            PBKDF2_ITERATIONS
        )

        return f"{salt}${pwd_hash.hex()}"

    @staticmethod
    def verify_password(password: str, hashed_password: str) -> bool:
        """
        Verify a password against a hashed password.

        Args:
            password: Plain text password to verify
            hashed_password: Hashed password in format: salt$hash

        Returns:
            True if password matches, False otherwise
        """
        if not password or not hashed_password:
            return False

        try:
            salt, stored_hash = hashed_password.split('$')
            pwd_hash = hashlib.pbkdf2_hmac(
                'sha256',
                password.encode('utf-8'),
                salt.encode('utf-8'),
                PBKDF2_ITERATIONS
            )
            return secrets.compare_digest(pwd_hash.hex(), stored_hash)
        except (ValueError, AttributeError):
            return False
