"""Unit tests for authentication service."""
import pytest
from hypothesis import given, strategies as st, settings
from sqlalchemy.orm import Session
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from tipbuddy.models.user import User
from tipbuddy.services.auth_service import AuthService, AccountResult, check_password_policy


class TestPasswordPolicy:
    """Test cases for the password policy."""

    def test_valid_password(self):
        assert check_password_policy("DemoPassword123!") == []

    @pytest.mark.parametrize("password,fragment", [
        ("Ab1!", "at least 6 characters"),
        ("Password!", "one digit"),
        ("PASSWORD1!", "one lowercase"),
        ("password1!", "one uppercase"),
        ("Password1", "non alphanumeric"),
    ])
    def test_single_violation(self, password, fragment):
        errors = check_password_policy(password)

        assert len(errors) == 1
        assert fragment in errors[0]

    def test_empty_password_violates_everything(self):
        assert len(check_password_policy("")) == 5
        assert len(check_password_policy(None)) == 5


class TestAuthService:
    """Test cases for AuthService."""

    def test_create_user(self, test_db: Session):
        auth_service = AuthService(test_db)
        user = User(username="alice", email="alice@example.com")

        result = auth_service.create_user(user, "Secret1!")

        assert result.success
        assert result.errors == []
        assert user.id is not None
        assert user.password_hash != "Secret1!"

        db_user = test_db.query(User).filter(User.username == "alice").first()
        assert db_user is not None
        assert db_user.id == user.id

    def test_create_user_keeps_given_id(self, test_db: Session):
        user = User(id="fixed-id", username="alice")

        AuthService(test_db).create_user(user, "Secret1!")

        assert user.id == "fixed-id"

    def test_create_user_duplicate_username(self, test_db: Session):
        auth_service = AuthService(test_db)
        auth_service.create_user(User(username="alice"), "Secret1!")

        result = auth_service.create_user(User(username="alice"), "Secret2!")

        assert not result.success
        assert result.errors == ["Username 'alice' is already taken."]
        assert test_db.query(User).count() == 1

    def test_create_user_weak_password(self, test_db: Session):
        result = AuthService(test_db).create_user(User(username="alice"), "weak")

        assert not result.success
        assert len(result.errors) > 1
        assert test_db.query(User).count() == 0

    def test_create_user_without_username(self, test_db: Session):
        result = AuthService(test_db).create_user(User(username=""), "Secret1!")

        assert result == AccountResult.failed("Username is required.")

    def test_create_user_database_error(self, test_db: Session):
        auth_service = AuthService(test_db)

        with patch.object(test_db, "commit", side_effect=OperationalError("INSERT", {}, Exception("locked"))):
            result = auth_service.create_user(User(username="alice"), "Secret1!")

        assert not result.success
        assert result.errors

    def test_find_by_username(self, test_db: Session):
        auth_service = AuthService(test_db)
        auth_service.create_user(User(username="alice"), "Secret1!")

        assert auth_service.find_by_username("alice").username == "alice"
        assert auth_service.find_by_username("bob") is None
        assert auth_service.find_by_username("") is None

    def test_get_user_by_id(self, test_db: Session):
        auth_service = AuthService(test_db)
        user = User(username="alice")
        auth_service.create_user(user, "Secret1!")

        assert auth_service.get_user_by_id(user.id).username == "alice"
        assert auth_service.get_user_by_id("missing") is None
        assert auth_service.get_user_by_id(None) is None

    def test_delete_user(self, test_db: Session):
        auth_service = AuthService(test_db)
        user = User(username="alice")
        auth_service.create_user(user, "Secret1!")

        result = auth_service.delete_user(user)

        assert result.success
        assert auth_service.find_by_username("alice") is None

    def test_authenticate(self, test_db: Session):
        auth_service = AuthService(test_db)
        auth_service.create_user(User(username="alice"), "Secret1!")

        assert auth_service.authenticate("alice", "Secret1!").username == "alice"
        assert auth_service.authenticate("alice", "Wrong1!") is None
        assert auth_service.authenticate("bob", "Secret1!") is None
        assert auth_service.authenticate("alice", "") is None


class TestPasswordHashing:
    """Test cases for password hashing."""

    def test_hash_has_salt_and_digest(self):
        hashed = AuthService.hash_password("Secret1!")

        salt, digest = hashed.split("$")
        assert len(salt) == 64
        assert len(digest) == 64

    def test_hashes_are_salted(self):
        assert AuthService.hash_password("Secret1!") != AuthService.hash_password("Secret1!")

    def test_hash_requires_password(self):
        with pytest.raises(ValueError):
            AuthService.hash_password("")

    def test_verify_rejects_malformed_hash(self):
        assert not AuthService.verify_password("Secret1!", "not-a-hash")
        assert not AuthService.verify_password("Secret1!", "")


@pytest.mark.property
@settings(max_examples=20, deadline=None)
@given(password=st.text(min_size=1, max_size=40, alphabet=st.characters(blacklist_categories=('Cs',))))
def test_property_password_verifies_only_itself(password):
    """
    Property: a hashed password verifies against itself and not against a changed one.
    """
    hashed = AuthService.hash_password(password)

    assert AuthService.verify_password(password, hashed)
    assert not AuthService.verify_password(password + "x", hashed)
