"""Tests for the demo data seeder."""
import logging
import random
import pytest
from datetime import date, datetime, time, timedelta
from hypothesis import given, strategies as st, settings
from sqlalchemy.orm import Session
from unittest.mock import MagicMock, call, patch

from tipbuddy.models.shift import Shift
from tipbuddy.models.user import User
from tipbuddy.services.auth_service import AuthService, AccountResult
from tipbuddy.services.demo_data_seeder import DemoDataSeeder, DEMO_USERNAME, DEMO_EMAIL
from tipbuddy.services.history_gap_analyzer import SeedingMode
from tests.conftest import get_test_db_session, make_time_zone_service


TODAY = date(2024, 1, 15)
DEMO_PASSWORD = "DemoPassword123!"


def make_seeder(db: Session, time_zone: str = "UTC", **kwargs) -> DemoDataSeeder:
    kwargs.setdefault("demo_password", DEMO_PASSWORD)
    return DemoDataSeeder(db, time_zone_service=make_time_zone_service(time_zone), **kwargs)


def create_demo_user(db: Session) -> User:
    user = User(username=DEMO_USERNAME, email=DEMO_EMAIL)
    assert AuthService(db).create_user(user, DEMO_PASSWORD).success
    return user


def add_shift(db: Session, user_id: str, start: datetime) -> Shift:
    shift = Shift(
        id=f"existing-{start.isoformat()}",
        user_id=user_id,
        date=start,
        credit_tips=100.0,
        cash_tips=10.0,
        tipout=5.0,
        hours_worked=6
    )
    db.add(shift)
    db.commit()
    return shift


def shifts_of(db: Session, user_id: str):
    return db.query(Shift).filter(Shift.user_id == user_id).order_by(Shift.date).all()


class TestSeedDemoData:
    """Tests for creating and refreshing the demo account."""

    def test_creates_demo_user_and_full_history(self, test_db: Session):
        seeder = make_seeder(test_db)

        result = seeder.seed_demo_data()

        user = AuthService(test_db).find_by_username(DEMO_USERNAME)
        assert user is not None
        assert user.email == DEMO_EMAIL
        assert user.first_name == "Demo"
        assert result.directive.mode == SeedingMode.FULL_SEED
        assert len(result.directive.dates) == 60
        assert result.directive.dates[0] == date(2023, 11, 17)
        assert result.directive.dates[-1] == TODAY

        stored = shifts_of(test_db, user.id)
        assert len(stored) == len(result.shifts)
        assert len(stored) > 0
        for shift in stored:
            assert date(2023, 11, 17) <= shift.date.date() <= TODAY

    def test_demo_user_can_log_in_with_configured_password(self, test_db: Session):
        seeder = make_seeder(test_db, demo_password="Another1!")

        seeder.seed_demo_data()

        auth_service = AuthService(test_db)
        assert auth_service.authenticate(DEMO_USERNAME, "Another1!") is not None
        assert auth_service.authenticate(DEMO_USERNAME, DEMO_PASSWORD) is None

    def test_second_run_same_day_writes_nothing(self, test_db: Session):
        """Seeding twice on the same local day adds no shifts the second time."""
        make_seeder(test_db).seed_demo_data()
        user = AuthService(test_db).find_by_username(DEMO_USERNAME)
        before = [(s.id, s.date) for s in shifts_of(test_db, user.id)]

        result = make_seeder(test_db).seed_demo_data()

        assert result.shifts == []
        assert [(s.id, s.date) for s in shifts_of(test_db, user.id)] == before

    def test_fills_three_day_gap(self, test_db: Session):
        user = create_demo_user(test_db)
        add_shift(test_db, user.id, datetime(2024, 1, 12, 14, 0))

        result = make_seeder(test_db).seed_demo_data()

        assert result.directive.mode == SeedingMode.FILL_GAP
        assert result.directive.dates == [date(2024, 1, 13), date(2024, 1, 14), date(2024, 1, 15)]
        for shift in result.shifts:
            assert shift.date.date() in result.directive.dates
        assert len(shifts_of(test_db, user.id)) == 1 + len(result.shifts)

    def test_stale_history_is_regenerated(self, test_db: Session):
        """A last shift 70 days ago is deleted and a fresh window generated."""
        user = create_demo_user(test_db)
        stale = add_shift(test_db, user.id, datetime(2023, 11, 6, 12, 0))
        stale_id = stale.id

        result = make_seeder(test_db).seed_demo_data()

        assert result.directive.mode == SeedingMode.REGENERATE_ALL
        assert result.directive.gap_days == 70
        assert len(result.directive.dates) == 60
        stored = shifts_of(test_db, user.id)
        assert stale_id not in {s.id for s in stored}
        assert len(stored) == len(result.shifts)

    def test_up_to_date_history_is_left_alone(self, test_db: Session):
        user = create_demo_user(test_db)
        add_shift(test_db, user.id, datetime(2024, 1, 15, 9, 0))

        shift_service = MagicMock()
        shift_service.get_shifts.return_value = shifts_of(test_db, user.id)
        seeder = make_seeder(test_db, shift_service=shift_service)

        result = seeder.seed_demo_data()

        assert result.directive.mode == SeedingMode.NO_OP
        assert result.shifts == []
        shift_service.add_shift.assert_not_called()
        shift_service.delete_shifts_for_user.assert_not_called()

    def test_gap_measured_in_local_days(self, test_db: Session):
        """A 03:00 UTC shift on Jan 15 is still Jan 14 in Los Angeles."""
        user = create_demo_user(test_db)
        add_shift(test_db, user.id, datetime(2024, 1, 15, 3, 0))

        result = make_seeder(test_db, time_zone="America/Los_Angeles").seed_demo_data()

        assert result.directive.most_recent_local_day == date(2024, 1, 14)
        assert result.directive.dates == [TODAY]

    def test_failed_user_creation_writes_nothing(self, test_db: Session, caplog):
        auth_service = MagicMock()
        auth_service.find_by_username.return_value = None
        auth_service.create_user.return_value = AccountResult.failed(
            "Passwords must have at least one digit ('0'-'9')."
        )
        shift_service = MagicMock()
        seeder = make_seeder(test_db, auth_service=auth_service, shift_service=shift_service)

        with caplog.at_level(logging.ERROR):
            result = seeder.seed_demo_data()

        assert result.directive is None
        assert result.shifts == []
        assert "Failed to create demo user" in caplog.text
        assert "at least one digit" in caplog.text
        shift_service.add_shift.assert_not_called()

    def test_generated_days_respect_shift_rules(self, test_db: Session):
        seeder = make_seeder(test_db, time_zone="America/Los_Angeles")

        result = seeder.seed_demo_data()

        by_day = {}
        for shift in result.shifts:
            by_day.setdefault(seeder.time_zone_service.local_date(shift.date), []).append(shift)

        for day, shifts in by_day.items():
            assert len(shifts) <= 2
            assert sum(s.hours_worked for s in shifts) <= 12
            if len(shifts) == 2:
                first, second = sorted(shifts, key=lambda s: s.date)
                assert second.date - (first.date + timedelta(hours=first.hours_worked)) >= timedelta(hours=1)


class TestFillHistory:
    """Tests for completing any user's history."""

    def test_fills_history_for_regular_user(self, test_db: Session):
        user = User(username="worker", email="worker@example.com")
        AuthService(test_db).create_user(user, "Worker1!")
        add_shift(test_db, user.id, datetime(2024, 1, 10, 12, 0))

        result = make_seeder(test_db).fill_history(user.id)

        assert result.directive.mode == SeedingMode.FILL_GAP
        assert result.directive.dates[0] == date(2024, 1, 11)
        assert all(s.user_id == user.id for s in result.shifts)

    def test_same_day_draws_same_shifts_for_same_user(self, test_db: Session):
        """Without an injected random source each user and day seed their own draws."""
        seeder = make_seeder(test_db)

        first = seeder.seed_shifts_for_dates("user-a", [TODAY - timedelta(days=i) for i in range(10)])
        first_timings = [(s.date, s.hours_worked, s.credit_tips) for s in first]
        seeder.shift_service.delete_shifts_for_user("user-a")

        second = seeder.seed_shifts_for_dates("user-a", [TODAY - timedelta(days=i) for i in range(10)])

        assert [(s.date, s.hours_worked, s.credit_tips) for s in second] == first_timings

    def test_each_date_draws_from_its_own_source(self, test_db: Session):
        rng = MagicMock(spec=random.Random)
        rng.random.return_value = 0.99
        seeder = make_seeder(test_db, seed=7)

        with patch.object(DemoDataSeeder, "_random_for", return_value=rng) as random_for:
            result = seeder.seed_shifts_for_dates("user-a", [TODAY, TODAY - timedelta(days=1)])

        assert result == []
        assert random_for.call_args_list == [
            call("user-a", TODAY - timedelta(days=1)),
            call("user-a", TODAY)
        ]

    def test_seed_gives_stable_but_different_draws(self, test_db: Session):
        seeder = make_seeder(test_db, seed=1)

        assert seeder._random_for("user-a", TODAY).random() == seeder._random_for("user-a", TODAY).random()
        assert seeder._random_for("user-a", TODAY).random() != make_seeder(test_db)._random_for("user-a", TODAY).random()


class TestSeedShiftsForDates:
    def test_empty_dates_log_and_return_nothing(self, test_db: Session, caplog):
        seeder = make_seeder(test_db)

        with caplog.at_level(logging.INFO):
            result = seeder.seed_shifts_for_dates("user-a", [])

        assert result == []
        assert "No dates to seed for user user-a" in caplog.text

    def test_dates_processed_oldest_first(self, test_db: Session):
        seeder = make_seeder(test_db)
        days = [TODAY - timedelta(days=i) for i in range(20)]

        result = seeder.seed_shifts_for_dates("user-a", days)

        assert [s.date for s in result] == sorted(s.date for s in result)


class TestResets:
    """Tests for resetting the demo account."""

    def test_reset_demo_user_recreates_account(self, test_db: Session):
        seeder = make_seeder(test_db)
        seeder.seed_demo_data()
        old_id = AuthService(test_db).find_by_username(DEMO_USERNAME).id

        result = seeder.reset_demo_user()

        new_user = AuthService(test_db).find_by_username(DEMO_USERNAME)
        assert new_user is not None
        assert new_user.id != old_id
        assert shifts_of(test_db, old_id) == []
        assert result.directive.mode == SeedingMode.FULL_SEED
        assert len(shifts_of(test_db, new_user.id)) == len(result.shifts)

    def test_reset_demo_user_without_account_creates_it(self, test_db: Session):
        result = make_seeder(test_db).reset_demo_user()

        assert AuthService(test_db).find_by_username(DEMO_USERNAME) is not None
        assert result.directive.mode == SeedingMode.FULL_SEED

    def test_reset_shifts_keeps_account(self, test_db: Session):
        seeder = make_seeder(test_db)
        seeder.seed_demo_data()
        user = AuthService(test_db).find_by_username(DEMO_USERNAME)
        add_shift(test_db, user.id, datetime(2024, 1, 15, 23, 0))

        result = seeder.reset_demo_user_shifts()

        assert AuthService(test_db).find_by_username(DEMO_USERNAME).id == user.id
        assert result.directive.mode == SeedingMode.FULL_SEED
        stored = shifts_of(test_db, user.id)
        assert "existing-2024-01-15T23:00:00" not in {s.id for s in stored}
        assert len(stored) == len(result.shifts)

    def test_reset_shifts_regenerates_same_history(self, test_db: Session):
        """Per-day seeding means a shift reset reproduces the same timings."""
        seeder = make_seeder(test_db)
        seeder.seed_demo_data()
        user = AuthService(test_db).find_by_username(DEMO_USERNAME)
        before = [(s.date, s.hours_worked) for s in shifts_of(test_db, user.id)]

        seeder.reset_demo_user_shifts()

        assert [(s.date, s.hours_worked) for s in shifts_of(test_db, user.id)] == before

    def test_reset_shifts_without_account(self, test_db: Session, caplog):
        with caplog.at_level(logging.WARNING):
            result = make_seeder(test_db).reset_demo_user_shifts()

        assert result.directive is None
        assert result.shifts == []
        assert "Demo user not found" in caplog.text
        assert test_db.query(Shift).count() == 0

    def test_reset_logs_failed_user_deletion(self, test_db: Session, caplog):
        demo_user = User(id="demo-id", username=DEMO_USERNAME)
        auth_service = MagicMock()
        auth_service.find_by_username.side_effect = [demo_user, demo_user]
        auth_service.delete_user.return_value = AccountResult.failed("database is locked")
        shift_service = MagicMock()
        shift_service.get_shifts.return_value = []
        shift_service.add_shift.side_effect = lambda shift: shift
        seeder = make_seeder(test_db, auth_service=auth_service, shift_service=shift_service)

        with caplog.at_level(logging.ERROR):
            seeder.reset_demo_user()

        assert "Failed to delete demo user: database is locked" in caplog.text
        shift_service.delete_shifts_for_user.assert_called_once_with("demo-id")


@pytest.mark.property
@settings(max_examples=25, deadline=None)
@given(days_ago=st.integers(min_value=-3, max_value=90))
def test_property_second_run_same_day_writes_nothing(days_ago):
    """
    Property: whatever the age of the last shift, a second run on the same local day adds nothing.
    """
    with get_test_db_session() as db:
        user = create_demo_user(db)
        add_shift(db, user.id, datetime.combine(TODAY - timedelta(days=days_ago), time(12)))

        make_seeder(db).seed_demo_data()
        count = db.query(Shift).count()

        result = make_seeder(db).seed_demo_data()

        assert result.shifts == []
        assert db.query(Shift).count() == count


@pytest.mark.property
@settings(max_examples=25, deadline=None)
@given(days_ago=st.integers(min_value=1, max_value=90), seed=st.integers(min_value=0, max_value=1000))
def test_property_seeded_second_run_same_day_writes_nothing(days_ago, seed):
    """
    Property: a fixed seed keeps the same-day guarantee, including for days that drew no shift.
    """
    with get_test_db_session() as db:
        user = create_demo_user(db)
        add_shift(db, user.id, datetime.combine(TODAY - timedelta(days=days_ago), time(12)))

        make_seeder(db, seed=seed).seed_demo_data()
        count = db.query(Shift).count()

        result = make_seeder(db, seed=seed).seed_demo_data()

        assert result.shifts == []
        assert db.query(Shift).count() == count
