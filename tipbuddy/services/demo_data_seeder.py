"""Demo data seeding service.

Keeps the demo account's work history current: on every run the existing
history is compared with today's local date and only the missing days are
generated. See HistoryGapAnalyzer for how the seeding mode is chosen.

Seeding for the same user must not run concurrently; two runs could both see
the same gap and write it twice. Callers serialize it per user.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
import logging
import random

from tipbuddy.config import settings
from tipbuddy.models.shift import Shift
from tipbuddy.models.user import User
from tipbuddy.services.auth_service import AuthService
from tipbuddy.services.history_gap_analyzer import HistoryGapAnalyzer, SeedingDirective, SeedingMode
from tipbuddy.services.shift_generator import ShiftGenerator
from tipbuddy.services.shift_service import ShiftService
from tipbuddy.services.time_zone_service import TimeZoneService


# Configure logging
logger = logging.getLogger(__name__)


DEMO_USERNAME = "demouser"
DEMO_EMAIL = "demo@example.com"


@dataclass
class SeedingResult:
    """What a seeding run decided and the shifts it persisted."""
    directive: Optional[SeedingDirective] = None
    shifts: List[Shift] = field(default_factory=list)


class DemoDataSeeder:
    """Service for creating, refreshing and resetting the demo account's data."""

    def __init__(
        self,
        db: Session,
        time_zone_service: Optional[TimeZoneService] = None,
        seed: Optional[int] = None,
        auth_service: Optional[AuthService] = None,
        shift_service: Optional[ShiftService] = None,
        demo_password: Optional[str] = None
    ):
        """
        Initialize demo data seeder.

        Args:
            db: Database session
            time_zone_service: Local-day conversions and today's date
            seed: Optional extra seed; every date still gets its own
                ``random.Random`` keyed on the user ID and the date, so a
                different seed gives a different but equally stable history
            auth_service: Account directory, built from db when omitted
            shift_service: Shift repository, built from db when omitted
            demo_password: Demo account password, from settings when omitted
        """
        self.db = db
        self.time_zone_service = time_zone_service or TimeZoneService(settings.demo_data_timezone)
        self.seed = seed
        self.auth_service = auth_service or AuthService(db)
        self.shift_service = shift_service or ShiftService(db)
        self.demo_password = demo_password or settings.demo_user_password
        self.analyzer = HistoryGapAnalyzer(self.time_zone_service)

    def seed_demo_data(self) -> SeedingResult:
        """
        Make sure the demo account exists and its history reaches today.

        Creates the account when missing. When creation fails the error is
        logged and no shifts are written.

        Returns:
            SeedingResult; its directive is None when the account could not be created
        """
        logger.info("Starting demo data seeding")

        demo_user = self.auth_service.find_by_username(DEMO_USERNAME)
        if demo_user is None:
            demo_user = self._create_demo_user()
            if demo_user is None:
                return SeedingResult()

        return self.fill_history(demo_user.id)

    def fill_history(self, user_id: str) -> SeedingResult:
        """
        Generate whatever history a user is missing up to today.

        Args:
            user_id: ID of the user whose history to complete

        Returns:
            SeedingResult with the directive that was executed
        """
        today = self.time_zone_service.current_local_date()
        history = self.shift_service.get_shifts(user_id)
        directive = self.analyzer.analyze(history, today)

        logger.info(
            f"Seeding directive for user {user_id}: {directive.mode.value} "
            f"(today={today}, most recent local day={directive.most_recent_local_day}, "
            f"gap={directive.gap_days}, dates={len(directive.dates)})"
        )

        return self._execute(user_id, directive)

    def reset_demo_user(self) -> SeedingResult:
        """
        Delete the demo account with all its shifts and create it again.

        Returns:
            SeedingResult of the recreation
        """
        demo_user = self.auth_service.find_by_username(DEMO_USERNAME)
        if demo_user is not None:
            self.shift_service.delete_shifts_for_user(demo_user.id)
            result = self.auth_service.delete_user(demo_user)
            if not result.success:
                logger.error(f"Failed to delete demo user: {'; '.join(result.errors)}")

        return self.seed_demo_data()

    def reset_demo_user_shifts(self) -> SeedingResult:
        """
        Replace the demo account's shifts with a freshly generated full history.

        Does nothing when the demo account does not exist.

        Returns:
            SeedingResult; its directive is None when there was no demo account
        """
        demo_user = self.auth_service.find_by_username(DEMO_USERNAME)
        if demo_user is None:
            logger.warning("Demo user not found, no shifts to reset")
            return SeedingResult()

        self.shift_service.delete_shifts_for_user(demo_user.id)

        today = self.time_zone_service.current_local_date()
        directive = SeedingDirective(SeedingMode.FULL_SEED, self.analyzer.full_window(today))
        return self._execute(demo_user.id, directive)

    def seed_shifts_for_dates(self, user_id: str, dates: List[date]) -> List[Shift]:
        """
        Generate and persist shifts for the given local dates.

        Dates are processed oldest first and every shift is saved before the
        next one is generated.

        Args:
            user_id: Owner of the new shifts
            dates: Local calendar dates to consider

        Returns:
            List of saved Shift objects
        """
        if not dates:
            logger.info(f"No dates to seed for user {user_id}")
            return []

        generator = ShiftGenerator(self.time_zone_service)
        ordered = sorted(dates)

        added = []
        for day in ordered:
            for shift in generator.generate_for_date(user_id, day, self._random_for(user_id, day)):
                added.append(self.shift_service.add_shift(shift))

        logger.info(
            f"Seeded {len(added)} shifts over {len(ordered)} dates "
            f"({ordered[0]} to {ordered[-1]}) for user {user_id}"
        )
        return added

    def _random_for(self, user_id: str, day: date) -> random.Random:
        # Same user and day always draw the same shifts
        if self.seed is not None:
            return random.Random(f"{self.seed}:{user_id}:{day.isoformat()}")
        return random.Random(f"{user_id}:{day.isoformat()}")

    def _execute(self, user_id: str, directive: SeedingDirective) -> SeedingResult:
        if directive.deletes_existing:
            logger.info(
                f"Last shift for user {user_id} is {directive.gap_days} days old, "
                f"beyond the {self.analyzer.max_history_days}-day horizon; regenerating all history"
            )
            self.shift_service.delete_shifts_for_user(user_id)

        shifts = self.seed_shifts_for_dates(user_id, directive.dates)
        return SeedingResult(directive, shifts)

    def _create_demo_user(self) -> Optional[User]:
        demo_user = User(
            username=DEMO_USERNAME,
            email=DEMO_EMAIL,
            first_name="Demo",
            last_name="User"
        )

        result = self.auth_service.create_user(demo_user, self.demo_password)
        if not result.success:
            logger.error(f"Failed to create demo user: {'; '.join(result.errors)}")
            return None

        logger.info(f"Created demo user {DEMO_USERNAME}")
        return demo_user
