"""Gap analysis deciding how much demo history needs generating."""
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional
import enum

from tipbuddy.models.shift import Shift
from tipbuddy.services.shift_generator import DEFAULT_PARAMETERS
from tipbuddy.services.time_zone_service import TimeZoneService


class SeedingMode(str, enum.Enum):
    """What the seeder must do for a user's history."""
    NO_OP = "no_op"
    FILL_GAP = "fill_gap"
    FULL_SEED = "full_seed"
    REGENERATE_ALL = "regenerate_all"


@dataclass(frozen=True)
class SeedingDirective:
    """Outcome of gap analysis: a mode and the local dates to populate."""
    mode: SeedingMode
    dates: List[date] = field(default_factory=list)
    most_recent_local_day: Optional[date] = None
    gap_days: Optional[int] = None

    @property
    def deletes_existing(self) -> bool:
        return self.mode == SeedingMode.REGENERATE_ALL


def date_range(start: date, end: date) -> List[date]:
    """Get every date from ``start`` to ``end``, both inclusive."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


class HistoryGapAnalyzer:
    """Compares a user's shift history with today, both in local days."""

    def __init__(self, time_zone_service: TimeZoneService, max_history_days: int = DEFAULT_PARAMETERS.max_history_days):
        """
        Initialize history gap analyzer.

        Args:
            time_zone_service: Projects stored UTC shift dates onto local days
            max_history_days: Horizon of plausible backfill, full window length
        """
        self.time_zone_service = time_zone_service
        self.max_history_days = max_history_days

    def full_window(self, today: date) -> List[date]:
        """Get the ``max_history_days`` local dates ending at ``today``."""
        return date_range(today - timedelta(days=self.max_history_days - 1), today)

    def most_recent_local_day(self, shifts: Iterable[Shift]) -> Optional[date]:
        """Get the latest local day any shift falls on, None without shifts."""
        local_days = [self.time_zone_service.local_date(shift.date) for shift in shifts]
        return max(local_days) if local_days else None

    def analyze(self, shifts: Iterable[Shift], today: date) -> SeedingDirective:
        """
        Decide the seeding directive for a history.

        Args:
            shifts: Full, unfiltered shift history of one user
            today: Today's local date

        Returns:
            SeedingDirective with the dates to generate, oldest first
        """
        most_recent = self.most_recent_local_day(shifts)
        if most_recent is None:
            return SeedingDirective(SeedingMode.FULL_SEED, self.full_window(today))

        gap = (today - most_recent).days

        if gap > self.max_history_days:
            return SeedingDirective(
                SeedingMode.REGENERATE_ALL,
                self.full_window(today),
                most_recent_local_day=most_recent,
                gap_days=gap
            )

        if gap <= 0:
            return SeedingDirective(SeedingMode.NO_OP, [], most_recent_local_day=most_recent, gap_days=gap)

        return SeedingDirective(
            SeedingMode.FILL_GAP,
            date_range(most_recent + timedelta(days=1), today),
            most_recent_local_day=most_recent,
            gap_days=gap
        )
