"""Synthetic shift generator for demo work history.

For each local calendar day the generator decides whether the demo worker
worked, whether it was a single or a double shift, and when each shift
started and how long it lasted. Timings obey these rules:

- at most two shifts per day and at most 12 hours of work in total;
- a shift never runs to or past 23:59 local time of its own day;
- the two halves of a double shift are separated by a break of 1 to 3 hours.

All randomness comes from the ``random.Random`` instance handed in, so a
seeded or scripted source reproduces the same history.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple
import logging
import random
import uuid

from tipbuddy.models.shift import Shift
from tipbuddy.services.time_zone_service import TimeZoneService


# Configure logging
logger = logging.getLogger(__name__)


ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class TimeWindow:
    """Part of the day a shift may start in, hours as [start_hour, end_hour)."""
    name: str
    start_hour: int
    end_hour: int


@dataclass(frozen=True)
class GenerationParameters:
    """Constants of the generation model."""

    # Indexed by date.weekday(): Monday is 0, Sunday is 6
    day_probabilities: Tuple[float, ...] = (0.10, 0.10, 0.75, 0.75, 0.90, 0.90, 0.90)
    double_shift_probability: float = 0.25
    time_windows: Tuple[TimeWindow, ...] = (
        TimeWindow("morning", 8, 12),
        TimeWindow("afternoon", 12, 16),
        TimeWindow("evening", 16, 20),
    )
    start_minutes: Tuple[int, ...] = (0, 15, 30, 45)
    single_hours: Tuple[int, int] = (3, 8)
    first_of_double_hours: Tuple[int, int] = (3, 6)
    second_of_double_hours: Tuple[int, int] = (3, 8)
    min_shift_hours: int = 3
    max_daily_hours: int = 12
    break_hours: Tuple[float, float] = (1.0, 3.0)
    latest_end: timedelta = timedelta(hours=23, minutes=59)
    credit_tips: Tuple[int, int] = (50, 200)
    cash_tips: Tuple[int, int] = (0, 100)
    tipout: Tuple[int, int] = (1, 10)
    max_history_days: int = 60


DEFAULT_PARAMETERS = GenerationParameters()


@dataclass(frozen=True)
class ShiftTiming:
    """Start and length of one shift, start measured from local midnight."""
    start: timedelta
    hours: int

    @property
    def end(self) -> timedelta:
        return self.start + self.hours * ONE_HOUR


class ShiftGenerator:
    """Generates plausible shifts for single calendar days."""

    def __init__(
        self,
        time_zone_service: TimeZoneService,
        rng: Optional[random.Random] = None,
        parameters: GenerationParameters = DEFAULT_PARAMETERS
    ):
        """
        Initialize shift generator.

        Args:
            time_zone_service: Converts local shift starts to UTC instants
            rng: Random source, a fresh unseeded ``random.Random`` by default
            parameters: Generation constants
        """
        self.time_zone_service = time_zone_service
        self.rng = rng or random.Random()
        self.parameters = parameters

    def shift_probability(self, day: date) -> float:
        """Get the probability that any shift is worked on ``day``."""
        return self.parameters.day_probabilities[day.weekday()]

    def plan_day(self, day: date, rng: Optional[random.Random] = None) -> List[ShiftTiming]:
        """
        Decide the shift timings for one day.

        Args:
            day: Local calendar date
            rng: Random source for this day only, the generator's own by default

        Returns:
            Zero, one or two timings ordered by start
        """
        rng = rng or self.rng

        if rng.random() > self.shift_probability(day):
            return []

        if rng.random() < self.parameters.double_shift_probability:
            return self._double_shift(rng)

        return [self._single_shift(rng)]

    def generate_for_date(self, user_id: str, day: date, rng: Optional[random.Random] = None) -> List[Shift]:
        """
        Generate unsaved shifts for one local day.

        Args:
            user_id: Owner of the generated shifts
            day: Local calendar date
            rng: Random source for this day only, the generator's own by default

        Returns:
            List of Shift objects with UTC start dates and drawn tips
        """
        rng = rng or self.rng

        shifts = []
        for timing in self.plan_day(day, rng):
            credit_tips, cash_tips, tipout = self._draw_tips(rng)
            start = self.time_zone_service.to_utc(day, timing.start)
            shifts.append(Shift(
                id=str(uuid.uuid4()),
                user_id=user_id,
                date=start.replace(tzinfo=None),
                credit_tips=float(credit_tips),
                cash_tips=float(cash_tips),
                tipout=float(tipout),
                hours_worked=timing.hours,
                created_at=datetime.utcnow()
            ))
        return shifts

    def _single_shift(self, rng: random.Random) -> ShiftTiming:
        start = self._draw_start(rng)
        hours = rng.randint(*self.parameters.single_hours)
        return ShiftTiming(start, self._clamp_hours(start, hours))

    def _double_shift(self, rng: random.Random) -> List[ShiftTiming]:
        params = self.parameters

        start = self._draw_start(rng)
        hours = rng.randint(*params.first_of_double_hours)
        first = ShiftTiming(start, self._clamp_hours(start, hours))

        # Break is drawn in fractional hours, unlike the quarter-hour start times
        break_length = rng.uniform(*params.break_hours) * ONE_HOUR
        second_start = first.end + break_length

        low, high = params.second_of_double_hours
        max_second_hours = min(high, params.max_daily_hours - first.hours)
        second_hours = rng.randint(low, max(low, max_second_hours))

        if self._whole_hours_left(second_start) < params.min_shift_hours:
            logger.debug(f"Second shift at {second_start} does not fit before midnight, keeping single shift")
            return [first]

        return [first, ShiftTiming(second_start, self._clamp_hours(second_start, second_hours))]

    def _draw_start(self, rng: random.Random) -> timedelta:
        window = rng.choice(self.parameters.time_windows)
        hour = rng.randint(window.start_hour, window.end_hour - 1)
        minute = rng.choice(self.parameters.start_minutes)
        return timedelta(hours=hour, minutes=minute)

    def _whole_hours_left(self, start: timedelta) -> int:
        return int((self.parameters.latest_end - start) / ONE_HOUR)

    def _clamp_hours(self, start: timedelta, hours: int) -> int:
        if start + hours * ONE_HOUR <= self.parameters.latest_end:
            return hours
        return max(self.parameters.min_shift_hours, self._whole_hours_left(start))

    def _draw_tips(self, rng: random.Random) -> Tuple[int, int, int]:
        params = self.parameters
        return (
            rng.randint(*params.credit_tips),
            rng.randint(*params.cash_tips),
            rng.randint(*params.tipout),
        )
