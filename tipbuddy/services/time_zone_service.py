"""Time zone service for local-day and UTC conversions.

Demo history is reasoned about in *local days*: the calendar date a shift
belongs to in the configured time zone. Shifts themselves are stored as UTC
instants, so every comparison of "which day" has to go through this service.
"""
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, NamedTuple, Optional
import logging

from dateutil import tz


# Configure logging
logger = logging.getLogger(__name__)


PACIFIC_IANA_ID = "America/Los_Angeles"
PACIFIC_ALIASES = ("US/Pacific", "Pacific Standard Time")
# UTC-8, DST from 02:00 on the second Sunday of March to 02:00 on the first Sunday of November
PACIFIC_POSIX_RULE = "PST8PDT,M3.2.0,M11.1.0"


class ResolvedTimeZone(NamedTuple):
    """A time zone together with the identifier it was resolved from."""
    key: str
    tzinfo: tzinfo


def _utc_now() -> datetime:
    return datetime.now(tz.UTC)


def _lookup(time_zone_id: str) -> Optional[tzinfo]:
    try:
        return tz.gettz(time_zone_id)
    except (ValueError, OSError) as e:
        logger.debug(f"Time zone lookup for '{time_zone_id}' failed: {e}")
        return None


def resolve_time_zone(configured_time_zone: Optional[str]) -> ResolvedTimeZone:
    """Resolve the configured time zone, falling back to Pacific time.

    The fallback chain is: the configured id, the IANA Pacific zone, its
    platform aliases, and finally a zone built from a POSIX TZ rule. This
    never fails.

    Args:
        configured_time_zone: Time zone identifier from configuration, may be empty

    Returns:
        ResolvedTimeZone with the identifier actually used
    """
    if configured_time_zone:
        time_zone = _lookup(configured_time_zone)
        if time_zone is not None:
            logger.info(f"Using configured timezone: {configured_time_zone}")
            return ResolvedTimeZone(configured_time_zone, time_zone)
        logger.warning(
            f"Configured timezone '{configured_time_zone}' not found, "
            f"falling back to Pacific timezone"
        )

    time_zone = _lookup(PACIFIC_IANA_ID)
    if time_zone is not None:
        logger.info(f"Using IANA Pacific timezone: {PACIFIC_IANA_ID}")
        return ResolvedTimeZone(PACIFIC_IANA_ID, time_zone)

    for alias in PACIFIC_ALIASES:
        time_zone = _lookup(alias)
        if time_zone is not None:
            logger.info(f"Using Pacific timezone alias: {alias}")
            return ResolvedTimeZone(alias, time_zone)

    logger.warning("No Pacific timezone found in the tz database, building one from a POSIX rule")
    return ResolvedTimeZone(PACIFIC_POSIX_RULE, tz.tzstr(PACIFIC_POSIX_RULE))


class TimeZoneService:
    """Service for converting between local calendar dates and UTC instants."""

    def __init__(
        self,
        configured_time_zone: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize time zone service.

        Args:
            configured_time_zone: Time zone identifier, Pacific time when empty or unknown
            clock: Callable returning the current instant, defaults to the UTC wall clock
        """
        resolved = resolve_time_zone(configured_time_zone)
        self.time_zone_id = resolved.key
        self.time_zone = resolved.tzinfo
        self._clock = clock or _utc_now

    def local_date(self, utc_instant: datetime) -> date:
        """
        Get the local calendar date of a UTC instant.

        Args:
            utc_instant: Instant to project; naive values are taken as UTC

        Returns:
            The date in the configured time zone, time of day discarded
        """
        if utc_instant.tzinfo is None:
            utc_instant = utc_instant.replace(tzinfo=tz.UTC)
        return utc_instant.astimezone(self.time_zone).date()

    def current_local_date(self) -> date:
        """Get today's date in the configured time zone."""
        return self.local_date(self._clock())

    def to_utc(self, local_date: date, time_of_day: timedelta) -> datetime:
        """
        Convert a local date and time of day to a UTC instant.

        Args:
            local_date: Calendar date in the configured time zone
            time_of_day: Offset from local midnight

        Returns:
            Timezone-aware UTC datetime
        """
        local_datetime = datetime.combine(local_date, time.min) + time_of_day
        return self.to_utc_datetime(local_datetime)

    def to_utc_datetime(self, local_datetime: datetime) -> datetime:
        """
        Convert a naive local datetime to a UTC instant.

        Wall times skipped by a DST transition are moved forward by the gap;
        repeated wall times resolve to their first occurrence.

        Args:
            local_datetime: Wall-clock time in the configured time zone

        Returns:
            Timezone-aware UTC datetime
        """
        aware = tz.resolve_imaginary(local_datetime.replace(tzinfo=self.time_zone))
        return aware.astimezone(tz.UTC)
