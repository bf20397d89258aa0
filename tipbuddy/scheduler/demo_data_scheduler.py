"""Daily scheduler keeping the demo account's history up to today."""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
import logging

from tipbuddy.config import settings
from tipbuddy.database import SessionLocal
from tipbuddy.services.demo_data_seeder import DemoDataSeeder
from tipbuddy.services.time_zone_service import TimeZoneService


# Configure logging
logger = logging.getLogger(__name__)


JOB_ID = 'daily_demo_data_refresh'

# Global scheduler instance
scheduler = AsyncIOScheduler()


def refresh_demo_data():
    """
    Fill the demo account's history up to today.

    Called by the scheduler once per local day. Errors are logged and never
    propagate into the scheduler; the session is always closed.
    """
    logger.info("Starting daily demo data refresh...")

    db = SessionLocal()
    try:
        seeder = DemoDataSeeder(db)
        result = seeder.seed_demo_data()

        logger.info(f"Daily demo data refresh completed. Added {len(result.shifts)} shifts.")

    except Exception as e:
        logger.error(f"Error during demo data refresh: {str(e)}", exc_info=True)
    finally:
        db.close()


def start_scheduler():
    """
    Start the demo data scheduler.

    The refresh runs shortly after local midnight in the demo time zone so
    the new day is seeded before anyone logs in.
    """
    time_zone = TimeZoneService(settings.demo_data_timezone).time_zone

    scheduler.add_job(
        refresh_demo_data,
        trigger=CronTrigger(
            hour=settings.demo_refresh_hour,
            minute=settings.demo_refresh_minute,
            timezone=time_zone
        ),
        id=JOB_ID,
        name='Daily Demo Data Refresh',
        replace_existing=True
    )

    logger.info(
        f"Demo data scheduler configured to run daily at "
        f"{settings.demo_refresh_hour:02d}:{settings.demo_refresh_minute:02d}"
    )

    scheduler.start()
    logger.info("Demo data scheduler started")


def stop_scheduler():
    """
    Stop the demo data scheduler.

    Called during application shutdown.
    """
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Demo data scheduler stopped")
    else:
        logger.info("Demo data scheduler was not running")
