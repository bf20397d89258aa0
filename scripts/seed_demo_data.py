#!/usr/bin/env python3
"""
Script to seed or reset the demo account's shift history.

Without flags the demo account is created if missing and its history is
filled up to today, exactly as on application startup.

Usage:
    python scripts/seed_demo_data.py [--reset | --reset-shifts] [--timezone TZ] [--seed N]
"""
import sys
import os
import argparse
import logging

# Add parent directory to path to import tipbuddy modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tipbuddy.config import settings
from tipbuddy.database import SessionLocal, init_db
from tipbuddy.services.demo_data_seeder import DemoDataSeeder
from tipbuddy.services.time_zone_service import TimeZoneService


def main():
    """Main function to seed demo data."""
    parser = argparse.ArgumentParser(
        description='Seed or reset the demo account history'
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--reset',
        action='store_true',
        help='Delete the demo account and recreate it with a full history'
    )
    mode.add_argument(
        '--reset-shifts',
        action='store_true',
        help='Keep the demo account but regenerate all of its shifts'
    )
    parser.add_argument(
        '--timezone',
        type=str,
        default=settings.demo_data_timezone,
        help='Time zone the demo worker lives in (default: DEMO_DATA_TIMEZONE or Pacific)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        help='Random seed for a reproducible history'
    )

    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper())

    init_db()

    db = SessionLocal()
    try:
        seeder = DemoDataSeeder(db, time_zone_service=TimeZoneService(args.timezone), seed=args.seed)

        if args.reset:
            result = seeder.reset_demo_user()
        elif args.reset_shifts:
            result = seeder.reset_demo_user_shifts()
        else:
            result = seeder.seed_demo_data()

        if result.directive is None:
            print("Demo data was not seeded, see the log for details")
            return 1

        print(f"Mode: {result.directive.mode.value}")
        print(f"Dates considered: {len(result.directive.dates)}")
        print(f"Shifts created: {len(result.shifts)}")

    except Exception as e:
        print(f"Error seeding demo data: {e}")
        db.rollback()
        return 1
    finally:
        db.close()

    return 0


if __name__ == '__main__':
    sys.exit(main())
