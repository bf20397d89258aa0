"""Scheduler and background tasks package."""
from tipbuddy.scheduler.demo_data_scheduler import (
    start_scheduler,
    stop_scheduler,
    refresh_demo_data
)

__all__ = [
    'start_scheduler',
    'stop_scheduler',
    'refresh_demo_data'
]
