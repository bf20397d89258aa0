"""Business logic services package."""
from tipbuddy.services.auth_service import AuthService, AccountResult
from tipbuddy.services.shift_service import ShiftService
from tipbuddy.services.time_zone_service import TimeZoneService
from tipbuddy.services.shift_generator import ShiftGenerator, GenerationParameters
from tipbuddy.services.history_gap_analyzer import HistoryGapAnalyzer, SeedingDirective, SeedingMode
from tipbuddy.services.demo_data_seeder import DemoDataSeeder, SeedingResult

__all__ = [
    "AuthService",
    "AccountResult",
    "ShiftService",
    "TimeZoneService",
    "ShiftGenerator",
    "GenerationParameters",
    "HistoryGapAnalyzer",
    "SeedingDirective",
    "SeedingMode",
    "DemoDataSeeder",
    "SeedingResult",
]
