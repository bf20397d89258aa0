"""HTTP API routers."""
from tipbuddy.api.auth import router as auth_router
from tipbuddy.api.shifts import router as shifts_router
from tipbuddy.api.demo_data import router as demo_data_router

__all__ = [
    "auth_router",
    "shifts_router",
    "demo_data_router",
]
