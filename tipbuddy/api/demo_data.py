"""Demo account reset routes."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tipbuddy.config import settings
from tipbuddy.services.demo_data_seeder import DemoDataSeeder
from tipbuddy.api.dependencies import get_demo_data_seeder


# Create router
router = APIRouter(prefix=f"{settings.api_prefix}/demodata", tags=["demo data"])


@router.post("/reset")
async def reset_demo_data(seeder: DemoDataSeeder = Depends(get_demo_data_seeder)):
    """Recreate the demo account and its full history."""
    result = seeder.reset_demo_user()
    return JSONResponse(content={
        "message": "Demo data has been reset.",
        "shiftsCreated": len(result.shifts)
    })


@router.post("/reset-shifts")
async def reset_demo_shifts(seeder: DemoDataSeeder = Depends(get_demo_data_seeder)):
    """Regenerate the demo account's shifts, keeping the account."""
    result = seeder.reset_demo_user_shifts()
    return JSONResponse(content={
        "message": "Demo user shifts have been reset.",
        "shiftsCreated": len(result.shifts)
    })
