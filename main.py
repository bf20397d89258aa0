"""Main application entry point."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os

from tipbuddy.config import settings
from tipbuddy.database import init_db, SessionLocal
from tipbuddy.exceptions import ValidationError, format_error_for_api
from tipbuddy.api import auth_router, shifts_router, demo_data_router
from tipbuddy.scheduler import start_scheduler, stop_scheduler
from tipbuddy.services.demo_data_seeder import DemoDataSeeder


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="TipBuddy API",
    description="Tip tracking API with a self-refreshing demo account",
    version="1.0.0",
    debug=settings.debug
)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

app.include_router(auth_router)
app.include_router(shifts_router)
app.include_router(demo_data_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Return validation errors as structured JSON."""
    return JSONResponse(status_code=exc.status_code, content=format_error_for_api(exc))


def seed_demo_data_on_startup() -> None:
    """Seed the demo account; failures are logged and startup continues."""
    db = SessionLocal()
    try:
        result = DemoDataSeeder(db).seed_demo_data()
        logger.info(f"Startup demo seeding added {len(result.shifts)} shifts")
    except Exception as e:
        logger.error(f"Startup demo seeding failed: {str(e)}", exc_info=True)
    finally:
        db.close()


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("Application starting up...")

    init_db()

    if settings.seed_demo_on_startup:
        seed_demo_data_on_startup()

    start_scheduler()
    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up on application shutdown."""
    stop_scheduler()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "TipBuddy API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        reload=False
    )
