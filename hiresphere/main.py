"""
FastAPI application entry point.
Owns the background scheduler: job-alert triggers start with the app and stop with it.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from hiresphere.app.core.config import settings
from hiresphere.app.core.logging_config import get_logger, setup_logging
from hiresphere.app.db.base import Base
from hiresphere.app.db.session import engine
from hiresphere.app.tasks.scheduler import TaskScheduler, init_job_alert_schedulers

# Import models so they register with Base.metadata
import hiresphere.app.models  # noqa: F401

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error("Database error: %s", e)

    scheduler = init_job_alert_schedulers(TaskScheduler())
    if settings.scheduler_enabled:
        scheduler.start()
    app.state.scheduler = scheduler
    try:
        yield
    finally:
        await scheduler.shutdown()


# Initialize FastAPI app
app = FastAPI(
    title="HireSphere API",
    description="Job alerts and job analytics",
    version=settings.app_version,
    lifespan=lifespan,
)


@app.get("/")
def read_root():
    """Root endpoint"""
    return {"message": "HireSphere API", "version": settings.app_version}


@app.get("/health")
def health_check():
    """Health check endpoint, with the scheduler's state"""
    scheduler = getattr(app.state, "scheduler", None)
    return {
        "status": "healthy",
        "scheduler": {
            "running": bool(scheduler and scheduler.running),
            "jobs": scheduler.jobs if scheduler else [],
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
