"""Main FastAPI application."""

import logging
import time
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import settings
from .goals.models import (
    CheckInRequest,
    Goal,
    GoalCreate,
    MessageResponse,
    MilestoneResponse,
    ProgressResponse,
)
from .goals.progress import summarize
from .goals.storage import GoalStorage, create_storage

VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Commitment Tracker",
    description="Track a single N-day commitment streak",
    version=VERSION,
)

# Initialize components
storage = create_storage(settings.storage_backend, settings.database_path)

VALIDATION_MESSAGES = {
    "/api/goals": "Invalid goal data",
    "/api/goals/checkin": "Invalid check-in data",
}

MAX_LOG_LINE = 80


def get_storage() -> GoalStorage:
    """Storage dependency (overridden in tests)."""
    return storage


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    """Log one line per /api request."""
    start = time.perf_counter()
    response = await call_next(request)

    if request.url.path.startswith("/api"):
        duration_ms = int((time.perf_counter() - start) * 1000)
        log_line = f"{request.method} {request.url.path} {response.status_code} in {duration_ms}ms"
        if len(log_line) > MAX_LOG_LINE:
            log_line = log_line[: MAX_LOG_LINE - 1] + "…"
        logger.info(log_line)

    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with the validation errors."""
    message = VALIDATION_MESSAGES.get(request.url.path, "Invalid request data")
    logger.warning(f"{message} on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"message": message, "error": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Turn unhandled errors into a 500 carrying the error message."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"message": str(exc) or "Internal Server Error"},
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Commitment Tracker",
        "version": VERSION,
        "endpoints": {
            "create": "POST /api/goals",
            "current": "GET /api/goals/current",
            "progress": "GET /api/goals/current/progress",
            "checkin": "POST /api/goals/checkin",
            "reset": "POST /api/goals/reset",
            "history": "GET /api/goals/history",
            "status": "GET /status",
        },
    }


@app.get("/status")
async def status():
    """Server status endpoint."""
    return {
        "status": "running",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage_backend": settings.storage_backend,
    }


@app.post("/api/goals", response_model=Goal)
def create_goal(payload: GoalCreate, storage: GoalStorage = Depends(get_storage)):
    """Start a new goal, deactivating the current one."""
    return storage.create_goal(payload.goal_days)


@app.get("/api/goals/current", response_model=Goal)
def get_current_goal(storage: GoalStorage = Depends(get_storage)):
    """Return the active goal."""
    try:
        goal = storage.get_current_goal()
    except Exception as e:
        logger.exception("Failed to get current goal")
        return JSONResponse(
            status_code=500,
            content={"message": "Failed to get current goal", "error": str(e)},
        )

    if goal is None:
        return JSONResponse(status_code=404, content={"message": "No active goal found"})

    return goal


@app.get("/api/goals/current/progress", response_model=ProgressResponse)
def get_current_progress(storage: GoalStorage = Depends(get_storage)):
    """Return derived display values for the active goal."""
    goal = storage.get_current_goal()
    if goal is None:
        return JSONResponse(status_code=404, content={"message": "No active goal found"})

    summary = summarize(
        goal.goal_days,
        goal.completed_days,
        start_date=goal.start_date,
        last_check_in=goal.last_check_in,
    )
    milestone = None
    if summary.milestone:
        milestone = MilestoneResponse(
            days=summary.milestone.days,
            title=summary.milestone.title,
            message=summary.milestone.message,
        )

    return ProgressResponse(
        goal_days=summary.goal_days,
        completed_days=summary.completed_days,
        remaining_days=summary.remaining_days,
        percentage=summary.percentage,
        is_complete=summary.is_complete,
        achievement=summary.achievement,
        milestone=milestone,
        week_progress=summary.week_progress,
        started_on=summary.started_on,
        last_check_in=summary.last_check_in,
    )


@app.post("/api/goals/checkin", response_model=Goal)
def check_in(payload: CheckInRequest, storage: GoalStorage = Depends(get_storage)):
    """Record one day of progress."""
    goal = storage.check_in_goal(payload.goal_id)
    if goal is None:
        logger.info(f"Check-in rejected, goal not found: {payload.goal_id}")
        return JSONResponse(status_code=404, content={"message": "Goal not found"})

    return goal


@app.post("/api/goals/reset", response_model=MessageResponse)
def reset_goal(storage: GoalStorage = Depends(get_storage)):
    """Deactivate the current goal, keeping it as history."""
    try:
        storage.reset_current_goal()
    except Exception as e:
        logger.exception("Failed to reset goal")
        return JSONResponse(
            status_code=500,
            content={"message": "Failed to reset goal", "error": str(e)},
        )

    return MessageResponse(message="Goal reset successfully")


@app.get("/api/goals/history", response_model=list[Goal])
def get_history(storage: GoalStorage = Depends(get_storage)):
    """Return every goal, newest first."""
    return storage.list_goals()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
