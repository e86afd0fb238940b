"""
Rollbook - Teaching Assistant Roster

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from rollbook import __version__
from rollbook.api import api_router
from rollbook.core.config import get_config, get_log_path
from rollbook.core.exceptions import RollbookError
from rollbook.core.logging import get_logger, setup_logging
from rollbook.services.roster_service import get_roster_service

# HTTP status returned for each error kind
ERROR_STATUS = {
    "entity_not_found": 404,
    "duplicate_entity": 409,
    "same_group": 409,
    "overlapping_consultation": 409,
    "invalid_range": 422,
    "invalid_status": 422,
    "parse_error": 422,
    "empty_group": 400,
    "batch_rejected": 400,
}

# Record startup time globally
_startup_time = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Loads the roster on startup so a broken data file fails fast.
    """
    global _startup_time
    _startup_time = datetime.now().isoformat()
    logger = setup_logging()
    logger.info("Starting Rollbook...")
    logger.debug("Log level: %s, log file: %s", get_config().logging.level, get_log_path())

    service = get_roster_service()
    logger.info("Roster ready: %s", service.store)

    yield

    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title="Rollbook",
    description="Roster of students, tutorial groups, homework, attendance and consultations",
    version=__version__,
    lifespan=lifespan,
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request, call_next):
    logger = get_logger()
    method = request.method
    path = request.url.path
    logger.debug("Request started: %s %s", method, path)
    response = await call_next(request)
    logger.debug("Request completed: %s %s -> %s", method, path, response.status_code)
    return response


@app.exception_handler(RollbookError)
async def rollbook_error_handler(request: Request, exc: RollbookError):
    status_code = ERROR_STATUS.get(exc.kind, 500)
    get_logger().warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "kind": exc.kind})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    messages = [error["msg"].removeprefix("Value error, ") for error in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": messages, "kind": "invalid_value"})


# Include API routes
app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "name": "Rollbook",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint with startup time."""
    return {
        "status": "healthy",
        "startup_time": _startup_time,
        "timestamp": datetime.now().isoformat(),
    }


if __name__ == "__main__":
    from rollbook.cli import serve

    serve()
