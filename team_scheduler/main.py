"""
Main FastAPI application for the Team Scheduler.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from team_scheduler.api import routes
from team_scheduler.core.config import CORS_ORIGINS, LOG_LEVEL
from team_scheduler.core.errors import ExternalServiceError, NotFoundError, ValidationError
from team_scheduler.core.logging_config import setup_logging, get_logger

setup_logging(LOG_LEVEL)
logger = get_logger(__name__)

app = FastAPI(
    title="Team Scheduler API",
    description="Weekly availability, events and attendance for an esports team",
    version="1.0.0"
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(routes.router)
app.include_router(routes.objects_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": [e.to_dict() for e in exc.errors]}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return await validation_error_handler(request, ValidationError.from_pydantic(exc.errors()))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": f"{exc.entity} not found"})


@app.exception_handler(ExternalServiceError)
async def external_service_error_handler(request: Request, exc: ExternalServiceError):
    logger.error(f"{request.method} {request.url.path} failed ({exc.service}): {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Error in {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Team Scheduler API",
        "version": "1.0.0",
        "endpoints": {
            "schedule": "/api/schedule",
            "players": "/api/players",
            "events": "/api/events",
            "health": "/api/health"
        }
    }
