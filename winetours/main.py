"""
Walla Walla Wine Tours - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from winetours.config import settings
from winetours.database import engine, SessionLocal
from winetours.errors import ServiceError, ValidationError
from winetours.api import customers, reservations, itineraries, notes, restaurants
from winetours.services import build_services

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer() if settings.log_format == "console" else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Wine Tours API", version="1.0.0")
    app.state.services = build_services(SessionLocal)
    yield
    await engine.dispose()
    logger.info("Shutting down Wine Tours API")


# Create FastAPI application
app = FastAPI(
    title="Wine Tours",
    description="Reservations, itineraries and proposal notes for winery tours",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.to_dict()},
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Service error", path=request.url.path, code=exc.code, error=exc.message)
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"] if part != "body") or "__root__"
        errors.setdefault(field, []).append(err["msg"])
    return error_response(ValidationError("Validation failed", errors))


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    checks = {}

    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    # Check Redis
    try:
        from winetours.jobs.celery_app import celery_app
        celery_app.control.ping(timeout=1)
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(customers.router, prefix="/customers", tags=["Customers"])
app.include_router(reservations.router, prefix="/reservations", tags=["Reservations"])
app.include_router(itineraries.router, prefix="/itineraries", tags=["Itineraries"])
app.include_router(notes.router, tags=["Notes"])
app.include_router(restaurants.router, prefix="/restaurants", tags=["Restaurants"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "winetours.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
