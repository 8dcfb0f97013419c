"""
FastAPI application entry point
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from flight_booking.api import auth, cities, flights, tickets
from flight_booking.core.config import Settings, get_settings
from flight_booking.core.database import Database
from flight_booking.core.exceptions import FlightBookingError, StorageError, ValidationError
from flight_booking.core.logging_config import setup_logging
from flight_booking.core.metrics import get_metrics
from flight_booking.middleware.rate_limiter import limiter
from flight_booking.middleware.tracing import TracingMiddleware
from flight_booking.scripts.seed_data import seed_reference_data
from flight_booking.services import EmailNotifier

logger = logging.getLogger(__name__)


def _format_validation_errors(exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    """Map the exception taxonomy onto HTTP responses"""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": exc.error_code, "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "validation_error", "errors": _format_validation_errors(exc)},
        )

    @app.exception_handler(FlightBookingError)
    async def booking_error_handler(request: Request, exc: FlightBookingError):
        detail = str(exc)
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.url.path}: {exc}")
            detail = "Internal server error"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error_code, "detail": detail},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": StorageError.error_code, "detail": "Internal server error"},
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded for {request.url.path}")
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "detail": f"Too many requests: {exc.detail}",
            },
            headers={"Retry-After": "60"},
        )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    notifier=None,
) -> FastAPI:
    """
    Build the application.

    The database handle is created here (or passed in by tests) and lives on
    app.state; handlers reach it through the get_db dependency.
    """
    settings = settings or get_settings()
    owns_database = database is None
    if database is None:
        database = Database(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan events for startup and shutdown"""
        logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION}")
        await database.connect()

        if settings.AUTO_CREATE_TABLES:
            await database.create_all()
        if settings.SEED_ON_STARTUP:
            await seed_reference_data(database, settings)

        yield

        logger.info("Shutting down...")
        if owns_database:
            await database.disconnect()
        logger.info("Cleanup complete")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Flight booking API with seat-level reservations",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.notifier = notifier or EmailNotifier(settings)
    app.state.limiter = limiter
    limiter.enabled = settings.RATE_LIMIT_ENABLED

    register_exception_handlers(app)

    app.add_middleware(TracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/metrics", tags=["Monitoring"])
    async def metrics():
        """Prometheus metrics endpoint"""
        content, content_type = get_metrics()
        return Response(content=content, media_type=content_type)

    app.include_router(auth.router, tags=["Auth"])
    app.include_router(cities.router, tags=["Cities"])
    app.include_router(flights.router, tags=["Flights"])
    app.include_router(tickets.router, tags=["Tickets"])

    return app


_settings = get_settings()
setup_logging(level=_settings.LOG_LEVEL, json_logs=_settings.LOG_JSON, log_file=_settings.LOG_FILE)

app = create_app(_settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "flight_booking.main:app",
        host="0.0.0.0",
        port=8000,
        reload=_settings.DEBUG,
        log_level=_settings.LOG_LEVEL.lower(),
    )
