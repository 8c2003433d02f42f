"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.middleware import CorrelationIdMiddleware
from src.api.routes import router
from src.api.widget import router as widget_router
from src.config import get_settings
from src.services.logging_service import configure_logging, get_logger
from src.services.weather_service import WeatherService, WeatherServiceError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    if not settings.openweathermap_api_key:
        logger.warning(
            "weather_api_key_missing",
            note="Weather and suggestion requests will fail until OPENWEATHERMAP_API_KEY is set",
        )

    app.state.weather_service = WeatherService()

    logger.info(
        "application_started",
        units=settings.weather_units,
        log_level=settings.log_level,
    )

    yield

    await app.state.weather_service.close()
    logger.info("application_shutdown")


app = FastAPI(
    title="Weather Widget API",
    description="Weather lookup with debounced city suggestions, 5-day forecast and map",
    version="0.1.0",
    lifespan=lifespan,
)


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or str(uuid4())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with a 400 and the first failing field."""
    correlation_id = _correlation_id(request)
    logger = structlog.get_logger()

    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", ["unknown"]))
        message = first_error.get("msg", "Validation failed")
        detail = f"Field '{field}': {message}"
    else:
        detail = "Request validation failed"

    logger.warning(
        "validation_error",
        correlation_id=correlation_id,
        detail=detail,
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "detail": detail,
            "correlation_id": correlation_id,
        },
        headers={"X-Correlation-Id": correlation_id},
    )


@app.exception_handler(WeatherServiceError)
async def weather_exception_handler(
    request: Request, exc: WeatherServiceError
) -> JSONResponse:
    """Collapse every upstream failure into one user-facing message."""
    correlation_id = _correlation_id(request)
    structlog.get_logger().warning(
        "weather_upstream_error",
        correlation_id=correlation_id,
        error=str(exc),
        error_type=type(exc).__name__,
    )

    return JSONResponse(
        status_code=502,
        content={
            "error": "Weather unavailable",
            "detail": exc.user_message,
            "correlation_id": correlation_id,
        },
        headers={"X-Correlation-Id": correlation_id},
    )


# CORS middleware for browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Correlation ID middleware for request tracking and observability
app.add_middleware(CorrelationIdMiddleware)

app.include_router(router)
app.include_router(widget_router)
