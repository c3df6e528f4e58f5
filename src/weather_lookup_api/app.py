"""Main FastAPI application."""

import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi_cache import FastAPICache
from loguru import logger
from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import REGISTRY, generate_latest

from .api import health, routes
from .api.dependencies import build_services
from .core.config import settings
from .core.errors import WeatherLookupError
from .models.weather import ErrorResponse


def setup_logging():
    """Configure loguru for structured logging.

    Sets up logging with the configured log level from settings.
    Logs are written to stderr with structured format.
    """
    # Remove default handler
    logger.remove()

    # Add custom handler with structured format
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}",
        level=settings.LOG_LEVEL,
        serialize=False,  # Human-readable format
        colorize=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT != "production",
    )

    logger.info(
        "Logging configured",
        level=settings.LOG_LEVEL,
    )


def setup_metrics():
    """Configure OpenTelemetry metrics with Prometheus exporter.

    Metrics are exposed at /metrics in a format compatible with Prometheus scraping.
    """
    reader = PrometheusMetricReader()

    resource = Resource.create(
        {
            "service.name": "weather-lookup-api",
            "service.version": "0.1.0",
        }
    )

    provider = MeterProvider(
        resource=resource,
        metric_readers=[reader],
    )

    # Set global meter provider
    metrics.set_meter_provider(provider)

    logger.info("OpenTelemetry metrics configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Build the cache and service graph, log configuration
    - Shutdown: Close upstream HTTP clients

    Args:
        app: FastAPI application instance
    """
    logger.info("Starting Weather Lookup API")

    # Log active configuration (without sensitive values)
    logger.info(
        "Configuration loaded",
        weather_provider=settings.WEATHER_PROVIDER,
        openweather_base_url=settings.OPENWEATHER_BASE_URL,
        geocoding_base_url=settings.GEOCODING_BASE_URL,
        upstream_timeout=settings.UPSTREAM_TIMEOUT,
        cache_duration_minutes=settings.CACHE_DURATION_MINUTES,
        geocoding_cache_ttl=settings.GEOCODING_CACHE_TTL,
        cache_max_size=settings.CACHE_MAX_SIZE,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
        # Do NOT log API key
    )
    if settings.WEATHER_PROVIDER == "openweather" and not settings.OPENWEATHER_API_KEY:
        logger.warning("OPENWEATHER_API_KEY is not set, weather requests will be rejected upstream")

    app.state.services = build_services(settings)
    logger.info("Services initialized")

    # Register the shared store as the fastapi-cache2 backend
    FastAPICache.init(
        app.state.services.cache,
        prefix="weather-lookup:",
        expire=settings.cache_ttl_seconds,
    )
    logger.info("Cache initialized", max_size=settings.CACHE_MAX_SIZE)

    yield

    logger.info("Shutting down Weather Lookup API")
    await app.state.services.aclose()
    app.state.services = None
    FastAPICache.reset()


# Set up logging first
setup_logging()

# Set up metrics
setup_metrics()

app = FastAPI(
    title="Weather Lookup API",
    description="Resolve an address and return current conditions and a daily forecast",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.LOG_LEVEL == "DEBUG" else None,  # Swagger UI only in debug mode
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(routes.router, tags=["Weather"])


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint():
    """Prometheus metrics endpoint.

    Exposes OpenTelemetry metrics in Prometheus format for scraping.
    """
    return PlainTextResponse(generate_latest(REGISTRY).decode("utf-8"))


@app.exception_handler(WeatherLookupError)
async def lookup_error_handler(request: Request, exc: WeatherLookupError):
    """Render expected lookup failures as the standard error body.

    Validation and not-found failures map to 400, provider failures to 500.
    """
    logger.info(
        "Lookup failed",
        kind=exc.kind.value,
        stage=getattr(exc, "stage", None),
        status_code=exc.status_code,
    )
    body = ErrorResponse(error=exc.message, timestamp=datetime.now(timezone.utc))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors.

    Logs the exception and returns a generic error response to avoid
    exposing internal details to clients.
    """
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
    )

    body = ErrorResponse(error="Internal server error", timestamp=datetime.now(timezone.utc))
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


# Instrument with OpenTelemetry
FastAPIInstrumentor.instrument_app(app)

logger.info("FastAPI application created")
