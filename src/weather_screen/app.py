"""Main FastAPI application."""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import REGISTRY, generate_latest

from .api import health, routes
from .core.config import settings
from .services.location import build_location_provider
from .services.openweather import WeatherGateway
from .services.session import WeatherSession


def setup_logging():
    """Configure loguru for structured logging.

    Logs are written to stderr at the configured level; structured
    context passed as keyword arguments is rendered from `extra`.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}",
        level=settings.LOG_LEVEL,
        serialize=False,
        colorize=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT != "production",
    )

    logger.info("Logging configured", level=settings.LOG_LEVEL)


def setup_metrics():
    """Configure OpenTelemetry metrics with the Prometheus exporter."""
    reader = PrometheusMetricReader()

    resource = Resource.create(
        {
            "service.name": "weather-screen",
            "service.version": "0.1.0",
        }
    )

    provider = MeterProvider(
        resource=resource,
        metric_readers=[reader],
    )
    metrics.set_meter_provider(provider)

    logger.info("OpenTelemetry metrics configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Startup mounts the single screen session: the location is resolved once,
    and weather is fetched right away when AUTO_FETCH is set.

    Args:
        app: FastAPI application instance
    """
    logger.info("Starting Weather Screen")

    logger.info(
        "Configuration loaded",
        openweather_base_url=settings.OPENWEATHER_BASE_URL,
        api_key_configured=settings.OPENWEATHER_API_KEY is not None,
        upstream_timeout=settings.UPSTREAM_TIMEOUT,
        location_source=settings.LOCATION_SOURCE,
        location_permission_granted=settings.LOCATION_PERMISSION_GRANTED,
        auto_fetch=settings.AUTO_FETCH,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
        # Do NOT log API key or coordinates
    )

    app.state.gateway = WeatherGateway()
    app.state.session = WeatherSession(
        build_location_provider(settings),
        app.state.gateway,
        auto_fetch=settings.AUTO_FETCH,
    )
    state = await app.state.session.start()
    logger.info("Session mounted", state=state.kind)

    yield

    logger.info("Shutting down Weather Screen")


setup_logging()

setup_metrics()

app = FastAPI(
    title="Weather Screen",
    description="Current weather and 5-day forecast for the device location, assembled for a single-screen client",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.LOG_LEVEL == "DEBUG" else None,
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
    """Prometheus metrics in text format for scraping."""
    return PlainTextResponse(generate_latest(REGISTRY).decode("utf-8"))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors and return a generic 500 without internal details."""
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


FastAPIInstrumentor.instrument_app(app)

logger.info("FastAPI application created")
