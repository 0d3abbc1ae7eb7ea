from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from contextlib import asynccontextmanager
import structlog
import time

from pageviews.core.config import Settings, settings as default_settings
from pageviews.api import live, track
from pageviews.schemas.health import HealthResponse
from pageviews.services.event_store import EventStore
from pageviews.services.live import LiveCounter

# Configure structured logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
    ]
)

logger = structlog.get_logger()

HELP_TEXT = "Pageview telemetry running\nPOST /track?page=...\nGET /live\n"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle events"""
        store = EventStore(settings)
        # FatalStartupError propagates: the server must not start without a store
        await store.initialize()
        live_counter = LiveCounter(store, interval=settings.live_interval_seconds)

        app.state.event_store = store
        app.state.live_counter = live_counter
        logger.info("application_startup", app_name=settings.app_name)

        yield

        live_counter.close()
        await store.dispose()
        logger.info("application_shutdown")

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan
    )

    # Middleware for logging requests
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2)
        )

        return response

    # Include routers
    app.include_router(track.router)
    app.include_router(live.router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "app": settings.app_name}

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Root endpoint"""
        return HELP_TEXT

    return app


app = create_app()
