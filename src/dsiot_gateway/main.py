"""Main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dsiot_gateway import __version__
from dsiot_gateway.api.dependencies import app_state
from dsiot_gateway.api.routes import router as api_router
from dsiot_gateway.core.cache import StatusCache
from dsiot_gateway.core.config import Settings, setup_logging
from dsiot_gateway.core.models import HealthResponse
from dsiot_gateway.protocol.handler import ProtocolHandler
from dsiot_gateway.transport.http import HttpTransport

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    settings = app_state.settings or Settings()
    app_state.settings = settings

    setup_logging(settings.log_level)
    logger.info(f"Starting DSIOT Gateway v{__version__}")

    app_state.cache = StatusCache(ttl=settings.cache_ttl)
    app_state.transport = HttpTransport(settings.device_host, timeout=settings.request_timeout)
    app_state.handler = ProtocolHandler(app_state.transport, cache=app_state.cache)
    logger.info(f"Using device at {settings.device_host}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if app_state.transport is not None:
        await app_state.transport.close()


app = FastAPI(
    title="DSIOT Gateway",
    description="Local REST API gateway for DSIOT air conditioners",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "DSIOT Gateway",
        "version": __version__,
        "status": "running",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    handler = app_state.handler
    cache = app_state.cache
    host = app_state.settings.device_host if app_state.settings is not None else None

    if handler is None or cache is None:
        return HealthResponse(
            status="unhealthy",
            device_reachable=False,
            device_host=host,
            last_update=None,
        )

    reachable = handler.reachable
    status = "healthy" if reachable and cache.has_status else ("degraded" if reachable else "unhealthy")

    return HealthResponse(
        status=status,
        device_reachable=reachable,
        device_host=host,
        last_update=cache.last_update,
    )


def main():
    """Run the application (for CLI entry point)."""
    import uvicorn

    settings = Settings()
    setup_logging(settings.log_level)
    app_state.settings = settings

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
