"""FastAPI application for the container instance gateway."""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from instance_gateway import __version__
from instance_gateway.api.exceptions import APIError
from instance_gateway.api.routers import instance_router
from instance_gateway.config import GatewaySettings, get_app_settings
from instance_gateway.containers.engine import ContainerEngine, DockerEngineClient
from instance_gateway.containers.gateway import InstanceGateway
from instance_gateway.containers.volumes import VolumeStore

logger = logging.getLogger(__name__)

# Track app start time
APP_START_TIME = datetime.now()


def build_engine(settings: GatewaySettings) -> DockerEngineClient:
    """Create the Docker engine client described by the settings.

    Args:
        settings: Gateway settings

    Returns:
        Engine client (not yet connected)
    """
    return DockerEngineClient(
        socket_path=settings.docker_socket,
        api_version=settings.docker_api_version,
        timeout=settings.engine_timeout,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Args:
        app: FastAPI application
    """
    settings: GatewaySettings = app.state.settings
    # Startup
    logger.info("Starting instance gateway...")
    logger.info(f"Volumes directory: {settings.volumes_dir}")
    yield
    # Shutdown
    logger.info("Shutting down instance gateway...")
    close = getattr(app.state.gateway.engine, "close", None)
    if close is not None:
        await close()


def create_app(
    settings: GatewaySettings | None = None,
    engine: ContainerEngine | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Gateway settings, read from the environment when omitted
        engine: Container engine, a Docker engine client when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_app_settings()
    if engine is None:
        engine = build_engine(settings)

    app = FastAPI(
        title="Instance Gateway",
        version=__version__,
        description="HTTP control surface for containers and their volume directories",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.gateway = InstanceGateway(engine, VolumeStore(settings.volumes_dir))

    if settings.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add process time and request ID headers to responses."""
        start_time = time.time()
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):  # noqa: ARG001
        """Render API errors as a message body."""
        return JSONResponse(
            status_code=exc.status_code, content={"message": exc.message}
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        uptime = (datetime.now() - APP_START_TIME).total_seconds()
        ping = getattr(app.state.gateway.engine, "ping", None)
        engine_ok = await ping() if ping is not None else True
        return {
            "status": "healthy" if engine_ok else "degraded",
            "version": __version__,
            "uptime": uptime,
            "engine": "connected" if engine_ok else "unavailable",
        }

    app.include_router(
        instance_router.router,
        prefix=settings.api_prefix.rstrip("/"),
        tags=["instances"],
    )

    return app
