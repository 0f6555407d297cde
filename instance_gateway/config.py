"""Gateway configuration loaded from the environment."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

# Fixed volumes root next to the package, independent of the working directory
DEFAULT_VOLUMES_DIR = Path(__file__).resolve().parent.parent / "volumes"


class GatewaySettings(BaseModel):
    """Instance gateway configuration settings."""

    docker_socket: str | None = None
    docker_api_version: str | None = None
    engine_timeout: float | None = None
    volumes_dir: Path = DEFAULT_VOLUMES_DIR
    api_prefix: str = "/instances"
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    enable_cors: bool = True


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_app_settings() -> GatewaySettings:
    """Get application settings from environment variables.

    Without ``DOCKER_SOCKET`` the Docker SDK's own environment handling
    (``DOCKER_HOST``, ``DOCKER_TLS_VERIFY``, ...) decides where the engine is.

    Returns:
        GatewaySettings instance
    """
    values: dict = {
        "docker_socket": os.getenv("DOCKER_SOCKET") or os.getenv("dockerSocket") or None,
        "docker_api_version": os.getenv("DOCKER_API_VERSION") or None,
        "api_prefix": os.getenv("GATEWAY_API_PREFIX", "/instances"),
        "debug": _env_flag("GATEWAY_DEBUG"),
        "log_level": os.getenv("GATEWAY_LOG_LEVEL", "INFO").upper(),
    }

    timeout = os.getenv("ENGINE_TIMEOUT")
    if timeout:
        values["engine_timeout"] = float(timeout)

    volumes_dir = os.getenv("VOLUMES_DIR")
    if volumes_dir:
        values["volumes_dir"] = Path(volumes_dir)

    origins = os.getenv("GATEWAY_ALLOWED_ORIGINS")
    if origins:
        values["allowed_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    return GatewaySettings(**values)
