"""Container engine capability and its Docker SDK implementation.

The gateway only needs three engine operations (list, inspect, remove). They
are described by the ``ContainerEngine`` protocol so the gateway can run
against any implementation; ``DockerEngineClient`` is the production one.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

import docker
import requests
from docker.errors import APIError, DockerException, NotFound

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EngineError(Exception):
    """Error reported by, or while talking to, the container engine."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


class ContainerEngine(Protocol):
    """Operations the gateway needs from a container engine."""

    async def list_containers(self, all: bool = True) -> list[dict[str, Any]]:  # noqa: A002
        ...

    async def inspect_container(self, container_id: str) -> dict[str, Any]:
        ...

    async def remove_container(self, container_id: str, force: bool = True) -> Any:
        ...


class DockerEngineClient:
    """Docker engine access through the Docker SDK.

    SDK calls are blocking, so each one runs in a worker thread.
    """

    def __init__(
        self,
        socket_path: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        client: docker.DockerClient | None = None,
    ):
        """Initialize the client.

        Args:
            socket_path: Path of the engine's Unix socket; the SDK's
                environment settings (``DOCKER_HOST`` etc.) are used when omitted
            api_version: Engine API version, negotiated when omitted
            timeout: Timeout per engine call in seconds, ``None`` to wait
                indefinitely
            client: Ready-made Docker client to use instead of creating one
        """
        self._socket_path = socket_path
        self._api_version = api_version
        self._timeout = timeout
        self._client = client

    @property
    def endpoint(self) -> str:
        if self._socket_path:
            return f"unix://{self._socket_path}"
        return os.getenv("DOCKER_HOST") or "unix:///var/run/docker.sock"

    def _get_client(self) -> docker.DockerClient:
        """Get or create the Docker client."""
        if self._client is None:
            if self._socket_path:
                self._client = docker.DockerClient(
                    base_url=f"unix://{self._socket_path}",
                    version=self._api_version,
                    timeout=self._timeout,
                )
            else:
                self._client = docker.from_env(
                    version=self._api_version, timeout=self._timeout
                )
            logger.info(f"Docker client connected to {self.endpoint}")
        return self._client

    async def _call(self, operation: Callable[[docker.DockerClient], T]) -> T:
        """Run a blocking SDK operation in a worker thread.

        Raises:
            EngineError: On any engine, transport or decoding failure
        """

        def _run() -> T:
            return operation(self._get_client())

        try:
            return await asyncio.to_thread(_run)
        except NotFound as e:
            raise EngineError(e.explanation or str(e), 404) from e
        except APIError as e:
            raise EngineError(e.explanation or str(e), e.status_code) from e
        except (DockerException, requests.exceptions.RequestException) as e:
            logger.debug(f"Engine call against {self.endpoint} failed: {e}")
            raise EngineError(str(e) or e.__class__.__name__) from e
        except (ValueError, OSError) as e:
            raise EngineError(str(e) or e.__class__.__name__) from e

    async def close(self) -> None:
        """Close the Docker client."""
        if self._client is not None:
            client, self._client = self._client, None
            await asyncio.to_thread(client.close)

    async def list_containers(self, all: bool = True) -> list[dict[str, Any]]:  # noqa: A002
        """List containers.

        Args:
            all: Include stopped containers

        Returns:
            Container summaries as reported by the engine
        """
        return await self._call(lambda client: client.api.containers(all=all)) or []

    async def inspect_container(self, container_id: str) -> dict[str, Any]:
        """Get the engine's full record for a container."""
        return await self._call(lambda client: client.api.inspect_container(container_id))

    async def remove_container(self, container_id: str, force: bool = True) -> Any:
        """Remove a container, killing it first when ``force`` is set."""
        return await self._call(
            lambda client: client.api.remove_container(container_id, force=force)
        )

    async def ping(self) -> bool:
        """Check whether the engine is reachable.

        Returns:
            True if the engine answered the ping
        """
        try:
            return bool(await self._call(lambda client: client.ping()))
        except EngineError:
            return False
