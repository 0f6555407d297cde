"""Container lifecycle gateway.

Every operation goes to the container engine, which is the source of truth;
nothing is cached between calls. The only local state touched is the volume
directory belonging to a container, which is removed together with it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from instance_gateway.api.exceptions import (
    ContainerNotFoundError,
    EngineUnavailableError,
    MissingContainerIdError,
)
from instance_gateway.containers.engine import ContainerEngine, EngineError
from instance_gateway.containers.volumes import VolumeStore

logger = logging.getLogger(__name__)

PURGE_MESSAGE = "All containers and volume directories deleted"


@dataclass
class PurgeReport:
    """Outcome of a purge, one entry per container."""

    removed: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    swept: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return PURGE_MESSAGE


def _require_id(container_id: str | None) -> str:
    if not container_id:
        raise MissingContainerIdError()
    return container_id


class InstanceGateway:
    """Passes container commands to the engine and keeps volume dirs in step."""

    def __init__(self, engine: ContainerEngine, volumes: VolumeStore):
        """Initialize gateway.

        Args:
            engine: Container engine to forward commands to
            volumes: Store holding the per-container volume directories
        """
        self.engine = engine
        self.volumes = volumes

    async def list_containers(self) -> list[dict[str, Any]]:
        """List all containers, running or not.

        Returns:
            Engine container summaries, unmodified

        Raises:
            EngineUnavailableError: If the engine cannot list containers
        """
        try:
            return await self.engine.list_containers(all=True)
        except EngineError as e:
            logger.error(f"Failed to list containers: {e.message}")
            raise EngineUnavailableError(e.message) from e

    async def inspect(self, container_id: str | None) -> dict[str, Any]:
        """Get the engine's full record for a container.

        Args:
            container_id: Container ID or name

        Returns:
            Engine inspection record, unmodified

        Raises:
            MissingContainerIdError: If no ID was given
            ContainerNotFoundError: If the engine cannot inspect the container
        """
        container_id = _require_id(container_id)
        try:
            return await self.engine.inspect_container(container_id)
        except EngineError as e:
            logger.debug(f"Inspect of {container_id} failed: {e.message}")
            raise ContainerNotFoundError(container_id) from e

    async def list_ports(self, container_id: str | None) -> list[dict[str, str]]:
        """List the port specifiers a container publishes or exposes.

        Args:
            container_id: Container ID or name

        Returns:
            One ``{"port": specifier}`` entry per port, e.g. ``"80/tcp"``
        """
        data = await self.inspect(container_id)
        ports = (data.get("NetworkSettings") or {}).get("Ports") or {}
        return [{"port": key} for key in ports]

    async def delete(self, container_id: str | None) -> Any:
        """Force-remove a container, then its volume directory.

        The volume directory is resolved from the name the engine reports,
        never from ``container_id``, and is removed only once the engine has
        confirmed the container removal.

        Args:
            container_id: Container ID or name

        Returns:
            The engine's removal result

        Raises:
            MissingContainerIdError: If no ID was given
            ContainerNotFoundError: If the container cannot be inspected or
                removed; the volume directory is left untouched
        """
        data = await self.inspect(container_id)
        name = data.get("Name") or ""

        try:
            result = await self.engine.remove_container(container_id, force=True)
        except EngineError as e:
            logger.warning(f"Removal of {container_id} failed: {e.message}")
            raise ContainerNotFoundError(container_id) from e

        if name:
            await asyncio.to_thread(self.volumes.remove, name)
        return result

    async def purge_all(self) -> PurgeReport:
        """Remove every container and every volume directory.

        Containers are handled one at a time. A failure on one container is
        logged and recorded, and the loop moves on. Once all containers have
        been tried, every subdirectory left under the volumes root is removed.

        Returns:
            Per-container outcomes

        Raises:
            EngineUnavailableError: If the initial container listing fails
        """
        containers = await self.list_containers()
        report = PurgeReport()

        for summary in containers:
            container_id = summary.get("Id") or ""
            try:
                data = await self.engine.inspect_container(container_id)
                name = data.get("Name") or ""
                await self.engine.remove_container(container_id, force=True)
                if name:
                    await asyncio.to_thread(self.volumes.remove, name)
            except (EngineError, OSError) as e:
                message = getattr(e, "message", None) or str(e)
                logger.error(
                    f"Error deleting container or volume for {container_id}: {message}"
                )
                report.failed[container_id] = message
                continue
            report.removed.append(container_id)

        report.swept = await asyncio.to_thread(self.volumes.sweep)
        logger.info(
            f"Purge finished: {len(report.removed)} removed, "
            f"{len(report.failed)} failed, {len(report.swept)} directories swept"
        )
        return report
