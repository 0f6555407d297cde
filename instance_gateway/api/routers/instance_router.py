"""Container instance API router."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from instance_gateway.containers.gateway import InstanceGateway

router = APIRouter()


class PortEntry(BaseModel):
    """A port specifier published or exposed by a container."""

    port: str


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


def get_gateway(request: Request) -> InstanceGateway:
    """Get the gateway bound to the application."""
    return request.app.state.gateway


@router.get("/")
async def list_containers(
    gateway: InstanceGateway = Depends(get_gateway),
) -> list[dict[str, Any]]:
    """List all containers regardless of state.

    Returns:
        Container summaries as reported by the engine
    """
    return await gateway.list_containers()


# Registered before the /{container_id} routes so "purge" is never taken as an ID.
@router.get("/purge/all", response_model=MessageResponse)
async def purge_all(
    gateway: InstanceGateway = Depends(get_gateway),
) -> MessageResponse:
    """Delete every container and every volume directory.

    Returns:
        Success message; per-container failures are only logged
    """
    report = await gateway.purge_all()
    return MessageResponse(message=report.message)


@router.get("/{container_id}")
async def inspect_container(
    container_id: str,
    gateway: InstanceGateway = Depends(get_gateway),
) -> dict[str, Any]:
    """Get full details of a container.

    Args:
        container_id: Container ID or name

    Returns:
        Engine inspection record
    """
    return await gateway.inspect(container_id)


@router.get("/{container_id}/ports", response_model=list[PortEntry])
async def list_container_ports(
    container_id: str,
    gateway: InstanceGateway = Depends(get_gateway),
) -> list[dict[str, str]]:
    """List the ports of a container.

    Args:
        container_id: Container ID or name

    Returns:
        List of ``{"port": specifier}`` entries
    """
    return await gateway.list_ports(container_id)


@router.get("/{container_id}/delete")
async def delete_container(
    container_id: str,
    gateway: InstanceGateway = Depends(get_gateway),
) -> Any:
    """Delete a container and its volume directory.

    Args:
        container_id: Container ID or name

    Returns:
        Engine removal result
    """
    return await gateway.delete(container_id)
