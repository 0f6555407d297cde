#!/usr/bin/env python3
"""Instance Gateway - Main CLI Interface."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from instance_gateway import __version__
from instance_gateway.api.app import build_engine
from instance_gateway.api.exceptions import APIError
from instance_gateway.config import get_app_settings
from instance_gateway.containers.gateway import InstanceGateway
from instance_gateway.containers.volumes import VolumeStore

settings = get_app_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize CLI
app = typer.Typer(
    name="instance-gateway",
    help="Manage engine containers and their volume directories",
)
console = Console()

T = TypeVar("T")


def run_gateway(operation: Callable[[InstanceGateway], Awaitable[T]]) -> T:
    """Run one gateway operation against the configured engine.

    Args:
        operation: Coroutine function taking the gateway

    Returns:
        The operation's result
    """

    async def _run() -> T:
        engine = build_engine(settings)
        try:
            gateway = InstanceGateway(engine, VolumeStore(settings.volumes_dir))
            return await operation(gateway)
        finally:
            await engine.close()

    try:
        return asyncio.run(_run())
    except APIError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1) from e


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind"),
    port: int = typer.Option(8000, help="Port to listen on"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the HTTP gateway."""
    console.print(
        f"[bold blue]Serving instance gateway on[/bold blue] {host}:{port} "
        f"(prefix {settings.api_prefix})"
    )
    uvicorn.run(
        "instance_gateway.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("list")
def list_containers():
    """List all containers regardless of state."""
    containers = run_gateway(lambda gateway: gateway.list_containers())

    table = Table(title="Containers")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Image", style="yellow")
    table.add_column("State")

    for container in containers:
        names = container.get("Names") or []
        table.add_row(
            (container.get("Id") or "")[:12],
            ", ".join(n.lstrip("/") for n in names),
            container.get("Image", ""),
            container.get("State", ""),
        )

    console.print(table)
    console.print(f"Total: {len(containers)}")


@app.command()
def inspect(
    container_id: str = typer.Argument(..., help="Container ID or name"),
):
    """Display the engine's full record for a container."""
    data = run_gateway(lambda gateway: gateway.inspect(container_id))
    console.print_json(json.dumps(data))


@app.command()
def ports(
    container_id: str = typer.Argument(..., help="Container ID or name"),
):
    """List the ports of a container."""
    entries = run_gateway(lambda gateway: gateway.list_ports(container_id))

    if not entries:
        console.print("[yellow]No ports[/yellow]")
        return
    for entry in entries:
        console.print(f"  • {entry['port']}")


@app.command()
def delete(
    container_id: str = typer.Argument(..., help="Container ID or name"),
):
    """Delete a container and its volume directory."""
    result: Any = run_gateway(lambda gateway: gateway.delete(container_id))
    console.print(f"[green]✓[/green] Deleted container {container_id}")
    if result:
        console.print_json(json.dumps(result))


@app.command()
def purge(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete every container and every volume directory."""
    if not yes:
        typer.confirm(
            f"Remove ALL containers and everything under {settings.volumes_dir}?",
            abort=True,
        )

    report = run_gateway(lambda gateway: gateway.purge_all())

    for container_id in report.removed:
        console.print(f"[green]✓[/green] Removed {container_id[:12]}")
    for container_id, message in report.failed.items():
        console.print(f"[red]✗[/red] {container_id[:12]}: {message}")
    if report.swept:
        console.print(f"Swept volume directories: {', '.join(report.swept)}")
    console.print(f"\n[bold green]{report.message}[/bold green]")


@app.command()
def version():
    """Display version information."""
    console.print("[bold]Instance Gateway[/bold]")
    console.print(f"Version: {__version__}")
    console.print(f"Engine: {build_engine(settings).endpoint}")
    console.print(f"Volumes: {settings.volumes_dir}")


if __name__ == "__main__":
    app()
