"""Shared fixtures for instance gateway tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from instance_gateway.api.app import create_app
from instance_gateway.config import GatewaySettings
from instance_gateway.containers.engine import EngineError
from instance_gateway.containers.gateway import InstanceGateway
from instance_gateway.containers.volumes import VolumeStore


class FakeEngine:
    """In-memory container engine."""

    def __init__(self):
        self.records: dict[str, dict[str, Any]] = {}
        self.list_error: str | None = None
        self.inspect_errors: set[str] = set()
        self.remove_errors: set[str] = set()
        self.removed: list[str] = []
        self.closed = False
        self.reachable = True
        self.endpoint = "fake://engine"

    def add(
        self,
        container_id: str,
        name: str,
        ports: dict[str, Any] | None = None,
        network_settings: bool = True,
    ) -> dict[str, Any]:
        record: dict[str, Any] = {
            "Id": container_id,
            "Name": f"/{name}",
            "State": {"Status": "running"},
        }
        if network_settings:
            record["NetworkSettings"] = {"Ports": ports}
        self.records[container_id] = record
        return record

    def _resolve(self, ref: str) -> str:
        if ref in self.records:
            return ref
        for container_id, record in self.records.items():
            if record["Name"].lstrip("/") == ref:
                return container_id
        raise EngineError(f"No such container: {ref}", 404)

    async def list_containers(self, all: bool = True) -> list[dict[str, Any]]:  # noqa: A002
        if self.list_error:
            raise EngineError(self.list_error)
        return [
            {"Id": cid, "Names": [rec["Name"]], "Image": "busybox", "State": "running"}
            for cid, rec in self.records.items()
        ]

    async def inspect_container(self, container_id: str) -> dict[str, Any]:
        resolved = self._resolve(container_id)
        if resolved in self.inspect_errors:
            raise EngineError("inspect exploded", 500)
        return self.records[resolved]

    async def remove_container(self, container_id: str, force: bool = True) -> Any:
        resolved = self._resolve(container_id)
        if resolved in self.remove_errors:
            raise EngineError("removal in progress", 409)
        del self.records[resolved]
        self.removed.append(resolved)
        return None

    async def ping(self) -> bool:
        return self.reachable

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def volumes_root(tmp_path: Path) -> Path:
    root = tmp_path / "volumes"
    root.mkdir()
    return root


@pytest.fixture
def volumes(volumes_root: Path) -> VolumeStore:
    return VolumeStore(volumes_root)


@pytest.fixture
def gateway(engine: FakeEngine, volumes: VolumeStore) -> InstanceGateway:
    return InstanceGateway(engine, volumes)


@pytest.fixture
def settings(volumes_root: Path) -> GatewaySettings:
    return GatewaySettings(volumes_dir=volumes_root, enable_cors=False)


@pytest.fixture
def client(settings: GatewaySettings, engine: FakeEngine):
    app = create_app(settings, engine=engine)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_volume(volumes_root: Path):
    """Create populated volume directories under the volumes root."""

    def _make(name: str) -> Path:
        path = volumes_root / name
        (path / "data").mkdir(parents=True)
        (path / "data" / "file.txt").write_text("payload")
        return path

    return _make
