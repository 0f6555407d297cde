"""Tests for the command line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

import main

runner = CliRunner()


@pytest.fixture
def cli_engine(engine, volumes_root: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(main, "build_engine", lambda settings: engine)
    monkeypatch.setattr(main.settings, "volumes_dir", volumes_root)
    return engine


def test_list(cli_engine):
    cli_engine.add("a1b2c3d4e5f6a7", "web")

    result = runner.invoke(main.app, ["list"])

    assert result.exit_code == 0
    assert "a1b2c3d4e5f6" in result.output
    assert "web" in result.output
    assert cli_engine.closed is True


def test_list_engine_down(cli_engine):
    cli_engine.list_error = "daemon gone"

    result = runner.invoke(main.app, ["list"])

    assert result.exit_code == 1
    assert "daemon gone" in result.output


def test_ports(cli_engine):
    cli_engine.add("a1", "web", ports={"80/tcp": None})

    result = runner.invoke(main.app, ["ports", "a1"])

    assert result.exit_code == 0
    assert "80/tcp" in result.output


def test_inspect_unknown(cli_engine):
    result = runner.invoke(main.app, ["inspect", "zz"])

    assert result.exit_code == 1
    assert "Container not found" in result.output


def test_delete(cli_engine, make_volume):
    cli_engine.add("a1", "web")
    volume = make_volume("web")

    result = runner.invoke(main.app, ["delete", "a1"])

    assert result.exit_code == 0
    assert not volume.exists()


def test_purge_requires_confirmation(cli_engine, make_volume):
    cli_engine.add("a1", "web")
    volume = make_volume("web")

    result = runner.invoke(main.app, ["purge"], input="n\n")

    assert result.exit_code == 1
    assert volume.exists()
    assert "a1" in cli_engine.records


def test_purge(cli_engine, make_volume, volumes_root: Path):
    cli_engine.add("a1", "web")
    cli_engine.add("b2", "db")
    cli_engine.remove_errors.add("b2")
    make_volume("web")
    make_volume("orphan")

    result = runner.invoke(main.app, ["purge", "--yes"])

    assert result.exit_code == 0
    assert "All containers and volume directories deleted" in result.output
    assert "removal in progress" in result.output
    assert list(volumes_root.iterdir()) == []
