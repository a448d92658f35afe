"""Pytest fixtures for trapdoor tests.

Configures logging and provides config directories, stores and registries
which never share state between tests.
"""

from collections.abc import Callable, Generator
import json
import logging
from pathlib import Path
from typing import Any

import pytest

from trapdoor.host.element import HostElement, HostMode
from trapdoor.host.registry import ConfigStore, HostRegistry
from tests import CONFIGURED_HOST, JSON_CONFIG, TEXT_CONFIG


@pytest.fixture(scope="session", autouse=True)
def configure_logging() -> Generator[None]:
    """Configure root logger for test session."""
    logging.basicConfig(level=logging.DEBUG, force=True)
    logger = logging.getLogger()
    logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    yield
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Empty config directory."""
    path = tmp_path / "configs"
    path.mkdir()
    return path


@pytest.fixture
def write_json(config_dir: Path) -> Callable[[Any], Path]:
    """Write the structured config resource."""

    def _write(data: Any) -> Path:
        file_path = config_dir / JSON_CONFIG
        file_path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def write_text(config_dir: Path) -> Callable[[str], Path]:
    """Write the line based config resource."""

    def _write(content: str) -> Path:
        file_path = config_dir / TEXT_CONFIG
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def configured() -> list[HostElement]:
    """Default configured elements."""
    return [
        HostElement("Production", "prod", CONFIGURED_HOST),
        HostElement("Staging", "staging", "staging.example.invalid", "https"),
        HostElement("Pinned", "pinned", CONFIGURED_HOST, "http", HostMode.DNS, "127.0.0.1"),
    ]


@pytest.fixture
def store(configured: list[HostElement]) -> ConfigStore:
    """Config store loaded with the default elements."""
    config_store = ConfigStore()
    config_store.load(configured)
    return config_store


@pytest.fixture
def registry(store: ConfigStore) -> Generator[HostRegistry]:
    """Registry on the loaded store."""
    host_registry = HostRegistry(store)
    yield host_registry
    host_registry.dispose()
