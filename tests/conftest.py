"""Shared pytest fixtures for devchain-config tests."""

import copy
import json
from pathlib import Path
from typing import Any, Dict

import pytest

from devchain_config.constants import CONFIG_PATH_ENV


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def literal_source() -> Dict[str, Any]:
    """Return the single-network source used throughout the docs."""
    return {
        "networks": {
            "development": {
                "host": "127.0.0.1",
                "port": 7545,
                "network_id": "*",
                "gas": 8000000,
            }
        },
        "compilers": {
            "solc": {
                "version": "0.6.6",
                "settings": {"optimizer": {"enabled": True, "runs": 140}},
            }
        },
        "mocha": {"enableTimeouts": False},
    }


@pytest.fixture
def make_source(literal_source: Dict[str, Any]):
    """Return a factory producing a deep copy of literal_source for mutation."""

    def _make() -> Dict[str, Any]:
        return copy.deepcopy(literal_source)

    return _make


@pytest.fixture
def sample_config_json(fixtures_dir: Path) -> Dict[str, Any]:
    """Load and return the sample_config.json fixture."""
    with open(fixtures_dir / "sample_config.json") as f:
        return json.load(f)


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample JSON config file."""
    return fixtures_dir / "sample_config.json"


@pytest.fixture
def truffle_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample truffle-config.js file."""
    return fixtures_dir / "truffle-config.js"


@pytest.fixture
def duplicate_networks_path(fixtures_dir: Path) -> Path:
    """Return path to a JSON config declaring the same network twice."""
    return fixtures_dir / "duplicate_networks.json"


@pytest.fixture(autouse=True)
def clear_config_env(monkeypatch):
    """Keep a developer's $DEVCHAIN_CONFIG out of the tests."""
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
