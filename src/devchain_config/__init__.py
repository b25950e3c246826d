"""
devchain-config: validated network, compiler and test-runner configuration
for smart contract toolchains
"""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    ConfigError,
    ConfigNotFoundError,
    DuplicateNetworkError,
    NetworkMismatchError,
    RangeError,
    SchemaError,
    UnknownNetworkError,
)
from .rpc import fetch_network_id, matches_network_id, verify_network
from .store import NetworkConfigStore
from .types import CompilerProfile, NetworkProfile, TestRunnerOptions

try:
    __version__ = version("devchain-config")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "NetworkConfigStore",
    "NetworkProfile",
    "CompilerProfile",
    "TestRunnerOptions",
    "fetch_network_id",
    "matches_network_id",
    "verify_network",
    "ConfigError",
    "ConfigNotFoundError",
    "SchemaError",
    "DuplicateNetworkError",
    "RangeError",
    "UnknownNetworkError",
    "NetworkMismatchError",
]
