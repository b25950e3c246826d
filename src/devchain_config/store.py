"""Main API for devchain-config library."""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .constants import REFERENCE_CONFIG
from .exceptions import DuplicateNetworkError, UnknownNetworkError
from .parsers import Source, parse_config, read_source, to_source_dict
from .paths import find_config_file
from .types import CompilerProfile, NetworkProfile, TestRunnerOptions

logger = logging.getLogger(__name__)


class NetworkConfigStore:
    """
    Validated, read-only network, compiler and test-runner configuration.

    Built once via load() and never mutated afterwards; pass it to
    consumers explicitly.
    """

    __slots__ = ("_networks", "_compiler", "_test_runner")

    def __init__(
        self,
        networks: Iterable[NetworkProfile],
        compiler: CompilerProfile,
        test_runner: TestRunnerOptions,
    ):
        """
        Initialize the store from already-validated values.

        Args:
            networks: Network profiles, in declaration order
            compiler: Compiler profile
            test_runner: Test-runner options

        Raises:
            DuplicateNetworkError: If two profiles share a name
        """
        by_name: Dict[str, NetworkProfile] = {}
        for profile in networks:
            if profile.name in by_name:
                raise DuplicateNetworkError(
                    f"Network '{profile.name}' is declared more than once",
                    f"networks.{profile.name}",
                )
            by_name[profile.name] = profile

        object.__setattr__(self, "_networks", MappingProxyType(by_name))
        object.__setattr__(self, "_compiler", compiler)
        object.__setattr__(self, "_test_runner", test_runner)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        # mappingproxy cannot be pickled; rebuild through __init__
        return (type(self), (self.list_networks(), self._compiler, self._test_runner))

    @classmethod
    def load(cls, source: Source) -> "NetworkConfigStore":
        """
        Parse and validate a configuration source.

        Args:
            source: Mapping, JSON or JS-module text, or path to a .json/.js file

        Returns:
            NetworkConfigStore

        Raises:
            SchemaError: If a required field is missing or has the wrong type
            DuplicateNetworkError: If two network profiles share a name
            RangeError: If port, gas or optimizer runs is out of bounds
            ConfigNotFoundError: If a path does not exist
        """
        data = read_source(source)
        networks, compiler, test_runner = parse_config(data)
        logger.debug(
            "Loaded %d network profile(s), %s %s",
            len(networks),
            compiler.toolchain_name,
            compiler.version,
        )
        return cls(networks, compiler, test_runner)

    @classmethod
    def from_file(cls, path: Optional[Union[Path, str]] = None) -> "NetworkConfigStore":
        """
        Load configuration from a file.

        Args:
            path: Config file path. If None, uses $DEVCHAIN_CONFIG or searches
                  the working directory and its parents for truffle-config.js,
                  truffle.js or truffle-config.json

        Raises:
            ConfigNotFoundError: If no config file is found
        """
        config_path = Path(path) if path is not None else find_config_file()
        logger.debug("Loading configuration from %s", config_path)
        return cls.load(config_path)

    @classmethod
    def default(cls) -> "NetworkConfigStore":
        """Reference setup: local Ganache nodes, solc 0.6.6, no test timeouts."""
        return cls.load(REFERENCE_CONFIG)

    @property
    def networks(self) -> Mapping[str, NetworkProfile]:
        """Read-only mapping of network name -> profile, in declaration order."""
        return self._networks

    @property
    def compiler(self) -> CompilerProfile:
        return self._compiler

    @property
    def test_runner(self) -> TestRunnerOptions:
        return self._test_runner

    def has_network(self, name: str) -> bool:
        """
        Check if a network profile exists.

        Args:
            name: Network name to check

        Returns:
            True if the profile exists, False otherwise
        """
        return name in self._networks

    def get_network(self, name: str) -> NetworkProfile:
        """
        Get a network profile by name.

        Args:
            name: Network name (e.g., "development")

        Returns:
            NetworkProfile

        Raises:
            UnknownNetworkError: If no profile has that name
        """
        if name not in self._networks:
            raise UnknownNetworkError(
                f"Network '{name}' not found in configuration", f"networks.{name}"
            )
        return self._networks[name]

    def list_networks(self) -> Tuple[NetworkProfile, ...]:
        """Get all network profiles in declaration order."""
        return tuple(self._networks.values())

    def network_names(self) -> List[str]:
        return list(self._networks)

    def get_compiler_profile(self) -> CompilerProfile:
        return self._compiler

    def get_test_runner_options(self) -> TestRunnerOptions:
        return self._test_runner

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the declarative source schema.

        Returns:
            Dictionary with networks, compilers and mocha sections
        """
        return to_source_dict(self.list_networks(), self._compiler, self._test_runner)

    def save(self, path: Union[Path, str]) -> Path:
        """
        Save configuration as JSON.

        Args:
            path: Output file path (parent directories are created)

        Returns:
            Path where configuration was saved
        """
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        return output_path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetworkConfigStore):
            return NotImplemented
        return (
            dict(self._networks) == dict(other._networks)
            and self._compiler == other._compiler
            and self._test_runner == other._test_runner
        )

    def __hash__(self) -> int:
        return hash((frozenset(self._networks.items()), self._compiler, self._test_runner))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(networks={self.network_names()!r}, "
            f"compiler={self._compiler!r}, test_runner={self._test_runner!r})"
        )
