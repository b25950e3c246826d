"""Data types and dataclasses for devchain-config library."""

from dataclasses import dataclass

from .constants import WILDCARD_NETWORK_ID


@dataclass(frozen=True)
class NetworkProfile:
    """Connection parameters for one blockchain node endpoint."""

    name: str  # Unique key, e.g., "development"
    host: str  # e.g., "127.0.0.1"
    port: int  # 1-65535
    network_id: str  # Decimal id or "*" for any network
    gas_limit: int  # Gas ceiling for transactions sent to this node

    @property
    def url(self) -> str:
        """HTTP JSON-RPC endpoint of the node."""
        host = self.host
        # IPv6 literals need brackets
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    @property
    def is_wildcard(self) -> bool:
        return self.network_id == WILDCARD_NETWORK_ID


@dataclass(frozen=True)
class CompilerProfile:
    """Compiler build and optimizer tuning."""

    toolchain_name: str  # e.g., "solc"
    version: str  # e.g., "0.6.6"
    optimizer_enabled: bool
    optimizer_runs: int  # Validated even when the optimizer is disabled


@dataclass(frozen=True)
class TestRunnerOptions:
    """Options handed to the external test runner."""

    __test__ = False  # not a pytest test class

    enable_timeouts: bool
