"""Node probing for devchain-config library."""

import logging
from typing import Union

import requests

from .exceptions import NetworkMismatchError
from .types import NetworkProfile

logger = logging.getLogger(__name__)


def fetch_network_id(profile: NetworkProfile, timeout: int = 30) -> str:
    """
    Ask a node for its network id via JSON-RPC `net_version`.

    Args:
        profile: Network profile to probe
        timeout: Request timeout in seconds

    Returns:
        Network id reported by the node, as a decimal string

    Raises:
        KeyError: If RPC response is missing required fields
        ValueError: If RPC returns an error
        RuntimeError: If network error occurs
    """
    try:
        response = requests.post(
            profile.url,
            json={
                "jsonrpc": "2.0",
                "method": "net_version",
                "params": [],
                "id": 1,
            },
            timeout=timeout,
        )

        if response.status_code != 200:
            raise RuntimeError(
                f"RPC request to {profile.url} failed with status {response.status_code}"
            )

        result = response.json()

        if "error" in result:
            raise ValueError(f"RPC error from {profile.url}: {result['error']}")

        return str(result["result"])

    except requests.RequestException as e:
        raise RuntimeError(f"Network error during RPC call to {profile.url}: {e}") from e


def matches_network_id(profile: NetworkProfile, node_network_id: Union[str, int]) -> bool:
    """
    Check whether a profile accepts a node's network id.

    A wildcard profile ("*") accepts any id.
    """
    return profile.is_wildcard or profile.network_id == str(node_network_id)


def verify_network(profile: NetworkProfile, timeout: int = 30) -> str:
    """
    Probe a node and check it serves the network the profile expects.

    Args:
        profile: Network profile to verify
        timeout: Request timeout in seconds

    Returns:
        Network id reported by the node

    Raises:
        NetworkMismatchError: If the node reports a different network id
    """
    node_network_id = fetch_network_id(profile, timeout=timeout)
    if not matches_network_id(profile, node_network_id):
        raise NetworkMismatchError(
            f"Node at {profile.url} reports network id {node_network_id}, "
            f"but network '{profile.name}' expects {profile.network_id}",
            f"networks.{profile.name}.network_id",
        )
    logger.debug("Network '%s' reachable at %s (id %s)", profile.name, profile.url, node_network_id)
    return node_network_id
