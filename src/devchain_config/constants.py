"""Configuration constants for devchain-config library."""

# Truffle treats "*" as "match any network id"
WILDCARD_NETWORK_ID = "*"

MIN_PORT = 1
MAX_PORT = 65535

# solc defaults when the optimizer block is omitted
DEFAULT_OPTIMIZER_ENABLED = False
DEFAULT_OPTIMIZER_RUNS = 200

# mocha runs with per-test timeouts unless told otherwise
DEFAULT_ENABLE_TIMEOUTS = True

# Environment variable naming an explicit config file
CONFIG_PATH_ENV = "DEVCHAIN_CONFIG"

# Searched in each directory, in order
CONFIG_FILENAMES = ("truffle-config.js", "truffle.js", "truffle-config.json")

# Keys understood inside a network profile; anything else is ignored
NETWORK_KEYS = frozenset({"host", "port", "network_id", "gas"})


def _local_network(port: int) -> dict:
    return {"host": "127.0.0.1", "port": port, "network_id": "*", "gas": 8000000}


# Reference setup: Ganache GUI on 7545 plus ten ganache-cli nodes on 8545-8554
REFERENCE_CONFIG = {
    "networks": {
        "development": _local_network(7545),
        **{f"mutNet{i}": _local_network(8544 + i) for i in range(1, 11)},
    },
    "compilers": {
        "solc": {
            "version": "0.6.6",
            "settings": {"optimizer": {"enabled": True, "runs": 140}},
        }
    },
    "mocha": {"enableTimeouts": False},
}
