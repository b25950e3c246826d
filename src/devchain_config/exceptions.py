"""Custom exception classes for devchain-config library."""

from typing import Optional


class ConfigError(Exception):
    """Base exception for configuration errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ConfigNotFoundError(ConfigError, FileNotFoundError):
    """Raised when no configuration file can be found."""

    pass


class SchemaError(ConfigError, ValueError):
    """Raised when a required field is missing or has the wrong type."""

    pass


class DuplicateNetworkError(ConfigError, ValueError):
    """Raised when two network profiles share a name."""

    pass


class RangeError(ConfigError, ValueError):
    """Raised when a numeric field falls outside its valid bounds."""

    pass


class UnknownNetworkError(ConfigError, KeyError):
    """Raised when a requested network is not in the store."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class NetworkMismatchError(ConfigError, ValueError):
    """Raised when a node reports a network id the profile does not accept."""

    pass
