"""Unit tests for custom exception classes."""

import pytest

from devchain_config.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    DuplicateNetworkError,
    NetworkMismatchError,
    RangeError,
    SchemaError,
    UnknownNetworkError,
)


class TestExceptionCatching:
    """Test that exceptions can be caught as their base types."""

    def test_catch_config_not_found_as_file_not_found_error(self):
        """Test that ConfigNotFoundError can be caught as FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            raise ConfigNotFoundError("test")

    def test_catch_schema_error_as_value_error(self):
        """Test that SchemaError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise SchemaError("test")

    def test_catch_duplicate_network_as_value_error(self):
        """Test that DuplicateNetworkError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise DuplicateNetworkError("test")

    def test_catch_range_error_as_value_error(self):
        """Test that RangeError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise RangeError("test")

    def test_catch_unknown_network_as_key_error(self):
        """Test that UnknownNetworkError can be caught as KeyError."""
        with pytest.raises(KeyError):
            raise UnknownNetworkError("test")

    def test_catch_network_mismatch_as_value_error(self):
        """Test that NetworkMismatchError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise NetworkMismatchError("test")

    def test_catch_all_as_config_error(self):
        """Test that all custom exceptions can be caught as ConfigError."""
        exceptions = [
            ConfigNotFoundError("test"),
            SchemaError("test"),
            DuplicateNetworkError("test"),
            RangeError("test"),
            UnknownNetworkError("test"),
            NetworkMismatchError("test"),
        ]

        for exc in exceptions:
            with pytest.raises(ConfigError):
                raise exc


class TestExceptionCreation:
    """Test creating exceptions with messages and field paths."""

    def test_exceptions_accept_string_messages(self):
        """Test that all exceptions render their message unchanged."""
        exceptions = [
            ConfigError,
            ConfigNotFoundError,
            SchemaError,
            DuplicateNetworkError,
            RangeError,
            UnknownNetworkError,
            NetworkMismatchError,
        ]

        for exc_class in exceptions:
            exc = exc_class("test message")
            assert str(exc) == "test message"

    def test_field_defaults_to_none(self):
        """Test that field is None when not given."""
        assert SchemaError("test").field is None

    def test_field_is_kept(self):
        """Test that the offending field path is exposed."""
        exc = RangeError("bad port", "networks.development.port")
        assert exc.field == "networks.development.port"
        assert str(exc) == "bad port"
