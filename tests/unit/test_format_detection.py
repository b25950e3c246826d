"""Unit tests for configuration source format detection and reading."""

from pathlib import Path

import pytest

from devchain_config.exceptions import ConfigNotFoundError, SchemaError
from devchain_config.parsers import SourceFormat, detect_source_format, read_source


class TestDetectSourceFormat:
    """Test the detect_source_format function."""

    def test_detects_mapping(self, literal_source):
        """Test that dicts are recognized as already decoded."""
        assert detect_source_format(literal_source) == SourceFormat.MAPPING

    def test_detects_json_text(self):
        """Test that text starting with "{" is JSON."""
        assert detect_source_format('  {"networks": {}}') == SourceFormat.JSON

    def test_detects_js_module_text(self):
        """Test that module.exports text is a JS module."""
        assert detect_source_format("module.exports = {};") == SourceFormat.JS_MODULE

    def test_detects_json_file_by_suffix(self, sample_config_path: Path):
        """Test .json suffix detection."""
        assert detect_source_format(sample_config_path) == SourceFormat.JSON

    def test_detects_js_file_by_suffix(self, truffle_config_path: Path):
        """Test .js suffix detection."""
        assert detect_source_format(truffle_config_path) == SourceFormat.JS_MODULE

    def test_unknown_suffix_falls_back_to_content(self, tmp_path: Path):
        """Test that files without a known suffix are sniffed."""
        config_file = tmp_path / "devchain.conf"
        config_file.write_text('{"networks": {}}')

        assert detect_source_format(config_file) == SourceFormat.JSON

    def test_unsupported_type_raises(self):
        """Test that other source types are rejected."""
        with pytest.raises(SchemaError):
            detect_source_format(42)

    def test_format_values(self):
        """Test that enum values are stable."""
        assert SourceFormat.JSON.value == "json"
        assert SourceFormat.JS_MODULE.value == "js-module"
        assert SourceFormat.MAPPING.value == "mapping"


class TestReadSource:
    """Test the read_source function."""

    def test_mapping_returned_as_is(self, literal_source):
        """Test that mappings pass through untouched."""
        assert read_source(literal_source) is literal_source

    def test_reads_json_file(self, sample_config_path: Path, sample_config_json):
        """Test reading a JSON file."""
        assert read_source(sample_config_path) == sample_config_json

    def test_reads_js_file(self, truffle_config_path: Path):
        """Test reading a truffle-config.js file."""
        data = read_source(truffle_config_path)
        assert "mutNet10" in data["networks"]

    def test_missing_file_raises_config_not_found(self, tmp_path: Path):
        """Test that missing files raise ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            read_source(tmp_path / "truffle-config.js")

    def test_invalid_json_raises_schema_error(self):
        """Test that malformed JSON is a SchemaError."""
        with pytest.raises(SchemaError):
            read_source("{ invalid json }")

    def test_non_object_root_raises_schema_error(self, tmp_path: Path):
        """Test that a JSON array root is rejected."""
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2, 3]")

        with pytest.raises(SchemaError):
            read_source(config_file)
