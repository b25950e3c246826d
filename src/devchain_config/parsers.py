"""Configuration source parsers for devchain-config library."""

import json
import logging
import math
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .constants import (
    DEFAULT_ENABLE_TIMEOUTS,
    DEFAULT_OPTIMIZER_ENABLED,
    DEFAULT_OPTIMIZER_RUNS,
    MAX_PORT,
    MIN_PORT,
    NETWORK_KEYS,
)
from .exceptions import ConfigNotFoundError, DuplicateNetworkError, RangeError, SchemaError
from .types import CompilerProfile, NetworkProfile, TestRunnerOptions

logger = logging.getLogger(__name__)

Source = Union[Mapping[str, Any], str, "os.PathLike[str]"]

_SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$")

_JS_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<line_comment>//[^\n]*)
    |(?P<block_comment>/\*.*?\*/)
    |(?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
    |(?P<number>-?(?:0[xX][0-9a-fA-F_]+|(?:\d[\d_]*)?\.?\d[\d_]*(?:[eE][+-]?\d+)?))
    |(?P<ident>[A-Za-z_$][\w$]*)
    |(?P<punct>[{}\[\]:,;.=()])
    """,
    re.VERBOSE | re.DOTALL,
)

_JS_LITERALS = {"true", "false", "null"}

# Widest value any field can hold: a uint256
_MAX_DECIMAL_DIGITS = 78
_MAX_HEX_DIGITS = 64
_JSON_PUNCT = {"{", "}", "[", "]", ":", ","}


class SourceFormat(Enum):
    """
    Configuration source formats.

    - MAPPING: an already-decoded mapping
    - JSON: JSON text or a .json file
    - JS_MODULE: a truffle-config.js style `module.exports = {...};` file
    """

    MAPPING = "mapping"
    JSON = "json"
    JS_MODULE = "js-module"


class _KeyedObject(dict):
    """Decoded object that remembers keys appearing more than once."""

    def __init__(self, pairs: List[Tuple[str, Any]]):
        super().__init__()
        self.duplicates: List[str] = []
        for key, value in pairs:
            if key in self and key not in self.duplicates:
                self.duplicates.append(key)
            self[key] = value


def detect_source_format(source: Source) -> SourceFormat:
    """
    Detect the format of a configuration source.

    Paths are classified by suffix (.json, .js/.cjs), falling back to their
    content. Text starting with "{" is JSON; anything else is treated as a
    JS module. read_source() retries JSON text that fails to decode as a
    bare JS object literal.

    Args:
        source: Mapping, text, or path

    Returns:
        Detected SourceFormat
    """
    if isinstance(source, Mapping):
        return SourceFormat.MAPPING

    if isinstance(source, os.PathLike):
        suffix = Path(source).suffix.lower()
        if suffix == ".json":
            return SourceFormat.JSON
        if suffix in (".js", ".cjs"):
            return SourceFormat.JS_MODULE
        return detect_source_format(_read_text(Path(source)))

    if not isinstance(source, str):
        raise SchemaError(
            f"Unsupported configuration source of type {type(source).__name__}"
        )

    if source.lstrip().startswith("{"):
        return SourceFormat.JSON
    return SourceFormat.JS_MODULE


def read_source(source: Source) -> Mapping[str, Any]:
    """
    Decode a configuration source into a mapping.

    Args:
        source: Mapping, JSON/JS text, or path to a .json/.js file

    Returns:
        Decoded top-level mapping

    Raises:
        ConfigNotFoundError: If a path does not exist
        SchemaError: If the text cannot be decoded or is not an object
    """
    source_format = detect_source_format(source)

    if source_format is SourceFormat.MAPPING:
        return source  # type: ignore[return-value]

    if isinstance(source, os.PathLike):
        text = _read_text(Path(source))
    else:
        text = source

    if source_format is SourceFormat.JS_MODULE:
        data = decode_json(js_module_to_json(text))
    else:
        try:
            data = decode_json(text)
        except SchemaError as json_error:
            if isinstance(source, os.PathLike):
                raise
            # Bare object literal with unquoted keys
            try:
                converted = js_module_to_json(text)
            except SchemaError:
                raise json_error from None
            data = decode_json(converted)
    if not isinstance(data, Mapping):
        raise SchemaError("Configuration root must be an object")
    return data


def _read_text(path: Path) -> str:
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError as e:
        raise ConfigNotFoundError(f"Configuration file not found at {path}") from e
    except UnicodeDecodeError as e:
        raise SchemaError(f"Configuration file {path} is not valid UTF-8: {e}") from e


def decode_json(text: str) -> Any:
    """
    Decode JSON text, keeping track of repeated object keys.

    Objects are returned as dicts carrying a `duplicates` list so that the
    section parsers can reject repeated network names or fields.

    Raises:
        SchemaError: If the text is not valid JSON
    """
    try:
        return json.loads(text, object_pairs_hook=_KeyedObject)
    except ValueError as e:
        # JSONDecodeError, or an integer over the int conversion digit limit
        raise SchemaError(f"Invalid JSON configuration: {e}") from e


def js_module_to_json(text: str) -> str:
    """
    Convert a JS module exporting an object literal to JSON text.

    Supported: comments, an optional "use strict" prologue,
    `module.exports =`, unquoted keys, single-quoted strings, trailing
    commas, hex/exponent/underscore-separated numbers, true/false/null.

    Raises:
        SchemaError: On any other JavaScript expression
    """
    tokens = _strip_module_wrapper(_tokenize_js(text))

    out: List[str] = []
    for i, (kind, value, line) in enumerate(tokens):
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None

        if kind == "punct":
            if value not in _JSON_PUNCT:
                raise SchemaError(f"Unsupported JavaScript syntax {value!r} at line {line}")
            # Trailing comma
            if value == "," and nxt is not None and nxt[1] in ("}", "]"):
                continue
            out.append(value)
        elif kind == "string":
            out.append(json.dumps(_unquote_js_string(value, line)))
        elif kind == "number":
            out.append(str(_js_number(value, line)))
        elif nxt is not None and nxt[1] == ":":
            # Unquoted object key
            out.append(json.dumps(value))
        elif value in _JS_LITERALS:
            out.append(value)
        else:
            raise SchemaError(
                f"Unsupported JavaScript expression {value!r} at line {line}; "
                "only literal values are allowed"
            )

    return "".join(out)


def _tokenize_js(text: str) -> List[Tuple[str, str, int]]:
    tokens: List[Tuple[str, str, int]] = []
    pos = 0
    while pos < len(text):
        match = _JS_TOKEN_RE.match(text, pos)
        if match is None:
            line = text.count("\n", 0, pos) + 1
            raise SchemaError(f"Unexpected character {text[pos]!r} at line {line}")
        kind = match.lastgroup
        if kind not in ("ws", "line_comment", "block_comment"):
            tokens.append((kind, match.group(), text.count("\n", 0, pos) + 1))
        pos = match.end()
    return tokens


def _strip_module_wrapper(tokens: List[Tuple[str, str, int]]) -> List[Tuple[str, str, int]]:
    # "use strict";
    if tokens and tokens[0][0] == "string" and tokens[0][1][1:-1] == "use strict":
        tokens = tokens[1:]
        if tokens and tokens[0][1] == ";":
            tokens = tokens[1:]

    if [value for _, value, _ in tokens[:4]] == ["module", ".", "exports", "="]:
        tokens = tokens[4:]

    while tokens and tokens[-1][1] == ";":
        tokens = tokens[:-1]

    if not tokens or tokens[0][1] != "{":
        raise SchemaError("Expected `module.exports = { ... }` in JS configuration")
    return tokens


def _unquote_js_string(literal: str, line: int) -> str:
    body = literal[1:-1]

    def _to_json_escape(match: "re.Match[str]") -> str:
        if match.group(0) == '"':
            return '\\"'
        if match.group(1) == "'":
            return "'"
        return match.group(0)

    try:
        return json.loads('"' + re.sub(r'\\(.)|"', _to_json_escape, body) + '"')
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid string literal at line {line}: {literal}") from e


def _js_number(literal: str, line: int) -> Union[int, float]:
    cleaned = literal.replace("_", "")
    sign = -1 if cleaned.startswith("-") else 1
    digits = cleaned.lstrip("-")
    too_large = RangeError(f"Numeric literal {literal[:20]!r} at line {line} is too large")

    if digits[:2].lower() == "0x":
        if len(digits[2:].lstrip("0")) > _MAX_HEX_DIGITS:
            raise too_large
        return sign * int(digits, 16)

    # 8e6 is an integer in JS
    if "." not in digits and "e" in digits.lower():
        mantissa, exponent = re.split("[eE]", digits)
        if not exponent.startswith("-"):
            if (
                len(exponent) > 6
                or len(mantissa.lstrip("0")) + int(exponent) > _MAX_DECIMAL_DIGITS
            ):
                raise too_large
            return sign * int(mantissa) * 10 ** int(exponent)

    if digits.isdigit():
        if len(digits.lstrip("0")) > _MAX_DECIMAL_DIGITS:
            raise too_large
        return sign * int(digits)

    value = sign * float(digits)
    if math.isinf(value):
        raise too_large
    return value


def _field(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _expect_mapping(value: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SchemaError(
            f"Field '{field}' must be an object, got {type(value).__name__}", field
        )
    duplicates = getattr(value, "duplicates", None)
    if duplicates:
        raise SchemaError(f"Field '{field}' repeats key '{duplicates[0]}'", field)
    return value


def _require(data: Mapping[str, Any], key: str, path: str) -> Any:
    if key not in data:
        field = _field(path, key)
        raise SchemaError(f"Missing required field '{field}'", field)
    return data[key]


def _expect_int(value: Any, field: str) -> int:
    # JSON decodes 8e6 as a float
    if isinstance(value, float) and value.is_integer():
        return int(value)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaError(
            f"Field '{field}' must be an integer, got {type(value).__name__}", field
        )
    return value


def _expect_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise SchemaError(
            f"Field '{field}' must be a boolean, got {type(value).__name__}", field
        )
    return value


def _expect_str(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise SchemaError(f"Field '{field}' must be a non-empty string", field)
    return value


def parse_network_profile(name: str, data: Any, path: str = "networks") -> NetworkProfile:
    """
    Parse one entry of the `networks` section.

    Args:
        name: Network name (the entry's key)
        data: Entry mapping with host, port, network_id, gas
        path: Field path of the enclosing section, used in error messages

    Returns:
        NetworkProfile

    Raises:
        SchemaError: If a field is missing or has the wrong type
        RangeError: If port or gas is out of bounds
    """
    base = _field(path, name)
    data = _expect_mapping(data, base)

    for key in data:
        if key not in NETWORK_KEYS and key != "name":
            logger.warning("Ignoring unsupported field '%s'", _field(base, key))

    host = _expect_str(_require(data, "host", base), _field(base, "host"))

    port_field = _field(base, "port")
    port = _expect_int(_require(data, "port", base), port_field)
    if not MIN_PORT <= port <= MAX_PORT:
        raise RangeError(
            f"Field '{port_field}' must be between {MIN_PORT} and {MAX_PORT}, got {port}",
            port_field,
        )

    id_field = _field(base, "network_id")
    network_id = _require(data, "network_id", base)
    if isinstance(network_id, int) and not isinstance(network_id, bool):
        if network_id < 0:
            raise RangeError(f"Field '{id_field}' must be non-negative", id_field)
        network_id = str(network_id)
    network_id = _expect_str(network_id, id_field)

    gas_field = _field(base, "gas")
    gas = _expect_int(_require(data, "gas", base), gas_field)
    if gas <= 0:
        raise RangeError(f"Field '{gas_field}' must be positive, got {gas}", gas_field)

    return NetworkProfile(
        name=name,
        host=host,
        port=port,
        network_id=network_id,
        gas_limit=gas,
    )


def parse_networks(data: Any) -> List[NetworkProfile]:
    """
    Parse the `networks` section.

    Accepts a mapping of name -> profile, or a list of profiles each
    carrying a `name` key.

    Returns:
        Profiles in source order

    Raises:
        DuplicateNetworkError: If two entries share a name
    """
    entries: List[Tuple[str, Any]]

    if isinstance(data, Mapping):
        duplicates = getattr(data, "duplicates", None)
        if duplicates:
            raise DuplicateNetworkError(
                f"Network '{duplicates[0]}' is declared more than once",
                _field("networks", duplicates[0]),
            )
        entries = list(data.items())
    elif isinstance(data, (list, tuple)):
        entries = []
        for index, entry in enumerate(data):
            entry = _expect_mapping(entry, f"networks[{index}]")
            entries.append((_require(entry, "name", f"networks[{index}]"), entry))
    else:
        raise SchemaError(
            f"Field 'networks' must be an object, got {type(data).__name__}", "networks"
        )

    profiles: List[NetworkProfile] = []
    seen = set()
    for name, entry in entries:
        if not isinstance(name, str) or not name:
            raise SchemaError(f"Network name must be a non-empty string, got {name!r}", "networks")
        if name in seen:
            raise DuplicateNetworkError(
                f"Network '{name}' is declared more than once", _field("networks", name)
            )
        seen.add(name)
        profiles.append(parse_network_profile(name, entry))

    return profiles


def parse_compiler_profile(data: Any) -> CompilerProfile:
    """
    Parse the `compilers` section.

    Exactly one toolchain entry is expected; its key becomes the
    toolchain name. The optimizer block is optional and defaults to
    solc's own defaults (disabled, 200 runs).

    Raises:
        SchemaError: If the section is malformed
        RangeError: If optimizer runs is negative
    """
    compilers = _expect_mapping(data, "compilers")
    if len(compilers) != 1:
        raise SchemaError(
            f"Field 'compilers' must declare exactly one toolchain, got {len(compilers)}",
            "compilers",
        )

    toolchain_name, entry = next(iter(compilers.items()))
    base = _field("compilers", toolchain_name)
    entry = _expect_mapping(entry, base)

    version_field = _field(base, "version")
    version = _expect_str(_require(entry, "version", base), version_field)
    if not _SEMVER_RE.match(version):
        raise SchemaError(
            f"Field '{version_field}' must be a semantic version, got '{version}'",
            version_field,
        )

    enabled = DEFAULT_OPTIMIZER_ENABLED
    runs = DEFAULT_OPTIMIZER_RUNS

    settings_field = _field(base, "settings")
    settings = _expect_mapping(entry.get("settings", {}), settings_field)
    for key in settings:
        if key != "optimizer":
            logger.debug(
                "Compiler setting '%s' is not part of the compiler profile",
                _field(settings_field, key),
            )

    optimizer_field = _field(settings_field, "optimizer")
    optimizer = _expect_mapping(settings.get("optimizer", {}), optimizer_field)
    if "enabled" in optimizer:
        enabled = _expect_bool(optimizer["enabled"], _field(optimizer_field, "enabled"))
    if "runs" in optimizer:
        runs_field = _field(optimizer_field, "runs")
        runs = _expect_int(optimizer["runs"], runs_field)
        if runs < 0:
            raise RangeError(
                f"Field '{runs_field}' must be non-negative, got {runs}", runs_field
            )

    return CompilerProfile(
        toolchain_name=toolchain_name,
        version=version,
        optimizer_enabled=enabled,
        optimizer_runs=runs,
    )


def parse_test_runner_options(data: Optional[Any]) -> TestRunnerOptions:
    """
    Parse the optional `mocha` section.

    Raises:
        SchemaError: If enableTimeouts is not a boolean
    """
    if data is None:
        return TestRunnerOptions(enable_timeouts=DEFAULT_ENABLE_TIMEOUTS)

    mocha = _expect_mapping(data, "mocha")
    enable_timeouts = DEFAULT_ENABLE_TIMEOUTS
    if "enableTimeouts" in mocha:
        enable_timeouts = _expect_bool(mocha["enableTimeouts"], "mocha.enableTimeouts")

    return TestRunnerOptions(enable_timeouts=enable_timeouts)


def parse_config(
    data: Mapping[str, Any],
) -> Tuple[List[NetworkProfile], CompilerProfile, TestRunnerOptions]:
    """
    Parse a decoded configuration mapping into its three sections.

    Returns:
        Tuple of (network profiles, compiler profile, test-runner options)
    """
    data = _expect_mapping(data, "<root>")
    networks = parse_networks(_require(data, "networks", ""))
    compiler = parse_compiler_profile(_require(data, "compilers", ""))
    test_runner = parse_test_runner_options(data.get("mocha"))
    return networks, compiler, test_runner


def to_source_dict(
    networks: Sequence[NetworkProfile],
    compiler: CompilerProfile,
    test_runner: TestRunnerOptions,
) -> Dict[str, Any]:
    """Serialize parsed values back into the declarative schema."""
    return {
        "networks": {
            profile.name: {
                "host": profile.host,
                "port": profile.port,
                "network_id": profile.network_id,
                "gas": profile.gas_limit,
            }
            for profile in networks
        },
        "compilers": {
            compiler.toolchain_name: {
                "version": compiler.version,
                "settings": {
                    "optimizer": {
                        "enabled": compiler.optimizer_enabled,
                        "runs": compiler.optimizer_runs,
                    }
                },
            }
        },
        "mocha": {"enableTimeouts": test_runner.enable_timeouts},
    }
