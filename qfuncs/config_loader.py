"""Load function definitions from TOML configuration files."""

import logging
import tomllib
from pathlib import Path
from typing import Any

from qfuncs.errors import ConfigError
from qfuncs.models import (
    ConfigFile,
    FunctionDefinition,
    FunctionOverrides,
    TestCase,
    TypeTag,
    parse_type_list,
)

logger = logging.getLogger(__name__)

CONFIG_KEYS = {"namespace", "author", "author_email", "function"}
FUNCTION_KEYS = {
    "description",
    "parameter_types",
    "return_type",
    "var_args",
    "source",
    "includes",
    "tests",
}
TEST_KEYS = {"call", "expect", "error", "null"}


def load_configs(paths: list[Path]) -> list[ConfigFile]:
    """Load every configuration file below the given paths.

    Directories are walked recursively in sorted order so that functions
    are always processed in the same order.

    Raises:
        ConfigError: If a path is missing or a file is invalid
    """
    configs = []
    for path in paths:
        if not path.exists():
            raise ConfigError(f"cannot access {path}: no such file or directory")
        if path.is_dir():
            files = sorted(p for p in path.rglob("*") if p.is_file())
        else:
            files = [path]
        for file_path in files:
            configs.append(load_config(file_path))
    logger.info(f"Loaded {len(configs)} configuration files")
    return configs


def load_config(path: Path) -> ConfigFile:
    """Load a single configuration file.

    Raises:
        ConfigError: If the file cannot be read, is not valid TOML or
            contains unknown keys
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot process config '{path}': {e}") from e
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"cannot process config '{path}': {e}") from e

    try:
        return _build_config(path, data)
    except ConfigError as e:
        raise ConfigError(f"cannot process config '{path}': {e}") from e


def _build_config(path: Path, data: dict[str, Any]) -> ConfigFile:
    _check_keys(data, CONFIG_KEYS, "")
    namespace = _get(data, "namespace", str, "", "")
    functions_table = _get(data, "function", dict, {}, "")

    functions = {}
    for name, table in functions_table.items():
        prefix = f"function.{name}"
        if not isinstance(table, dict):
            raise ConfigError(f"'{prefix}' must be a table")
        functions[name] = _build_function(namespace, name, table, prefix)

    logger.debug(f"Loaded {len(functions)} functions from {path}")
    return ConfigFile(
        path=path,
        namespace=namespace,
        author=_get(data, "author", str, "", ""),
        author_email=_get(data, "author_email", str, "", ""),
        functions=functions,
    )


def _build_function(
    namespace: str, name: str, table: dict[str, Any], prefix: str
) -> FunctionDefinition:
    _check_keys(table, FUNCTION_KEYS, prefix)

    overrides = FunctionOverrides(
        parameter_types=_get(table, "parameter_types", str, None, prefix),
        return_type=_get(table, "return_type", str, None, prefix),
        var_args=_get(table, "var_args", bool, None, prefix),
    )
    try:
        if overrides.parameter_types is not None:
            parse_type_list(overrides.parameter_types)
        if overrides.return_type is not None:
            TypeTag.parse(overrides.return_type)
    except ValueError as e:
        raise ConfigError(f"{prefix}: {e}") from e

    includes = _get(table, "includes", list, [], prefix)
    if not all(isinstance(i, str) for i in includes):
        raise ConfigError(f"'{prefix}.includes' must be a list of strings")

    tests = []
    for i, test in enumerate(_get(table, "tests", list, [], prefix)):
        test_prefix = f"{prefix}.tests[{i}]"
        if not isinstance(test, dict):
            raise ConfigError(f"'{test_prefix}' must be a table")
        _check_keys(test, TEST_KEYS, test_prefix)
        tests.append(
            TestCase(
                call=_get(test, "call", str, "", test_prefix),
                expect=test.get("expect"),
                error=_get(test, "error", bool, False, test_prefix),
                null=_get(test, "null", bool, False, test_prefix),
            )
        )

    return FunctionDefinition(
        namespace=namespace,
        name=name,
        source=_get(table, "source", str, "", prefix),
        description=_get(table, "description", str, "", prefix),
        includes=includes,
        tests=tests,
        overrides=overrides,
    )


def _check_keys(table: dict[str, Any], allowed: set[str], prefix: str) -> None:
    for key in table:
        if key not in allowed:
            dotted = f"{prefix}.{key}" if prefix else key
            raise ConfigError(f"contains unknown key: {dotted}")


def _get(table: dict[str, Any], key: str, kind: type, default: Any, prefix: str):
    if key not in table:
        return default
    value = table[key]
    if not isinstance(value, kind):
        dotted = f"{prefix}.{key}" if prefix else key
        raise ConfigError(f"'{dotted}' must be of type {kind.__name__}")
    return value
