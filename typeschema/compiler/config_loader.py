"""Configuration loader for typeschema.

Parses configuration into kernel config models. Supports two config sources:

1. **kind: Config YAML** - loaded via explicit path or the
   ``TYPESCHEMA_CONFIG_PATH`` env var.
2. **pyproject.toml [tool.typeschema]** - auto-discovery fallback.

Example ``kind: Config`` manifest::

    kind: Config
    spec:
      require_non_nulls_by_default: true
      ref_prefix: "#/components/schemas/"
      simple_type_mappings:
        bson.ObjectId: {type: string, format: objectid}
        app.types.Money: number
      property_inclusion_filter: app.schema:include_member
      embedded_type_processors:
        - app.schema:PageProcessor
      logging:
        level: INFO
"""

from __future__ import annotations

import os
import re
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, cast

import yaml

from typeschema.kernel.config.models import (
    GeneratorConfig,
    LoggingConfig,
    PropertyFilter,
    TypeSchemaConfig,
)
from typeschema.kernel.domain import SimpleType
from typeschema.kernel.exceptions import ConfigurationError, ResolveError, ValidationError
from typeschema.kernel.logging import get_logger
from typeschema.kernel.resolver import resolve
from typeschema.kernel.schema.processors import EmbeddedTypeProcessor
from typeschema.kernel.schema.simple_types import merge_simple_types

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

# Boolean logging settings overridable from the environment
_LOG_BOOL_ENV_VARS = {
    "use_color": "TYPESCHEMA_LOG_COLOR",
    "include_timestamp": "TYPESCHEMA_LOG_TIMESTAMP",
    "use_rich": "TYPESCHEMA_LOG_RICH",
    "dual_sink": "TYPESCHEMA_LOG_DUAL_SINK",
    "enable_stdlib_bridge": "TYPESCHEMA_LOG_STDLIB_BRIDGE",
    "backtrace": "TYPESCHEMA_LOG_BACKTRACE",
    "diagnose": "TYPESCHEMA_LOG_DIAGNOSE",
}

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string

    Examples
    --------
    >>> _parse_bool_env("Yes")
    True
    >>> _parse_bool_env("off")
    False
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str, mtime: float) -> TypeSchemaConfig:
    """Cached configuration loader keyed on path and modification time."""
    return ConfigLoader()._load_and_parse(Path(path_str))


class ConfigLoader:
    """Loads and processes typeschema configuration files.

    Supports two config sources:

    1. ``kind: Config`` YAML manifests (explicit path or env var)
    2. ``pyproject.toml [tool.typeschema]`` (auto-discovery)
    """

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> TypeSchemaConfig:
        """Load configuration from YAML or pyproject.toml.

        Parameters
        ----------
        path : str | Path | None
            Path to config file. If None, searches using discovery order.

        Returns
        -------
        TypeSchemaConfig
            Parsed configuration with environment variables substituted

        Raises
        ------
        FileNotFoundError
            If no configuration file can be found
        ConfigurationError
            If the file content is invalid
        """
        config_path = self._find_config_file(path).absolute()
        return _load_and_parse_cached(str(config_path), config_path.stat().st_mtime)

    def _load_and_parse(self, config_path: Path) -> TypeSchemaConfig:
        """Load and parse configuration file (YAML or TOML)."""
        logger.info("Loading configuration from {path}", path=config_path)

        if config_path.suffix in (".yaml", ".yml"):
            return self._load_yaml_config(config_path)
        return self._load_toml_config(config_path)

    def _load_yaml_config(self, config_path: Path) -> TypeSchemaConfig:
        """Load and parse a kind: Config YAML file."""
        with config_path.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(config_path.name, f"invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                config_path.name, f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                config_path.name,
                f"YAML config files must use 'kind: Config', got 'kind: {kind}'",
            )

        spec = data.get("spec") or {}
        if not isinstance(spec, dict):
            raise ConfigurationError(config_path.name, "'spec' must be a mapping")

        return self._parse_config(self._substitute_env_vars(spec))

    def _load_toml_config(self, config_path: Path) -> TypeSchemaConfig:
        """Load and parse a TOML config file (pyproject.toml or a flat TOML file)."""
        with config_path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(config_path.name, f"invalid TOML: {e}") from e

        tool_data = data.get("tool", {}).get("typeschema")
        if tool_data is None:
            if config_path.name == "pyproject.toml":
                logger.warning(
                    "No [tool.typeschema] section found in pyproject.toml, using defaults"
                )
                return get_default_config()
            tool_data = data

        return self._parse_config(self._substitute_env_vars(tool_data))

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Find configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``TYPESCHEMA_CONFIG_PATH`` env var
        3. ``pyproject.toml`` in CWD
        4. ``pyproject.toml`` in parent directories (with ``[tool.typeschema]``)

        Raises
        ------
        FileNotFoundError
            If no configuration file is found
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("TYPESCHEMA_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using config from TYPESCHEMA_CONFIG_PATH: {}", config_path)
                return config_path
            logger.warning("TYPESCHEMA_CONFIG_PATH set but file not found: {}", config_path)

        if Path("pyproject.toml").exists():
            return Path("pyproject.toml")

        current = Path.cwd()
        while current != current.parent:
            pyproject = current / "pyproject.toml"
            if pyproject.exists():
                with pyproject.open("rb") as f:
                    data = tomllib.load(f)
                if "typeschema" in data.get("tool", {}):
                    return pyproject
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Provide a kind: Config YAML path, "
            "set TYPESCHEMA_CONFIG_PATH, or add [tool.typeschema] to pyproject.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ``${VAR}`` placeholders with environment values.

        Unknown variables keep their placeholder.
        """
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    logger.debug(
                        "Environment variable ${{{var_name}}} not found, keeping placeholder",
                        var_name=var_name,
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> TypeSchemaConfig:
        """Parse configuration data into TypeSchemaConfig.

        Raises
        ------
        ConfigurationError
            If a value has the wrong shape or an import path cannot be resolved
        """
        generator_kwargs: dict[str, Any] = {}

        if "simple_type_mappings" in data:
            overrides = self._parse_simple_types(data["simple_type_mappings"])
            generator_kwargs["simple_type_mappings"] = merge_simple_types(overrides)
            logger.debug("Loaded {count} simple type mappings", count=len(overrides))

        if filter_path := data.get("property_inclusion_filter"):
            generator_kwargs["property_inclusion_filter"] = self._parse_filter(filter_path)

        if "embedded_type_processors" in data:
            generator_kwargs["embedded_type_processors"] = self._parse_processors(
                data["embedded_type_processors"]
            )

        if "include_builtin_processors" in data:
            generator_kwargs["include_builtin_processors"] = bool(
                data["include_builtin_processors"]
            )

        if "require_non_nulls_by_default" in data:
            generator_kwargs["require_non_nulls_by_default"] = bool(
                data["require_non_nulls_by_default"]
            )

        if "ref_prefix" in data:
            generator_kwargs["ref_prefix"] = str(data["ref_prefix"])

        try:
            generator = GeneratorConfig(**generator_kwargs)
        except ValidationError as e:
            raise ConfigurationError("generator", str(e)) from e

        return TypeSchemaConfig(
            generator=generator,
            logging=self._parse_logging_config(data.get("logging") or {}),
        )

    @staticmethod
    def _parse_simple_types(data: Any) -> dict[str, SimpleType]:
        if not isinstance(data, dict):
            raise ConfigurationError("simple_type_mappings", "must be a mapping")

        mappings: dict[str, SimpleType] = {}
        for name, entry in data.items():
            if isinstance(entry, str):
                mappings[name] = SimpleType(entry)
            elif isinstance(entry, dict) and entry.get("type"):
                mappings[name] = SimpleType(str(entry["type"]), entry.get("format"))
            else:
                raise ConfigurationError(
                    "simple_type_mappings", f"entry '{name}' must define 'type'"
                )
        return mappings

    @staticmethod
    def _parse_filter(path: str) -> PropertyFilter:
        try:
            candidate = resolve(path)
        except ResolveError as e:
            raise ConfigurationError("property_inclusion_filter", str(e)) from e
        if not callable(candidate):
            raise ConfigurationError("property_inclusion_filter", f"'{path}' is not callable")
        return cast("PropertyFilter", candidate)

    @staticmethod
    def _parse_processors(paths: Any) -> tuple[EmbeddedTypeProcessor, ...]:
        if not isinstance(paths, list):
            raise ConfigurationError("embedded_type_processors", "must be a list of import paths")

        processors: list[EmbeddedTypeProcessor] = []
        for path in paths:
            try:
                candidate = resolve(path)
            except ResolveError as e:
                raise ConfigurationError("embedded_type_processors", str(e)) from e
            if isinstance(candidate, type):
                candidate = candidate()
            if not isinstance(candidate, EmbeddedTypeProcessor):
                raise ConfigurationError(
                    "embedded_type_processors", f"'{path}' does not define process(context)"
                )
            processors.append(candidate)
        return tuple(processors)

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over config file values:
        - TYPESCHEMA_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - TYPESCHEMA_LOG_FORMAT: Output format (console, json, structured, rich, dual)
        - TYPESCHEMA_LOG_FILE: Optional file path for log output
        - TYPESCHEMA_LOG_COLOR, TYPESCHEMA_LOG_TIMESTAMP, TYPESCHEMA_LOG_RICH,
          TYPESCHEMA_LOG_DUAL_SINK, TYPESCHEMA_LOG_STDLIB_BRIDGE,
          TYPESCHEMA_LOG_BACKTRACE, TYPESCHEMA_LOG_DIAGNOSE: booleans
        """
        defaults = LoggingConfig()
        level = str(logging_data.get("level", defaults.level)).upper()
        format_type = str(logging_data.get("format", defaults.format)).lower()
        output_file = logging_data.get("output_file", defaults.output_file)
        flags = {
            name: bool(logging_data.get(name, getattr(defaults, name)))
            for name in _LOG_BOOL_ENV_VARS
        }

        if env_level := os.getenv("TYPESCHEMA_LOG_LEVEL"):
            level = env_level.upper()
            logger.debug("Overriding log level from env: {}", level)

        if env_format := os.getenv("TYPESCHEMA_LOG_FORMAT"):
            format_type = env_format.lower()
            logger.debug("Overriding log format from env: {}", format_type)

        if env_file := os.getenv("TYPESCHEMA_LOG_FILE"):
            output_file = env_file
            logger.debug("Overriding log file from env: {}", output_file)

        for name, env_var in _LOG_BOOL_ENV_VARS.items():
            if env_value := os.getenv(env_var):
                try:
                    flags[name] = _parse_bool_env(env_value)
                    logger.debug("Overriding {} from env: {}", name, flags[name])
                except ValueError as e:
                    logger.warning("Invalid {} value: {}", env_var, e)

        return LoggingConfig(
            level=cast("Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']", level),
            format=cast("Literal['console', 'json', 'structured', 'dual', 'rich']", format_type),
            output_file=output_file,
            **flags,
        )


def load_config(path: str | Path | None = None) -> TypeSchemaConfig:
    """Load configuration from file or return defaults.

    Parameters
    ----------
    path : str | Path | None
        Path to configuration file or None to search

    Returns
    -------
    TypeSchemaConfig
        Loaded configuration or defaults if no file found

    Raises
    ------
    FileNotFoundError
        If an explicit path does not exist
    ConfigurationError
        If the configuration is invalid
    """
    try:
        return ConfigLoader().load_config_file(path)
    except FileNotFoundError:
        if path:
            raise
        logger.info("No configuration file found, using defaults")
        return get_default_config()


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when configuration files have been modified
    and you need to force a reload.
    """
    _load_and_parse_cached.cache_clear()


def get_default_config() -> TypeSchemaConfig:
    """Get default configuration."""
    return TypeSchemaConfig()


__all__ = ["ConfigLoader", "clear_config_cache", "get_default_config", "load_config"]
