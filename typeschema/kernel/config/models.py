"""Configuration data models for typeschema."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Literal

from typeschema.kernel.domain import Member, SimpleType, TypeDescriptor
from typeschema.kernel.exceptions import ValidationError

if TYPE_CHECKING:
    from typeschema.kernel.schema.processors import EmbeddedTypeProcessor

PropertyFilter = Callable[[TypeDescriptor, Member], bool]

COMPONENTS_REF_PREFIX = "#/components/schemas/"
DEFINITIONS_REF_PREFIX = "#/definitions/"


def _default_simple_types() -> Mapping[str, SimpleType]:
    from typeschema.kernel.schema.simple_types import (
        DEFAULT_SIMPLE_TYPES,  # lazy: the schema package imports this module
    )

    return DEFAULT_SIMPLE_TYPES


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for typeschema.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, dual, rich)
    output_file : str | None, default=None
        Optional file path to write logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    use_rich : bool, default=False
        Use Rich library for console output
    dual_sink : bool, default=False
        Enable dual-sink mode: Rich console + structured JSON to stdout
    enable_stdlib_bridge : bool, default=False
        Enable interception of stdlib logging for third-party libraries
    backtrace : bool, default=True
        Enable backtrace for debugging
    diagnose : bool, default=True
        Enable diagnose mode with variable values

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.typeschema.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export TYPESCHEMA_LOG_LEVEL=DEBUG
    export TYPESCHEMA_LOG_FORMAT=rich
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "dual", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True
    use_rich: bool = False
    dual_sink: bool = False
    enable_stdlib_bridge: bool = False
    backtrace: bool = True
    diagnose: bool = True


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Setup-time configuration of the schema engine.

    Built once before any schema is generated and never mutated afterwards,
    so concurrent builds can share it without locking.

    Attributes
    ----------
    simple_type_mappings : Mapping[str, SimpleType]
        Fully-qualified type name to primitive rendering
    property_inclusion_filter : PropertyFilter | None
        Predicate over (type, member); returning False drops the member
    embedded_type_processors : tuple[EmbeddedTypeProcessor, ...]
        Processors offered every embedded type, in order, before the built-ins
    include_builtin_processors : bool
        Append the optional/union unwrapping processors to the chain
    require_non_nulls_by_default : bool
        Global default for required-ness
    ref_prefix : str
        Prefix of emitted ``$ref`` targets
    """

    simple_type_mappings: Mapping[str, SimpleType] = field(default_factory=_default_simple_types)
    property_inclusion_filter: PropertyFilter | None = None
    embedded_type_processors: tuple[EmbeddedTypeProcessor, ...] = ()
    include_builtin_processors: bool = True
    require_non_nulls_by_default: bool = True
    ref_prefix: str = COMPONENTS_REF_PREFIX

    def __post_init__(self) -> None:
        """Validate configuration values.

        Raises
        ------
        ValidationError
            If the ref prefix is empty or a simple type has no schema type
        """
        if not self.ref_prefix:
            raise ValidationError("ref_prefix", "cannot be empty")
        for name, simple_type in self.simple_type_mappings.items():
            if not simple_type.type:
                raise ValidationError(f"simple_type_mappings.{name}", "must define 'type'")

        # Freeze caller-supplied collections
        if not isinstance(self.simple_type_mappings, MappingProxyType):
            object.__setattr__(
                self, "simple_type_mappings", MappingProxyType(dict(self.simple_type_mappings))
            )
        object.__setattr__(self, "embedded_type_processors", tuple(self.embedded_type_processors))


@dataclass(frozen=True, slots=True)
class TypeSchemaConfig:
    """Complete typeschema configuration."""

    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
