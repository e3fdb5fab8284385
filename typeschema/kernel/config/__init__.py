"""Configuration models for typeschema."""

from typeschema.kernel.config.models import (
    COMPONENTS_REF_PREFIX,
    DEFINITIONS_REF_PREFIX,
    GeneratorConfig,
    LoggingConfig,
    PropertyFilter,
    TypeSchemaConfig,
)


def __getattr__(name: str) -> object:
    """Lazy imports for config loader symbols (live in typeschema.compiler.config_loader)."""
    _loader_names = {"ConfigLoader", "get_default_config", "load_config"}
    if name in _loader_names:
        from typeschema.compiler import config_loader

        return getattr(config_loader, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "COMPONENTS_REF_PREFIX",
    "DEFINITIONS_REF_PREFIX",
    "GeneratorConfig",
    "LoggingConfig",
    "PropertyFilter",
    "TypeSchemaConfig",
]
