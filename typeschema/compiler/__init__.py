"""Userspace compiler layer: turns configuration files into kernel models."""

from typeschema.compiler.config_loader import (
    ConfigLoader,
    clear_config_cache,
    get_default_config,
    load_config,
)

__all__ = ["ConfigLoader", "clear_config_cache", "get_default_config", "load_config"]
