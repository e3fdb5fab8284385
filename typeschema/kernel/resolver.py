"""Module path resolver for types, filters and processors.

Objects named in configuration files and on the command line are resolved
through Python's import system.

Examples
--------
>>> from typeschema.kernel.resolver import resolve
>>> resolve("collections:OrderedDict")
<class 'collections.OrderedDict'>
>>> resolve("decimal.Decimal")
<class 'decimal.Decimal'>
"""

from __future__ import annotations

import importlib
from typing import Any

from typeschema.kernel.exceptions import ResolveError


def resolve(path: str) -> Any:
    """Resolve an import path to a Python object.

    Parameters
    ----------
    path : str
        ``package.module:attribute`` (the attribute may be dotted, e.g.
        ``app.models:Outer.Inner``) or ``package.module.attribute``

    Returns
    -------
    Any
        The resolved object

    Raises
    ------
    ResolveError
        If the module or attribute cannot be found
    """
    if ":" in path:
        module_path, _, attribute_path = path.partition(":")
    else:
        module_path, _, attribute_path = path.rpartition(".")

    if not module_path or not attribute_path:
        raise ResolveError(path, "Invalid format - expected 'package.module:attribute'")

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as e:
        raise ResolveError(path, f"Module '{module_path}' not found: {e}") from e
    except ImportError as e:
        raise ResolveError(path, f"Failed to import '{module_path}': {e}") from e

    obj: Any = module
    for attribute in attribute_path.split("."):
        try:
            obj = getattr(obj, attribute)
        except AttributeError as e:
            available = ", ".join([name for name in dir(obj) if not name.startswith("_")][:10])
            raise ResolveError(
                path, f"'{attribute}' not found in '{module_path}'. Available: {available}"
            ) from e

    return obj


__all__ = ["resolve"]
