"""Schema documents assembled from generator output.

Builds the ``components.schemas`` section of an OpenAPI document and
freestanding draft-07 JSON Schemas, and renders them as dict, JSON or YAML.
"""

import dataclasses
import json
from collections import deque
from collections.abc import Iterable
from typing import Any

import yaml

from typeschema.kernel.config import DEFINITIONS_REF_PREFIX, GeneratorConfig
from typeschema.kernel.domain import TypeDescriptor
from typeschema.kernel.logging import get_logger
from typeschema.kernel.ports import TypeIntrospector
from typeschema.kernel.schema.generator import TypeSchemaGenerator

logger = get_logger(__name__)

JSON_SCHEMA_DRAFT_07 = "http://json-schema.org/draft-07/schema#"

OUTPUT_FORMATS = ("dict", "json", "yaml")


class ComponentsBuilder:
    """Resolve a set of root types and everything they reference.

    Each root is built without inlining; every referenced type is then built
    the same way until no unresolved reference remains. Types are placed under
    their schema name (the simple name, suffixed with the generic arguments of
    a parameterized type), in the order they were first reached.

    Parameters
    ----------
    generator : TypeSchemaGenerator
        Generator used for every definition
    inline_refs : bool, default=False
        Build definitions with inlining; only types cut by the inlining cycle
        guard are then resolved separately

    Examples
    --------
    Example usage::

        builder = ComponentsBuilder(TypeSchemaGenerator(introspector))
        schemas = builder.build([user_type])
        schemas["User"]     # {"type": "object", ...}
        schemas["Address"]  # referenced from User
    """

    def __init__(self, generator: TypeSchemaGenerator, inline_refs: bool = False) -> None:
        self._generator = generator
        self._inline_refs = inline_refs

    def build(self, roots: Iterable[TypeDescriptor]) -> dict[str, dict[str, Any]]:
        """Build named definitions for ``roots`` and all types they reference."""
        schemas: dict[str, dict[str, Any]] = {}
        owners: dict[str, TypeDescriptor] = {}
        seen: set[TypeDescriptor] = set()
        pending: deque[TypeDescriptor] = deque()

        for root in roots:
            if root not in seen:
                seen.add(root)
                pending.append(root)

        while pending:
            type_ = pending.popleft()
            node = self._generator.build_schema(type_, inline_refs=self._inline_refs)

            name = type_.schema_name
            owner = owners.get(name)
            if owner is None:
                owners[name] = type_
                schemas[name] = node.json
                logger.debug("Resolved {} as '{}'", type_, name)
            elif owner != type_:
                logger.warning(
                    "Schema name '{}' is used by both {} and {}; keeping the first definition",
                    name,
                    owner,
                    type_,
                )

            for reference in sorted(node.references - seen, key=str):
                seen.add(reference)
                pending.append(reference)

        return schemas


def _descriptor(introspector: TypeIntrospector, type_: Any) -> TypeDescriptor:
    if isinstance(type_, TypeDescriptor):
        return type_
    return introspector.resolve_type_descriptor(type_)


def generate_components_document(
    roots: Iterable[Any],
    introspector: TypeIntrospector,
    config: GeneratorConfig | None = None,
) -> dict[str, Any]:
    """Build an OpenAPI ``components`` document for the given root types.

    Parameters
    ----------
    roots : Iterable[Any]
        Type descriptors or raw host types
    introspector : TypeIntrospector
        Host type-system port
    config : GeneratorConfig | None
        Engine configuration

    Returns
    -------
    dict[str, Any]
        ``{"components": {"schemas": {...}}}``
    """
    generator = TypeSchemaGenerator(introspector, config)
    descriptors = [_descriptor(introspector, root) for root in roots]
    schemas = ComponentsBuilder(generator).build(descriptors)
    logger.info("Generated {} component schema(s) from {} root(s)", len(schemas), len(descriptors))
    return {"components": {"schemas": schemas}}


def generate_json_schema(
    type_: Any,
    introspector: TypeIntrospector,
    config: GeneratorConfig | None = None,
) -> dict[str, Any]:
    """Build a freestanding draft-07 JSON Schema for a type.

    Referenced types are inlined. A type referring back to one of the types
    enclosing it is emitted as a ``#/definitions/`` reference and defined once
    under ``definitions``.

    Examples
    --------
    Example usage::

        schema = generate_json_schema(User, PythonTypeIntrospector())
        schema["$schema"]  # "http://json-schema.org/draft-07/schema#"
    """
    config = dataclasses.replace(config or GeneratorConfig(), ref_prefix=DEFINITIONS_REF_PREFIX)
    generator = TypeSchemaGenerator(introspector, config)
    root = _descriptor(introspector, type_)

    node = generator.build_schema(root, inline_refs=True)
    schema: dict[str, Any] = {"$schema": JSON_SCHEMA_DRAFT_07, **node.json}
    if node.references:
        builder = ComponentsBuilder(generator, inline_refs=True)
        schema["definitions"] = builder.build(sorted(node.references, key=str))

    logger.info("Generated JSON schema for {}", root)
    return schema


def format_output(schema: dict[str, Any], format: str = "dict") -> dict[str, Any] | str:
    """Format schema output as dict, YAML, or JSON.

    Raises
    ------
    ValueError
        If the format is not one of dict, json or yaml

    Examples
    --------
    >>> format_output({"type": "string"}, "json")
    '{\\n  "type": "string"\\n}'
    >>> format_output({"type": "string"}, "yaml")
    'type: string\\n'
    """
    if format == "dict":
        return schema
    if format == "yaml":
        yaml_str: str = yaml.dump(schema, sort_keys=False, default_flow_style=False)
        return yaml_str
    if format == "json":
        return json.dumps(schema, indent=2)
    raise ValueError(f"Unsupported output format '{format}', expected one of {OUTPUT_FORMATS}")


__all__ = [
    "JSON_SCHEMA_DRAFT_07",
    "OUTPUT_FORMATS",
    "ComponentsBuilder",
    "format_output",
    "generate_components_document",
    "generate_json_schema",
]
