"""Schema engine: turns a type graph into JSON Schema."""

from typeschema.kernel.schema.composition import COMPOSITION_ANNOTATIONS, find_composition
from typeschema.kernel.schema.document import (
    JSON_SCHEMA_DRAFT_07,
    OUTPUT_FORMATS,
    ComponentsBuilder,
    format_output,
    generate_components_document,
    generate_json_schema,
)
from typeschema.kernel.schema.extra import coerce_annotation_value, collect_extra, merge_extra
from typeschema.kernel.schema.generator import TypeSchemaGenerator
from typeschema.kernel.schema.processors import (
    BUILTIN_PROCESSORS,
    EmbeddedTypeProcessor,
    EmbeddedTypeProcessorContext,
    OptionalUnwrapProcessor,
    UnionProcessor,
)
from typeschema.kernel.schema.properties import PropertyExtractor, accessor_property_name
from typeschema.kernel.schema.simple_types import (
    BINARY_ELEMENT_NAMES,
    DEFAULT_SIMPLE_TYPES,
    merge_simple_types,
)

__all__ = [
    "BINARY_ELEMENT_NAMES",
    "BUILTIN_PROCESSORS",
    "COMPOSITION_ANNOTATIONS",
    "DEFAULT_SIMPLE_TYPES",
    "JSON_SCHEMA_DRAFT_07",
    "OUTPUT_FORMATS",
    "ComponentsBuilder",
    "EmbeddedTypeProcessor",
    "EmbeddedTypeProcessorContext",
    "OptionalUnwrapProcessor",
    "PropertyExtractor",
    "TypeSchemaGenerator",
    "UnionProcessor",
    "accessor_property_name",
    "coerce_annotation_value",
    "collect_extra",
    "find_composition",
    "format_output",
    "generate_components_document",
    "generate_json_schema",
    "merge_extra",
    "merge_simple_types",
]
