"""typeschema - JSON Schema and OpenAPI components from a type graph.

Examples
--------
Example usage::

    from typeschema import PythonTypeIntrospector, generate_components_document

    document = generate_components_document([User], PythonTypeIntrospector())
"""

from importlib.metadata import PackageNotFoundError, version

# Version is defined in pyproject.toml and read dynamically
try:
    __version__ = version("typeschema")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts

from typeschema.adapters.python import PythonTypeIntrospector  # noqa: E402
from typeschema.kernel.config import GeneratorConfig, TypeSchemaConfig  # noqa: E402
from typeschema.kernel.domain import SchemaNode, SimpleType, TypeDescriptor  # noqa: E402
from typeschema.kernel.exceptions import (  # noqa: E402
    ConfigurationError,
    SchemaGenerationError,
    TypeSchemaError,
    UnsupportedAnnotationValueError,
)
from typeschema.kernel.schema import (  # noqa: E402
    JSON_SCHEMA_DRAFT_07,
    ComponentsBuilder,
    TypeSchemaGenerator,
    format_output,
    generate_components_document,
    generate_json_schema,
)

__all__ = [
    "JSON_SCHEMA_DRAFT_07",
    "ComponentsBuilder",
    "ConfigurationError",
    "GeneratorConfig",
    "PythonTypeIntrospector",
    "SchemaGenerationError",
    "SchemaNode",
    "SimpleType",
    "TypeDescriptor",
    "TypeSchemaConfig",
    "TypeSchemaError",
    "TypeSchemaGenerator",
    "UnsupportedAnnotationValueError",
    "__version__",
    "format_output",
    "generate_components_document",
    "generate_json_schema",
]
