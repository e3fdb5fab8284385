"""Python reflection adapter.

Examples
--------
Example usage::

    from typeschema.adapters.python import PythonTypeIntrospector
    from typeschema.kernel.schema import generate_components_document

    document = generate_components_document([User], PythonTypeIntrospector())
"""

from typeschema.adapters.python.introspector import PythonTypeIntrospector
from typeschema.adapters.python.markers import (
    AllOf,
    AnyOf,
    Custom,
    JsonSchema,
    NotNull,
    OneOf,
    OpenApiByFields,
    OpenApiExample,
    OpenApiIgnore,
    OpenApiName,
    OpenApiPropertyType,
    annotate,
    custom_annotation,
)

__all__ = [
    "AllOf",
    "AnyOf",
    "Custom",
    "JsonSchema",
    "NotNull",
    "OneOf",
    "OpenApiByFields",
    "OpenApiExample",
    "OpenApiIgnore",
    "OpenApiName",
    "OpenApiPropertyType",
    "PythonTypeIntrospector",
    "annotate",
    "custom_annotation",
]
