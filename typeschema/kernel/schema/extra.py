"""Extension metadata collection and merging.

Types and members can carry an ``OpenApiExample``, any number of
``Custom(name, value)`` annotations, and annotations flagged as custom schema
metadata. Their values end up as additional members of the generated schema
node.
"""

import textwrap
from collections.abc import Sequence
from typing import Any

from typeschema.kernel.domain import (
    Annotation,
    AnnotationValue,
    AnnotationValueKind,
    find_annotation,
    find_annotations,
)
from typeschema.kernel.exceptions import UnsupportedAnnotationValueError
from typeschema.kernel.logging import get_logger

logger = get_logger(__name__)

_JSON_ARRAY_ELEMENT_TYPES = (bool, int, float, str, list, dict)


class _CoercionError(Exception):
    """Internal signal carrying the reason a value cannot be coerced."""


def collect_extra(annotations: Sequence[Annotation], element: str = "<unknown>") -> dict[str, Any]:
    """Collect extension metadata from the annotations of a type or member.

    Parameters
    ----------
    annotations : Sequence[Annotation]
        Annotations attached to the element
    element : str
        Name of the element, used in error messages

    Returns
    -------
    dict[str, Any]
        Extension map; ``example`` is always present (None when not declared)

    Raises
    ------
    UnsupportedAnnotationValueError
        If a custom annotation attribute holds a nested annotation, an array
        element that is not a JSON value, or an unknown value shape
    """
    extra: dict[str, Any] = {"example": None}

    example = find_annotation(annotations, "OpenApiExample")
    if example is not None and (value := example.get("value")) is not None:
        extra["example"] = value.value

    for custom in find_annotations(annotations, "Custom"):
        name = custom.get("name")
        value = custom.get("value")
        if name is not None and value is not None:
            extra[name.value] = value.value

    for annotation in annotations:
        if not annotation.custom:
            continue

        logger.debug("Custom annotation {} on {}", annotation.name, element)
        for attribute, value in annotation.attributes.items():
            try:
                extra[attribute] = coerce_annotation_value(value)
            except _CoercionError as e:
                raise UnsupportedAnnotationValueError(
                    element, annotation.name, attribute, str(e)
                ) from None
            logger.debug("Mapped {}.{} to {!r}", annotation.name, attribute, extra[attribute])

    return extra


def coerce_annotation_value(value: AnnotationValue) -> Any:
    """Convert an annotation value into a JSON-compatible value."""
    match value.kind:
        case AnnotationValueKind.BOOLEAN | AnnotationValueKind.NUMBER:
            return value.value
        case AnnotationValueKind.STRING:
            return trim_indent(value.value)
        case AnnotationValueKind.ENUM_CONSTANT:
            return str(value.value)
        case AnnotationValueKind.TYPE:
            return value.value.full_name
        case AnnotationValueKind.ARRAY:
            array = []
            for item in value.value:
                coerced = coerce_annotation_value(item)
                if not isinstance(coerced, _JSON_ARRAY_ELEMENT_TYPES):
                    raise _CoercionError(f"unsupported array value {item.value!r}")
                array.append(coerced)
            return array
        case AnnotationValueKind.ANNOTATION:
            raise _CoercionError("nested annotations are not supported")
        case AnnotationValueKind.UNKNOWN:
            raise _CoercionError(f"unknown value {value.value!r}")
    raise _CoercionError(f"unknown value kind {value.kind!r}")


def trim_indent(text: str) -> str:
    """Remove common indentation and surrounding blank lines.

    Examples
    --------
    >>> trim_indent('''
    ...     first
    ...       second
    ... ''')
    'first\\n  second'
    """
    return textwrap.dedent(text).strip("\n")


def merge_extra(schema: dict[str, Any], extra: dict[str, Any] | None) -> dict[str, Any]:
    """Add every non-None extension entry to ``schema`` and return it."""
    if not extra:
        return schema

    for key, value in extra.items():
        if value is None:
            continue
        if isinstance(value, bool | int | float | list | dict):
            schema[key] = value
        else:
            schema[key] = str(value)
    return schema


__all__ = ["coerce_annotation_value", "collect_extra", "merge_extra", "trim_indent"]
