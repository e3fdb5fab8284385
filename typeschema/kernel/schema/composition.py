"""Composition detection.

A type or a member declares a composition through a ``OneOf``, ``AnyOf`` or
``AllOf`` annotation whose ``value`` lists the member types.
"""

from collections.abc import Sequence

from typeschema.kernel.domain import (
    Annotation,
    AnnotationValueKind,
    CompositionKind,
    CompositionSpec,
    TypeDescriptor,
)
from typeschema.kernel.exceptions import ValidationError

COMPOSITION_ANNOTATIONS: dict[str, CompositionKind] = {
    "OneOf": CompositionKind.ONE_OF,
    "AnyOf": CompositionKind.ANY_OF,
    "AllOf": CompositionKind.ALL_OF,
}


def find_composition(annotations: Sequence[Annotation]) -> CompositionSpec | None:
    """Return the composition declared by ``annotations``, if any.

    The first composition annotation wins when several are attached.

    Raises
    ------
    ValidationError
        If the annotation's ``value`` is not an array of types
    """
    for annotation in annotations:
        kind = COMPOSITION_ANNOTATIONS.get(annotation.simple_name)
        if kind is None:
            continue

        value = annotation.get("value")
        if value is None:
            return CompositionSpec(kind, ())
        if value.kind is not AnnotationValueKind.ARRAY:
            raise ValidationError(f"{annotation.name}.value", "must be an array of types")

        members: list[TypeDescriptor] = []
        for item in value.value:
            if item.kind is not AnnotationValueKind.TYPE:
                raise ValidationError(
                    f"{annotation.name}.value", "must only contain types", value=item.value
                )
            members.append(item.value)
        return CompositionSpec(kind, tuple(members))

    return None


__all__ = ["COMPOSITION_ANNOTATIONS", "find_composition"]
