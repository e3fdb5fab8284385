"""Domain models for typeschema."""

from typeschema.kernel.domain.annotations import (
    Annotation,
    AnnotationValue,
    AnnotationValueKind,
    Member,
    find_annotation,
    find_annotations,
)
from typeschema.kernel.domain.types import (
    CompositionKind,
    CompositionSpec,
    CustomProperty,
    MemberKind,
    PropertyDescriptor,
    SchemaNode,
    SimpleType,
    TypeDescriptor,
    TypeKind,
    Visibility,
)

__all__ = [
    "Annotation",
    "AnnotationValue",
    "AnnotationValueKind",
    "CompositionKind",
    "CompositionSpec",
    "CustomProperty",
    "Member",
    "MemberKind",
    "PropertyDescriptor",
    "SchemaNode",
    "SimpleType",
    "TypeDescriptor",
    "TypeKind",
    "Visibility",
    "find_annotation",
    "find_annotations",
]
