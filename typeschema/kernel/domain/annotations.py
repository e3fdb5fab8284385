"""Annotation and member models exchanged with the host type system.

Annotation values are modelled as a tagged variant. Hosts translate their
native annotation values into :class:`AnnotationValue` instances and the
engine dispatches on :class:`AnnotationValueKind` exhaustively.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from typeschema.kernel.domain.types import MemberKind, TypeDescriptor, Visibility


class AnnotationValueKind(StrEnum):
    """Kind tag of an annotation attribute value."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    TYPE = "type"
    ENUM_CONSTANT = "enum_constant"
    ARRAY = "array"
    ANNOTATION = "annotation"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class AnnotationValue:
    """A single annotation attribute value.

    ``value`` holds a bool, a number, a str, a :class:`TypeDescriptor`, the
    constant name of an enum value, a tuple of :class:`AnnotationValue`, a
    nested :class:`Annotation` or, for UNKNOWN, whatever the host could not
    classify.
    """

    kind: AnnotationValueKind
    value: Any

    @classmethod
    def boolean(cls, value: bool) -> AnnotationValue:
        return cls(AnnotationValueKind.BOOLEAN, value)

    @classmethod
    def number(cls, value: int | float) -> AnnotationValue:
        return cls(AnnotationValueKind.NUMBER, value)

    @classmethod
    def string(cls, value: str) -> AnnotationValue:
        return cls(AnnotationValueKind.STRING, value)

    @classmethod
    def type_of(cls, value: TypeDescriptor) -> AnnotationValue:
        return cls(AnnotationValueKind.TYPE, value)

    @classmethod
    def enum_constant(cls, name: str) -> AnnotationValue:
        return cls(AnnotationValueKind.ENUM_CONSTANT, name)

    @classmethod
    def array(cls, *values: AnnotationValue) -> AnnotationValue:
        return cls(AnnotationValueKind.ARRAY, tuple(values))

    @classmethod
    def annotation(cls, value: Annotation) -> AnnotationValue:
        return cls(AnnotationValueKind.ANNOTATION, value)

    @classmethod
    def unknown(cls, value: Any) -> AnnotationValue:
        return cls(AnnotationValueKind.UNKNOWN, value)


@dataclass(frozen=True, slots=True)
class Annotation:
    """An annotation attached to a type or a member.

    Attributes
    ----------
    name : str
        Fully-qualified annotation name; well-known annotations are matched
        on :attr:`simple_name`
    attributes : Mapping[str, AnnotationValue]
        Declared attribute values, defaults included
    custom : bool
        Whether the annotation contributes custom schema metadata
    """

    name: str
    attributes: Mapping[str, AnnotationValue] = field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )
    custom: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def get(self, attribute: str) -> AnnotationValue | None:
        return self.attributes.get(attribute)


@dataclass(frozen=True, slots=True)
class Member:
    """A member of a type as reported by the host.

    ``declared_type`` is the accessor's return type or the field's type, or
    None when the host cannot type the member.
    """

    name: str
    kind: MemberKind
    declared_type: TypeDescriptor | None
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    annotations: tuple[Annotation, ...] = ()
    source: Any = field(default=None, compare=False, repr=False)


def find_annotation(annotations: Sequence[Annotation], simple_name: str) -> Annotation | None:
    """Return the first annotation with the given simple name."""
    for annotation in annotations:
        if annotation.simple_name == simple_name:
            return annotation
    return None


def find_annotations(annotations: Sequence[Annotation], simple_name: str) -> list[Annotation]:
    """Return every annotation with the given simple name, in order."""
    return [annotation for annotation in annotations if annotation.simple_name == simple_name]


__all__ = [
    "Annotation",
    "AnnotationValue",
    "AnnotationValueKind",
    "Member",
    "find_annotation",
    "find_annotations",
]
