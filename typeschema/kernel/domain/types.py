"""Domain models for the type graph and the schema nodes built from it.

A :class:`TypeDescriptor` is the host-agnostic identity of a type. Hosts
create descriptors on demand; the engine only reads them. Two descriptors are
equal when their fully-qualified names and generic arguments are equal, which
is what makes reference sets deduplicate structurally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import Any


class TypeKind(StrEnum):
    """Structural kind of a type."""

    OBJECT = "object"
    ENUM = "enum"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    PRIMITIVE = "primitive"


class MemberKind(StrEnum):
    """Shape of a type member as reported by the host."""

    FIELD = "field"
    METHOD = "method"
    PROPERTY = "property"

    @property
    def is_accessor(self) -> bool:
        """Whether members of this kind are accessor-shaped."""
        return self is not MemberKind.FIELD


class Visibility(IntEnum):
    """Member visibility, ordered from most closed to most open."""

    PRIVATE = 0
    PROTECTED = 1
    DEFAULT = 2
    PUBLIC = 3


class CompositionKind(StrEnum):
    """JSON Schema composition keyword."""

    ONE_OF = "oneOf"
    ANY_OF = "anyOf"
    ALL_OF = "allOf"


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Identity of a type in the host type system.

    Attributes
    ----------
    full_name : str
        Fully-qualified name, e.g. ``app.models.User``
    simple_name : str
        Short name used for ``$ref`` targets, e.g. ``User``
    kind : TypeKind
        Structural kind
    generics : tuple[TypeDescriptor, ...]
        Ordered generic type arguments
    source : Any
        Handle back to the host's raw type node; only the host reads it
    """

    full_name: str
    simple_name: str
    kind: TypeKind = field(default=TypeKind.OBJECT, compare=False)
    generics: tuple[TypeDescriptor, ...] = ()
    source: Any = field(default=None, compare=False, repr=False)

    @property
    def is_primitive(self) -> bool:
        """Whether values of this type can never be absent."""
        return self.kind is TypeKind.PRIMITIVE

    @property
    def schema_name(self) -> str:
        """Definition name of the type, e.g. ``Page_User`` for ``Page[User]``.

        Generic arguments are part of the name so that differently
        parameterized types never share a definition.
        """
        return "_".join((self.simple_name, *(arg.schema_name for arg in self.generics)))

    def __str__(self) -> str:
        if not self.generics:
            return self.full_name
        return f"{self.full_name}[{', '.join(str(arg) for arg in self.generics)}]"


@dataclass(frozen=True, slots=True)
class SimpleType:
    """Schema rendering of a primitive or well-known type."""

    type: str
    format: str | None = None

    def to_json(self) -> dict[str, Any]:
        """Render as a schema fragment."""
        schema: dict[str, Any] = {"type": self.type}
        if self.format is not None:
            schema["format"] = self.format
        return schema


@dataclass(frozen=True, slots=True)
class CompositionSpec:
    """A ``oneOf``/``anyOf``/``allOf`` declaration over member types."""

    kind: CompositionKind
    members: tuple[TypeDescriptor, ...]


@dataclass(frozen=True, slots=True)
class CustomProperty:
    """Property injected by the host with no corresponding declared member."""

    name: str
    type: TypeDescriptor


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """A named, typed schema property extracted from a type member."""

    name: str
    type: TypeDescriptor
    composition: CompositionSpec | None = None
    required: bool = True
    extra: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True, slots=True)
class SchemaNode:
    """A schema fragment plus the types it referenced without inlining.

    The reference set is owned by whoever receives the node; callers union it
    into their own result instead of mutating a shared collection.
    """

    json: dict[str, Any]
    references: frozenset[TypeDescriptor] = frozenset()


__all__ = [
    "CompositionKind",
    "CompositionSpec",
    "CustomProperty",
    "MemberKind",
    "PropertyDescriptor",
    "SchemaNode",
    "SimpleType",
    "TypeDescriptor",
    "TypeKind",
    "Visibility",
]
