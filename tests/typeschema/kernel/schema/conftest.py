"""Fixtures for schema engine tests.

The engine is exercised through an in-memory type system so that every port
answer is spelled out by the test itself.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from typeschema.kernel.domain import (
    Annotation,
    AnnotationValue,
    CustomProperty,
    Member,
    MemberKind,
    TypeDescriptor,
    TypeKind,
    Visibility,
)


class InMemoryTypeSystem:
    """Type introspector backed by dictionaries filled in by tests."""

    BASE_OBJECT_MEMBERS = frozenset({"getClass", "hashCode", "toString"})

    def __init__(self) -> None:
        self._members: dict[TypeDescriptor, list[Member]] = {}
        self._annotations: dict[TypeDescriptor, list[Annotation]] = {}
        self._custom: dict[TypeDescriptor, list[CustomProperty]] = {}
        self._supertypes: dict[TypeDescriptor, set[TypeDescriptor]] = {}
        self._records: set[TypeDescriptor] = set()

    def define(
        self,
        type_: TypeDescriptor,
        members: Sequence[Member] = (),
        annotations: Sequence[Annotation] = (),
        custom: Sequence[CustomProperty] = (),
        record: bool = False,
        supertypes: Sequence[TypeDescriptor] = (),
    ) -> TypeDescriptor:
        self._members[type_] = list(members)
        self._annotations[type_] = list(annotations)
        self._custom[type_] = list(custom)
        self._supertypes[type_] = set(supertypes)
        if record:
            self._records.add(type_)
        return type_

    def list_members(self, type_: TypeDescriptor) -> list[Member]:
        return self._members.get(type_, [])

    def type_annotations(self, type_: TypeDescriptor) -> list[Annotation]:
        return self._annotations.get(type_, [])

    def custom_properties(self, type_: TypeDescriptor) -> list[CustomProperty]:
        return self._custom.get(type_, [])

    def is_assignable(self, source: TypeDescriptor, target: TypeDescriptor) -> bool:
        return source == target or target in self._supertypes.get(source, set())

    def is_record(self, type_: TypeDescriptor) -> bool:
        return type_ in self._records

    def is_base_object_member(self, member: Member) -> bool:
        return member.name in self.BASE_OBJECT_MEMBERS

    def resolve_type_descriptor(self, raw: Any) -> TypeDescriptor:
        if isinstance(raw, TypeDescriptor):
            return raw
        raise TypeError(f"Unknown type {raw!r}")


def object_type(
    name: str, *generics: TypeDescriptor, package: str = "app.models"
) -> TypeDescriptor:
    return TypeDescriptor(f"{package}.{name}", name, TypeKind.OBJECT, tuple(generics))


def getter(
    name: str,
    type_: TypeDescriptor | None,
    *annotations: Annotation,
    visibility: Visibility = Visibility.PUBLIC,
    static: bool = False,
) -> Member:
    return Member(name, MemberKind.METHOD, type_, visibility, static, tuple(annotations))


def field(
    name: str,
    type_: TypeDescriptor | None,
    *annotations: Annotation,
    visibility: Visibility = Visibility.PUBLIC,
    static: bool = False,
) -> Member:
    return Member(name, MemberKind.FIELD, type_, visibility, static, tuple(annotations))


def marker(name: str, /, custom: bool = False, **attributes: AnnotationValue) -> Annotation:
    return Annotation(f"app.annotations.{name}", attributes, custom=custom)


INT = TypeDescriptor("builtins.int", "int", TypeKind.PRIMITIVE)
STR = TypeDescriptor("builtins.str", "str")
BYTE = TypeDescriptor("builtins.byte", "byte", TypeKind.PRIMITIVE)


def list_of(element: TypeDescriptor) -> TypeDescriptor:
    return TypeDescriptor("builtins.list", "list", TypeKind.ARRAY, (element,))


def dict_of(key: TypeDescriptor, value: TypeDescriptor) -> TypeDescriptor:
    return TypeDescriptor("builtins.dict", "dict", TypeKind.DICTIONARY, (key, value))


class TypeFactory:
    """Helpers for building descriptors, members and annotations in tests."""

    INT = INT
    STR = STR
    BYTE = BYTE
    object_type = staticmethod(object_type)
    getter = staticmethod(getter)
    field = staticmethod(field)
    marker = staticmethod(marker)
    list_of = staticmethod(list_of)
    dict_of = staticmethod(dict_of)


@pytest.fixture
def types() -> type[TypeFactory]:
    """Fixture providing descriptor and member builders."""
    return TypeFactory


@pytest.fixture
def type_system() -> InMemoryTypeSystem:
    """Fixture providing an empty in-memory type system."""
    return InMemoryTypeSystem()
