"""Type introspection over Python classes and type hints.

Implements :class:`~typeschema.kernel.ports.TypeIntrospector` with the
standard library's reflection facilities:

- dataclasses, pydantic models and named tuples are value-records whose
  fields become accessor members named verbatim
- enums expose their members as static fields
- other classes expose annotated class attributes, zero-argument methods and
  properties, walking the MRO base-first
- schema annotations come from ``typing.Annotated`` metadata and from
  :func:`typeschema.adapters.python.markers.annotate`
"""

import dataclasses
import inspect
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Annotated, Any, TypeVar, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from typeschema.adapters.python.hints import (
    ARRAY_ORIGINS,
    BINARY_TYPES,
    DICTIONARY_ORIGINS,
    NoneType,
    is_classvar,
    is_literal_type,
    is_named_tuple,
    is_union_type,
    qualified_name,
    substitute_type_vars,
    unwrap_annotated,
    unwrap_classvar,
)
from typeschema.adapters.python.markers import (
    attached_annotations,
    is_custom_annotation,
    is_schema_annotation,
)
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
from typeschema.kernel.exceptions import ResolveError
from typeschema.kernel.logging import get_logger
from typeschema.kernel.resolver import resolve

logger = get_logger(__name__)

BYTE = TypeDescriptor("builtins.byte", "byte", TypeKind.PRIMITIVE)
ANY = TypeDescriptor("typing.Any", "Any", source=Any)
NONE = TypeDescriptor("builtins.NoneType", "NoneType", source=NoneType)

_PRIMITIVES: frozenset[type] = frozenset({bool, int, float})
_OBJECT_MEMBER_NAMES = frozenset(dir(object))


def _visibility(name: str) -> Visibility:
    if name.startswith("__") and not name.endswith("__"):
        return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _demangle(name: str, klass: type) -> str:
    prefix = f"_{klass.__name__.lstrip('_')}__"
    return name[len(prefix) - 2 :] if name.startswith(prefix) else name


def _pydantic_generic(cls: Any) -> tuple[type, tuple[Any, ...]] | None:
    """Return the origin and arguments of a parameterized pydantic model.

    Pydantic builds ``Model[Arg]`` as a real subclass, so ``typing.get_origin``
    does not see through it.
    """
    if not (isinstance(cls, type) and issubclass(cls, BaseModel)):
        return None
    metadata = getattr(cls, "__pydantic_generic_metadata__", None) or {}
    origin = metadata.get("origin")
    if origin is None:
        return None
    return origin, tuple(metadata.get("args", ()))


def _type_hints(obj: Any) -> dict[str, Any]:
    """Resolve type hints keeping Annotated metadata, falling back to raw annotations."""
    try:
        return get_type_hints(obj, include_extras=True)
    except (NameError, TypeError, AttributeError) as e:
        logger.debug("Could not resolve type hints of {}: {}", obj, e)
        return dict(inspect.get_annotations(obj))


class PythonTypeIntrospector:
    """Type introspector for Python classes.

    Parameters
    ----------
    custom_properties : Mapping[Any, Sequence[tuple[str, Any]]] | None
        Extra ``(name, type)`` properties per class (or per fully-qualified
        class name), appended after the declared members

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Point:
    ...     x: int
    ...     y: int
    >>> introspector = PythonTypeIntrospector()
    >>> point = introspector.resolve_type_descriptor(Point)
    >>> [member.name for member in introspector.list_members(point)]
    ['x', 'y']
    >>> introspector.resolve_type_descriptor(list[int]).kind
    <TypeKind.ARRAY: 'array'>
    """

    def __init__(
        self, custom_properties: Mapping[Any, Sequence[tuple[str, Any]]] | None = None
    ) -> None:
        self._custom_properties: dict[str, tuple[CustomProperty, ...]] = {}
        for owner, properties in (custom_properties or {}).items():
            full_name = owner if isinstance(owner, str) else qualified_name(owner)
            self._custom_properties[full_name] = tuple(
                CustomProperty(name, self.resolve_type_descriptor(hint))
                for name, hint in properties
            )

    # ------------------------------------------------------------------
    # Descriptor resolution
    # ------------------------------------------------------------------

    def resolve_type_descriptor(self, raw: Any) -> TypeDescriptor:
        """Build a descriptor from a class or a type hint."""
        hint, _ = unwrap_annotated(raw)

        if hint is None or hint is NoneType:
            return NONE
        if hint is Any:
            return ANY
        if isinstance(hint, TypeVar):
            return self.resolve_type_descriptor(hint.__bound__) if hint.__bound__ else ANY
        if isinstance(hint, str):
            logger.debug("Unresolved forward reference '{}' treated as Any", hint)
            return ANY

        if is_union_type(hint):
            return self._union_descriptor(hint)
        if is_literal_type(hint):
            values = get_args(hint)
            return self.resolve_type_descriptor(type(values[0]) if values else Any)

        origin = get_origin(hint)
        base = origin if origin is not None else hint
        args = get_args(hint)

        if base in BINARY_TYPES:
            return TypeDescriptor(
                qualified_name(base), base.__name__, TypeKind.ARRAY, (BYTE,), hint
            )
        if base in DICTIONARY_ORIGINS:
            key, value = args if len(args) == 2 else (Any, Any)
            return TypeDescriptor(
                qualified_name(base),
                base.__name__,
                TypeKind.DICTIONARY,
                (self.resolve_type_descriptor(key), self.resolve_type_descriptor(value)),
                hint,
            )
        if base in ARRAY_ORIGINS:
            return TypeDescriptor(
                qualified_name(base),
                base.__name__,
                TypeKind.ARRAY,
                (self._element_descriptor(args),),
                hint,
            )

        if not isinstance(base, type):
            logger.debug("Unsupported type hint {!r} treated as Any", hint)
            return ANY

        parameterized = _pydantic_generic(base)
        if parameterized is not None:
            base, args = parameterized

        if base in _PRIMITIVES:
            kind = TypeKind.PRIMITIVE
        elif issubclass(base, Enum):
            kind = TypeKind.ENUM
        else:
            kind = TypeKind.OBJECT
        generics = tuple(self.resolve_type_descriptor(arg) for arg in args)
        return TypeDescriptor(qualified_name(base), base.__name__, kind, generics, hint)

    def _union_descriptor(self, hint: Any) -> TypeDescriptor:
        args = get_args(hint)
        present = [arg for arg in args if arg is not NoneType]
        if len(present) == 1 and len(args) == 2:
            return TypeDescriptor(
                "typing.Optional",
                "Optional",
                generics=(self.resolve_type_descriptor(present[0]),),
                source=hint,
            )
        return TypeDescriptor(
            "typing.Union",
            "Union",
            generics=tuple(self.resolve_type_descriptor(arg) for arg in args),
            source=hint,
        )

    def _element_descriptor(self, args: tuple[Any, ...]) -> TypeDescriptor:
        elements = list(dict.fromkeys(arg for arg in args if arg is not Ellipsis))
        if not elements:
            return ANY
        if len(elements) == 1:
            return self.resolve_type_descriptor(elements[0])
        return TypeDescriptor(
            "typing.Union",
            "Union",
            generics=tuple(self.resolve_type_descriptor(arg) for arg in elements),
        )

    # ------------------------------------------------------------------
    # Port queries
    # ------------------------------------------------------------------

    def list_members(self, type_: TypeDescriptor) -> list[Member]:
        cls = self._class_of(type_)
        if cls is None:
            return []
        if issubclass(cls, Enum):
            return [
                Member(name=item.name, kind=MemberKind.FIELD, declared_type=type_, is_static=True)
                for item in cls
            ]

        type_vars = self._type_var_bindings(type_)
        if self._is_record_class(cls):
            return self._record_members(cls, type_vars)
        return self._class_members(cls, type_vars)

    def type_annotations(self, type_: TypeDescriptor) -> list[Annotation]:
        # Wrappers have no class to annotate; as a root they render as anyOf.
        if type_.full_name == "typing.Union" and type_.generics:
            return [self._any_of(type_.generics)]
        if type_.full_name == "typing.Optional" and type_.generics:
            return [self._any_of((*type_.generics, NONE))]

        cls = self._class_of(type_)
        if cls is None or cls.__module__ == "builtins":
            return []
        parameterized = _pydantic_generic(cls)
        if parameterized is not None:
            cls = parameterized[0]
        return self._annotations(attached_annotations(cls))

    def custom_properties(self, type_: TypeDescriptor) -> tuple[CustomProperty, ...]:
        return self._custom_properties.get(type_.full_name, ())

    def is_assignable(self, source: TypeDescriptor, target: TypeDescriptor) -> bool:
        source_cls = self._class_of(source)
        target_cls = self._class_of(target)
        if source_cls is None or target_cls is None:
            return source == target
        return issubclass(source_cls, target_cls)

    def is_record(self, type_: TypeDescriptor) -> bool:
        cls = self._class_of(type_)
        return cls is not None and self._is_record_class(cls)

    def is_base_object_member(self, member: Member) -> bool:
        return member.name in _OBJECT_MEMBER_NAMES

    # ------------------------------------------------------------------
    # Member discovery
    # ------------------------------------------------------------------

    @staticmethod
    def _is_record_class(cls: type) -> bool:
        return dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel) or is_named_tuple(cls)

    def _record_members(self, cls: type, type_vars: dict[Any, Any]) -> list[Member]:
        if issubclass(cls, BaseModel):
            # pydantic has already substituted the arguments of parameterized models
            members = []
            for name, info in cls.model_fields.items():
                hint = info.annotation
                if info.metadata:
                    hint = Annotated[hint, *info.metadata]
                members.append(self._member(name, MemberKind.METHOD, hint, type_vars))
            return members

        hints = _type_hints(cls)
        if dataclasses.is_dataclass(cls):
            names = [f.name for f in dataclasses.fields(cls)]
        else:
            names = list(cls._fields)  # type: ignore[attr-defined]

        return [self._member(name, MemberKind.METHOD, hints.get(name), type_vars) for name in names]

    def _class_members(self, cls: type, type_vars: dict[Any, Any]) -> list[Member]:
        hints = _type_hints(cls)
        members: dict[str, Member] = {}

        for klass in reversed(cls.__mro__):
            if klass is object:
                continue

            for name in inspect.get_annotations(klass):
                if _is_dunder(name):
                    continue
                hint = hints.get(name)
                static = is_classvar(unwrap_annotated(hint)[0])
                if static:
                    hint = unwrap_classvar(unwrap_annotated(hint)[0])
                members[name] = self._member(
                    _demangle(name, klass), MemberKind.FIELD, hint, type_vars, static=static
                )

            for name, attribute in vars(klass).items():
                if _is_dunder(name):
                    continue
                member = self._callable_member(name, attribute, type_vars)
                if member is not None:
                    members[name] = member

        return list(members.values())

    def _callable_member(
        self, name: str, attribute: Any, type_vars: dict[Any, Any]
    ) -> Member | None:
        if isinstance(attribute, property):
            if attribute.fget is None:
                return None
            return self._member(
                name,
                MemberKind.PROPERTY,
                self._return_hint(attribute.fget),
                type_vars,
                annotations=attached_annotations(attribute),
            )

        if isinstance(attribute, staticmethod | classmethod):
            return self._member(
                name,
                MemberKind.METHOD,
                self._return_hint(attribute.__func__),
                type_vars,
                static=True,
                annotations=attached_annotations(attribute),
            )

        if inspect.isfunction(attribute) and self._takes_no_arguments(attribute):
            return self._member(
                name,
                MemberKind.METHOD,
                self._return_hint(attribute),
                type_vars,
                annotations=attached_annotations(attribute),
            )
        return None

    @staticmethod
    def _takes_no_arguments(function: Callable[..., Any]) -> bool:
        try:
            parameters = list(inspect.signature(function).parameters.values())[1:]
        except (TypeError, ValueError):
            return False
        return all(
            p.default is not inspect.Parameter.empty
            or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
            for p in parameters
        )

    @staticmethod
    def _return_hint(function: Callable[..., Any]) -> Any:
        hint = _type_hints(function).get("return")
        return None if hint is NoneType else hint

    def _member(
        self,
        name: str,
        kind: MemberKind,
        hint: Any,
        type_vars: dict[Any, Any],
        static: bool = False,
        annotations: Sequence[Any] = (),
    ) -> Member:
        metadata: tuple[Any, ...] = ()
        declared_type = None
        if hint is not None:
            hint = substitute_type_vars(hint, type_vars)
            _, metadata = unwrap_annotated(hint)
            declared_type = self.resolve_type_descriptor(hint)

        return Member(
            name=name,
            kind=kind,
            declared_type=declared_type,
            visibility=_visibility(name),
            is_static=static,
            annotations=tuple(self._annotations((*metadata, *annotations))),
        )

    # ------------------------------------------------------------------
    # Annotation conversion
    # ------------------------------------------------------------------

    def _annotations(self, markers: Sequence[Any]) -> list[Annotation]:
        return [self._annotation(marker) for marker in markers if is_schema_annotation(marker)]

    def _annotation(self, marker: Any) -> Annotation:
        attributes = {}
        for f in dataclasses.fields(marker):
            value = getattr(marker, f.name)
            if value is not None:
                attributes[f.name] = self._annotation_value(value)
        return Annotation(
            qualified_name(type(marker)), attributes, custom=is_custom_annotation(marker)
        )

    def _annotation_value(self, value: Any) -> AnnotationValue:
        if isinstance(value, bool):
            return AnnotationValue.boolean(value)
        if isinstance(value, Enum):
            return AnnotationValue.enum_constant(value.name)
        if isinstance(value, int | float):
            return AnnotationValue.number(value)
        if isinstance(value, str):
            return AnnotationValue.string(value)
        if isinstance(value, type | TypeVar) or get_origin(value) is not None:
            return AnnotationValue.type_of(self.resolve_type_descriptor(value))
        if isinstance(value, list | tuple):
            return AnnotationValue.array(*(self._annotation_value(item) for item in value))
        if is_schema_annotation(value):
            return AnnotationValue.annotation(self._annotation(value))
        return AnnotationValue.unknown(value)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _class_of(self, type_: TypeDescriptor) -> type | None:
        source = type_.source
        if source is None and type_.kind is not TypeKind.PRIMITIVE and "." in type_.full_name:
            module, _, qualname = type_.full_name.rpartition(".")
            try:
                source = resolve(f"{module}:{qualname}")
            except ResolveError:
                return None
        base = get_origin(source) or source
        return base if isinstance(base, type) else None

    @staticmethod
    def _any_of(types: Sequence[TypeDescriptor]) -> Annotation:
        return Annotation(
            "typing.AnyOf", {"value": AnnotationValue.array(*map(AnnotationValue.type_of, types))}
        )

    @staticmethod
    def _type_var_bindings(type_: TypeDescriptor) -> dict[Any, Any]:
        origin = get_origin(type_.source)
        if origin is None:
            return {}
        parameters = getattr(origin, "__parameters__", ())
        return dict(zip(parameters, get_args(type_.source), strict=False))


__all__ = ["ANY", "BYTE", "NONE", "PythonTypeIntrospector"]
