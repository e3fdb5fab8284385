"""Schema annotations for Python types.

Markers attach to fields and return types through ``typing.Annotated``
metadata, and to classes, methods and properties through :func:`annotate`.

Examples
--------
Example usage::

    from dataclasses import dataclass
    from typing import Annotated

    from typeschema.adapters.python.markers import NotNull, OpenApiExample, OpenApiName

    @dataclass
    class User:
        name: Annotated[str, NotNull(), OpenApiExample("Ada")]
        email_address: Annotated[str | None, OpenApiName("email")]
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from typeschema.kernel.domain import Visibility

T = TypeVar("T")

ANNOTATIONS_ATTR = "__typeschema_annotations__"
CUSTOM_ANNOTATION_ATTR = "__typeschema_custom_annotation__"


class Marker:
    """Base class of the well-known schema annotations."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class OpenApiName(Marker):
    """Override the property name."""

    value: str


@dataclass(frozen=True, slots=True)
class OpenApiIgnore(Marker):
    """Exclude the member from the schema."""


@dataclass(frozen=True, slots=True)
class OpenApiExample(Marker):
    """Example value rendered as the ``example`` keyword."""

    value: str


@dataclass(frozen=True, slots=True)
class OpenApiPropertyType(Marker):
    """Render the member or type as ``defined_by`` instead of its declared type."""

    defined_by: Any


@dataclass(frozen=True, slots=True)
class OpenApiByFields(Marker):
    """Extract properties from fields of at least ``value`` visibility."""

    value: Visibility = Visibility.PUBLIC


@dataclass(frozen=True, slots=True)
class JsonSchema(Marker):
    """Override the required-by-default flag for one type."""

    require_non_nulls: bool = True


@dataclass(frozen=True, slots=True)
class NotNull(Marker):
    """Mark the member as never null, making it required."""


@dataclass(frozen=True, slots=True)
class Custom(Marker):
    """Add one ``name: value`` entry to the schema; repeatable."""

    name: str
    value: str


@dataclass(frozen=True, slots=True, init=False)
class _Composition(Marker):
    value: tuple[Any, ...]

    def __init__(self, *types: Any) -> None:
        object.__setattr__(self, "value", tuple(types))


@dataclass(frozen=True, slots=True, init=False)
class OneOf(_Composition):
    """Value matches exactly one of the given types."""


@dataclass(frozen=True, slots=True, init=False)
class AnyOf(_Composition):
    """Value matches at least one of the given types."""


@dataclass(frozen=True, slots=True, init=False)
class AllOf(_Composition):
    """Value matches all of the given types."""


def custom_annotation(cls: type[T]) -> type[T]:
    """Declare a class as custom schema metadata.

    Every field of an instance ends up as a schema keyword. Classes that are
    not dataclasses yet are turned into frozen dataclasses.

    Examples
    --------
    >>> @custom_annotation
    ... class Deprecated:
    ...     deprecated: bool = True
    >>> is_custom_annotation(Deprecated())
    True
    """
    if not dataclasses.is_dataclass(cls):
        cls = dataclass(frozen=True)(cls)
    setattr(cls, CUSTOM_ANNOTATION_ATTR, True)
    return cls


def is_custom_annotation(obj: Any) -> bool:
    """Check if ``obj`` is an instance of a custom annotation class."""
    return vars(type(obj)).get(CUSTOM_ANNOTATION_ATTR, False) is True


def is_schema_annotation(obj: Any) -> bool:
    """Check if ``obj`` is a marker or a custom annotation instance."""
    return isinstance(obj, Marker) or is_custom_annotation(obj)


def annotate(*markers: Any) -> Callable[[T], T]:
    """Attach schema annotations to a class, method or property.

    Raises
    ------
    TypeError
        If a marker is not a schema annotation

    Examples
    --------
    >>> @annotate(JsonSchema(require_non_nulls=False))
    ... class Settings:
    ...     pass
    >>> attached_annotations(Settings)
    (JsonSchema(require_non_nulls=False),)
    """
    for marker in markers:
        if not is_schema_annotation(marker):
            raise TypeError(f"{marker!r} is not a schema annotation")

    def decorator(target: T) -> T:
        holder = _holder(target)
        setattr(holder, ANNOTATIONS_ATTR, attached_annotations(holder) + markers)
        return target

    return decorator


def _holder(target: Any) -> Any:
    if isinstance(target, property):
        return target.fget
    if isinstance(target, staticmethod | classmethod):
        return target.__func__
    return target


def attached_annotations(target: Any) -> tuple[Any, ...]:
    """Return the annotations attached to ``target`` itself, never inherited ones."""
    try:
        return tuple(vars(_holder(target)).get(ANNOTATIONS_ATTR, ()))
    except TypeError:
        return ()


__all__ = [
    "AllOf",
    "AnyOf",
    "Custom",
    "JsonSchema",
    "Marker",
    "NotNull",
    "OneOf",
    "OpenApiByFields",
    "OpenApiExample",
    "OpenApiIgnore",
    "OpenApiName",
    "OpenApiPropertyType",
    "annotate",
    "attached_annotations",
    "custom_annotation",
    "is_custom_annotation",
    "is_schema_annotation",
]
