"""Type hint inspection utilities."""

import collections
import collections.abc
import types
from typing import Annotated, Any, ClassVar, Literal, TypeVar, Union, get_args, get_origin

NoneType = type(None)

ARRAY_ORIGINS: frozenset[Any] = frozenset({
    list,
    tuple,
    set,
    frozenset,
    collections.deque,
    collections.abc.Collection,
    collections.abc.Iterable,
    collections.abc.Iterator,
    collections.abc.MutableSequence,
    collections.abc.MutableSet,
    collections.abc.Sequence,
    collections.abc.Set,
})

DICTIONARY_ORIGINS: frozenset[Any] = frozenset({
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
})

BINARY_TYPES: frozenset[type] = frozenset({bytes, bytearray})


def qualified_name(obj: Any) -> str:
    """Return ``module.qualname`` of a class.

    Examples
    --------
    >>> qualified_name(int)
    'builtins.int'
    >>> import decimal
    >>> qualified_name(decimal.Decimal)
    'decimal.Decimal'
    """
    return f"{obj.__module__}.{obj.__qualname__}"


def is_union_type(type_hint: Any) -> bool:
    """Check if type hint is a Union type (including | syntax).

    Examples
    --------
    >>> from typing import Union
    >>> is_union_type(Union[str, int])
    True
    >>> is_union_type(str | int)
    True
    >>> is_union_type(str)
    False
    """
    return get_origin(type_hint) is Union or isinstance(type_hint, types.UnionType)


def is_literal_type(type_hint: Any) -> bool:
    """Check if type hint is a Literal type.

    Examples
    --------
    >>> is_literal_type(Literal["a", "b"])
    True
    >>> is_literal_type(str)
    False
    """
    return get_origin(type_hint) is Literal


def is_classvar(type_hint: Any) -> bool:
    """Check if type hint declares a class variable.

    Examples
    --------
    >>> is_classvar(ClassVar[int])
    True
    >>> is_classvar(int)
    False
    """
    return type_hint is ClassVar or get_origin(type_hint) is ClassVar


def unwrap_annotated(type_hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split an Annotated type into its base type and metadata.

    Nested Annotated types are flattened, outer metadata last.

    Examples
    --------
    >>> unwrap_annotated(Annotated[int, "a", "b"])
    (<class 'int'>, ('a', 'b'))
    >>> unwrap_annotated(str)
    (<class 'str'>, ())
    """
    metadata: tuple[Any, ...] = ()
    while get_origin(type_hint) is Annotated:
        metadata = tuple(type_hint.__metadata__) + metadata
        type_hint = type_hint.__origin__
    return type_hint, metadata


def unwrap_classvar(type_hint: Any) -> Any:
    """Return the type wrapped by ``ClassVar``, or Any for a bare ``ClassVar``."""
    args = get_args(type_hint)
    return args[0] if args else Any


def is_named_tuple(cls: Any) -> bool:
    """Check if a class was built by ``typing.NamedTuple`` or ``collections.namedtuple``.

    Examples
    --------
    >>> from typing import NamedTuple
    >>> class Point(NamedTuple):
    ...     x: int
    >>> is_named_tuple(Point)
    True
    >>> is_named_tuple(tuple)
    False
    """
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, "_fields")


def substitute_type_vars(type_hint: Any, mapping: dict[Any, Any]) -> Any:
    """Replace type variables in a hint with the types bound in ``mapping``.

    Examples
    --------
    >>> T = TypeVar("T")
    >>> substitute_type_vars(list[T], {T: int})
    list[int]
    >>> substitute_type_vars(T, {T: str})
    <class 'str'>
    """
    if not mapping:
        return type_hint
    if isinstance(type_hint, TypeVar):
        return mapping.get(type_hint, type_hint)
    parameters = getattr(type_hint, "__parameters__", ())
    if parameters and not isinstance(type_hint, type):
        return type_hint[tuple(mapping.get(p, p) for p in parameters)]
    return type_hint


__all__ = [
    "ARRAY_ORIGINS",
    "BINARY_TYPES",
    "DICTIONARY_ORIGINS",
    "NoneType",
    "is_classvar",
    "is_literal_type",
    "is_named_tuple",
    "is_union_type",
    "qualified_name",
    "substitute_type_vars",
    "unwrap_annotated",
    "unwrap_classvar",
]
