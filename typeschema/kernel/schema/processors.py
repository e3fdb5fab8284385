"""Embedded-type processors.

A processor is offered every embedded type before the built-in container and
reference rendering. A composition declared on the embedding property is
rendered only when every processor declines it; the built-in processors always
decline such types. The first processor returning a node wins; returning
None passes the type on to the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from typeschema.kernel.domain import (
    CompositionKind,
    CompositionSpec,
    SchemaNode,
    TypeDescriptor,
)

if TYPE_CHECKING:
    from typeschema.kernel.schema.generator import TypeSchemaGenerator


@dataclass(frozen=True, slots=True)
class EmbeddedTypeProcessorContext:
    """Everything a processor may need to render an embedded type.

    Attributes
    ----------
    generator : TypeSchemaGenerator
        Generator to recurse into for nested types
    type : TypeDescriptor
        Embedded type being rendered
    inline_refs : bool
        Whether referenced types are inlined
    require_non_nulls : bool
        Effective required-by-default flag
    extra : dict[str, Any] | None
        Extension metadata merged into the result after the processor runs
    composition : CompositionSpec | None
        Composition declared on the embedding property, rendered as
        ``oneOf``/``anyOf``/``allOf`` when every processor declines
    inlining : frozenset[TypeDescriptor]
        Types currently being inlined around this one
    """

    generator: TypeSchemaGenerator
    type: TypeDescriptor
    inline_refs: bool
    require_non_nulls: bool
    extra: dict[str, Any] | None = None
    composition: CompositionSpec | None = None
    inlining: frozenset[TypeDescriptor] = frozenset()


@runtime_checkable
class EmbeddedTypeProcessor(Protocol):
    """Strategy rendering selected embedded types."""

    def process(self, context: EmbeddedTypeProcessorContext) -> SchemaNode | None:
        """Render ``context.type`` or return None to decline."""
        ...


class OptionalUnwrapProcessor:
    """Render an optional wrapper as its single type argument.

    Examples
    --------
    >>> processor = OptionalUnwrapProcessor()
    >>> processor.full_names
    ('typing.Optional',)
    """

    def __init__(self, full_names: tuple[str, ...] = ("typing.Optional",)) -> None:
        self.full_names = tuple(full_names)

    def process(self, context: EmbeddedTypeProcessorContext) -> SchemaNode | None:
        type_ = context.type
        if context.composition is not None or len(type_.generics) != 1:
            return None
        if type_.full_name not in self.full_names:
            return None
        return context.generator.render_embedded(
            type_.generics[0],
            context.inline_refs,
            context.require_non_nulls,
            inlining=context.inlining,
        )


class UnionProcessor:
    """Render a union wrapper as ``anyOf`` over its type arguments."""

    def __init__(self, full_names: tuple[str, ...] = ("typing.Union",)) -> None:
        self.full_names = tuple(full_names)

    def process(self, context: EmbeddedTypeProcessorContext) -> SchemaNode | None:
        type_ = context.type
        if context.composition is not None or not type_.generics:
            return None
        if type_.full_name not in self.full_names:
            return None
        return context.generator.render_composition(
            CompositionSpec(CompositionKind.ANY_OF, type_.generics),
            context.inline_refs,
            context.require_non_nulls,
            inlining=context.inlining,
        )


BUILTIN_PROCESSORS: tuple[EmbeddedTypeProcessor, ...] = (
    OptionalUnwrapProcessor(),
    UnionProcessor(),
)

__all__ = [
    "BUILTIN_PROCESSORS",
    "EmbeddedTypeProcessor",
    "EmbeddedTypeProcessorContext",
    "OptionalUnwrapProcessor",
    "UnionProcessor",
]
