"""Type introspection port definition."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from typeschema.kernel.domain import Annotation, CustomProperty, Member, TypeDescriptor


@runtime_checkable
class TypeIntrospector(Protocol):
    """Port for querying the host type system.

    The schema engine never inspects host types directly. Adapters implement
    this protocol over whatever native reflection facility exists.
    """

    def list_members(self, type_: TypeDescriptor) -> Sequence[Member]:
        """List the members of a type in declaration order.

        Parameters
        ----------
        type_ : TypeDescriptor
            Type to inspect

        Returns
        -------
        Sequence[Member]
            Ordered members, including static ones
        """
        ...

    def type_annotations(self, type_: TypeDescriptor) -> Sequence[Annotation]:
        """Annotations attached to the type itself."""
        ...

    def custom_properties(self, type_: TypeDescriptor) -> Sequence[CustomProperty]:
        """Properties injected for the type without a declared member."""
        ...

    def is_assignable(self, source: TypeDescriptor, target: TypeDescriptor) -> bool:
        """Whether values of ``source`` can be assigned to ``target``."""
        ...

    def is_record(self, type_: TypeDescriptor) -> bool:
        """Whether the type is a value-record whose members keep their names."""
        ...

    def is_base_object_member(self, member: Member) -> bool:
        """Whether the member belongs to the universal base object type."""
        ...

    def resolve_type_descriptor(self, raw: Any) -> TypeDescriptor:
        """Build a descriptor from a raw host type handle.

        Parameters
        ----------
        raw : Any
            Host type handle (for the Python adapter: a class or type hint)

        Returns
        -------
        TypeDescriptor
            Descriptor identifying the type
        """
        ...
