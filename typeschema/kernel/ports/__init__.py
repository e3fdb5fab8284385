"""Port interfaces for the schema engine."""

from typeschema.kernel.ports.type_introspection import TypeIntrospector

__all__ = ["TypeIntrospector"]
