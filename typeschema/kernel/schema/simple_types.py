"""Default simple-type table.

Maps fully-qualified type names to the primitive schema they render as.
A type found here is never referenced or inlined, and never contributes to a
reference set.
"""

from collections.abc import Mapping
from types import MappingProxyType

from typeschema.kernel.domain import SimpleType

DEFAULT_SIMPLE_TYPES: Mapping[str, SimpleType] = MappingProxyType({
    "builtins.bool": SimpleType("boolean"),
    "builtins.int": SimpleType("integer"),
    "builtins.float": SimpleType("number", "double"),
    "builtins.complex": SimpleType("string"),
    "builtins.str": SimpleType("string"),
    "builtins.NoneType": SimpleType("null"),
    "builtins.object": SimpleType("object"),
    "typing.Any": SimpleType("object"),
    "decimal.Decimal": SimpleType("number"),
    "datetime.datetime": SimpleType("string", "date-time"),
    "datetime.date": SimpleType("string", "date"),
    "datetime.time": SimpleType("string", "time"),
    "datetime.timedelta": SimpleType("string", "duration"),
    "uuid.UUID": SimpleType("string", "uuid"),
    "ipaddress.IPv4Address": SimpleType("string", "ipv4"),
    "ipaddress.IPv6Address": SimpleType("string", "ipv6"),
    "pathlib.Path": SimpleType("string"),
    "pathlib.PurePath": SimpleType("string"),
    "pathlib._local.Path": SimpleType("string"),
    "pathlib._local.PurePath": SimpleType("string"),
})

# Element simple names that turn an array into a binary string
BINARY_ELEMENT_NAMES = frozenset({"byte", "Byte"})


def merge_simple_types(
    overrides: Mapping[str, SimpleType], base: Mapping[str, SimpleType] = DEFAULT_SIMPLE_TYPES
) -> Mapping[str, SimpleType]:
    """Return a read-only table with ``overrides`` applied on top of ``base``."""
    return MappingProxyType({**base, **overrides})


__all__ = ["BINARY_ELEMENT_NAMES", "DEFAULT_SIMPLE_TYPES", "merge_simple_types"]
