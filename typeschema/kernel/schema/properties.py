"""Property extraction from type members."""

from typeschema.kernel.config import GeneratorConfig
from typeschema.kernel.domain import (
    Annotation,
    AnnotationValueKind,
    Member,
    MemberKind,
    PropertyDescriptor,
    TypeDescriptor,
    Visibility,
    find_annotation,
)
from typeschema.kernel.exceptions import ValidationError
from typeschema.kernel.logging import get_logger
from typeschema.kernel.ports import TypeIntrospector
from typeschema.kernel.schema.composition import find_composition
from typeschema.kernel.schema.extra import collect_extra

logger = get_logger(__name__)

_ACCESSOR_PREFIXES = ("get", "is")


def accessor_property_name(name: str) -> str | None:
    """Derive a property name from an accessor-shaped member name.

    Examples
    --------
    >>> accessor_property_name("getFoo")
    'foo'
    >>> accessor_property_name("isActive")
    'active'
    >>> accessor_property_name("get_created_at")
    'created_at'
    >>> accessor_property_name("compute") is None
    True
    """
    for prefix in _ACCESSOR_PREFIXES:
        if not name.startswith(prefix):
            continue
        rest = name[len(prefix) :]
        if rest.startswith("_"):
            rest = rest[1:]
        elif not rest[:1].isupper():
            continue
        if rest:
            return rest[0].lower() + rest[1:]
    return None


def visibility_floor(by_fields: Annotation) -> Visibility:
    """Read the minimum visibility from an ``OpenApiByFields`` annotation.

    Raises
    ------
    ValidationError
        If the value does not name a visibility level
    """
    value = by_fields.get("value")
    if value is None:
        return Visibility.PUBLIC
    if value.kind is not AnnotationValueKind.ENUM_CONSTANT:
        raise ValidationError(
            f"{by_fields.name}.value", "must be a visibility constant", value.value
        )
    try:
        return Visibility[str(value.value).upper()]
    except KeyError:
        raise ValidationError(
            f"{by_fields.name}.value",
            f"must be one of {[v.name for v in Visibility]}",
            value.value,
        ) from None


class PropertyExtractor:
    """Turns the members of a type into property descriptors.

    Parameters
    ----------
    introspector : TypeIntrospector
        Host type-system port
    config : GeneratorConfig
        Engine configuration providing the inclusion filter
    """

    def __init__(self, introspector: TypeIntrospector, config: GeneratorConfig) -> None:
        self._introspector = introspector
        self._config = config

    def extract(self, type_: TypeDescriptor, require_non_nulls: bool) -> list[PropertyDescriptor]:
        """Extract the properties of ``type_`` in declaration order.

        Members failing a filter, lacking a derivable name or lacking a type
        are skipped. Host-supplied custom properties follow the declared ones.
        """
        type_annotations = self._introspector.type_annotations(type_)
        by_fields = find_annotation(type_annotations, "OpenApiByFields")
        floor = visibility_floor(by_fields) if by_fields is not None else None
        verbatim_names = by_fields is not None or self._introspector.is_record(type_)

        properties: list[PropertyDescriptor] = []
        for member in self._introspector.list_members(type_):
            if not self._accepts(type_, member, floor):
                continue

            name = self._property_name(member, verbatim_names)
            if name is None:
                logger.debug("Skipping {}.{}: not an accessor name", type_, member.name)
                continue

            property_type = self._property_type(member)
            if property_type is None:
                logger.debug("Skipping {}.{}: no type", type_, member.name)
                continue

            not_null = find_annotation(member.annotations, "NotNull") is not None
            properties.append(
                PropertyDescriptor(
                    name=name,
                    type=property_type,
                    composition=find_composition(member.annotations),
                    required=require_non_nulls and (property_type.is_primitive or not_null),
                    extra=collect_extra(member.annotations, element=f"{type_}.{member.name}"),
                )
            )

        for custom in self._introspector.custom_properties(type_):
            properties.append(
                PropertyDescriptor(name=custom.name, type=custom.type, required=require_non_nulls)
            )

        return properties

    def _accepts(self, type_: TypeDescriptor, member: Member, floor: Visibility | None) -> bool:
        inclusion_filter = self._config.property_inclusion_filter
        if inclusion_filter is not None and not inclusion_filter(type_, member):
            logger.debug("Skipping {}.{}: rejected by inclusion filter", type_, member.name)
            return False
        if member.is_static:
            return False
        if floor is None and not member.kind.is_accessor:
            return False
        if floor is not None and member.visibility < floor:
            logger.debug("Skipping {}.{}: below {} visibility", type_, member.name, floor.name)
            return False
        if find_annotation(member.annotations, "OpenApiIgnore") is not None:
            logger.debug("Skipping {}.{}: ignored", type_, member.name)
            return False
        if self._introspector.is_base_object_member(member):
            return False
        return True

    @staticmethod
    def _property_name(member: Member, verbatim: bool) -> str | None:
        override = find_annotation(member.annotations, "OpenApiName")
        if override is not None and (value := override.get("value")) is not None:
            return str(value.value)
        if verbatim or member.kind is MemberKind.PROPERTY:
            return member.name
        return accessor_property_name(member.name)

    @staticmethod
    def _property_type(member: Member) -> TypeDescriptor | None:
        defined_by = find_annotation(member.annotations, "OpenApiPropertyType")
        if defined_by is not None and (value := defined_by.get("defined_by")) is not None:
            return value.value
        return member.declared_type


__all__ = ["PropertyExtractor", "accessor_property_name", "visibility_floor"]
