"""Type schema generator - converts a type graph into JSON Schema nodes.

The generator walks types through the :class:`TypeIntrospector` port and
renders each one as a :class:`SchemaNode`: the schema fragment plus the set of
types it referenced by ``$ref`` instead of inlining. Callers resolve those
references themselves (see :mod:`typeschema.kernel.schema.document`), which
is what keeps recursive type graphs finite.

Examples
--------
Example usage::

    from typeschema.adapters.python import PythonTypeIntrospector

    introspector = PythonTypeIntrospector()
    generator = TypeSchemaGenerator(introspector)
    node = generator.build_schema(introspector.resolve_type_descriptor(User))
    node.json        # {"type": "object", "additionalProperties": False, ...}
    node.references  # frozenset({TypeDescriptor('app.models.Address', ...)})
"""

from collections.abc import Sequence
from typing import Any

from typeschema.kernel.config import GeneratorConfig
from typeschema.kernel.domain import (
    Annotation,
    CompositionSpec,
    SchemaNode,
    SimpleType,
    TypeDescriptor,
    TypeKind,
    find_annotation,
)
from typeschema.kernel.logging import get_logger
from typeschema.kernel.ports import TypeIntrospector
from typeschema.kernel.schema.composition import find_composition
from typeschema.kernel.schema.extra import collect_extra, merge_extra
from typeschema.kernel.schema.processors import (
    BUILTIN_PROCESSORS,
    EmbeddedTypeProcessor,
    EmbeddedTypeProcessorContext,
)
from typeschema.kernel.schema.properties import PropertyExtractor
from typeschema.kernel.schema.simple_types import BINARY_ELEMENT_NAMES

logger = get_logger(__name__)

_NOTHING: frozenset[TypeDescriptor] = frozenset()


class TypeSchemaGenerator:
    """Render types as JSON Schema.

    Parameters
    ----------
    introspector : TypeIntrospector
        Host type-system port
    config : GeneratorConfig | None
        Engine configuration; defaults are used when omitted

    Notes
    -----
    The generator holds no per-build state. Every call returns a fresh node
    whose reference set is owned by the caller.
    """

    def __init__(
        self, introspector: TypeIntrospector, config: GeneratorConfig | None = None
    ) -> None:
        self._introspector = introspector
        self._config = config or GeneratorConfig()
        self._properties = PropertyExtractor(introspector, self._config)

        processors: tuple[EmbeddedTypeProcessor, ...] = self._config.embedded_type_processors
        if self._config.include_builtin_processors:
            processors += BUILTIN_PROCESSORS
        self._processors = processors

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @property
    def introspector(self) -> TypeIntrospector:
        return self._introspector

    @property
    def processors(self) -> tuple[EmbeddedTypeProcessor, ...]:
        """Effective processor chain in the order processors are consulted."""
        return self._processors

    # ------------------------------------------------------------------
    # Root rendering
    # ------------------------------------------------------------------

    def build_schema(
        self,
        type_: TypeDescriptor,
        inline_refs: bool = False,
        require_non_nulls_by_default: bool | None = None,
    ) -> SchemaNode:
        """Build the schema of a type as a standalone definition.

        Parameters
        ----------
        type_ : TypeDescriptor
            Type to render
        inline_refs : bool, default=False
            Inline referenced object and enum types instead of emitting ``$ref``
        require_non_nulls_by_default : bool | None
            Required-by-default flag; the configured default when None

        Returns
        -------
        SchemaNode
            Schema of the type and the types it references

        Raises
        ------
        UnsupportedAnnotationValueError
            If custom annotation metadata cannot be represented
        """
        if require_non_nulls_by_default is None:
            require_non_nulls_by_default = self._config.require_non_nulls_by_default
        return self._build(type_, inline_refs, require_non_nulls_by_default, _NOTHING)

    def _build(
        self,
        type_: TypeDescriptor,
        inline_refs: bool,
        require_non_nulls: bool,
        inlining: frozenset[TypeDescriptor],
    ) -> SchemaNode:
        annotations = self._introspector.type_annotations(type_)

        defined_by = self._defined_by(annotations)
        if defined_by is not None:
            return self._build(defined_by, inline_refs, require_non_nulls, inlining)

        simple_type = self._simple_type(type_)
        if simple_type is not None:
            return SchemaNode(simple_type.to_json())

        composition = find_composition(annotations)
        if composition is not None:
            return self.render_composition(
                composition, inline_refs, require_non_nulls, inlining=inlining
            )

        match type_.kind:
            case TypeKind.ENUM:
                return SchemaNode({"type": "string", "enum": self._enum_values(type_)})
            case TypeKind.ARRAY | TypeKind.DICTIONARY:
                return self._render_container(type_, inline_refs, require_non_nulls, inlining)
            case _:
                return self._build_object(
                    type_, annotations, inline_refs, require_non_nulls, inlining
                )

    def _build_object(
        self,
        type_: TypeDescriptor,
        annotations: Sequence[Annotation],
        inline_refs: bool,
        require_non_nulls: bool,
        inlining: frozenset[TypeDescriptor],
    ) -> SchemaNode:
        schema: dict[str, Any] = {"type": "object", "additionalProperties": False}
        merge_extra(schema, collect_extra(annotations, element=str(type_)))

        json_schema = find_annotation(annotations, "JsonSchema")
        if json_schema is not None and (value := json_schema.get("require_non_nulls")) is not None:
            require_non_nulls = bool(value.value)

        nested = inlining | {type_}
        properties: dict[str, Any] = {}
        required: list[str] = []
        references: frozenset[TypeDescriptor] = _NOTHING

        for prop in self._properties.extract(type_, require_non_nulls):
            if prop.name in properties:
                logger.debug("Skipping {}.{}: duplicate property", type_, prop.name)
                continue

            node = self.render_embedded(
                prop.type,
                inline_refs,
                require_non_nulls,
                prop.composition,
                prop.extra,
                inlining=nested,
            )
            properties[prop.name] = node.json
            references |= node.references
            if prop.required:
                required.append(prop.name)

        schema["properties"] = properties
        if required:
            schema["required"] = required
        return SchemaNode(schema, references)

    def _enum_values(self, type_: TypeDescriptor) -> list[str]:
        values: list[str] = []
        for member in self._introspector.list_members(type_):
            if not member.is_static or member.declared_type is None:
                continue
            if not self._introspector.is_assignable(member.declared_type, type_):
                continue
            if member.name not in values:
                values.append(member.name)
        return values

    # ------------------------------------------------------------------
    # Embedded rendering
    # ------------------------------------------------------------------

    def render_embedded(
        self,
        type_: TypeDescriptor,
        inline_refs: bool = False,
        require_non_nulls: bool | None = None,
        composition: CompositionSpec | None = None,
        extra: dict[str, Any] | None = None,
        *,
        inlining: frozenset[TypeDescriptor] = _NOTHING,
    ) -> SchemaNode:
        """Render a type used inside another schema.

        Parameters
        ----------
        type_ : TypeDescriptor
            Embedded type
        inline_refs : bool, default=False
            Inline referenced object and enum types instead of emitting ``$ref``
        require_non_nulls : bool | None
            Required-by-default flag; the configured default when None
        composition : CompositionSpec | None
            Composition declared on the embedding property
        extra : dict[str, Any] | None
            Extension metadata merged into the result
        inlining : frozenset[TypeDescriptor]
            Types currently being inlined around this one

        Returns
        -------
        SchemaNode
            Schema fragment and referenced types
        """
        if require_non_nulls is None:
            require_non_nulls = self._config.require_non_nulls_by_default

        defined_by = self._defined_by(self._introspector.type_annotations(type_))
        if defined_by is not None:
            return self.render_embedded(
                defined_by, inline_refs, require_non_nulls, composition, extra, inlining=inlining
            )

        node = self._process(type_, inline_refs, require_non_nulls, composition, extra, inlining)
        if node is None and composition is not None:
            node = self.render_composition(
                composition, inline_refs, require_non_nulls, inlining=inlining
            )
        elif node is None:
            node = self._render_fallback(type_, inline_refs, require_non_nulls, inlining)

        return SchemaNode(merge_extra(dict(node.json), extra), node.references)

    def render_composition(
        self,
        composition: CompositionSpec,
        inline_refs: bool,
        require_non_nulls: bool,
        *,
        inlining: frozenset[TypeDescriptor] = _NOTHING,
    ) -> SchemaNode:
        """Render ``oneOf``/``anyOf``/``allOf`` over the composition members."""
        items: list[dict[str, Any]] = []
        references: frozenset[TypeDescriptor] = _NOTHING
        for member in composition.members:
            node = self.render_embedded(member, inline_refs, require_non_nulls, inlining=inlining)
            items.append(node.json)
            references |= node.references
        return SchemaNode({composition.kind.value: items}, references)

    def reference_or_inline(
        self,
        type_: TypeDescriptor,
        inline_refs: bool,
        require_non_nulls: bool,
        *,
        inlining: frozenset[TypeDescriptor] = _NOTHING,
    ) -> SchemaNode:
        """Render a simple type, an inlined schema, or a ``$ref``.

        A type already being inlined further up the chain is referenced even
        when ``inline_refs`` is set.
        """
        simple_type = self._simple_type(type_)
        if simple_type is not None:
            return SchemaNode(simple_type.to_json())

        if inline_refs and type_ not in inlining:
            return self._build(type_, inline_refs, require_non_nulls, inlining)

        logger.debug("Recording reference to {}", type_)
        return SchemaNode(
            {"$ref": f"{self._config.ref_prefix}{type_.schema_name}"}, frozenset({type_})
        )

    def _process(
        self,
        type_: TypeDescriptor,
        inline_refs: bool,
        require_non_nulls: bool,
        composition: CompositionSpec | None,
        extra: dict[str, Any] | None,
        inlining: frozenset[TypeDescriptor],
    ) -> SchemaNode | None:
        if not self._processors:
            return None

        context = EmbeddedTypeProcessorContext(
            generator=self,
            type=type_,
            inline_refs=inline_refs,
            require_non_nulls=require_non_nulls,
            extra=extra,
            composition=composition,
            inlining=inlining,
        )
        for processor in self._processors:
            node = processor.process(context)
            if node is not None:
                return node
        return None

    def _render_fallback(
        self,
        type_: TypeDescriptor,
        inline_refs: bool,
        require_non_nulls: bool,
        inlining: frozenset[TypeDescriptor],
    ) -> SchemaNode:
        if self._simple_type(type_) is None and type_.kind in (TypeKind.ARRAY, TypeKind.DICTIONARY):
            return self._render_container(type_, inline_refs, require_non_nulls, inlining)
        return self.reference_or_inline(type_, inline_refs, require_non_nulls, inlining=inlining)

    def _render_container(
        self,
        type_: TypeDescriptor,
        inline_refs: bool,
        require_non_nulls: bool,
        inlining: frozenset[TypeDescriptor],
    ) -> SchemaNode:
        if type_.kind is TypeKind.ARRAY:
            if not type_.generics:
                return SchemaNode({"type": "array"})
            element = type_.generics[0]
            if element.simple_name in BINARY_ELEMENT_NAMES:
                return SchemaNode({"type": "string", "format": "binary"})
            items = self.render_embedded(element, inline_refs, require_non_nulls, inlining=inlining)
            return SchemaNode({"type": "array", "items": items.json}, items.references)

        if len(type_.generics) < 2:
            return SchemaNode({"type": "object"})
        values = self.render_embedded(
            type_.generics[1], inline_refs, require_non_nulls, inlining=inlining
        )
        return SchemaNode(
            {"type": "object", "additionalProperties": values.json}, values.references
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _simple_type(self, type_: TypeDescriptor) -> SimpleType | None:
        return self._config.simple_type_mappings.get(type_.full_name)

    @staticmethod
    def _defined_by(annotations: Sequence[Annotation]) -> TypeDescriptor | None:
        annotation = find_annotation(annotations, "OpenApiPropertyType")
        if annotation is None:
            return None
        value = annotation.get("defined_by")
        return value.value if value is not None else None


__all__ = ["TypeSchemaGenerator"]
