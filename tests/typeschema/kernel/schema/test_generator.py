"""Tests for typeschema.kernel.schema.generator module."""

from __future__ import annotations

import json

import pytest

from typeschema.kernel.config import GeneratorConfig
from typeschema.kernel.domain import (
    AnnotationValue,
    CompositionKind,
    CompositionSpec,
    CustomProperty,
    SchemaNode,
    SimpleType,
    TypeDescriptor,
    TypeKind,
)
from typeschema.kernel.exceptions import UnsupportedAnnotationValueError
from typeschema.kernel.schema import (
    EmbeddedTypeProcessorContext,
    TypeSchemaGenerator,
    merge_simple_types,
)


class TestObjectSchemas:
    """Tests for rendering object types."""

    def test_entity_with_accessors(self, type_system, types) -> None:
        """Test getters become properties, with renaming and ignoring applied."""
        entity = type_system.define(
            types.object_type("Entity"),
            members=[
                types.getter("getStatus", types.INT),
                types.getter(
                    "getMessageValue",
                    types.STR,
                    types.marker("OpenApiName", value=AnnotationValue.string("message")),
                ),
                types.getter("getFormattedMessage", types.STR, types.marker("OpenApiIgnore")),
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(entity)

        assert node.json == {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "status": {"type": "integer"},
                "message": {"type": "string"},
            },
            "required": ["status"],
        }
        assert node.references == frozenset()

    def test_properties_always_present(self, type_system, types) -> None:
        """Test an object without properties still has an empty properties map."""
        empty = type_system.define(types.object_type("Empty"))

        node = TypeSchemaGenerator(type_system).build_schema(empty)

        assert node.json == {"type": "object", "additionalProperties": False, "properties": {}}

    def test_referenced_types_are_not_inlined(self, type_system, types) -> None:
        """Test object members render as $ref and are recorded once."""
        address = type_system.define(
            types.object_type("Address"), members=[types.getter("getCity", types.STR)]
        )
        user = type_system.define(
            types.object_type("User"),
            members=[
                types.getter("getHome", address),
                types.getter("getWork", address),
                types.getter("getPrevious", types.list_of(address)),
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(user)

        assert node.json["properties"]["home"] == {"$ref": "#/components/schemas/Address"}
        assert node.json["properties"]["work"] == {"$ref": "#/components/schemas/Address"}
        assert node.json["properties"]["previous"] == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/Address"},
        }
        assert node.references == frozenset({address})

    def test_self_reference_under_field_extraction(self, type_system, types) -> None:
        """Test a self-referential type builds one level deep and references itself."""
        node_type = types.object_type("Node")
        type_system.define(
            node_type,
            members=[types.field("next", node_type)],
            annotations=[types.marker("OpenApiByFields")],
        )

        node = TypeSchemaGenerator(type_system).build_schema(node_type)

        assert node.json["properties"] == {"next": {"$ref": "#/components/schemas/Node"}}
        assert node_type in node.references

    def test_generic_arguments_are_referenced(self, type_system, types) -> None:
        """Test types reached through generics end up in the reference set."""
        item = type_system.define(types.object_type("Item"))
        order = type_system.define(
            types.object_type("Order"),
            members=[types.getter("getItems", types.dict_of(types.STR, types.list_of(item)))],
        )

        node = TypeSchemaGenerator(type_system).build_schema(order)

        assert node.json["properties"]["items"] == {
            "type": "object",
            "additionalProperties": {
                "type": "array",
                "items": {"$ref": "#/components/schemas/Item"},
            },
        }
        assert node.references == frozenset({item})

    def test_byte_array_is_binary(self, type_system, types) -> None:
        """Test an array of bytes renders as a binary string."""
        blob = type_system.define(
            types.object_type("Blob"), members=[types.getter("getData", types.list_of(types.BYTE))]
        )

        node = TypeSchemaGenerator(type_system).build_schema(blob)

        assert node.json["properties"]["data"] == {"type": "string", "format": "binary"}

    def test_type_level_extra_is_merged(self, type_system, types) -> None:
        """Test example and custom entries of the type land on the object schema."""
        pet = type_system.define(
            types.object_type("Pet"),
            annotations=[
                types.marker("OpenApiExample", value=AnnotationValue.string("{}")),
                types.marker(
                    "Custom",
                    name=AnnotationValue.string("x-internal"),
                    value=AnnotationValue.string("true"),
                ),
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(pet)

        assert node.json["example"] == "{}"
        assert node.json["x-internal"] == "true"

    def test_member_extra_is_merged_into_property(self, type_system, types) -> None:
        """Test member-level metadata is merged into the property schema."""
        pet = type_system.define(
            types.object_type("Pet"),
            members=[
                types.getter(
                    "getName",
                    types.STR,
                    types.marker("OpenApiExample", value=AnnotationValue.string("Rex")),
                )
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(pet)

        assert node.json["properties"]["name"] == {"type": "string", "example": "Rex"}

    def test_custom_properties_are_appended(self, type_system, types) -> None:
        """Test host-supplied properties follow the declared ones."""
        pet = type_system.define(
            types.object_type("Pet"),
            members=[types.getter("getName", types.STR)],
            custom=[CustomProperty("links", types.list_of(types.STR))],
        )

        node = TypeSchemaGenerator(type_system).build_schema(pet)

        assert list(node.json["properties"]) == ["name", "links"]
        assert node.json["required"] == ["links"]

    def test_unsupported_custom_metadata_fails_the_build(self, type_system, types) -> None:
        """Test a nested annotation in custom metadata aborts the build."""
        nested = types.marker("Audit")
        pet = type_system.define(
            types.object_type("Pet"),
            annotations=[
                types.marker("Owner", custom=True, audit=AnnotationValue.annotation(nested))
            ],
        )

        with pytest.raises(UnsupportedAnnotationValueError, match="nested annotations"):
            TypeSchemaGenerator(type_system).build_schema(pet)


class TestRequiredFlag:
    """Tests for the required-flag law."""

    @pytest.fixture
    def pet(self, type_system, types) -> TypeDescriptor:
        return type_system.define(
            types.object_type("Pet"),
            members=[
                types.getter("getAge", types.INT),
                types.getter("getName", types.STR),
                types.getter("getOwner", types.STR, types.marker("NotNull")),
            ],
        )

    def test_default_requires_primitives_and_not_null(self, type_system, pet) -> None:
        """Test primitive and not-null members are required by default."""
        node = TypeSchemaGenerator(type_system).build_schema(pet)
        assert node.json["required"] == ["age", "owner"]

    def test_global_default_off(self, type_system, pet) -> None:
        """Test nothing is required when the global default is off."""
        config = GeneratorConfig(require_non_nulls_by_default=False)
        node = TypeSchemaGenerator(type_system, config).build_schema(pet)
        assert "required" not in node.json

    def test_call_override(self, type_system, pet) -> None:
        """Test the per-call default overrides the configured one."""
        node = TypeSchemaGenerator(type_system).build_schema(
            pet, require_non_nulls_by_default=False
        )
        assert "required" not in node.json

    def test_type_override(self, type_system, types) -> None:
        """Test JsonSchema.require_non_nulls on the type overrides the default."""
        relaxed = type_system.define(
            types.object_type("Relaxed"),
            members=[types.getter("getAge", types.INT)],
            annotations=[
                types.marker("JsonSchema", require_non_nulls=AnnotationValue.boolean(False))
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(relaxed)

        assert "required" not in node.json


class TestEnumSchemas:
    """Tests for rendering enum types."""

    def test_enum_values_are_assignable_static_members(self, type_system, types) -> None:
        """Test only static members of the enum's own type are listed, in order."""
        color = TypeDescriptor("app.models.Color", "Color", TypeKind.ENUM)
        type_system.define(
            color,
            members=[
                types.field("RED", color, static=True),
                types.field("GREEN", color, static=True),
                types.field("DEFAULT_NAME", types.STR, static=True),
                types.field("value", types.STR),
                types.field("RED", color, static=True),
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(color)

        assert node.json == {"type": "string", "enum": ["RED", "GREEN"]}
        assert node.references == frozenset()

    def test_embedded_enum_is_referenced(self, type_system, types) -> None:
        """Test an enum used as a property type is referenced, not inlined."""
        color = TypeDescriptor("app.models.Color", "Color", TypeKind.ENUM)
        type_system.define(color, members=[types.field("RED", color, static=True)])
        car = type_system.define(
            types.object_type("Car"), members=[types.getter("getColor", color)]
        )

        node = TypeSchemaGenerator(type_system).build_schema(car)

        assert node.json["properties"]["color"] == {"$ref": "#/components/schemas/Color"}
        assert node.references == frozenset({color})


class TestSimpleTypes:
    """Tests for the simple-type short-circuit."""

    def test_root_simple_type(self, type_system, types) -> None:
        """Test a simple type renders as its primitive at the root."""
        node = TypeSchemaGenerator(type_system).build_schema(types.STR)
        assert node == SchemaNode({"type": "string"})

    def test_custom_mapping_wins_and_is_never_referenced(self, type_system, types) -> None:
        """Test configured simple types short-circuit in embedded positions."""
        money = types.object_type("Money")
        invoice = type_system.define(
            types.object_type("Invoice"), members=[types.getter("getTotal", money)]
        )
        config = GeneratorConfig(
            simple_type_mappings=merge_simple_types({"app.models.Money": SimpleType("number")})
        )

        node = TypeSchemaGenerator(type_system, config).build_schema(invoice)

        assert node.json["properties"]["total"] == {"type": "number"}
        assert node.references == frozenset()


class TestDefinedBy:
    """Tests for the defined-by override."""

    def test_type_override_is_absolute(self, type_system, types) -> None:
        """Test a type with OpenApiPropertyType renders as the override type."""
        token = type_system.define(
            types.object_type("Token"),
            members=[types.getter("getValue", types.STR)],
            annotations=[
                types.marker("OpenApiPropertyType", defined_by=AnnotationValue.type_of(types.STR))
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(token)

        assert node.json == {"type": "string"}

    def test_embedded_type_override(self, type_system, types) -> None:
        """Test a referenced type with an override is rendered as the override."""
        token = type_system.define(
            types.object_type("Token"),
            annotations=[
                types.marker("OpenApiPropertyType", defined_by=AnnotationValue.type_of(types.STR))
            ],
        )
        session = type_system.define(
            types.object_type("Session"), members=[types.getter("getToken", token)]
        )

        node = TypeSchemaGenerator(type_system).build_schema(session)

        assert node.json["properties"]["token"] == {"type": "string"}
        assert node.references == frozenset()

    def test_member_override(self, type_system, types) -> None:
        """Test a member-level override replaces the declared type."""
        address = types.object_type("Address")
        user = type_system.define(
            types.object_type("User"),
            members=[
                types.getter(
                    "getAddress",
                    address,
                    types.marker(
                        "OpenApiPropertyType", defined_by=AnnotationValue.type_of(types.STR)
                    ),
                )
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(user)

        assert node.json["properties"]["address"] == {"type": "string"}
        assert node.references == frozenset()


class TestComposition:
    """Tests for oneOf/anyOf/allOf rendering."""

    def test_type_level_composition(self, type_system, types) -> None:
        """Test a type-level composition renders members as references."""
        cat = type_system.define(types.object_type("Cat"))
        dog = type_system.define(types.object_type("Dog"))
        pet = type_system.define(
            types.object_type("Pet"),
            annotations=[
                types.marker(
                    "OneOf",
                    value=AnnotationValue.array(
                        AnnotationValue.type_of(cat), AnnotationValue.type_of(dog)
                    ),
                )
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(pet)

        assert node.json == {
            "oneOf": [
                {"$ref": "#/components/schemas/Cat"},
                {"$ref": "#/components/schemas/Dog"},
            ]
        }
        assert node.references == frozenset({cat, dog})

    def test_property_composition(self, type_system, types) -> None:
        """Test a property-level composition replaces the declared type."""
        cat = type_system.define(types.object_type("Cat"))
        owner = type_system.define(
            types.object_type("Owner"),
            members=[
                types.getter(
                    "getPet",
                    types.object_type("Pet"),
                    types.marker(
                        "AnyOf",
                        value=AnnotationValue.array(
                            AnnotationValue.type_of(cat), AnnotationValue.type_of(types.STR)
                        ),
                    ),
                )
            ],
        )

        node = TypeSchemaGenerator(type_system).build_schema(owner)

        assert node.json["properties"]["pet"] == {
            "anyOf": [{"$ref": "#/components/schemas/Cat"}, {"type": "string"}]
        }
        assert node.references == frozenset({cat})

    def test_inline_composition(self, type_system, types) -> None:
        """Test composition members are inlined when requested."""
        cat = type_system.define(
            types.object_type("Cat"), members=[types.getter("getName", types.STR)]
        )
        generator = TypeSchemaGenerator(type_system)

        node = generator.render_composition(
            CompositionSpec(CompositionKind.ALL_OF, (cat,)),
            inline_refs=True,
            require_non_nulls=True,
        )

        assert node.json["allOf"][0]["properties"] == {"name": {"type": "string"}}
        assert node.references == frozenset()


class TestInlining:
    """Tests for inline mode."""

    def test_referenced_types_are_inlined(self, type_system, types) -> None:
        """Test inline mode expands referenced types in place."""
        address = type_system.define(
            types.object_type("Address"), members=[types.getter("getCity", types.STR)]
        )
        user = type_system.define(
            types.object_type("User"), members=[types.getter("getHome", address)]
        )

        node = TypeSchemaGenerator(type_system).build_schema(user, inline_refs=True)

        assert node.json["properties"]["home"]["properties"] == {"city": {"type": "string"}}
        assert node.references == frozenset()

    def test_cycle_is_cut_with_reference(self, type_system, types) -> None:
        """Test a type reached again while being inlined is referenced instead."""
        node_type = types.object_type("Node")
        type_system.define(node_type, members=[types.getter("getNext", node_type)])

        node = TypeSchemaGenerator(type_system).build_schema(node_type, inline_refs=True)

        assert node.json["properties"]["next"] == {"$ref": "#/components/schemas/Node"}
        assert node.references == frozenset({node_type})


class TestProcessors:
    """Tests for the embedded-type processor chain."""

    def test_configured_processor_runs_first(self, type_system, types) -> None:
        """Test a configured processor can take over an embedded type."""
        page = types.object_type("Page", types.STR)

        class PageProcessor:
            def process(self, context: EmbeddedTypeProcessorContext) -> SchemaNode | None:
                if context.type.full_name != "app.models.Page":
                    return None
                items = context.generator.render_embedded(
                    context.type.generics[0], context.inline_refs, context.require_non_nulls
                )
                return SchemaNode({"type": "array", "items": items.json}, items.references)

        listing = type_system.define(
            types.object_type("Listing"),
            members=[
                types.getter(
                    "getPage",
                    page,
                    types.marker("OpenApiExample", value=AnnotationValue.string("[]")),
                )
            ],
        )
        config = GeneratorConfig(embedded_type_processors=(PageProcessor(),))

        node = TypeSchemaGenerator(type_system, config).build_schema(listing)

        assert node.json["properties"]["page"] == {
            "type": "array",
            "items": {"type": "string"},
            "example": "[]",
        }
        assert node.references == frozenset()

    def test_builtin_processors_follow_configured_ones(self, type_system) -> None:
        """Test the chain order is configured processors, then built-ins."""

        class Noop:
            def process(self, context: EmbeddedTypeProcessorContext) -> SchemaNode | None:
                return None

        noop = Noop()
        generator = TypeSchemaGenerator(
            type_system, GeneratorConfig(embedded_type_processors=(noop,))
        )

        assert generator.processors[0] is noop
        assert len(generator.processors) == 3

    def test_builtin_processors_can_be_disabled(self, type_system) -> None:
        """Test include_builtin_processors=False leaves only configured processors."""
        generator = TypeSchemaGenerator(
            type_system, GeneratorConfig(include_builtin_processors=False)
        )
        assert generator.processors == ()


class TestIdempotence:
    """Tests for deterministic output."""

    def test_repeated_builds_are_identical(self, type_system, types) -> None:
        """Test two builds of the same type give byte-identical JSON."""
        address = type_system.define(types.object_type("Address"))
        user = type_system.define(
            types.object_type("User"),
            members=[types.getter("getHome", address), types.getter("getAge", types.INT)],
        )
        generator = TypeSchemaGenerator(type_system)

        first = generator.build_schema(user)
        second = generator.build_schema(user)

        assert json.dumps(first.json) == json.dumps(second.json)
        assert first.references == second.references
