import pytest
from pydantic import ValidationError

from petstore_openapi.petstore.app import build_registries
from petstore_openapi.petstore.schemas import PET, PET_STATUS
from petstore_openapi.registry.errors import DuplicateSchemaError, RegistryClosedError, UnknownSchemaError
from petstore_openapi.registry.lifecycle import Lifecycle
from petstore_openapi.registry.schemas import (
    EnumMember,
    EnumShape,
    FieldSpec,
    ObjectShape,
    SchemaRegistry,
    array_of,
    int64,
    map_of,
    ref,
    references,
    string,
)


def _make_object(*refs: str) -> ObjectShape:
    return ObjectShape(fields=[FieldSpec(name=f"f{i}", type=ref(name)) for i, name in enumerate(refs)])


class TestSchemaRegistry:
    def test_register_and_resolve(self):
        registry = SchemaRegistry()
        registry.register("PetStatus", PET_STATUS)
        assert registry.resolve("PetStatus") is PET_STATUS
        assert "PetStatus" in registry
        assert len(registry) == 1

    def test_duplicate_name_fails(self):
        registry = SchemaRegistry()
        registry.register("PetStatus", PET_STATUS)
        with pytest.raises(DuplicateSchemaError) as exc:
            registry.register("PetStatus", PET_STATUS)
        assert exc.value.name == "PetStatus"

    def test_unknown_name_fails(self):
        with pytest.raises(UnknownSchemaError) as exc:
            SchemaRegistry().resolve("Widget")
        assert "Widget" in str(exc.value)

    def test_sealed_registry_rejects_register(self):
        lifecycle = Lifecycle()
        registry = SchemaRegistry(lifecycle)
        lifecycle.seal()
        with pytest.raises(RegistryClosedError):
            registry.register("PetStatus", PET_STATUS)

    def test_names_keep_registration_order(self):
        registry = SchemaRegistry()
        for name in ("Zebra", "Apple", "Mango"):
            registry.register(name, _make_object())
        assert registry.names() == ["Zebra", "Apple", "Mango"]

    def test_closure_follows_references(self):
        registry = SchemaRegistry()
        registry.register("Pet", _make_object("Category", "Tag"))
        registry.register("Category", _make_object())
        assert registry.closure(["Pet"]) == "Tag"
        registry.register("Tag", _make_object())
        assert registry.closure(["Pet"]) is None

    def test_closure_handles_cycles(self):
        registry = SchemaRegistry()
        registry.register("Node", _make_object("Node"))
        assert registry.closure(["Node"]) is None


class TestEnumShape:
    def test_wire_round_trip_for_every_registered_enum(self):
        registries, _ = build_registries()
        enums = {name: shape for name, shape in registries.schemas.items() if isinstance(shape, EnumShape)}
        assert set(enums) == {"PetStatus", "OrderStatus"}
        for shape in enums.values():
            for member in shape.members:
                assert shape.from_wire(shape.to_wire(member.name)) == member
                assert shape.from_wire(shape.to_wire(member.value)) == member
                assert shape.to_wire(shape.from_wire(member.wire).name) == member.wire

    def test_numeric_value_serializes_as_wire_string(self):
        assert PET_STATUS.to_wire(1) == "available"
        assert PET_STATUS.to_wire(3) == "sold"

    def test_booleans_are_not_numeric_values(self):
        with pytest.raises(ValueError):
            PET_STATUS.to_wire(True)

    def test_unknown_member_fails(self):
        with pytest.raises(ValueError):
            PET_STATUS.to_wire("Lost")
        with pytest.raises(ValueError):
            PET_STATUS.from_wire("lost")

    def test_parse_is_lenient(self):
        assert PET_STATUS.parse("SOLD").name == "Sold"
        assert PET_STATUS.parse("pending").name == "Pending"
        assert PET_STATUS.parse(" 2 ").name == "Pending"
        assert PET_STATUS.parse("4") is None
        assert PET_STATUS.parse("nope") is None
        assert PET_STATUS.parse("nope", PET_STATUS.members[0]).wire == "available"

    def test_duplicate_wire_strings_rejected(self):
        with pytest.raises(ValidationError):
            EnumShape(members=[
                EnumMember(name="A", value=1, wire="same"),
                EnumMember(name="B", value=2, wire="same"),
            ])

    def test_empty_enum_rejected(self):
        with pytest.raises(ValidationError):
            EnumShape(members=[])

    def test_openapi_lists_wire_strings_in_order(self):
        assert PET_STATUS.to_openapi()["enum"] == ["available", "pending", "sold"]


class TestTypeExpressions:
    def test_nested_openapi_rendering(self):
        assert array_of(ref("Pet")).to_openapi() == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/Pet"},
        }
        assert map_of(int64()).to_openapi() == {
            "type": "object",
            "additionalProperties": {"type": "integer", "format": "int64"},
        }

    def test_references_walk_objects_and_collections(self):
        assert list(references(PET)) == ["Category", "Tag", "PetStatus"]
        assert list(references(map_of(array_of(ref("User"))))) == ["User"]
        assert list(references(string())) == []

    def test_object_required_fields(self):
        schema = PET.to_openapi()
        assert schema["required"] == ["name", "photoUrls"]
        assert list(schema["properties"]) == ["id", "category", "name", "photoUrls", "tags", "status"]

    def test_duplicate_field_names_rejected(self):
        with pytest.raises(ValidationError):
            ObjectShape(fields=[FieldSpec(name="id", type=int64()), FieldSpec(name="id", type=string())])
