import pytest

from petstore_openapi.mock.generator import MockGenerator
from petstore_openapi.petstore.app import build_registries
from petstore_openapi.registry.schemas import (
    FieldSpec,
    ObjectShape,
    SchemaRegistry,
    array_of,
    int32,
    map_of,
    ref,
    string,
)


def _make_generator(seed: int | None = 1) -> MockGenerator:
    registries, _ = build_registries()
    return MockGenerator(registries.schemas, seed=seed)


class TestMockGenerator:
    def test_pet_matches_shape(self):
        pet = _make_generator().create_named("Pet")
        assert list(pet) == ["id", "category", "name", "photoUrls", "tags", "status"]
        assert isinstance(pet["id"], int)
        assert pet["name"].startswith("name")
        assert len(pet["photoUrls"]) == 3
        assert set(pet["tags"][0]) == {"id", "name"}
        assert pet["status"] in ("available", "pending", "sold")

    def test_same_seed_same_data(self):
        assert _make_generator(7).create_named("Order") == _make_generator(7).create_named("Order")

    def test_different_seed_different_data(self):
        assert _make_generator(7).create_named("User") != _make_generator(8).create_named("User")

    def test_overrides_replace_fields(self):
        user = _make_generator().create_named("User", {"username": "alice"})
        assert user["username"] == "alice"

    def test_unknown_override_field_fails(self):
        with pytest.raises(ValueError):
            _make_generator().create_named("User", {"nickname": "al"})

    def test_collections(self):
        generator = _make_generator()
        inventory = generator.create(map_of(int32()))
        assert len(inventory) == 3
        assert all(isinstance(v, int) for v in inventory.values())
        assert len(generator.create(array_of(ref("User")))) == 3
        assert isinstance(generator.create(string()), str)

    def test_order_ship_date_is_iso(self):
        order = _make_generator().create_named("Order")
        assert order["shipDate"].startswith("20")
        assert "T" in order["shipDate"]

    def test_headers_shape(self):
        headers = _make_generator().create_named("LoginUserResponseHeader")
        assert isinstance(headers["X-Rate-Limit"], int)
        assert isinstance(headers["X-Expires-After"], str)

    def test_self_reference_stops_at_depth_limit(self):
        schemas = SchemaRegistry()
        schemas.register("Node", ObjectShape(fields=[
            FieldSpec(name="name", type=string()),
            FieldSpec(name="next", type=ref("Node")),
        ]))
        node = MockGenerator(schemas, seed=0, max_depth=2).create_named("Node")
        depth = 0
        while node is not None:
            node = node["next"]
            depth += 1
        assert depth <= 3
