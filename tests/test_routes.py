import pytest
from pydantic import ValidationError

from petstore_openapi.petstore.schemas import PET_STATUS
from petstore_openapi.registry.errors import DanglingReferenceError, DuplicateRouteError, RegistryClosedError
from petstore_openapi.registry.routes import (
    HttpMethod,
    ParameterDescriptor,
    ParameterLocation,
    Placeholder,
    RegistrySet,
    ResponseDescriptor,
    RouteDescriptor,
    RouteTable,
    parse_path_template,
)
from petstore_openapi.registry.schemas import FieldSpec, HeaderSpec, HeadersShape, ObjectShape, array_of, int32, ref
from petstore_openapi.registry.security import ApiKeyScheme, SecurityRequirement


def _make_route(method: str = "GET", path: str = "/pets", operation_id: str = "listPets", **kwargs) -> RouteDescriptor:
    return RouteDescriptor(operation_id=operation_id, method=method, path_template=path, **kwargs)


def _make_table() -> RouteTable:
    registries = RegistrySet()
    registries.schemas.register("PetStatus", PET_STATUS)
    registries.security.register("api_key", ApiKeyScheme(parameter_name="api_key"))
    return RouteTable(registries)


class TestPathTemplate:
    def test_plain_placeholder(self):
        template = parse_path_template("pet/{petId}")
        assert template.parts == ["pet/", Placeholder(name="petId")]
        assert template.openapi_path == "/pet/{petId}"
        assert template.constraints == {}

    def test_regex_constraint_kept_verbatim(self):
        template = parse_path_template("user/{username:regex((?!^login$)(^.+$))}")
        assert template.constraints == {"username": "regex((?!^login$)(^.+$))"}
        assert template.openapi_path == "/user/{username}"

    def test_constraint_with_nested_braces(self):
        template = parse_path_template("/zip/{code:regex(^\\d{{5}}$)}/info")
        assert template.placeholders[0].constraint == "regex(^\\d{{5}}$)"
        assert template.openapi_path == "/zip/{code}/info"

    def test_unbalanced_braces_rejected(self):
        with pytest.raises(ValueError):
            parse_path_template("pet/{petId")
        with pytest.raises(ValueError):
            parse_path_template("pet/petId}")


class TestDescriptors:
    def test_path_parameter_must_be_required(self):
        with pytest.raises(ValidationError):
            ParameterDescriptor(name="petId", location=ParameterLocation.PATH, required=False, schema_ref=int32())

    def test_method_is_normalized(self):
        assert _make_route(method="get").method is HttpMethod.GET

    def test_descriptor_is_immutable(self):
        route = _make_route()
        with pytest.raises(ValidationError):
            route.deprecated = True

    def test_tags_are_deduplicated_in_order(self):
        assert _make_route(tags=["pet", "store", "pet"]).tags == ["pet", "store"]


class TestRouteTable:
    def test_add_route_keeps_insertion_order(self):
        table = _make_table()
        table.add_route(_make_route("GET", "/b", "b"))
        table.add_route(_make_route("GET", "/a", "a"))
        assert [r.operation_id for r in table] == ["b", "a"]
        assert "a" in table
        assert table.get("b").path_template == "/b"

    @pytest.mark.parametrize("first,second", [
        (dict(operation_id="one"), dict(operation_id="two", deprecated=True)),
        (dict(operation_id="two", summary="x"), dict(operation_id="one")),
    ])
    def test_duplicate_method_and_path_fails(self, first, second):
        table = _make_table()
        table.add_route(_make_route("GET", "/pets", **first))
        with pytest.raises(DuplicateRouteError):
            table.add_route(_make_route("GET", "/pets", **second))

    def test_leading_slash_does_not_hide_duplicates(self):
        table = _make_table()
        table.add_route(_make_route("GET", "pets", "one"))
        with pytest.raises(DuplicateRouteError):
            table.add_route(_make_route("GET", "/pets", "two"))

    @pytest.mark.parametrize("first,second", [
        ("/user/{username}", "/user/{username:alpha}"),
        ("/pet/{id}", "pet/{petId}"),
    ])
    def test_paths_landing_on_same_document_path_collide(self, first, second):
        table = _make_table()
        table.add_route(_make_route("GET", first, "one"))
        with pytest.raises(DuplicateRouteError) as exc:
            table.add_route(_make_route("GET", second, "two"))
        assert exc.value.existing == "one"
        assert [r.operation_id for r in table] == ["one"]

    def test_same_path_different_method_is_allowed(self):
        table = _make_table()
        table.add_route(_make_route("GET", "/pets", "listPets"))
        table.add_route(_make_route("POST", "/pets", "addPet"))
        assert len(table) == 2

    def test_duplicate_operation_id_fails(self):
        table = _make_table()
        table.add_route(_make_route("GET", "/pets", "pets"))
        with pytest.raises(DuplicateRouteError):
            table.add_route(_make_route("POST", "/pets", "pets"))

    def test_unregistered_schema_is_dangling(self):
        table = _make_table()
        route = _make_route(responses={200: ResponseDescriptor(schema_ref=ref("Widget"))})
        with pytest.raises(DanglingReferenceError) as exc:
            table.add_route(route)
        assert exc.value.name == "Widget"
        assert "Widget" in str(exc.value)
        assert len(table) == 0

    def test_dangling_check_is_transitive(self):
        table = _make_table()
        table.registries.schemas.register("Pet", ObjectShape(fields=[FieldSpec(name="c", type=ref("Category"))]))
        route = _make_route(responses={200: ResponseDescriptor(schema_ref=array_of(ref("Pet")))})
        with pytest.raises(DanglingReferenceError) as exc:
            table.add_route(route)
        assert exc.value.name == "Category"

    def test_parameter_schema_is_checked(self):
        table = _make_table()
        param = ParameterDescriptor(name="status", location=ParameterLocation.QUERY, schema_ref=ref("Missing"))
        with pytest.raises(DanglingReferenceError):
            table.add_route(_make_route(parameters=[param]))

    def test_unknown_security_scheme_is_dangling(self):
        table = _make_table()
        with pytest.raises(DanglingReferenceError) as exc:
            table.add_route(_make_route(security=[SecurityRequirement(name="oauth")]))
        assert exc.value.kind == "security scheme"

    def test_unknown_scope_is_dangling(self):
        table = _make_table()
        with pytest.raises(DanglingReferenceError) as exc:
            table.add_route(_make_route(security=[SecurityRequirement(name="api_key", scopes=["admin"])]))
        assert exc.value.kind == "scope"

    def test_header_set_must_be_registered(self):
        table = _make_table()
        route = _make_route(responses={200: ResponseDescriptor(headers_ref="RateHeaders")})
        with pytest.raises(DanglingReferenceError):
            table.add_route(route)
        table.registries.schemas.register(
            "RateHeaders", HeadersShape(headers=[HeaderSpec(name="X-Rate-Limit", type=int32())])
        )
        table.add_route(route)

    def test_schema_reference_to_header_set_is_dangling(self):
        table = _make_table()
        table.registries.schemas.register(
            "RateHeaders", HeadersShape(headers=[HeaderSpec(name="X-Rate-Limit", type=int32())])
        )
        table.registries.schemas.register("Quota", ObjectShape(fields=[FieldSpec(name="rate", type=ref("RateHeaders"))]))
        for schema_ref in (ref("RateHeaders"), array_of(ref("Quota"))):
            route = _make_route(responses={200: ResponseDescriptor(schema_ref=schema_ref)})
            with pytest.raises(DanglingReferenceError) as exc:
                table.add_route(route)
            assert exc.value.name == "RateHeaders"
        assert len(table) == 0

    def test_sealed_table_rejects_routes(self):
        table = _make_table()
        table.registries.seal()
        with pytest.raises(RegistryClosedError):
            table.add_route(_make_route())
