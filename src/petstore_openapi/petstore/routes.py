"""Pet store route table: the pet, store and user resource groups."""

from petstore_openapi.petstore.security import API_KEY_REQUIRED, PETSTORE_AUTH_REQUIRED
from petstore_openapi.registry.routes import (
    BodyDescriptor,
    ParameterDescriptor,
    ParameterLocation,
    ResponseDescriptor,
    RouteDescriptor,
    RouteTable,
)
from petstore_openapi.registry.schemas import array_of, int32, int64, map_of, ref, string

OK = 200
BAD_REQUEST = 400
NOT_FOUND = 404
METHOD_NOT_ALLOWED = 405


def _with_body(schema, description="successful operation", media_type="application/json", **kwargs):
    return ResponseDescriptor(
        media_type=media_type, schema_ref=schema, summary=description, description=description, **kwargs
    )


def _without_body(description: str) -> ResponseDescriptor:
    return ResponseDescriptor(summary=description, description=description)


def _path_id(name: str, description: str) -> ParameterDescriptor:
    return ParameterDescriptor(
        name=name, location=ParameterLocation.PATH, required=True, schema_ref=int64(), description=description
    )


def _json_body(schema, description: str) -> BodyDescriptor:
    return BodyDescriptor(schema_ref=schema, description=description, required=True)


PET_ROUTES = [
    RouteDescriptor(
        operation_id="updatePet",
        method="PUT",
        path_template="pet",
        tags=["pet"],
        summary="Update an existing pet",
        description="This updates an existing pet.",
        security=[PETSTORE_AUTH_REQUIRED],
        request_body=_json_body(ref("Pet"), "Pet object that needs to be updated to the store"),
        responses={
            OK: _with_body(ref("Pet"), "Pet details updated"),
            BAD_REQUEST: _without_body("Invalid ID supplied"),
            NOT_FOUND: _without_body("Pet not found"),
            METHOD_NOT_ALLOWED: _without_body("Validation exception"),
        },
    ),
    RouteDescriptor(
        operation_id="addPet",
        method="POST",
        path_template="pet",
        tags=["pet"],
        summary="Add a new pet to the store",
        description="This add a new pet to the store.",
        security=[PETSTORE_AUTH_REQUIRED],
        request_body=_json_body(ref("Pet"), "Pet object that needs to be added to the store"),
        responses={
            OK: _with_body(ref("Pet"), "New pet details added"),
            METHOD_NOT_ALLOWED: _without_body("Invalid input"),
        },
    ),
    RouteDescriptor(
        operation_id="findPetsByStatus",
        method="GET",
        path_template="pet/findByStatus",
        tags=["pet"],
        summary="Finds Pets by status",
        description="Multiple status values can be provided with comma separated strings.",
        security=[PETSTORE_AUTH_REQUIRED],
        parameters=[
            ParameterDescriptor(
                name="status",
                location=ParameterLocation.QUERY,
                required=True,
                schema_ref=array_of(ref("PetStatus")),
                explode=True,
                description="Status values that need to be considered for filter",
            ),
        ],
        responses={
            OK: _with_body(array_of(ref("Pet"))),
            BAD_REQUEST: _without_body("Invalid status value"),
        },
    ),
    RouteDescriptor(
        operation_id="findPetsByTags",
        method="GET",
        path_template="pet/findByTags",
        tags=["pet"],
        summary="Finds Pets by tags",
        description="Muliple tags can be provided with comma separated strings.",
        deprecated=True,
        security=[PETSTORE_AUTH_REQUIRED],
        parameters=[
            ParameterDescriptor(
                name="tags",
                location=ParameterLocation.QUERY,
                required=True,
                schema_ref=array_of(string()),
                explode=True,
                description="Tags to filter by",
            ),
        ],
        responses={
            OK: _with_body(array_of(ref("Pet"))),
            BAD_REQUEST: _without_body("Invalid tag value"),
        },
    ),
    RouteDescriptor(
        operation_id="getPetById",
        method="GET",
        path_template="pet/{petId}",
        tags=["pet"],
        summary="Find pet by ID",
        description="Returns a single pet.",
        security=[API_KEY_REQUIRED],
        parameters=[_path_id("petId", "ID of pet to return")],
        responses={
            OK: _with_body(ref("Pet")),
            BAD_REQUEST: _without_body("Invalid ID supplied"),
            NOT_FOUND: _without_body("Pet not found"),
        },
    ),
    RouteDescriptor(
        operation_id="updatePetWithForm",
        method="POST",
        path_template="pet/{petId}",
        tags=["pet"],
        summary="Updates a pet in the store with form data",
        description="This updates a pet in the store with form data.",
        security=[PETSTORE_AUTH_REQUIRED],
        parameters=[_path_id("petId", "ID of pet that needs to be updated")],
        request_body=BodyDescriptor(
            media_type="application/x-www-form-urlencoded",
            schema_ref=ref("PetUrlForm"),
            description="Pet object that needs to be added to the store",
            required=True,
        ),
        responses={
            OK: _with_body(ref("Pet")),
            METHOD_NOT_ALLOWED: _without_body("Invalid input"),
        },
    ),
    RouteDescriptor(
        operation_id="deletePet",
        method="DELETE",
        path_template="pet/{petId}",
        tags=["pet"],
        summary="Deletes a pet",
        description="This deletes a pet.",
        security=[PETSTORE_AUTH_REQUIRED],
        parameters=[
            ParameterDescriptor(name="api_key", location=ParameterLocation.HEADER, schema_ref=string()),
            _path_id("petId", "Pet id to delete"),
        ],
        responses={
            OK: _without_body("successful operation"),
            BAD_REQUEST: _without_body("Invalid ID supplied"),
            NOT_FOUND: _without_body("Pet not found"),
        },
    ),
    RouteDescriptor(
        operation_id="uploadFile",
        method="POST",
        path_template="pet/{petId}/uploadImage",
        tags=["pet"],
        summary="Uploads an image",
        description="This uploads an image.",
        security=[PETSTORE_AUTH_REQUIRED],
        parameters=[_path_id("petId", "ID of pet to update")],
        request_body=BodyDescriptor(media_type="multipart/form-data", schema_ref=ref("PetFormData")),
        responses={
            OK: _with_body(ref("ApiResponse")),
        },
    ),
]

STORE_ROUTES = [
    RouteDescriptor(
        operation_id="getInventory",
        method="GET",
        path_template="store/inventory",
        tags=["store"],
        summary="Returns pet inventories by status",
        description="This returns a map of status codes to quantities.",
        security=[API_KEY_REQUIRED],
        responses={
            OK: ResponseDescriptor(schema_ref=map_of(int32()), description="Successful operation"),
        },
    ),
    RouteDescriptor(
        operation_id="placeOrder",
        method="POST",
        path_template="store/order",
        tags=["store"],
        summary="Places an order for a pet",
        description="This places an order for a pet.",
        request_body=_json_body(ref("Order"), "Order placed for purchasing the pet"),
        responses={
            OK: _with_body(ref("Order")),
            BAD_REQUEST: _without_body("Invalid input"),
        },
    ),
    RouteDescriptor(
        operation_id="getOrderById",
        method="GET",
        path_template="store/order/{orderId}",
        tags=["store"],
        summary="Finds purchase order by ID",
        description="This finds purchase order by ID.",
        parameters=[_path_id("orderId", "ID of order that needs to be fetched")],
        responses={
            OK: ResponseDescriptor(schema_ref=ref("Order"), description="Successful operation"),
            BAD_REQUEST: _without_body("Invalid ID supplied"),
            NOT_FOUND: _without_body("Order not found"),
        },
    ),
    RouteDescriptor(
        operation_id="deleteOrder",
        method="DELETE",
        path_template="store/order/{orderId}",
        tags=["store"],
        summary="Deletes purchase order by ID",
        description=(
            "For valid response try integer IDs with positive integer value. "
            "Negative or non - integer values will generate API errors."
        ),
        parameters=[_path_id("orderId", "ID of order that needs to be deleted")],
        responses={
            BAD_REQUEST: _without_body("Invalid ID supplied"),
            NOT_FOUND: _without_body("Order not found"),
        },
    ),
]

USER_ROUTES = [
    RouteDescriptor(
        operation_id="createUser",
        method="POST",
        path_template="user",
        tags=["user"],
        summary="Creates user",
        description="This can only be done by the logged in user.",
        request_body=_json_body(ref("User"), "Created user object"),
        responses={OK: _with_body(ref("User"))},
    ),
    RouteDescriptor(
        operation_id="createUsersWithArrayInput",
        method="POST",
        path_template="user/createWithArray",
        tags=["user"],
        summary="Creates list of users with given input array",
        description="This Creates list of users with given input array.",
        request_body=_json_body(array_of(ref("User")), "List of user object"),
        responses={OK: _with_body(array_of(ref("User")))},
    ),
    RouteDescriptor(
        operation_id="createUsersWithListInput",
        method="POST",
        path_template="user/createWithList",
        tags=["user"],
        summary="Creates list of users with given input array",
        description="This Creates list of users with given input array.",
        request_body=_json_body(array_of(ref("User")), "List of user object"),
        responses={OK: _with_body(array_of(ref("User")))},
    ),
    RouteDescriptor(
        operation_id="loginUser",
        method="GET",
        path_template="user/login",
        tags=["user"],
        summary="Logs user into the system",
        description="This logs user into the system.",
        parameters=[
            ParameterDescriptor(
                name="username", location=ParameterLocation.QUERY, required=True,
                schema_ref=string(), description="The user name for login",
            ),
            ParameterDescriptor(
                name="password", location=ParameterLocation.QUERY, required=True,
                schema_ref=string(), description="The password for login in clear text",
            ),
        ],
        responses={
            OK: _with_body(string(), media_type="text/plain", headers_ref="LoginUserResponseHeader"),
        },
    ),
    RouteDescriptor(
        operation_id="logoutUser",
        method="GET",
        path_template="user/logout",
        tags=["user"],
        summary="Logs out current logged in user session",
        description="This logs out current logged in user session.",
        responses={OK: _without_body("successful operation")},
    ),
    RouteDescriptor(
        operation_id="getUserByName",
        method="GET",
        path_template="user/{username:regex((?!^login$)(^.+$))}",
        tags=["user"],
        summary="Gets user by user name",
        description="This gets user by user name.",
        parameters=[
            ParameterDescriptor(
                name="username", location=ParameterLocation.PATH, required=True,
                schema_ref=string(), description="The user name for login",
            ),
        ],
        responses={
            OK: _with_body(ref("User")),
            BAD_REQUEST: _without_body("Invalid username supplied"),
            NOT_FOUND: _without_body("User not found"),
        },
    ),
]

ROUTES = PET_ROUTES + STORE_ROUTES + USER_ROUTES


def register_routes(routes: RouteTable) -> None:
    for route in ROUTES:
        routes.add_route(route)
