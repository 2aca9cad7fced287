"""Pet store data shapes."""

from petstore_openapi.registry.schemas import (
    EnumMember,
    EnumShape,
    FieldSpec,
    HeaderSpec,
    HeadersShape,
    ObjectShape,
    SchemaRegistry,
    array_of,
    binary,
    boolean,
    date_time,
    int32,
    int64,
    ref,
    string,
)

PET_STATUS = EnumShape(
    description="Pet status in the store",
    members=[
        EnumMember(name="Available", value=1, wire="available"),
        EnumMember(name="Pending", value=2, wire="pending"),
        EnumMember(name="Sold", value=3, wire="sold"),
    ],
)

ORDER_STATUS = EnumShape(
    description="Order status",
    members=[
        EnumMember(name="Placed", value=1, wire="placed"),
        EnumMember(name="Approved", value=2, wire="approved"),
        EnumMember(name="Delivered", value=3, wire="delivered"),
    ],
)

CATEGORY = ObjectShape(
    description="Pet category",
    fields=[
        FieldSpec(name="id", type=int64()),
        FieldSpec(name="name", type=string()),
    ],
)

TAG = ObjectShape(
    description="Pet tag",
    fields=[
        FieldSpec(name="id", type=int64()),
        FieldSpec(name="name", type=string()),
    ],
)

PET = ObjectShape(
    description="A pet for sale in the pet store",
    fields=[
        FieldSpec(name="id", type=int64()),
        FieldSpec(name="category", type=ref("Category")),
        FieldSpec(name="name", type=string(), required=True),
        FieldSpec(name="photoUrls", type=array_of(string()), required=True),
        FieldSpec(name="tags", type=array_of(ref("Tag"))),
        FieldSpec(name="status", type=ref("PetStatus")),
    ],
)

ORDER = ObjectShape(
    description="An order for a pet from the pet store",
    fields=[
        FieldSpec(name="id", type=int64()),
        FieldSpec(name="petId", type=int64()),
        FieldSpec(name="quantity", type=int32()),
        FieldSpec(name="shipDate", type=date_time()),
        FieldSpec(name="status", type=ref("OrderStatus")),
        FieldSpec(name="complete", type=boolean()),
    ],
)

USER = ObjectShape(
    description="A user who is purchasing from the pet store",
    fields=[
        FieldSpec(name="id", type=int64()),
        FieldSpec(name="username", type=string()),
        FieldSpec(name="firstName", type=string()),
        FieldSpec(name="lastName", type=string()),
        FieldSpec(name="email", type=string()),
        FieldSpec(name="password", type=string()),
        FieldSpec(name="phone", type=string()),
        FieldSpec(name="userStatus", type=int32(), description="User Status"),
    ],
)

API_RESPONSE = ObjectShape(
    description="Describes the result of uploading an image resource",
    fields=[
        FieldSpec(name="code", type=int32()),
        FieldSpec(name="type", type=string()),
        FieldSpec(name="message", type=string()),
    ],
)

PET_URL_FORM = ObjectShape(
    fields=[
        FieldSpec(name="name", type=string(), description="Updated name of the pet"),
        FieldSpec(name="status", type=ref("PetStatus"), description="Updated status of the pet"),
    ],
)

PET_FORM_DATA = ObjectShape(
    fields=[
        FieldSpec(name="additionalMetadata", type=string(), description="Additional data to pass to server"),
        FieldSpec(name="file", type=binary(), description="File to upload"),
    ],
)

LOGIN_USER_RESPONSE_HEADER = HeadersShape(
    headers=[
        HeaderSpec(name="X-Rate-Limit", type=int32(), description="calls per hour allowed by the user"),
        HeaderSpec(name="X-Expires-After", type=date_time(), description="date in UTC when token expires"),
    ],
)

SCHEMAS = {
    "PetStatus": PET_STATUS,
    "OrderStatus": ORDER_STATUS,
    "Category": CATEGORY,
    "Tag": TAG,
    "Pet": PET,
    "Order": ORDER,
    "User": USER,
    "ApiResponse": API_RESPONSE,
    "PetUrlForm": PET_URL_FORM,
    "PetFormData": PET_FORM_DATA,
    "LoginUserResponseHeader": LOGIN_USER_RESPONSE_HEADER,
}


def register_schemas(schemas: SchemaRegistry) -> None:
    for name, shape in SCHEMAS.items():
        schemas.register(name, shape)
