"""Mock handlers for the pet store operations.

Every handler logs the document title and answers with generated data. There
is no persistence and no authentication check.
"""

import logging
from collections.abc import Callable

from petstore_openapi.config import OpenApiSettings
from petstore_openapi.mock.generator import MockGenerator
from petstore_openapi.mock.messages import MockRequest, MockResponse
from petstore_openapi.registry.schemas import array_of, int32, map_of, ref, string

logger = logging.getLogger(__name__)

Handler = Callable[[MockRequest], MockResponse]


def _invalid_id() -> MockResponse:
    return MockResponse(status=400, body=None)


def _path_int(req: MockRequest, name: str) -> int | None:
    try:
        return int(req.path_params[name])
    except (KeyError, ValueError):
        return None


class _Handlers:
    operations: dict[str, str] = {}  # operationId -> method name

    def __init__(self, settings: OpenApiSettings, fixture: MockGenerator):
        self.settings = settings
        self.fixture = fixture

    def _log(self) -> None:
        logger.info("document title: %s", self.settings.doc_title)

    def bind(self) -> dict[str, Handler]:
        return {operation_id: getattr(self, method) for operation_id, method in self.operations.items()}


class PetHandlers(_Handlers):
    operations = {
        "updatePet": "update_pet",
        "addPet": "add_pet",
        "findPetsByStatus": "find_by_status",
        "findPetsByTags": "find_by_tags",
        "getPetById": "get_pet_by_id",
        "updatePetWithForm": "update_pet_with_form",
        "deletePet": "delete_pet",
        "uploadFile": "upload_file",
    }

    def update_pet(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse(body=self.fixture.create_named("Pet"))

    def add_pet(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse(body=self.fixture.create_named("Pet"))

    def find_by_status(self, req: MockRequest) -> MockResponse:
        self._log()
        status_enum = self.fixture.schemas.enum("PetStatus")
        available = status_enum.members[0]
        wanted = {status_enum.parse(value, available).wire for value in req.query_values("status")}
        pets = self.fixture.create(array_of(ref("Pet")))
        return MockResponse(body=[pet for pet in pets if pet["status"] in wanted])

    def find_by_tags(self, req: MockRequest) -> MockResponse:
        self._log()
        tags = [self.fixture.create_named("Tag", {"name": name}) for name in req.query_values("tags")]
        pets = self.fixture.create(array_of(ref("Pet")))
        for pet in pets:
            pet["tags"] = tags
        return MockResponse(body=pets)

    def get_pet_by_id(self, req: MockRequest) -> MockResponse:
        self._log()
        pet_id = _path_int(req, "petId")
        if pet_id is None:
            return _invalid_id()
        return MockResponse(body=self.fixture.create_named("Pet", {"id": pet_id}))

    def update_pet_with_form(self, req: MockRequest) -> MockResponse:
        self._log()
        pet_id = _path_int(req, "petId")
        if pet_id is None:
            return _invalid_id()
        return MockResponse(body=self.fixture.create_named("Pet", {"id": pet_id}))

    def delete_pet(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse()

    def upload_file(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse(body=self.fixture.create_named("ApiResponse"))


class StoreHandlers(_Handlers):
    operations = {
        "getInventory": "get_inventory",
        "placeOrder": "place_order",
        "getOrderById": "get_order_by_id",
        "deleteOrder": "delete_order",
    }

    def get_inventory(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse(body=self.fixture.create(map_of(int32())))

    def place_order(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse(body=self.fixture.create_named("Order"))

    def get_order_by_id(self, req: MockRequest) -> MockResponse:
        self._log()
        order_id = _path_int(req, "orderId")
        if order_id is None:
            return _invalid_id()
        return MockResponse(body=self.fixture.create_named("Order", {"id": order_id}))

    def delete_order(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse()


class UserHandlers(_Handlers):
    operations = {
        "createUser": "create_user",
        "createUsersWithArrayInput": "create_users",
        "createUsersWithListInput": "create_users",
        "loginUser": "login_user",
        "logoutUser": "logout_user",
        "getUserByName": "get_user_by_name",
    }

    def create_user(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse(body=self.fixture.create_named("User"))

    def create_users(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse(body=self.fixture.create(array_of(ref("User"))))

    def login_user(self, req: MockRequest) -> MockResponse:
        self._log()
        headers = self.fixture.create_named("LoginUserResponseHeader")
        return MockResponse(
            media_type="text/plain",
            body=self.fixture.create(string()),
            headers={"Content-Type": "text/plain; charset=utf-8", **{k: str(v) for k, v in headers.items()}},
        )

    def logout_user(self, req: MockRequest) -> MockResponse:
        self._log()
        return MockResponse()

    def get_user_by_name(self, req: MockRequest) -> MockResponse:
        self._log()
        username = req.path_params.get("username", "")
        return MockResponse(body=self.fixture.create_named("User", {"username": username}))


def bind_handlers(settings: OpenApiSettings, fixture: MockGenerator) -> dict[str, Handler]:
    """Map every pet store operationId to its handler."""
    handlers: dict[str, Handler] = {}
    for group in (PetHandlers, StoreHandlers, UserHandlers):
        handlers.update(group(settings, fixture).bind())
    return handlers
