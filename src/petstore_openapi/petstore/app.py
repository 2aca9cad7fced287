"""Startup wiring for the pet store: registries, document and dispatcher."""

import logging

from petstore_openapi.compiler.document import CompiledDocument, DocumentProvider, compile_document
from petstore_openapi.config import OpenApiSettings
from petstore_openapi.dispatch import Dispatcher
from petstore_openapi.mock.generator import MockGenerator
from petstore_openapi.petstore.handlers import bind_handlers
from petstore_openapi.petstore.routes import register_routes
from petstore_openapi.petstore.schemas import register_schemas
from petstore_openapi.petstore.security import register_security
from petstore_openapi.registry.routes import RegistrySet, RouteTable

logger = logging.getLogger(__name__)


def build_registries() -> tuple[RegistrySet, RouteTable]:
    """Register every pet store schema, security scheme and route."""
    registries = RegistrySet()
    register_schemas(registries.schemas)
    register_security(registries.security)
    routes = RouteTable(registries)
    register_routes(routes)
    logger.debug(
        "Registered %d schemas, %d security schemes, %d routes",
        len(registries.schemas), len(registries.security), len(routes),
    )
    return registries, routes


def build_document(settings: OpenApiSettings) -> CompiledDocument:
    registries, routes = build_registries()
    return compile_document(settings.document_info(), registries, routes)


class PetStoreApp:
    """The assembled mock function app: sealed registries, lazy document, dispatcher."""

    def __init__(self, settings: OpenApiSettings):
        self.settings = settings
        self.registries, self.routes = build_registries()
        self.documents = DocumentProvider(
            lambda: compile_document(settings.document_info(), self.registries, self.routes)
        )
        self.fixture = MockGenerator(self.registries.schemas, seed=settings.mock_seed)
        self.dispatcher = Dispatcher(self.routes, bind_handlers(settings, self.fixture), self.documents)

    def document(self) -> CompiledDocument:
        return self.documents.get()
