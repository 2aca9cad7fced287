"""Document compiler: registries + route table -> one OpenAPI 3.0 document.

Compiling seals the registry set. The result is deterministic: identical
registrations produce byte-identical JSON and YAML.
"""

import copy
import json
import logging
import threading
from collections.abc import Callable

import yaml
from pydantic import BaseModel, ConfigDict

from petstore_openapi.registry.errors import IncompleteDocumentError, StaleReferenceError
from petstore_openapi.registry.routes import RegistrySet, RouteDescriptor, RouteTable
from petstore_openapi.registry.schemas import HeadersShape, references

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.1"


class Contact(BaseModel):
    name: str = ""
    email: str = ""
    url: str = ""


class License(BaseModel):
    name: str
    url: str = ""


class DocumentInfo(BaseModel):
    """The ``info`` block plus server URLs, supplied by configuration."""

    title: str
    version: str
    description: str = ""
    terms_of_service: str = ""
    contact: Contact | None = None
    license: License | None = None
    servers: list[str] = []

    def to_openapi(self) -> dict:
        result = {"title": self.title}
        if self.description:
            result["description"] = self.description
        if self.terms_of_service:
            result["termsOfService"] = self.terms_of_service
        if self.contact is not None:
            result["contact"] = self.contact.model_dump(exclude_defaults=True)
        if self.license is not None:
            result["license"] = self.license.model_dump(exclude_defaults=True)
        result["version"] = self.version
        return result


class CompiledDocument(BaseModel):
    """An immutable compiled document. Use ``as_dict()`` for a mutable copy."""

    model_config = ConfigDict(frozen=True)

    data: dict

    def as_dict(self) -> dict:
        return copy.deepcopy(self.data)

    def to_json(self) -> str:
        return json.dumps(self.data, indent=2, ensure_ascii=False)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.data, sort_keys=False, allow_unicode=True)

    # The sections below are copies; the document is shared between threads.

    @property
    def paths(self) -> dict:
        return copy.deepcopy(self.data["paths"])

    @property
    def schemas(self) -> dict:
        return copy.deepcopy(self.data["components"]["schemas"])

    @property
    def security_schemes(self) -> dict:
        return copy.deepcopy(self.data["components"]["securitySchemes"])

    def operation_ids(self) -> list[str]:
        return [op["operationId"] for methods in self.data["paths"].values() for op in methods.values()]


def _check_info(info: DocumentInfo) -> None:
    missing = [attr for attr in ("title", "version") if not getattr(info, attr).strip()]
    if missing:
        raise IncompleteDocumentError(missing)


def _check_closure(registries: RegistrySet, routes: RouteTable) -> None:
    for route in routes:
        dangling = registries.check_route(route)
        if dangling is not None:
            raise StaleReferenceError(dangling[1], route.operation_id)
    for name, shape in registries.schemas.items():
        missing = registries.schemas.closure(references(shape))
        if missing is not None:
            raise StaleReferenceError(missing, name)


def _operation(route: RouteDescriptor, registries: RegistrySet) -> dict:
    op: dict = {}
    if route.tags:
        op["tags"] = list(route.tags)
    if route.summary:
        op["summary"] = route.summary
    if route.description:
        op["description"] = route.description
    op["operationId"] = route.operation_id

    if route.parameters:
        op["parameters"] = []
        for param in route.parameters:
            entry = {"name": param.name, "in": param.location.value}
            if param.description:
                entry["description"] = param.description
            entry["required"] = param.required
            if param.explode:
                entry["style"] = "form"
                entry["explode"] = True
            entry["schema"] = param.schema_ref.to_openapi()
            entry["x-ms-visibility"] = param.visibility.value.lower()
            op["parameters"].append(entry)

    body = route.request_body
    if body is not None:
        entry = {}
        if body.description:
            entry["description"] = body.description
        media = {"schema": body.schema_ref.to_openapi()} if body.schema_ref is not None else {}
        entry["content"] = {body.media_type: media}
        entry["required"] = body.required
        op["requestBody"] = entry

    op["responses"] = {}
    for status, response in route.responses.items():
        entry = {"description": response.description}
        if response.headers_ref:
            entry["headers"] = registries.schemas.resolve(response.headers_ref).to_openapi()
        if response.schema_ref is not None:
            entry["content"] = {response.media_type: {"schema": response.schema_ref.to_openapi()}}
        if response.summary:
            entry["x-ms-summary"] = response.summary
        op["responses"][str(status)] = entry

    if route.security:
        op["security"] = [requirement.to_openapi() for requirement in route.security]
    if route.deprecated:
        op["deprecated"] = True
    op["x-ms-visibility"] = route.visibility.value.lower()
    return op


def compile_document(info: DocumentInfo, registries: RegistrySet, routes: RouteTable) -> CompiledDocument:
    """Compile the registries and route table into an OpenAPI document.

    Seals ``registries``; later registrations fail with RegistryClosedError.
    Raises IncompleteDocumentError for a blank title or version (before
    sealing) and StaleReferenceError if any reference no longer resolves.
    """
    if routes.registries is not registries:
        raise ValueError("Route table was built against a different registry set")
    _check_info(info)
    registries.seal()
    _check_closure(registries, routes)

    tags: list[str] = []
    paths: dict[str, dict] = {}
    for route in routes:
        for tag in route.tags:
            if tag not in tags:
                tags.append(tag)
        path = route.template.openapi_path
        paths.setdefault(path, {})[route.method.value.lower()] = _operation(route, registries)

    data: dict = {"openapi": OPENAPI_VERSION, "info": info.to_openapi()}
    if info.servers:
        data["servers"] = [{"url": url} for url in info.servers]
    if tags:
        data["tags"] = [{"name": tag} for tag in tags]
    data["paths"] = paths
    data["components"] = {
        "schemas": {
            name: shape.to_openapi()
            for name, shape in registries.schemas.items()
            if not isinstance(shape, HeadersShape)
        },
        "securitySchemes": {name: scheme.to_openapi() for name, scheme in registries.security.items()},
    }

    logger.debug(
        "Compiled document '%s' %s: %d paths, %d schemas, %d security schemes",
        info.title, info.version, len(paths),
        len(data["components"]["schemas"]), len(data["components"]["securitySchemes"]),
    )
    return CompiledDocument(data=data)


class DocumentProvider:
    """Compiles a document once, on first use, and hands the same object to every caller."""

    def __init__(self, build: Callable[[], CompiledDocument]):
        self._build = build
        self._document: CompiledDocument | None = None
        self._lock = threading.Lock()

    def get(self) -> CompiledDocument:
        if self._document is None:
            with self._lock:
                if self._document is None:
                    self._document = self._build()
        return self._document

    @property
    def ready(self) -> bool:
        return self._document is not None
