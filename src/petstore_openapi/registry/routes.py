"""Route descriptor table.

Routes are added explicitly at startup, checked against the schema and
security registries as they are added, and kept in insertion order so that
the compiled document is stable across regenerations.
"""

import logging
from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from petstore_openapi.registry.errors import DanglingReferenceError, DuplicateRouteError
from petstore_openapi.registry.lifecycle import Lifecycle
from petstore_openapi.registry.schemas import HeadersShape, SchemaRegistry, TypeExpr, references
from petstore_openapi.registry.security import SecurityRegistry, SecurityRequirement

logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class ParameterLocation(str, Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"


class Visibility(str, Enum):
    IMPORTANT = "Important"
    ADVANCED = "Advanced"
    INTERNAL = "Internal"


class Placeholder(BaseModel):
    """A ``{name}`` or ``{name:constraint}`` segment of a path template."""

    model_config = ConfigDict(frozen=True)

    name: str
    constraint: str | None = None  # raw, uninterpreted


class PathTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: str
    parts: list[str | Placeholder]

    @property
    def placeholders(self) -> list[Placeholder]:
        return [p for p in self.parts if isinstance(p, Placeholder)]

    @property
    def constraints(self) -> dict[str, str]:
        return {p.name: p.constraint for p in self.placeholders if p.constraint is not None}

    @property
    def openapi_path(self) -> str:
        """The template with constraints stripped and a leading slash."""
        text = "".join(p if isinstance(p, str) else "{" + p.name + "}" for p in self.parts)
        return text if text.startswith("/") else "/" + text


def parse_path_template(template: str) -> PathTemplate:
    """Split a path template into literal text and placeholders.

    Constraint text after the first ``:`` inside a placeholder is recorded
    verbatim. Nested braces inside a constraint (e.g. ``\\d{3}``) are kept.
    """
    parts: list[str | Placeholder] = []
    literal = ""
    i = 0
    while i < len(template):
        char = template[i]
        if char == "}":
            raise ValueError(f"Unbalanced '}}' in path template '{template}'")
        if char != "{":
            literal += char
            i += 1
            continue
        depth = 1
        j = i + 1
        while j < len(template) and depth:
            if template[j] == "{":
                depth += 1
            elif template[j] == "}":
                depth -= 1
            j += 1
        if depth:
            raise ValueError(f"Unbalanced '{{' in path template '{template}'")
        body = template[i + 1:j - 1]
        name, sep, constraint = body.partition(":")
        if not name:
            raise ValueError(f"Empty placeholder in path template '{template}'")
        if literal:
            parts.append(literal)
            literal = ""
        parts.append(Placeholder(name=name, constraint=constraint if sep else None))
        i = j
    if literal:
        parts.append(literal)
    return PathTemplate(raw=template, parts=parts)


class ParameterDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    location: ParameterLocation
    required: bool = False
    schema_ref: TypeExpr
    explode: bool = False
    description: str = ""
    visibility: Visibility = Visibility.IMPORTANT

    @model_validator(mode="after")
    def _path_params_are_required(self):
        if self.location is ParameterLocation.PATH and not self.required:
            raise ValueError(f"path parameter '{self.name}' must be required")
        return self


class BodyDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    media_type: str = "application/json"
    schema_ref: TypeExpr | None = None
    description: str = ""
    required: bool = False


class ResponseDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    media_type: str = "application/json"
    schema_ref: TypeExpr | None = None
    description: str = ""
    summary: str = ""
    headers_ref: str | None = None  # name of a registered HeadersShape


class RouteDescriptor(BaseModel):
    """Complete metadata for one HTTP operation."""

    model_config = ConfigDict(frozen=True)

    operation_id: str
    method: HttpMethod
    path_template: str
    tags: list[str] = []
    summary: str = ""
    description: str = ""
    parameters: list[ParameterDescriptor] = []
    request_body: BodyDescriptor | None = None
    responses: dict[int, ResponseDescriptor] = {}
    security: list[SecurityRequirement] = []
    deprecated: bool = False
    visibility: Visibility = Visibility.IMPORTANT

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @field_validator("path_template")
    @classmethod
    def _parsable_template(cls, value: str) -> str:
        parse_path_template(value)
        return value

    @property
    def template(self) -> PathTemplate:
        return parse_path_template(self.path_template)

    @property
    def key(self) -> tuple[HttpMethod, str]:
        """Method plus the document path with placeholder names blanked.

        ``/pet/{id}`` and ``pet/{petId:int}`` share a key: both land on the
        same document path shape.
        """
        shape = "".join(p if isinstance(p, str) else "{}" for p in self.template.parts)
        return self.method, shape if shape.startswith("/") else "/" + shape

    def schema_names(self) -> Iterator[str]:
        for param in self.parameters:
            yield from references(param.schema_ref)
        if self.request_body is not None:
            yield from references(self.request_body.schema_ref)
        for response in self.responses.values():
            yield from references(response.schema_ref)

    def header_names(self) -> Iterator[str]:
        for response in self.responses.values():
            if response.headers_ref:
                yield response.headers_ref


class RegistrySet:
    """The schema and security registries sharing one Open/Sealed lifecycle."""

    def __init__(self):
        self.lifecycle = Lifecycle()
        self.schemas = SchemaRegistry(self.lifecycle)
        self.security = SecurityRegistry(self.lifecycle)

    @property
    def sealed(self) -> bool:
        return self.lifecycle.sealed

    def seal(self) -> None:
        self.lifecycle.seal()

    def check_route(self, route: RouteDescriptor) -> tuple[str, str] | None:
        """Return ``(kind, name)`` of the first reference that does not resolve."""
        missing = self.schemas.closure(route.schema_names())
        if missing is not None:
            return "schema", missing
        for name in route.header_names():
            if name not in self.schemas or not isinstance(self.schemas.resolve(name), HeadersShape):
                return "header set", name
        for requirement in route.security:
            missing = self.security.unresolved(requirement)
            if missing is not None:
                kind = "security scheme" if requirement.name not in self.security else "scope"
                return kind, missing
        return None


class RouteTable:
    """Ordered, append-only collection of route descriptors."""

    def __init__(self, registries: RegistrySet):
        self.registries = registries
        self._routes: dict[tuple[HttpMethod, str], RouteDescriptor] = {}
        self._operation_ids: dict[str, RouteDescriptor] = {}

    @property
    def lifecycle(self) -> Lifecycle:
        return self.registries.lifecycle

    def add_route(self, route: RouteDescriptor) -> RouteDescriptor:
        self.lifecycle.ensure_open(f"add route '{route.operation_id}'")
        method, path = route.method, route.template.openapi_path
        existing = self._routes.get(route.key)
        if existing is not None:
            raise DuplicateRouteError(f"{method.value} {path}", existing.operation_id)
        existing = self._operation_ids.get(route.operation_id)
        if existing is not None:
            raise DuplicateRouteError(f"operationId '{route.operation_id}'", existing.operation_id)
        dangling = self.registries.check_route(route)
        if dangling is not None:
            kind, name = dangling
            raise DanglingReferenceError(name, route.operation_id, kind)
        self._routes[route.key] = route
        self._operation_ids[route.operation_id] = route
        logger.debug("Added route %s %s (%s)", method.value, path, route.operation_id)
        return route

    def get(self, operation_id: str) -> RouteDescriptor:
        return self._operation_ids[operation_id]

    def __iter__(self) -> Iterator[RouteDescriptor]:
        return iter(list(self._routes.values()))

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, operation_id: str) -> bool:
        return operation_id in self._operation_ids
