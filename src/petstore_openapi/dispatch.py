"""In-process dispatcher: matches requests to routes and calls their handlers.

Path matching honours the raw inline constraints recorded on route templates
(``{username:regex(...)}``, ``{id:int}``) and prefers literal segments over
placeholders, so ``/pet/findByStatus`` never lands on ``/pet/{petId}``.
"""

import logging
import re
import uuid
from collections.abc import Callable, Mapping

from petstore_openapi.compiler.document import DocumentProvider
from petstore_openapi.mock.messages import MockRequest, MockResponse
from petstore_openapi.registry.errors import DispatchError, RouteNotFoundError, UnsupportedConstraintError
from petstore_openapi.registry.routes import Placeholder, RouteDescriptor, RouteTable

logger = logging.getLogger(__name__)

Handler = Callable[[MockRequest], MockResponse]

DISCOVERY_PATHS = {
    "/openapi/v3.json": "json",
    "/openapi/v3.yaml": "yaml",
}

INT32_RANGE = (-(2**31), 2**31 - 1)
INT64_RANGE = (-(2**63), 2**63 - 1)


def _in_range(bounds: tuple[int, int]) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        if not re.fullmatch(r"-?\d+", value):
            return False
        return bounds[0] <= int(value) <= bounds[1]
    return check


def _is_guid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


SIMPLE_CONSTRAINTS: dict[str, Callable[[str], bool]] = {
    "int": _in_range(INT32_RANGE),
    "long": _in_range(INT64_RANGE),
    "alpha": lambda value: bool(re.fullmatch(r"[A-Za-z]+", value)),
    "bool": lambda value: value.lower() in ("true", "false"),
    "guid": _is_guid,
}


def constraint_checks(constraint: str, path_template: str) -> list[Callable[[str], bool]]:
    """Interpret a raw constraint string such as ``int`` or ``regex((?!^login$)(^.+$))``."""
    if constraint.startswith("regex(") and constraint.endswith(")"):
        pattern = re.compile(constraint[len("regex("):-1], re.IGNORECASE)
        return [lambda value: pattern.search(value) is not None]
    checks = []
    for name in constraint.split(":"):
        check = SIMPLE_CONSTRAINTS.get(name)
        if check is None:
            raise UnsupportedConstraintError(name, path_template)
        checks.append(check)
    return checks


class CompiledRoute:
    def __init__(self, route: RouteDescriptor):
        self.route = route
        template = route.template
        pattern = ""
        # Placeholder names need not be valid regex group names, so groups are positional.
        self.names: list[str] = []
        self.checks: dict[str, list[Callable[[str], bool]]] = {}
        for part in template.parts:
            if isinstance(part, Placeholder):
                pattern += "([^/]+)"
                self.names.append(part.name)
                if part.constraint is not None:
                    self.checks[part.name] = constraint_checks(part.constraint, route.path_template)
            else:
                pattern += re.escape(part)
        self.pattern = re.compile(pattern.lstrip("/"))
        literal = sum(len(p) for p in template.parts if isinstance(p, str))
        self.precedence = (len(template.placeholders), -literal)

    def match(self, path: str) -> dict[str, str] | None:
        m = self.pattern.fullmatch(path.lstrip("/"))
        if m is None:
            return None
        params = dict(zip(self.names, m.groups()))
        for name, checks in self.checks.items():
            if not all(check(params[name]) for check in checks):
                return None
        return params


class Dispatcher:
    """Routes mock requests to handlers by operationId."""

    def __init__(self, routes: RouteTable, handlers: Mapping[str, Handler],
                 documents: DocumentProvider | None = None):
        missing = [route.operation_id for route in routes if route.operation_id not in handlers]
        if missing:
            raise DispatchError(f"No handler bound for operations: {', '.join(missing)}")
        self.handlers = dict(handlers)
        self.documents = documents
        self._routes = sorted((CompiledRoute(route) for route in routes), key=lambda r: r.precedence)

    def match(self, method: str, path: str) -> tuple[RouteDescriptor, dict[str, str]]:
        method = method.upper()
        for compiled in self._routes:
            if compiled.route.method.value != method:
                continue
            params = compiled.match(path)
            if params is not None:
                return compiled.route, params
        raise RouteNotFoundError(method, path)

    def dispatch(self, request: MockRequest) -> MockResponse:
        path = request.path.split("?", 1)[0]
        if self.documents is not None and request.method.upper() == "GET" and path in DISCOVERY_PATHS:
            return self._discovery(DISCOVERY_PATHS[path])
        route, params = self.match(request.method, path)
        logger.debug("%s %s -> %s", request.method.upper(), path, route.operation_id)
        bound = request.model_copy(update={"path": path, "path_params": params})
        return self.handlers[route.operation_id](bound)

    def call(self, method: str, path: str, query: Mapping[str, list[str]] | None = None,
             headers: Mapping[str, str] | None = None) -> MockResponse:
        request = MockRequest(method=method, path=path, query=dict(query or {}), headers=dict(headers or {}))
        return self.dispatch(request)

    def _discovery(self, fmt: str) -> MockResponse:
        document = self.documents.get()
        if fmt == "yaml":
            return MockResponse(media_type="text/yaml", body=document.to_yaml())
        return MockResponse(body=document.as_dict())
