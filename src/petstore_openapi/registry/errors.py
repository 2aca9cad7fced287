"""Errors raised while building and compiling the API-surface registry.

All of these are startup-time programmer or configuration errors. They are
fatal: the process should not start serving with a registry in an invalid
state.
"""


class RegistryError(Exception):
    """Base class for registry and compiler errors."""


class DuplicateSchemaError(RegistryError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Schema '{name}' is already registered")


class UnknownSchemaError(RegistryError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Schema '{name}' is not registered")


class DuplicateSchemeError(RegistryError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Security scheme '{name}' is already registered")


class InvalidSecurityFlowError(RegistryError):
    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Security scheme '{name}' is invalid: {reason}")


class DuplicateRouteError(RegistryError):
    def __init__(self, key: str, existing: str):
        self.key = key
        self.existing = existing
        super().__init__(f"Route {key} collides with operation '{existing}'")


class DanglingReferenceError(RegistryError):
    """A route refers to a schema, header set, scheme or scope that is not registered."""

    def __init__(self, name: str, operation_id: str, kind: str = "schema"):
        self.name = name
        self.operation_id = operation_id
        self.kind = kind
        super().__init__(f"Operation '{operation_id}' references unknown {kind} '{name}'")


class StaleReferenceError(RegistryError):
    """A reference stopped resolving after the routes that need it were added."""

    def __init__(self, name: str, referrer: str):
        self.name = name
        self.referrer = referrer
        super().__init__(f"'{referrer}' references '{name}', which no longer resolves")


class RegistryClosedError(RegistryError):
    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Registry is sealed; cannot {action}")


class IncompleteDocumentError(RegistryError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Document info is missing: {', '.join(missing)}")


class DispatchError(Exception):
    """Base class for errors raised while routing mock requests."""


class RouteNotFoundError(DispatchError):
    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f"No route matches {method} {path}")


class UnsupportedConstraintError(DispatchError):
    def __init__(self, constraint: str, path_template: str):
        self.constraint = constraint
        self.path_template = path_template
        super().__init__(f"Unsupported constraint '{constraint}' in route '{path_template}'")
