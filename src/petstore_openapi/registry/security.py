"""Security scheme registry.

Schemes are declared for documentation only; nothing here checks requests.
"""

import logging
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from petstore_openapi.registry.errors import DuplicateSchemeError, InvalidSecurityFlowError
from petstore_openapi.registry.lifecycle import Lifecycle

logger = logging.getLogger(__name__)


class ApiKeyLocation(str, Enum):
    HEADER = "header"
    QUERY = "query"
    COOKIE = "cookie"


class FlowType(str, Enum):
    IMPLICIT = "implicit"
    PASSWORD = "password"
    CLIENT_CREDENTIALS = "clientCredentials"
    AUTHORIZATION_CODE = "authorizationCode"


# URLs each OAuth2 flow type must declare.
REQUIRED_FLOW_URLS = {
    FlowType.IMPLICIT: ("authorization_url",),
    FlowType.PASSWORD: ("token_url",),
    FlowType.CLIENT_CREDENTIALS: ("token_url",),
    FlowType.AUTHORIZATION_CODE: ("authorization_url", "token_url"),
}


class OAuthFlow(BaseModel):
    model_config = ConfigDict(frozen=True)

    authorization_url: str | None = None
    token_url: str | None = None
    refresh_url: str | None = None
    scopes: dict[str, str] = {}

    def to_openapi(self) -> dict:
        result = {}
        if self.authorization_url:
            result["authorizationUrl"] = self.authorization_url
        if self.token_url:
            result["tokenUrl"] = self.token_url
        if self.refresh_url:
            result["refreshUrl"] = self.refresh_url
        result["scopes"] = dict(self.scopes)
        return result


class ApiKeyScheme(BaseModel):
    """An API key carried in exactly one place: a header, a query parameter or a cookie."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["apiKey"] = "apiKey"
    parameter_name: str
    location: ApiKeyLocation = ApiKeyLocation.HEADER
    description: str = ""

    @property
    def scopes(self) -> set[str]:
        return set()

    def to_openapi(self) -> dict:
        result = {"type": "apiKey"}
        if self.description:
            result["description"] = self.description
        result["name"] = self.parameter_name
        result["in"] = self.location.value
        return result


class OAuth2Scheme(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["oauth2"] = "oauth2"
    flows: dict[FlowType, OAuthFlow]
    description: str = ""

    @property
    def scopes(self) -> set[str]:
        return {scope for flow in self.flows.values() for scope in flow.scopes}

    def to_openapi(self) -> dict:
        result = {"type": "oauth2"}
        if self.description:
            result["description"] = self.description
        result["flows"] = {flow_type.value: flow.to_openapi() for flow_type, flow in self.flows.items()}
        return result


SecurityScheme = Annotated[Union[ApiKeyScheme, OAuth2Scheme], Field(discriminator="kind")]


class SecurityRequirement(BaseModel):
    """A route's reference to a registered scheme, with the scopes it needs."""

    model_config = ConfigDict(frozen=True)

    name: str
    scopes: list[str] = []

    def to_openapi(self) -> dict:
        return {self.name: list(self.scopes)}


def _validate(name: str, scheme: SecurityScheme) -> None:
    if isinstance(scheme, ApiKeyScheme):
        if not scheme.parameter_name:
            raise InvalidSecurityFlowError(name, "API key scheme needs a parameter name")
        return
    if not scheme.flows:
        raise InvalidSecurityFlowError(name, "OAuth2 scheme declares no flows")
    for flow_type, flow in scheme.flows.items():
        if not flow.scopes:
            raise InvalidSecurityFlowError(name, f"{flow_type.value} flow declares no scopes")
        for attr in REQUIRED_FLOW_URLS[flow_type]:
            if not getattr(flow, attr):
                raise InvalidSecurityFlowError(name, f"{flow_type.value} flow is missing {attr}")


class SecurityRegistry:
    """Append-only map of scheme name -> scheme, in registration order."""

    def __init__(self, lifecycle: Lifecycle | None = None):
        self.lifecycle = lifecycle or Lifecycle()
        self._schemes: dict[str, SecurityScheme] = {}

    def register(self, name: str, scheme: SecurityScheme) -> SecurityScheme:
        self.lifecycle.ensure_open(f"register security scheme '{name}'")
        if name in self._schemes:
            raise DuplicateSchemeError(name)
        _validate(name, scheme)
        self._schemes[name] = scheme
        logger.debug("Registered security scheme %s (%s)", name, scheme.kind)
        return scheme

    def get(self, name: str) -> SecurityScheme | None:
        return self._schemes.get(name)

    def unresolved(self, requirement: SecurityRequirement) -> str | None:
        """Return the scheme or scope name that does not resolve, if any."""
        scheme = self._schemes.get(requirement.name)
        if scheme is None:
            return requirement.name
        for scope in requirement.scopes:
            if scope not in scheme.scopes:
                return scope
        return None

    def items(self) -> list[tuple[str, SecurityScheme]]:
        return list(self._schemes.items())

    def names(self) -> list[str]:
        return list(self._schemes)

    def __contains__(self, name: str) -> bool:
        return name in self._schemes

    def __len__(self) -> int:
        return len(self._schemes)
