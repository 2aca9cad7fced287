"""Pet store security schemes. Declared for documentation; never enforced."""

from petstore_openapi.registry.security import (
    ApiKeyLocation,
    ApiKeyScheme,
    FlowType,
    OAuth2Scheme,
    OAuthFlow,
    SecurityRegistry,
    SecurityRequirement,
)

PETSTORE_AUTH = OAuth2Scheme(
    flows={
        FlowType.IMPLICIT: OAuthFlow(
            authorization_url="http://petstore.swagger.io/oauth/dialog",
            scopes={
                "write:pets": "modify pets in your account",
                "read:pets": "read your pets",
            },
        ),
    },
)

API_KEY = ApiKeyScheme(parameter_name="api_key", location=ApiKeyLocation.HEADER)

# Requirements used by the routes
PETSTORE_AUTH_REQUIRED = SecurityRequirement(name="petstore_auth")
API_KEY_REQUIRED = SecurityRequirement(name="api_key")


def register_security(security: SecurityRegistry) -> None:
    security.register("petstore_auth", PETSTORE_AUTH)
    security.register("api_key", API_KEY)
