"""Static catalogs of canned error responses."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from aumai_mockengine.models import (
    ErrorKind,
    ErrorScenario,
    MockResponse,
    NetworkErrorKind,
)

ERROR_CATALOG: Mapping[ErrorKind, MockResponse] = MappingProxyType(
    {
        ErrorKind.BAD_REQUEST: MockResponse(
            status_code=400,
            body={
                "error": "Bad Request",
                "message": "The request was invalid or cannot be processed.",
            },
        ),
        ErrorKind.UNAUTHORIZED: MockResponse(
            status_code=401,
            body={
                "error": "Unauthorized",
                "message": "Authentication is required to access this resource.",
            },
        ),
        ErrorKind.FORBIDDEN: MockResponse(
            status_code=403,
            body={
                "error": "Forbidden",
                "message": "You do not have permission to access this resource.",
            },
        ),
        ErrorKind.NOT_FOUND: MockResponse(
            status_code=404,
            body={
                "error": "Not Found",
                "message": "The requested resource was not found.",
            },
        ),
        ErrorKind.INTERNAL_SERVER_ERROR: MockResponse(
            status_code=500,
            body={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred on the server.",
            },
        ),
        ErrorKind.SERVICE_UNAVAILABLE: MockResponse(
            status_code=503,
            body={
                "error": "Service Unavailable",
                "message": "The service is temporarily unavailable. Please try again later.",
            },
        ),
        ErrorKind.RATE_LIMITED: MockResponse(
            status_code=429,
            body={
                "error": "Too Many Requests",
                "message": "Rate limit exceeded. Please try again later.",
            },
            headers={"Retry-After": "60"},
        ),
    }
)

# What a proxying HTTP layer emits when it surfaces a simulated transport
# failure as a gateway response instead of dropping the connection.
NETWORK_ERROR_CATALOG: Mapping[NetworkErrorKind, MockResponse] = MappingProxyType(
    {
        NetworkErrorKind.CONNECTION_REFUSED: MockResponse(
            status_code=502,
            body={
                "error": "Bad Gateway",
                "message": "Connection refused by target server",
                "code": "CONNECTION_REFUSED",
            },
        ),
        NetworkErrorKind.CONNECTION_RESET: MockResponse(
            status_code=502,
            body={
                "error": "Bad Gateway",
                "message": "Connection reset by peer",
                "code": "CONNECTION_RESET",
            },
        ),
        NetworkErrorKind.DNS_RESOLUTION: MockResponse(
            status_code=502,
            body={
                "error": "Bad Gateway",
                "message": "DNS resolution failed",
                "code": "DNS_RESOLUTION",
            },
        ),
        NetworkErrorKind.SSL_HANDSHAKE: MockResponse(
            status_code=502,
            body={
                "error": "Bad Gateway",
                "message": "SSL handshake failed",
                "code": "SSL_HANDSHAKE",
            },
        ),
        NetworkErrorKind.GATEWAY_TIMEOUT: MockResponse(
            status_code=504,
            body={
                "error": "Gateway Timeout",
                "message": "Gateway timeout",
                "code": "GATEWAY_TIMEOUT",
            },
        ),
    }
)


def error_response_for(kind: ErrorKind | str) -> MockResponse:
    """Return a fresh copy of the catalog response for *kind*.

    Raises:
        ValueError: if *kind* is not a known :class:`ErrorKind` name.
    """
    return ERROR_CATALOG[ErrorKind(kind)].model_copy(deep=True)


def network_error_response_for(kind: NetworkErrorKind | str) -> MockResponse:
    """Return a fresh copy of the gateway response for a transport failure."""
    return NETWORK_ERROR_CATALOG[NetworkErrorKind(kind)].model_copy(deep=True)


def resolve_error_scenario(scenario: ErrorScenario) -> MockResponse:
    """Merge *scenario*'s override over the catalog default, field by field."""
    base = error_response_for(scenario.type)
    override = scenario.response
    if override is None:
        return base
    return MockResponse(
        status_code=override.status_code
        if override.status_code is not None
        else base.status_code,
        body=override.body if override.body is not None else base.body,
        headers=override.headers if override.headers is not None else base.headers,
    )


__all__ = [
    "ERROR_CATALOG",
    "NETWORK_ERROR_CATALOG",
    "error_response_for",
    "network_error_response_for",
    "resolve_error_scenario",
]
