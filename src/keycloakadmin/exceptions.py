"""
Custom exceptions for the keycloakadmin package.

This module provides Keycloak-specific exceptions that wrap httpx exceptions
and give meaningful error context for identity server administration calls.
"""

import functools
from typing import (
    Any,
    Awaitable,
    Callable,
    Collection,
    Dict,
    Optional,
    ParamSpec,
    Type,
    TypeVar,
    cast,
)

import httpx

P = ParamSpec("P")
T = TypeVar("T")


# Base Keycloak exceptions
class KeycloakError(Exception):
    """Base exception for all keycloakadmin errors."""

    pass


class KeycloakClientClosed(KeycloakError):
    """
    Raised when an operation is attempted on a closed KeycloakAdminClient.
    """

    def __init__(self, message: str = "The KeycloakAdminClient is closed") -> None:
        super().__init__(message)


class KeycloakSessionError(KeycloakError):
    """
    Raised when the session state of a client handle is used inconsistently:
    reading a token that was never committed, committing an empty token,
    authenticating twice or sharing one credential store between handles.

    This indicates a wiring defect, not a recoverable condition.
    """


class KeycloakValidationError(KeycloakError, ValueError):
    """
    Raised locally, before any network call, when a required argument or
    setting is missing or malformed.
    """


# Connection and network errors
class KeycloakTransportError(KeycloakError, httpx.RequestError):
    """
    Base class for Keycloak connection-related errors.
    Raised when the identity server could not be reached or the exchange
    broke down before a response arrived.
    """

    def __init__(self, message: str, *, request: Optional[httpx.Request] = None) -> None:
        super().__init__(message)
        self.message = message
        self._request = request

    @property
    def request(self) -> Optional[httpx.Request]:  # type: ignore[override]
        return self._request

    @request.setter
    def request(self, request: httpx.Request) -> None:
        self._request = request

    def __str__(self) -> str:
        return f"Keycloak connection error: {self.message}"


class KeycloakSystemUnavailableError(KeycloakTransportError):
    """
    Raised when the Keycloak server is unreachable: connection refused,
    DNS resolution failure, or nothing listening at the base URL.
    """

    def __str__(self) -> str:
        return f"Keycloak server unavailable: {self.message}"


class KeycloakTimeoutError(KeycloakTransportError):
    """
    Raised when a request to Keycloak times out.
    """

    def __str__(self) -> str:
        return f"Keycloak request timeout: {self.message}"


class KeycloakProtocolError(KeycloakTransportError):
    """
    Raised when there are HTTP protocol-level errors talking to Keycloak.
    """

    def __str__(self) -> str:
        return f"Keycloak protocol error: {self.message}"


class KeycloakNetworkError(KeycloakTransportError):
    """
    Raised for general network issues while talking to Keycloak.
    """

    def __str__(self) -> str:
        return f"Keycloak network error: {self.message}"


class KeycloakAuthenticationError(KeycloakError):
    """
    Raised when the token endpoint refuses the grant.

    ``error`` and ``error_description`` are copied verbatim from the body the
    server returned, e.g. ``invalid_grant`` / ``Invalid user credentials``.
    """

    def __init__(
        self,
        error: Optional[str] = None,
        error_description: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        self.error = error
        self.error_description = error_description
        self.status_code = status_code
        super().__init__(error_description or error or "Authentication failed")

    def __str__(self) -> str:
        detail = self.error_description or "no description"
        return f"Keycloak authentication failed: {self.error} ({detail})"


# HTTP status based exceptions for admin calls
class KeycloakApiError(KeycloakError):
    """
    Raised when an administrative call returns a status outside the set the
    operation expects.

    ``body`` is the response body exactly as received: parsed JSON when the
    server sent JSON (usually ``{"error": ...}`` or ``{"errorMessage": ...}``),
    the raw text when it did not, or ``None`` when it was empty.
    """

    def __init__(
        self,
        body: Any = None,
        *,
        status_code: Optional[int] = None,
        expected: Collection[int] = (),
        request: Optional[httpx.Request] = None,
        response: Optional[httpx.Response] = None,
    ) -> None:
        self.body = body
        self.status_code = status_code
        self.expected = tuple(expected)
        self.request = request
        self.response = response
        super().__init__(self.error_message)

    @property
    def error_message(self) -> str:
        """A single string describing the failure, whatever shape ``body`` has."""
        if isinstance(self.body, dict):
            for key in ("errorMessage", "error_description", "error"):
                if self.body.get(key):
                    return str(self.body[key])
            return str(self.body)
        if self.body:
            return str(self.body)
        return f"HTTP {self.status_code}"

    def __str__(self) -> str:
        return f"Keycloak API error: {self.error_message} (HTTP {self.status_code})"


class KeycloakBadRequestError(KeycloakApiError):
    """Raised for 400 bad request errors."""

    def __str__(self) -> str:
        return f"Keycloak bad request: {self.error_message}"


class KeycloakUnauthorizedError(KeycloakApiError):
    """
    Raised for 401 errors on admin calls.
    The token was rejected, usually because it expired.
    """

    def __str__(self) -> str:
        return f"Keycloak unauthorized: {self.error_message}"


class KeycloakForbiddenError(KeycloakApiError):
    """
    Raised for 403 errors.
    The authenticated user lacks the admin role needed for the call.
    """

    def __str__(self) -> str:
        return f"Keycloak permission denied: {self.error_message}"


class KeycloakNotFoundError(KeycloakApiError):
    """
    Raised for 404 errors: realm, client, user, role or group missing.
    """

    def __str__(self) -> str:
        return f"Keycloak resource not found: {self.error_message}"


class KeycloakConflictError(KeycloakApiError):
    """
    Raised for 409 errors, e.g. a realm, client or user with the same
    unique name already exists.
    """

    def __str__(self) -> str:
        return f"Keycloak conflict: {self.error_message}"


class KeycloakServerError(KeycloakApiError):
    """Raised for 5xx errors from the identity server."""

    def __str__(self) -> str:
        return f"Keycloak server error: {self.error_message} (HTTP {self.status_code})"


# Exception mapping dictionaries
_HTTP_STATUS_EXCEPTIONS: Dict[int, Type[KeycloakApiError]] = {
    400: KeycloakBadRequestError,
    401: KeycloakUnauthorizedError,
    403: KeycloakForbiddenError,
    404: KeycloakNotFoundError,
    409: KeycloakConflictError,
}

_CONNECTION_EXCEPTIONS: Dict[Type[httpx.RequestError], Type[KeycloakTransportError]] = {
    httpx.ConnectError: KeycloakSystemUnavailableError,
    httpx.ConnectTimeout: KeycloakTimeoutError,
    httpx.ReadTimeout: KeycloakTimeoutError,
    httpx.WriteTimeout: KeycloakTimeoutError,
    httpx.PoolTimeout: KeycloakTimeoutError,
    httpx.RemoteProtocolError: KeycloakProtocolError,
    httpx.LocalProtocolError: KeycloakProtocolError,
    httpx.ReadError: KeycloakNetworkError,
    httpx.WriteError: KeycloakNetworkError,
    httpx.CloseError: KeycloakNetworkError,
}


def _request_of(error: httpx.RequestError) -> Optional[httpx.Request]:
    """httpx raises RuntimeError when a RequestError was built without a request."""
    try:
        return error.request
    except RuntimeError:
        return None


def create_transport_error(original_error: httpx.RequestError) -> KeycloakTransportError:
    """Create the Keycloak transport exception matching an httpx request error."""
    request = _request_of(original_error)
    exception_class = _CONNECTION_EXCEPTIONS.get(type(original_error))
    if exception_class is None:
        for httpx_type, mapped in _CONNECTION_EXCEPTIONS.items():
            if isinstance(original_error, httpx_type):
                exception_class = mapped
                break
    if exception_class is None:
        if isinstance(original_error, httpx.TimeoutException):
            exception_class = KeycloakTimeoutError
        else:
            return KeycloakTransportError(
                f"Connection error: {original_error}", request=request
            )
    return exception_class(str(original_error) or type(original_error).__name__, request=request)


def create_api_error(
    body: Any,
    *,
    status_code: int,
    expected: Collection[int] = (),
    request: Optional[httpx.Request] = None,
    response: Optional[httpx.Response] = None,
) -> KeycloakApiError:
    """Create the Keycloak API exception matching an unexpected status code."""
    if status_code in _HTTP_STATUS_EXCEPTIONS:
        exception_class: Type[KeycloakApiError] = _HTTP_STATUS_EXCEPTIONS[status_code]
    elif 500 <= status_code < 600:
        exception_class = KeycloakServerError
    else:
        exception_class = KeycloakApiError
    return exception_class(
        body,
        status_code=status_code,
        expected=expected,
        request=request,
        response=response,
    )


def keycloak_errors(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """
    Decorator that converts httpx request errors to Keycloak transport errors.

    Usage:
        >>> @keycloak_errors
        ... async def get_realm(self, realm_name: str):
        ...     response = await self._http.get(f"realms/{realm_name}")
        ...     return response.json()
    """

    @functools.wraps(func)
    async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except KeycloakError:
            raise
        except httpx.RequestError as e:
            raise create_transport_error(e) from e

    return cast(Callable[P, Awaitable[T]], async_wrapper)
