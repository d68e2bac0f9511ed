from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Collection, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

import httpx

from keycloakadmin._httpx import CONTENT_TYPE_JSON, KeycloakAuth, KeycloakSettings
from keycloakadmin.binding import RESOURCE_TREE, Namespace, bind_resources
from keycloakadmin.exceptions import (
    KeycloakApiError,
    KeycloakClientClosed,
    KeycloakSessionError,
    create_api_error,
    keycloak_errors,
)

USER_AGENT_STRING = "keycloakadmin (python)"

ExpectedStatus = Union[int, Collection[int]]

# Set up logger
logger = logging.getLogger("KeycloakAdminClient")


class KeycloakAdminClient:
    """An authenticated session against the Keycloak admin REST API

    Instances are built and authenticated by :func:`create_client`; the handle
    is only handed out once authentication has settled. Resource operations
    are bound onto the handle as read-only namespaces:

        >>> import asyncio
        >>> from keycloakadmin import create_client
        >>> async def main():
        ...     kc = await create_client({
        ...         "baseUrl": "http://127.0.0.1:8080/auth",
        ...         "username": "admin",
        ...         "password": "admin",
        ...         "grant_type": "password",
        ...         "client_id": "admin-cli",
        ...     })
        ...     async with kc:
        ...         return await kc.realms.find()
        >>> asyncio.run(main())
        [{'id': 'master', 'realm': 'master', ...}]

    Parameters:
        settings (KeycloakSettings): Connection and credential settings.
    """

    def __init__(self, settings: KeycloakSettings):
        if "_auth" in self.__dict__:
            raise KeycloakSessionError("KeycloakAdminClient is already initialized")
        # The credential store is created before anything else touches the handle
        auth = KeycloakAuth(settings)
        auth.attach(self)
        object.__setattr__(self, "_auth", auth)
        object.__setattr__(self, "_settings", settings)
        object.__setattr__(self, "_http_client", None)
        object.__setattr__(self, "is_closed", False)
        object.__setattr__(self, "_namespaces", bind_resources(RESOURCE_TREE, self))

    def __repr__(self) -> str:
        return f"KeycloakAdminClient at {self.base_url}"

    def __getattr__(self, name: str) -> Namespace:
        namespaces = self.__dict__.get("_namespaces", {})
        try:
            return namespaces[name]
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "base_url" or name in self.__dict__.get("_namespaces", {}):
            raise AttributeError(f"{name} is read-only on a KeycloakAdminClient")
        if name.startswith("_") or name == "is_closed":
            raise AttributeError(f"{name} is private to the KeycloakAdminClient")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if (
            name in ("base_url", "is_closed")
            or name.startswith("_")
            or name in self.__dict__.get("_namespaces", {})
        ):
            raise AttributeError(f"{name} cannot be deleted from a KeycloakAdminClient")
        object.__delattr__(self, name)

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self._namespaces))

    async def __aenter__(self):
        """Keep one httpx.AsyncClient open for the duration of the block.

        Returns:
            KeycloakAdminClient: The client itself.
        """
        self.validate_client_open()
        if self._http_client is None or self._http_client.is_closed:
            object.__setattr__(self, "_http_client", self.get_http_client_async())
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the held HTTP client and mark the handle closed."""
        http_client = self._http_client
        object.__setattr__(self, "_http_client", None)
        if http_client is not None and not http_client.is_closed:
            try:
                await http_client.aclose()
            except httpx.HTTPError as e:
                logger.warning(f"Error closing HTTP client: {e}")
        object.__setattr__(self, "is_closed", True)

    @property
    def base_url(self) -> str:
        """The server base URL this handle was created for."""
        return self._settings.base_url

    @property
    def admin_url(self) -> str:
        return self._settings.admin_url

    @property
    def namespaces(self) -> Dict[str, Namespace]:
        """The bound resource namespaces, by name."""
        return dict(self._namespaces)

    def validate_client_open(self) -> None:
        if self.is_closed:
            raise KeycloakClientClosed()

    def build_url(self, path: str) -> str:
        """Build the absolute admin URL for a path relative to ``{base_url}/admin``."""
        return f"{self.admin_url}/{path.lstrip('/')}".rstrip("/")

    def get_http_client_async(self) -> httpx.AsyncClient:
        """Returns an async httpx client for talking to the admin API.

        The client carries this handle's credential store as its auth, so the
        bearer token is attached to every request it sends.
        """
        return httpx.AsyncClient(
            timeout=self._settings.timeout,
            verify=self._settings.ssl_verify,
            auth=self._auth,
            headers={"Accept": CONTENT_TYPE_JSON, "User-Agent": USER_AGENT_STRING},
        )

    @staticmethod
    def handle_json_response(response: httpx.Response) -> Any:
        """Parse a response body.

        Returns:
            Any: Parsed JSON, the raw text when the body is not JSON, or None
                when the body is empty.
        """
        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def location_id(response: httpx.Response) -> str:
        """Extract the id of a created resource from the Location header.

        Raises:
            KeycloakApiError: If the response carries no Location header.
        """
        location = response.headers.get("Location")
        if not location:
            raise KeycloakApiError(
                "Created resource did not return a Location header",
                status_code=response.status_code,
                response=response,
            )
        return urlsplit(location).path.rstrip("/").rsplit("/", 1)[-1]

    @staticmethod
    def _expected_codes(expected_status: ExpectedStatus) -> tuple:
        if isinstance(expected_status, int):
            return (expected_status,)
        return tuple(expected_status)

    @keycloak_errors
    async def send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        expected_status: ExpectedStatus = 200,
    ) -> httpx.Response:
        """Send one admin request and check its status.

        Args:
            method (str): HTTP verb.
            path (str): Path relative to ``{base_url}/admin``.
            json (Any, optional): Body, serialized as JSON when not None.
            params (Mapping, optional): Query parameters.
            expected_status (int | Collection[int]): Status code(s) meaning success.

        Returns:
            httpx.Response: The response, whose status is one of ``expected_status``.

        Raises:
            KeycloakApiError: The status was not one of ``expected_status``.
            KeycloakTransportError: The server could not be reached.
            KeycloakClientClosed: The handle has been closed.
        """
        self.validate_client_open()
        expected = self._expected_codes(expected_status)
        url = self.build_url(path)
        request_kwargs: Dict[str, Any] = {}
        if json is not None:
            request_kwargs["json"] = json
        if params:
            request_kwargs["params"] = {k: v for k, v in params.items() if v is not None}

        if self._http_client is not None and not self._http_client.is_closed:
            response = await self._http_client.request(method, url, **request_kwargs)
        else:
            async with self.get_http_client_async() as http_client:
                response = await http_client.request(method, url, **request_kwargs)

        logger.debug(f"{method} {path} -> {response.status_code}")
        if response.status_code not in expected:
            raise create_api_error(
                self.handle_json_response(response),
                status_code=response.status_code,
                expected=expected,
                request=response.request,
                response=response,
            )
        return response

    async def execute(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        expected_status: ExpectedStatus = 200,
    ) -> Any:
        """Send one admin request and return its parsed body.

        Returns:
            Any: The parsed JSON body, or None for an empty body (201/204).
        """
        response = await self.send(
            method, path, json=json, params=params, expected_status=expected_status
        )
        return self.handle_json_response(response)

    async def write_then_read(
        self,
        method: str,
        path: str,
        payload: Any,
        read: Callable[[httpx.Response], Awaitable[Any]],
        *,
        expected_status: ExpectedStatus = 201,
    ) -> Any:
        """Perform a write whose success carries no body, then read the result.

        ``read`` receives the write's response and is only awaited once the
        write status has been confirmed. Its result is returned instead of the
        write's empty body.
        """
        response = await self.send(method, path, json=payload, expected_status=expected_status)
        logger.debug(f"{method} {path} succeeded, fetching the written resource")
        return await read(response)


async def create_client(
    settings: Union[KeycloakSettings, Mapping[str, Any]],
) -> KeycloakAdminClient:
    """Build a client handle and authenticate it.

    The handle is returned only after authentication has settled, so every
    operation bound onto it can rely on a committed token.

    Args:
        settings (KeycloakSettings | Mapping): Connection settings. A mapping
            is converted with :meth:`KeycloakSettings.from_mapping`.

    Returns:
        KeycloakAdminClient: An authenticated handle.

    Raises:
        KeycloakValidationError: The settings are incomplete.
        KeycloakAuthenticationError: The token endpoint refused the credentials.
        KeycloakTransportError: The token endpoint could not be reached.
    """
    if not isinstance(settings, KeycloakSettings):
        settings = KeycloakSettings.from_mapping(settings)
    handle = KeycloakAdminClient(settings)
    try:
        await handle._auth.authenticate()
    except BaseException:
        await handle.aclose()
        raise
    logger.debug(f"Bound namespaces: {', '.join(handle.namespaces)}")
    return handle
