from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict, Mapping, NamedTuple, Optional

import httpx

from keycloakadmin.exceptions import (
    KeycloakAuthenticationError,
    KeycloakSessionError,
    KeycloakValidationError,
    keycloak_errors,
)

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Generator
    import ssl

logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json"

# Settings keys as spelled by callers coming from JSON style settings objects
_SETTINGS_ALIASES = {
    "baseUrl": "base_url",
    "accessToken": "access_token",
    "realmName": "realm_name",
    "clientId": "client_id",
    "grantType": "grant_type",
    "sslVerify": "ssl_verify",
}


def _get_timeout_config() -> dict:
    """Get timeout configuration from environment variables.

    Returns:
        dict: connect, read, write and pool timeouts; None where unset.
    """
    return {
        "connect": float(os.environ["KEYCLOAKADMIN_CONNECT_TIMEOUT"])
        if "KEYCLOAKADMIN_CONNECT_TIMEOUT" in os.environ
        else None,
        "read": float(os.environ["KEYCLOAKADMIN_READ_TIMEOUT"])
        if "KEYCLOAKADMIN_READ_TIMEOUT" in os.environ
        else None,
        "write": float(os.environ["KEYCLOAKADMIN_WRITE_TIMEOUT"])
        if "KEYCLOAKADMIN_WRITE_TIMEOUT" in os.environ
        else None,
        "pool": float(os.environ["KEYCLOAKADMIN_POOL_TIMEOUT"])
        if "KEYCLOAKADMIN_POOL_TIMEOUT" in os.environ
        else None,
    }


def _get_default_timeout() -> Optional[float]:
    try:
        timeout_str = os.environ.get("KEYCLOAKADMIN_HTTP_TIMEOUT")
        return float(timeout_str) if timeout_str is not None else None
    except (TypeError, ValueError):
        return None


def construct_timeout_from_env() -> httpx.Timeout:
    """Build an httpx.Timeout from environment variables only.

    Returns httpx.Timeout(None), i.e. no timeout, when nothing is configured.
    """
    default_timeout = _get_default_timeout()
    granular = {k: v for k, v in _get_timeout_config().items() if v is not None}
    if not granular and default_timeout is None:
        return httpx.Timeout(None)
    return httpx.Timeout(default_timeout, **granular)


def construct_timeout(timeout: float | dict | httpx.Timeout | None) -> httpx.Timeout:
    """Build an httpx.Timeout from a caller supplied value.

    A dict is merged over the environment defaults, so only the keys that
    should differ need to be given.
    """
    if timeout is None:
        return httpx.Timeout(None)
    if isinstance(timeout, httpx.Timeout):
        return timeout
    if isinstance(timeout, dict):
        granular = {k: v for k, v in _get_timeout_config().items() if v is not None}
        return httpx.Timeout(_get_default_timeout(), **{**granular, **timeout})
    return httpx.Timeout(timeout)


@dataclass(frozen=True)
class KeycloakSettings:
    """Parameters required to connect to and authenticate against Keycloak.

    Read once when the client authenticates; never mutated afterwards.

    Attributes:
        base_url (str): Base URL of the server, e.g. ``http://localhost:8080/auth``.
        username (str | None): Admin user name for the password grant.
        password (str | None): Admin password for the password grant.
        grant_type (str): OAuth2 grant type sent to the token endpoint.
        client_id (str): Client the admin user logs in through.
        realm_name (str): Realm whose token endpoint is used.
        access_token (str | None): Pre-issued bearer token. When given, no
            token request is made.
        ssl_verify (bool | ssl.SSLContext): Whether to verify SSL certificates.
        timeout (httpx.Timeout): Timeout for every HTTP request. Defaults to
            the ``KEYCLOAKADMIN_*_TIMEOUT`` environment variables.
    """

    base_url: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    grant_type: str = "password"
    client_id: str = "admin-cli"
    realm_name: str = "master"
    access_token: Optional[str] = field(default=None, repr=False)
    ssl_verify: bool | ssl.SSLContext = True
    timeout: httpx.Timeout = field(default_factory=construct_timeout_from_env)

    def __post_init__(self):
        if not self.base_url:
            raise KeycloakValidationError("base_url is required")
        if not isinstance(self.timeout, httpx.Timeout):
            object.__setattr__(self, "timeout", construct_timeout(self.timeout))
        if not self.access_token and not (self.username and self.password):
            raise KeycloakValidationError(
                "username and password are required unless access_token is supplied"
            )

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> "KeycloakSettings":
        """Build settings from a plain mapping.

        Accepts snake_case field names as well as the camelCase spelling
        (``baseUrl``, ``accessToken``, ``realmName``) of JSON style settings.
        """
        if not isinstance(settings, Mapping):
            raise KeycloakValidationError(
                f"settings must be a mapping or KeycloakSettings, got {type(settings).__name__}"
            )
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in settings.items():
            name = _SETTINGS_ALIASES.get(key, key)
            if name not in known:
                raise KeycloakValidationError(f"Unknown setting: {key}")
            kwargs[name] = value
        if "base_url" not in kwargs:
            raise KeycloakValidationError("base_url is required")
        return cls(**kwargs)

    @property
    def _root(self) -> str:
        return self.base_url.rstrip("/")

    @property
    def token_url(self) -> str:
        return f"{self._root}/realms/{self.realm_name}/protocol/openid-connect/token"

    @property
    def admin_url(self) -> str:
        return f"{self._root}/admin"

    @property
    def token_form(self) -> Dict[str, str]:
        """Form fields of the password grant, and nothing else."""
        form = {
            "username": self.username,
            "password": self.password,
            "grant_type": self.grant_type,
            "client_id": self.client_id,
        }
        return {k: v for k, v in form.items() if v is not None}


class KeycloakAuth(httpx.Auth):
    """Session state of one client handle, attached to requests as an httpx auth.

    Holds the bearer token privately and adds it to every request the handle
    sends. It performs the initial token exchange once and never refreshes.
    """

    class _Token(NamedTuple):
        access_token: str
        expires_at: Optional[datetime]

    def __init__(self, params: KeycloakSettings):
        self._params = params
        self._token: Optional[KeycloakAuth._Token] = None
        self._owned = False
        self._authenticated = False

    def __repr__(self) -> str:
        state = "authenticated" if self._token else "unauthenticated"
        return f"<KeycloakAuth {state} for {self._params.base_url}>"

    def attach(self, owner: object) -> None:
        """Register this store as the private state of exactly one handle."""
        if self._owned:
            raise KeycloakSessionError("Credential store is already owned by a client")
        self._owned = True

    @property
    def access_token(self) -> str:
        if self._token is None:
            raise KeycloakSessionError(
                "No access token has been committed for this client; "
                "it was used before authentication completed"
            )
        return self._token.access_token

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._token.expires_at if self._token else None

    def set_token(self, access_token: str, expires_at: Optional[datetime] = None) -> None:
        if not access_token:
            raise KeycloakSessionError("Refusing to commit an empty access token")
        self._token = KeycloakAuth._Token(access_token=access_token, expires_at=expires_at)

    def auth_flow(self, request: httpx.Request) -> "Generator[httpx.Request, httpx.Response, None]":
        """Attach the bearer token to every outgoing request"""
        request.headers["Authorization"] = f"Bearer {self.access_token}"
        yield request

    async def authenticate(self) -> None:
        """Obtain the bearer token, or accept the pre-supplied one.

        Raises:
            KeycloakAuthenticationError: The token endpoint refused the grant.
            KeycloakTransportError: The token endpoint could not be reached.
            KeycloakSessionError: This store was already authenticated.
        """
        if self._authenticated:
            raise KeycloakSessionError("Client is already authenticated")
        if self._params.access_token:
            logger.debug("Using supplied access token, skipping token request")
            self.set_token(self._params.access_token)
        else:
            logger.info(
                f"Logging in to {self._params.base_url} as {self._params.username} "
                f"(realm {self._params.realm_name})"
            )
            token = await self._do_async_auth()
            self.set_token(token.access_token, token.expires_at)
            logger.info("Logged in")
        self._authenticated = True

    @keycloak_errors
    async def _do_async_auth(self) -> _Token:
        """Password grant against the token endpoint."""
        async with httpx.AsyncClient(
            timeout=self._params.timeout, verify=self._params.ssl_verify
        ) as client:
            response = await client.post(
                self._params.token_url,
                data=self._params.token_form,
                headers={"Accept": CONTENT_TYPE_JSON},
            )

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = {}

        if not response.is_success or not payload.get("access_token"):
            logger.warning(f"Login refused by token endpoint (HTTP {response.status_code})")
            raise KeycloakAuthenticationError(
                payload.get("error"),
                payload.get("error_description"),
                status_code=response.status_code,
            )

        expires_at = None
        if "expires_in" in payload:
            expires_at = datetime.now(tz=timezone.utc) + timedelta(
                seconds=int(payload["expires_in"])
            )
        return KeycloakAuth._Token(access_token=payload["access_token"], expires_at=expires_at)
