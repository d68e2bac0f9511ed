"""keycloakadmin is a Python client for the Keycloak admin REST API.

It authenticates once against a Keycloak server and exposes the admin
resources (realms, clients, users, groups, roles, role mappings and events)
as read-only namespaces of coroutine functions on a single client handle.
"""

import importlib.metadata

from keycloakadmin.exceptions import (
    # Base exceptions
    KeycloakError,
    KeycloakClientClosed,
    KeycloakSessionError,
    KeycloakValidationError,
    # Transport errors
    KeycloakTransportError,
    KeycloakSystemUnavailableError,
    KeycloakTimeoutError,
    KeycloakProtocolError,
    KeycloakNetworkError,
    # Authentication errors
    KeycloakAuthenticationError,
    # API errors
    KeycloakApiError,
    KeycloakBadRequestError,
    KeycloakUnauthorizedError,
    KeycloakForbiddenError,
    KeycloakNotFoundError,
    KeycloakConflictError,
    KeycloakServerError,
)
from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient, create_client
from keycloakadmin._httpx import KeycloakAuth, KeycloakSettings
from keycloakadmin.binding import Namespace

__version__ = importlib.metadata.version("keycloakadmin")
__all__ = [
    # Core client
    "KeycloakAdminClient",
    "create_client",
    "Namespace",
    # Keycloak Auth Components
    "KeycloakAuth",
    "KeycloakSettings",
    # Base exceptions
    "KeycloakError",
    "KeycloakClientClosed",
    "KeycloakSessionError",
    "KeycloakValidationError",
    # Transport errors
    "KeycloakTransportError",
    "KeycloakSystemUnavailableError",
    "KeycloakTimeoutError",
    "KeycloakProtocolError",
    "KeycloakNetworkError",
    # Authentication errors
    "KeycloakAuthenticationError",
    # API errors
    "KeycloakApiError",
    "KeycloakBadRequestError",
    "KeycloakUnauthorizedError",
    "KeycloakForbiddenError",
    "KeycloakNotFoundError",
    "KeycloakConflictError",
    "KeycloakServerError",
]
