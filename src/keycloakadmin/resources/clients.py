"""Client (application) operations, bound as ``client.clients``.

Note that ``id`` is the server-generated UUID of a client, while ``clientId``
is the unique name an application logs in with.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from keycloakadmin.exceptions import KeycloakNotFoundError
from keycloakadmin.resources._helpers import (
    realm_path,
    require_client_id,
    require_field,
    split_options,
)

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient

logger = logging.getLogger(__name__)


async def find(
    client: KeycloakAdminClient, realm_name: str, options: Optional[Mapping[str, Any]] = None
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """Get the clients of a realm.

    Args:
        realm_name (str): Realm name (not the realm id).
        options (Mapping, optional): ``{"id": ...}`` fetches one client by id;
            any other keys (e.g. ``clientId``) are sent as query parameters.

    Returns:
        list | dict: Matching clients, or one client when ``id`` is given.
    """
    client_uuid, params = split_options(options, "id")
    if client_uuid:
        return await client.execute("GET", realm_path(realm_name, "clients", client_uuid))
    return await client.execute("GET", realm_path(realm_name, "clients"), params=params)


async def create(
    client: KeycloakAdminClient, realm_name: str, new_client: Dict[str, Any]
) -> Dict[str, Any]:
    """Create a client and return it as stored by the server.

    The server answers with an empty body; ``clientId`` is unique within a
    realm, so the new client is looked up with it.

    Raises:
        KeycloakNotFoundError: The client was created but the lookup by
            ``clientId`` came back empty.
    """
    client_id = require_field(new_client, "clientId", "client")

    async def read_back(response):
        found = await find(client, realm_name, {"clientId": client_id})
        if not found:
            raise KeycloakNotFoundError(
                {"error": f"Created client {client_id} could not be read back"},
                status_code=response.status_code,
                response=response,
            )
        return found[0]

    return await client.write_then_read(
        "POST", realm_path(realm_name, "clients"), new_client, read_back, expected_status=201
    )


async def update(
    client: KeycloakAdminClient, realm_name: str, updated_client: Dict[str, Any]
) -> None:
    """Update a client; ``updated_client["id"]`` selects which one."""
    client_uuid = require_field(updated_client, "id", "client")
    await client.execute(
        "PUT",
        realm_path(realm_name, "clients", client_uuid),
        json=updated_client,
        expected_status=204,
    )


async def remove(client: KeycloakAdminClient, realm_name: str, id: str) -> None:
    require_client_id(id)
    await client.execute("DELETE", realm_path(realm_name, "clients", id), expected_status=204)


async def get_client_secret(client: KeycloakAdminClient, realm_name: str, id: str) -> Dict[str, Any]:
    """Get the credential of a confidential client: ``{"type": "secret", "value": ...}``."""
    require_client_id(id)
    logger.debug(f"Fetching client secret for client {id} in realm {realm_name}")
    return await client.execute("GET", realm_path(realm_name, "clients", id, "client-secret"))
