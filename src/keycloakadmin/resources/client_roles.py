"""Client-level roles, bound as ``client.clients.roles``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from keycloakadmin.resources._helpers import realm_path, require_client_id, require_field

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(
    client: KeycloakAdminClient, realm_name: str, id: str, role_name: Optional[str] = None
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """Get all roles of the client with id ``id``, or the one named ``role_name``."""
    require_client_id(id)
    if role_name:
        return await client.execute(
            "GET", realm_path(realm_name, "clients", id, "roles", role_name)
        )
    return await client.execute("GET", realm_path(realm_name, "clients", id, "roles"))


async def create(
    client: KeycloakAdminClient, realm_name: str, id: str, role: Dict[str, Any]
) -> Dict[str, Any]:
    """Create a role on a client and return it as stored by the server."""
    require_client_id(id)
    role_name = require_field(role, "name", "role")

    async def read_back(_response):
        return await find(client, realm_name, id, role_name)

    return await client.write_then_read(
        "POST", realm_path(realm_name, "clients", id, "roles"), role, read_back, expected_status=201
    )
