"""Realm-level roles, bound as ``client.realms.roles``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from keycloakadmin.resources._helpers import realm_path, require_field

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(
    client: KeycloakAdminClient, realm_name: str, role_name: Optional[str] = None
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """Get all roles of a realm, or the single role named ``role_name``."""
    if role_name:
        return await client.execute("GET", realm_path(realm_name, "roles", role_name))
    return await client.execute("GET", realm_path(realm_name, "roles"))


async def create(
    client: KeycloakAdminClient, realm_name: str, role: Dict[str, Any]
) -> Dict[str, Any]:
    """Create a realm role and return it as stored by the server.

    Role names are unique within a realm, so the new role is read back by name.

    Raises:
        KeycloakValidationError: ``role`` is missing or has no name.
        KeycloakConflictError: A role with that name already exists.
    """
    role_name = require_field(role, "name", "role")

    async def read_back(_response):
        return await find(client, realm_name, role_name)

    return await client.write_then_read(
        "POST", realm_path(realm_name, "roles"), role, read_back, expected_status=201
    )
