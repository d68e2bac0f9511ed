"""Realm operations, bound as ``client.realms``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from keycloakadmin.resources._helpers import realm_path, require_field

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(
    client: KeycloakAdminClient, realm_name: Optional[str] = None
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """Get every realm, or the one named ``realm_name``.

    Args:
        realm_name (str, optional): Realm name (not the realm id).

    Returns:
        list | dict: All realm representations, or a single one.

    Raises:
        KeycloakNotFoundError: No realm has that name.
    """
    if realm_name:
        return await client.execute("GET", realm_path(realm_name))
    return await client.execute("GET", "realms")


async def create(client: KeycloakAdminClient, realm: Dict[str, Any]) -> Dict[str, Any]:
    """Import a realm and return it as stored by the server.

    The import endpoint answers with an empty body, so the realm is read back
    by its name once the import succeeded.
    """
    realm_name = require_field(realm, "realm", "realm")

    async def read_back(_response):
        return await find(client, realm_name)

    return await client.write_then_read("POST", "realms", realm, read_back, expected_status=201)


async def update(client: KeycloakAdminClient, realm_name: str, realm: Dict[str, Any]) -> None:
    """Update the fields of ``realm_name`` given in ``realm``."""
    await client.execute(
        "PUT", realm_path(realm_name), json=realm, expected_status=204
    )


async def remove(client: KeycloakAdminClient, realm_name: str) -> None:
    await client.execute("DELETE", realm_path(realm_name), expected_status=204)
