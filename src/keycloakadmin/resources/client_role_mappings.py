"""Client role assignment for users, bound as ``client.clients.maps``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from keycloakadmin.resources._helpers import (
    realm_path,
    require_client_id,
    require_roles,
    require_user_id,
)

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


def _mapping_path(realm_name: str, user_id: str, client_id: str) -> str:
    return realm_path(realm_name, "users", user_id, "role-mappings", "clients", client_id)


async def map(
    client: KeycloakAdminClient,
    realm_name: str,
    user_id: str,
    client_id: str,
    roles: List[Dict[str, Any]],
) -> None:
    """Assign one or more roles of a client to a user.

    Args:
        realm_name (str): Realm the client and the user live in.
        user_id (str): Id (UUID) of the user.
        client_id (str): Id (UUID, not the clientId) of the client owning the roles.
        roles (list): Role representations to assign.

    Raises:
        KeycloakValidationError: ``user_id``, ``client_id`` or ``roles`` is missing.
    """
    require_user_id(user_id)
    require_client_id(client_id)
    require_roles(roles)
    await client.execute(
        "POST", _mapping_path(realm_name, user_id, client_id), json=roles, expected_status=204
    )


async def unmap(
    client: KeycloakAdminClient,
    realm_name: str,
    user_id: str,
    client_id: str,
    roles: List[Dict[str, Any]],
) -> None:
    """Remove one or more roles of a client from a user."""
    require_user_id(user_id)
    require_client_id(client_id)
    require_roles(roles)
    await client.execute(
        "DELETE", _mapping_path(realm_name, user_id, client_id), json=roles, expected_status=204
    )
