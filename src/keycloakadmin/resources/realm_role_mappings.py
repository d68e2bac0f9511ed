"""Realm role assignment for users, bound as ``client.realms.maps``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from keycloakadmin.resources._helpers import realm_path, require_roles, require_user_id

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


def _mapping_path(realm_name: str, user_id: str) -> str:
    return realm_path(realm_name, "users", user_id, "role-mappings", "realm")


async def map(
    client: KeycloakAdminClient, realm_name: str, user_id: str, roles: List[Dict[str, Any]]
) -> None:
    """Assign one or more realm roles to a user.

    Args:
        realm_name (str): Realm the roles and the user live in.
        user_id (str): Id (UUID) of the user.
        roles (list): Role representations; each needs at least ``id`` and ``name``.

    Raises:
        KeycloakValidationError: ``user_id`` or ``roles`` is missing.
    """
    require_user_id(user_id)
    require_roles(roles)
    await client.execute(
        "POST", _mapping_path(realm_name, user_id), json=roles, expected_status=204
    )


async def unmap(
    client: KeycloakAdminClient, realm_name: str, user_id: str, roles: List[Dict[str, Any]]
) -> None:
    """Remove one or more realm roles from a user."""
    require_user_id(user_id)
    require_roles(roles)
    await client.execute(
        "DELETE", _mapping_path(realm_name, user_id), json=roles, expected_status=204
    )
