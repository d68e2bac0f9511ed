"""Role mappings of a user, bound as ``client.users.role_mappings``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from keycloakadmin.resources._helpers import realm_path, require_user_id

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(client: KeycloakAdminClient, realm_name: str, user_id: str) -> Dict[str, Any]:
    """Get every role mapped to a user.

    Returns:
        dict: ``{"realmMappings": [...], "clientMappings": {clientId: {"mappings": [...]}}}``
    """
    require_user_id(user_id)
    return await client.execute("GET", realm_path(realm_name, "users", user_id, "role-mappings"))
