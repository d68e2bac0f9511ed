"""Group membership of a user, bound as ``client.users.groups``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from keycloakadmin.resources._helpers import realm_path, require_user_id

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(client: KeycloakAdminClient, realm_name: str, user_id: str) -> List[Dict[str, Any]]:
    """Get the groups a user belongs to."""
    require_user_id(user_id)
    return await client.execute("GET", realm_path(realm_name, "users", user_id, "groups"))
