"""Group operations, bound as ``client.groups``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from keycloakadmin.resources._helpers import realm_path

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(client: KeycloakAdminClient, realm_name: str) -> List[Dict[str, Any]]:
    """Get the group hierarchy of a realm. Only names and ids are returned."""
    return await client.execute("GET", realm_path(realm_name, "groups"))
