"""Members of a group, bound as ``client.groups.members``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from keycloakadmin.resources._helpers import realm_path

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(
    client: KeycloakAdminClient,
    realm_name: str,
    group_id: str,
    options: Optional[Mapping[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Get the users in a group.

    Args:
        realm_name (str): Realm name (not the realm id).
        group_id (str): Id of the group.
        options (Mapping, optional): ``first`` (pagination offset) and ``max``
            (page size, server default 100).
    """
    return await client.execute(
        "GET", realm_path(realm_name, "groups", group_id, "members"), params=options
    )
