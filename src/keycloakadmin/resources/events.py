"""Login events of a realm, bound as ``client.events``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from keycloakadmin.resources._helpers import realm_path

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(
    client: KeycloakAdminClient, realm_name: str, options: Optional[Mapping[str, Any]] = None
) -> List[Dict[str, Any]]:
    """Get the stored events of a realm.

    ``options`` are sent as query parameters, e.g. ``type``, ``client``,
    ``user``, ``dateFrom``, ``dateTo``, ``first``, ``max``.
    """
    return await client.execute("GET", realm_path(realm_name, "events"), params=options)
