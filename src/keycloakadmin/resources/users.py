"""User operations, bound as ``client.users``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from keycloakadmin.resources._helpers import (
    realm_path,
    require_field,
    require_user_id,
    split_options,
)

if TYPE_CHECKING:  # pragma: no cover
    from keycloakadmin.KeycloakAdminClient import KeycloakAdminClient


async def find(
    client: KeycloakAdminClient, realm_name: str, options: Optional[Mapping[str, Any]] = None
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """Get the users of a realm.

    Args:
        realm_name (str): Realm name (not the realm id).
        options (Mapping, optional): ``{"userId": ...}`` fetches one user;
            other keys (``username``, ``email``, ``first``, ``max``, ``search``...)
            are sent as query parameters.

    Returns:
        list | dict: Matching users, or one user when ``userId`` is given.

    Raises:
        KeycloakNotFoundError: The realm, or the user given by ``userId``, does not exist.
    """
    user_id, params = split_options(options, "userId")
    if user_id:
        return await client.execute("GET", realm_path(realm_name, "users", user_id))
    return await client.execute("GET", realm_path(realm_name, "users"), params=params)


async def create(
    client: KeycloakAdminClient, realm_name: str, user: Dict[str, Any]
) -> Dict[str, Any]:
    """Create a user and return it as stored by the server.

    The users endpoint has no exact-match filter to look the new user up by,
    so the id is taken from the ``Location`` header of the 201 response.
    """
    require_field(user, "username", "user")

    async def read_back(response):
        return await find(client, realm_name, {"userId": client.location_id(response)})

    return await client.write_then_read(
        "POST", realm_path(realm_name, "users"), user, read_back, expected_status=201
    )


async def update(client: KeycloakAdminClient, realm_name: str, user: Dict[str, Any]) -> None:
    """Update a user; ``user["id"]`` selects which one."""
    user_id = require_field(user, "id", "user")
    await client.execute(
        "PUT", realm_path(realm_name, "users", user_id), json=user, expected_status=204
    )


async def remove(client: KeycloakAdminClient, realm_name: str, user_id: str) -> None:
    require_user_id(user_id)
    await client.execute("DELETE", realm_path(realm_name, "users", user_id), expected_status=204)


async def reset_password(
    client: KeycloakAdminClient, realm_name: str, user_id: str, credentials: Dict[str, Any]
) -> None:
    """Set a new password for a user.

    Args:
        credentials (dict): e.g. ``{"temporary": True, "value": "s3cret"}``.
            ``type`` defaults to ``"password"``.
    """
    require_user_id(user_id)
    payload = {"type": "password", **(credentials or {})}
    await client.execute(
        "PUT",
        realm_path(realm_name, "users", user_id, "reset-password"),
        json=payload,
        expected_status=204,
    )
