"""Shared helpers for the resource modules."""

from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import quote

from keycloakadmin.exceptions import KeycloakValidationError


def quote_segment(value: Any) -> str:
    """Percent-encode one path segment (realm names may contain spaces)."""
    return quote(str(value), safe="")


def realm_path(realm_name: str, *segments: Any) -> str:
    """Build ``realms/{realm}/seg/...`` with every segment encoded."""
    parts = ["realms", quote_segment(realm_name)]
    parts.extend(quote_segment(segment) for segment in segments)
    return "/".join(parts)


def split_options(
    options: Optional[Mapping[str, Any]], key: str
) -> Tuple[Optional[Any], Dict[str, Any]]:
    """Pop ``key`` out of a find() options mapping.

    Returns the popped value (or None) and the remaining options, which are
    sent as query parameters.
    """
    remaining = dict(options or {})
    return remaining.pop(key, None), remaining


def require_user_id(user_id: Any) -> None:
    if not user_id:
        raise KeycloakValidationError("user id is missing")


def require_client_id(client_id: Any) -> None:
    if not client_id:
        raise KeycloakValidationError("client id is missing")


def require_roles(roles: Any) -> None:
    if not roles or not isinstance(roles, list):
        raise KeycloakValidationError("roles are missing")


def require_field(payload: Any, field: str, what: str) -> Any:
    """Return ``payload[field]``, raising when the payload or the field is missing."""
    if not payload:
        raise KeycloakValidationError(f"{what} is missing")
    if not isinstance(payload, Mapping) or not payload.get(field):
        raise KeycloakValidationError(f"{what} {field} is missing")
    return payload[field]
