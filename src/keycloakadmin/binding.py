"""Binding of the resource modules onto a client handle.

``RESOURCE_TREE`` is the fixed shape of the public API: dicts are namespaces,
and every leaf is a coroutine function that takes the client handle as its
first argument. :func:`bind_resources` walks the tree once, when the handle
is built, and produces an isomorphic tree of :class:`Namespace` objects whose
leaves are the functions partially applied to the handle.
"""

import functools
import inspect
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Union

from keycloakadmin.resources import (
    client_role_mappings,
    client_roles,
    clients,
    events,
    group_members,
    groups,
    realm_role_mappings,
    realm_roles,
    realms,
    user_groups,
    user_role_mappings,
    users,
)

ResourceTree = Mapping[str, Union[Callable[..., Any], "ResourceTree"]]

RESOURCE_TREE: ResourceTree = {
    "realms": {
        "find": realms.find,
        "create": realms.create,
        "update": realms.update,
        "remove": realms.remove,
        "roles": {
            "find": realm_roles.find,
            "create": realm_roles.create,
        },
        "maps": {
            "map": realm_role_mappings.map,
            "unmap": realm_role_mappings.unmap,
        },
    },
    "clients": {
        "find": clients.find,
        "create": clients.create,
        "update": clients.update,
        "remove": clients.remove,
        "get_client_secret": clients.get_client_secret,
        "roles": {
            "find": client_roles.find,
            "create": client_roles.create,
        },
        "maps": {
            "map": client_role_mappings.map,
            "unmap": client_role_mappings.unmap,
        },
    },
    "users": {
        "find": users.find,
        "create": users.create,
        "update": users.update,
        "remove": users.remove,
        "reset_password": users.reset_password,
        "groups": {
            "find": user_groups.find,
        },
        "role_mappings": {
            "find": user_role_mappings.find,
        },
    },
    "groups": {
        "find": groups.find,
        "members": {
            "find": group_members.find,
        },
    },
    "events": {
        "find": events.find,
    },
}


class Namespace:
    """A read-only group of bound operations and nested namespaces.

    Members are reached as attributes (``client.clients.roles.find``) or by
    name (``namespace["find"]``). Nothing can be added, replaced or removed
    after construction.
    """

    __slots__ = ("_path", "_members")

    def __init__(self, path: str, members: Mapping[str, Any]):
        object.__setattr__(self, "_path", path)
        object.__setattr__(self, "_members", MappingProxyType(dict(members)))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._members[name]
        except KeyError:
            raise AttributeError(f"Namespace '{self._path}' has no member '{name}'") from None

    def __getitem__(self, name: str) -> Any:
        return self._members[name]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Namespace '{self._path}' is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Namespace '{self._path}' is read-only")

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __dir__(self):
        return sorted(self._members)

    def __repr__(self) -> str:
        return f"<Namespace {self._path}: {', '.join(self._members)}>"


def bind_resources(tree: ResourceTree, client: Any, path: str = "") -> Dict[str, Any]:
    """Bind every function leaf of ``tree`` to ``client``.

    Returns:
        dict: Top-level name to :class:`Namespace` (for dict nodes) or bound
            operation (for function leaves).

    Raises:
        TypeError: A leaf is neither a mapping nor a coroutine function. This
            is a wiring defect and is never caught.
    """
    bound: Dict[str, Any] = {}
    for name, node in tree.items():
        node_path = f"{path}.{name}" if path else name
        if isinstance(node, Mapping):
            bound[name] = Namespace(node_path, bind_resources(node, client, node_path))
        elif inspect.iscoroutinefunction(node):
            operation = functools.partial(node, client)
            functools.update_wrapper(operation, node)
            bound[name] = operation
        else:
            raise TypeError(
                f"Cannot bind '{node_path}': expected a namespace mapping or a "
                f"coroutine function, got {type(node).__name__}"
            )
    return bound
