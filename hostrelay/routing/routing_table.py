from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping

from .backend_address import BackendAddress


class RoutingTable:
    """
    Read-only mapping of client-requested ``host:port`` keys to backend
    addresses. Built once before the listener binds and shared by every
    connection handler without locking.

    Keys are matched verbatim: no case-folding or other normalization.
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Mapping[str, BackendAddress] | None = None) -> None:
        if routes is None:
            routes = {}

        self._routes: Mapping[str, BackendAddress] = MappingProxyType(dict(routes))

    def resolve(self, route_key: str) -> BackendAddress | None:
        return self._routes.get(route_key)

    @property
    def routes(self) -> Mapping[str, BackendAddress]:
        return self._routes

    def __contains__(self, route_key: object) -> bool:
        return route_key in self._routes

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RoutingTable({dict(self._routes)!r})"
