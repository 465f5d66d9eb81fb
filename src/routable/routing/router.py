"""Ordered routing table with first-match lookup and reverse generation.

Routes are compiled once when the router is constructed. Outside
production the table is then frozen: routes, their configs and their
keys become read-only for the lifetime of the router.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from routable._internal.types import BuildParams, RouteDefinition
from routable.config import RouterConfig
from routable.errors import ConfigurationError
from routable.http.query import DefaultQueryCodec
from routable.routing.pattern import BuilderCache
from routable.routing.route import MatchResult, Navigation, Route

logger = logging.getLogger("routable.routing")

RouteTable = Mapping[str, RouteDefinition] | Sequence[RouteDefinition]


def _iter_definitions(routes: RouteTable | None) -> Iterator[tuple[str, RouteDefinition]]:
    """Yield ``(name, definition)`` pairs in table order.

    Raises ``ConfigurationError`` for a list entry without a name, a
    repeated name, or a table that is neither a mapping nor a list.
    """
    if routes is None:
        return

    if isinstance(routes, Mapping):
        yield from routes.items()
        return

    if isinstance(routes, (str, bytes)) or not isinstance(routes, Sequence):
        msg = f"Routes must be a mapping or a list of route definitions, got {type(routes).__name__}."
        raise ConfigurationError(msg)

    seen: set[str] = set()
    for index, definition in enumerate(routes):
        if not isinstance(definition, Mapping):
            msg = f"Route at index {index} must be a mapping, got {type(definition).__name__}."
            raise ConfigurationError(msg)
        name = definition.get("name")
        if not name:
            msg = f"Route at index {index} has no name. Routes given as a list need a 'name' key."
            raise ConfigurationError(msg)
        if name in seen:
            msg = f"Duplicate route name {name!r} at index {index}. Route names must be unique."
            raise ConfigurationError(msg)
        seen.add(name)
        yield name, definition


class Router:
    """Route matching and route generation over an ordered table.

    Usage::

        router = Router({
            "view_user": {"path": "/user/:id", "method": "get", "page": "user"},
        })
        match = router.get_route("/user/garfield")
        # match.name == "view_user", match.params == {"id": "garfield"}
        router.make_path("view_user", {"id": "odie"})  # "/user/odie"

    Routes are tried in table order and the first match wins; there is
    no specificity ranking, so list specific routes before general ones.
    """

    __slots__ = ("_builder_cache", "_frozen", "_query_codec", "_routes")

    def __init__(
        self,
        routes: RouteTable | None = None,
        config: RouterConfig | None = None,
    ) -> None:
        config = config or RouterConfig()
        self._query_codec = (
            config.query_codec if config.query_codec is not None else DefaultQueryCodec()
        )
        self._builder_cache = (
            config.builder_cache if config.builder_cache is not None else BuilderCache()
        )

        table: dict[str, Route] = {}
        for name, definition in _iter_definitions(routes):
            table[name] = Route(
                name,
                definition,
                builder_cache=self._builder_cache,
                query_codec=self._query_codec,
            )

        self._frozen = config.should_freeze()
        self._routes: dict[str, Route] | MappingProxyType[str, Route]
        if self._frozen:
            for route in table.values():
                route.freeze()
            self._routes = MappingProxyType(table)
        else:
            self._routes = table

        logger.debug("Router compiled %d routes (frozen=%s)", len(table), self._frozen)

    @property
    def routes(self) -> Mapping[str, Route]:
        """The name -> Route table, in match order.

        Read-only when the router is frozen; the live dict otherwise.
        """
        return self._routes

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get_route(
        self,
        url: str | None,
        *,
        method: str | None = None,
        navigate: Navigation | None = None,
    ) -> MatchResult | None:
        """Return the first route matching *url* and *method*.

        *method* is case-insensitive and defaults to ``GET``. *navigate*
        is checked against routes that declare ``navigate.params``.
        Returns ``None`` when no route matches.
        """
        for name, route in self._routes.items():
            if route is None:
                continue
            matched = route.match(url, method=method, navigate=navigate)
            if matched is not None:
                return MatchResult(
                    name=name,
                    url=url or "",
                    method=matched.method,
                    params=matched.params,
                    query=matched.query,
                    config=route.config,
                    navigate=navigate,
                )
        return None

    def make_path(
        self,
        name: str,
        params: BuildParams | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Build the path for route *name*.

        Returns ``None`` if the route does not exist or cannot be built
        from *params*.
        """
        route = self._routes.get(name) if name else None
        if route is None:
            return None
        return route.make_path(params, query) or None

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"Router({list(self._routes)!r}, frozen={self._frozen})"
