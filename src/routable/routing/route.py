"""Route, its path and method variants, and match results."""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from routable._internal.freeze import deep_freeze
from routable._internal.types import BuildParams, ParamValue, QueryMapping, RouteDefinition
from routable.errors import ConfigurationError, RoutableError
from routable.http.query import QueryCodec
from routable.routing.params import decode_component, decode_repeated
from routable.routing.pattern import NEVER_MATCH, BuilderCache, Token, compile_pattern

logger = logging.getLogger("routable.routing")

DEFAULT_METHOD = "GET"

# First "?" or "#" ends the path
_PATH_END_RE = re.compile(r"[?#]")


# -- Path variants --


@dataclass(frozen=True, slots=True)
class SinglePath:
    """``path: "/users/:id"``"""

    pattern: str

    @property
    def patterns(self) -> tuple[str, ...]:
        return (self.pattern,)


@dataclass(frozen=True, slots=True)
class AlternativePaths:
    """``path: ["/a/:id", "/b/:id"]``, matched together and built in order."""

    patterns: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class InvalidPath:
    """A ``path`` value that is neither a string nor a list of strings.

    Never matches and never builds.
    """

    value: object

    @property
    def patterns(self) -> tuple[str, ...]:
        return ()


PathSpec: TypeAlias = SinglePath | AlternativePaths | InvalidPath


def path_spec(value: object) -> PathSpec:
    """Classify a definition's ``path`` value."""
    if isinstance(value, str):
        return SinglePath(value)
    if isinstance(value, (list, tuple)) and value and all(isinstance(p, str) for p in value):
        return AlternativePaths(tuple(value))
    return InvalidPath(value)


# -- Methods --


@dataclass(frozen=True, slots=True)
class MethodFilter:
    """Accepted HTTP methods, upper-cased.

    ``methods=None`` accepts every method; an empty set accepts none.
    """

    methods: frozenset[str] | None = None

    def accepts(self, method: str) -> bool:
        return self.methods is None or method in self.methods

    @classmethod
    def from_definition(cls, definition: RouteDefinition) -> "MethodFilter":
        """Derive the filter from the ``method`` key.

        Key absent accepts any method, ``None`` accepts no method, a
        string or a list of strings accepts those methods.
        """
        if "method" not in definition:
            return cls()
        value = definition["method"]
        if value is None:
            return cls(frozenset())
        if isinstance(value, str):
            return cls(frozenset({value.upper()}))
        if isinstance(value, Iterable) and all(isinstance(m, str) for m in value):
            return cls(frozenset(m.upper() for m in value))
        msg = f"Route method must be a string, a list of strings or None, got {value!r}."
        raise ConfigurationError(msg)


# -- Navigation --


@dataclass(frozen=True, slots=True)
class Navigation:
    """Client-side navigation info that is not part of the URL.

    ``type`` is e.g. ``"pageload"``, ``"click"`` or ``"popstate"``.
    ``params`` are checked against a route's ``navigate.params``.
    """

    type: str | None = None
    params: Mapping[str, Any] = field(default_factory=dict)


def _navigation_matches(criteria: Mapping[str, Any], navigate: Navigation | None) -> bool:
    supplied = navigate.params if navigate is not None else {}
    for key, expected in criteria.items():
        value = supplied.get(key)
        if isinstance(expected, re.Pattern):
            if value is None or expected.search(str(value)) is None:
                return False
        elif value != expected:
            return False
    return True


# -- Results --


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of matching one route."""

    method: str
    params: dict[str | int, ParamValue]
    query: QueryMapping


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Result of a successful router lookup.

    ``config`` is the route's own ``config`` attribute, not a per-lookup
    copy. For a mutable router that is the caller's definition object;
    a frozen route holds a deep read-only copy made once by ``freeze()``,
    so the caller's dicts are never touched.
    """

    name: str
    url: str
    method: str
    params: dict[str | int, ParamValue]
    query: QueryMapping
    config: RouteDefinition
    navigate: Navigation | None = None


def split_url(url: str) -> tuple[str, str | None]:
    """Split *url* into its path and query string.

    The fragment is dropped. A ``#`` before any ``?`` means no query.

    Examples::

        "/a/b?x=1#top" -> ("/a/b", "x=1")
        "/a/b#?"       -> ("/a/b", None)
    """
    found = _PATH_END_RE.search(url)
    if found is None:
        return url, None
    path = url[: found.start()]
    if found.group() == "#":
        return path, None
    query = url[found.end() :]
    fragment_at = query.find("#")
    if fragment_at >= 0:
        query = query[:fragment_at]
    return path, query


def _decode_param(key: Token, captured: str | None) -> ParamValue:
    if captured is None or not key.repeat:
        return decode_component(captured)
    return decode_repeated(captured, key.delimiter)


# -- Route --


class Route:
    """One compiled entry of the routing table.

    Owns the compiled matcher for its path and builds paths through the
    shared ``BuilderCache``. Once ``freeze()`` has been called, assigning
    to any attribute raises ``AttributeError`` and ``config`` and
    ``keys`` are read-only.
    """

    __slots__ = (
        "_builder_cache",
        "_frozen",
        "_query_codec",
        "config",
        "keys",
        "methods",
        "name",
        "path",
        "regexp",
    )

    def __init__(
        self,
        name: str,
        definition: RouteDefinition,
        *,
        builder_cache: BuilderCache,
        query_codec: QueryCodec,
    ) -> None:
        if not isinstance(definition, Mapping):
            msg = f"Route {name!r} must be defined by a mapping, got {type(definition).__name__}."
            raise ConfigurationError(msg)

        self._builder_cache = builder_cache
        self._query_codec = query_codec
        self.name = name
        self.config: RouteDefinition = definition
        self.methods = MethodFilter.from_definition(definition)
        self.path: PathSpec = path_spec(definition.get("path"))

        self.keys: list[Token] | tuple[Token, ...]
        if isinstance(self.path, InvalidPath):
            logger.warning(
                "Route %r has an invalid path %r; it will never match or build.",
                name,
                self.path.value,
            )
            self.regexp = NEVER_MATCH
            self.keys = []
        else:
            compiled = compile_pattern(self.path.patterns)
            self.regexp = compiled.regex
            self.keys = compiled.keys

    def __setattr__(self, attr: str, value: object) -> None:
        if getattr(self, "_frozen", False):
            msg = f"Cannot assign to {attr!r}: route {self.name!r} is frozen."
            raise AttributeError(msg)
        object.__setattr__(self, attr, value)

    def freeze(self) -> None:
        """Make the route, its config and its keys read-only."""
        self.config = deep_freeze(self.config)
        self.keys = tuple(self.keys)
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return getattr(self, "_frozen", False)

    def match(
        self,
        url: str | None,
        *,
        method: str | None = None,
        navigate: Navigation | None = None,
    ) -> RouteMatch | None:
        """Match *url* and *method* (default ``GET``) against this route.

        Returns ``None`` for an empty url, a rejected method, a path that
        does not match, or unmet ``navigate.params`` criteria.
        """
        if not url:
            return None

        method = method.upper() if method else DEFAULT_METHOD
        if not self.methods.accepts(method):
            return None

        path, query_string = split_url(url)
        found = self.regexp.match(path)
        if found is None:
            return None

        navigate_config = self.config.get("navigate")
        if isinstance(navigate_config, Mapping):
            criteria = navigate_config.get("params")
            if criteria and not _navigation_matches(criteria, navigate):
                return None

        # Duplicate names come from alternatives; the first defined value wins
        params: dict[str | int, ParamValue] = {}
        for index, key in enumerate(self.keys, start=1):
            if params.get(key.name) is None:
                params[key.name] = _decode_param(key, found.group(index))

        query = self._query_codec.parse(query_string) if query_string else {}
        return RouteMatch(method=method, params=params, query=query)

    def make_path(
        self,
        params: BuildParams | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Build a path from *params*, appending *query* if non-empty.

        Alternatives are tried in order. Returns ``None`` when none of
        them can be built; never raises.
        """
        for pattern in self.path.patterns:
            try:
                path = self._builder_cache.get(pattern)(params)
            except RoutableError as exc:
                logger.debug("Route %r failed to build %r: %s", self.name, pattern, exc)
                continue
            return path + self._format_query(query)
        return None

    def _format_query(self, query: Mapping[str, Any] | None) -> str:
        if not query:
            return ""
        query_string = self._query_codec.stringify(query)
        return f"?{query_string}" if query_string else ""

    def __repr__(self) -> str:
        return f"Route({self.name!r}, {self.path!r})"
