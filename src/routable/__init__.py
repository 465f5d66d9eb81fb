"""Routable — a URL routing table for servers and clients alike.

Matches a URL and method to a named route, and builds the URL of a
named route from its parameters. No transport or framework dependency.

Basic usage::

    from routable import Router

    router = Router({
        "article": {"path": "/:site/:category?/:alias", "method": "get"},
    })

    match = router.get_route("/finance/news/story.html?ref=home")
    match.name    # "article"
    match.params  # {"site": "finance", "category": "news", "alias": "story.html"}
    match.query   # {"ref": "home"}

    router.make_path("article", {"site": "sports", "alias": "x.html"})
    # "/sports/x.html"
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "BuildError",
    "BuilderCache",
    "ConfigurationError",
    "DefaultQueryCodec",
    "MatchResult",
    "Navigation",
    "PatternError",
    "QueryCodec",
    "RoutableError",
    "Route",
    "Router",
    "RouterConfig",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routable`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from routable.routing.router import Router

        return Router

    if name in ("Route", "MatchResult", "Navigation"):
        from routable.routing import route as _route

        return getattr(_route, name)

    if name == "RouterConfig":
        from routable.config import RouterConfig

        return RouterConfig

    if name in ("QueryCodec", "DefaultQueryCodec"):
        from routable.http import query as _query

        return getattr(_query, name)

    if name == "BuilderCache":
        from routable.routing.pattern import BuilderCache

        return BuilderCache

    if name in ("RoutableError", "ConfigurationError", "PatternError", "BuildError"):
        from routable import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
