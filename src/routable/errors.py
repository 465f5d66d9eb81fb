"""Routable exception hierarchy.

Shared across the pattern compiler, Route and Router so every module
raises and catches the same types.
"""


class RoutableError(Exception):
    """Base for all routable-specific errors."""


class ConfigurationError(RoutableError):
    """Raised when a route table is invalid.

    Always raised while the ``Router`` is being constructed; a router
    that was built successfully never raises it.
    """


class PatternError(ConfigurationError):
    """A path pattern could not be compiled into a regular expression."""

    def __init__(self, pattern: str, detail: str) -> None:
        self.pattern = pattern
        self.detail = detail
        super().__init__(f"Invalid route pattern {pattern!r}: {detail}")


class BuildError(RoutableError):
    """A path could not be built from the given parameters.

    Raised by ``PathBuilder`` and caught by ``Route.make_path``, which
    turns it into a ``None`` result.
    """

    def __init__(self, key: str | int, detail: str) -> None:
        self.key = key
        self.detail = detail
        super().__init__(detail)
