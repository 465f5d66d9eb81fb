"""Path pattern compilation.

Route paths use the ``path-to-regexp`` syntax found in most JavaScript
routers, so a table can be shared between a browser and a server::

    "/users"                     literal
    "/users/:id"                 named segment
    "/posts/:id(\\d+)"           constrained segment
    "/:site/:category?/:alias"   optional segment
    "/files/:path+"              repeated segment (one or more)
    "/:foo/(.*)"                 unnamed segment, built with key 0
    "/static/*"                  asterisk, matches anything

A pattern compiles two ways: into a regex that matches a literal path
and yields one capture group per key, and into a ``PathBuilder`` that
inverts the pattern given parameter values.
"""

import re
import threading
from collections.abc import Sequence
from dataclasses import dataclass

from routable._internal.types import BuildParams
from routable.errors import BuildError, PatternError
from routable.routing.params import encode_asterisk, encode_component

DEFAULT_DELIMITER = "/"

# Either an escaped character, or an optional prefix followed by a named
# segment with an optional custom group, an unnamed group, or an asterisk.
_TOKEN_RE = re.compile(
    r"(\\.)"
    r"|([/.])?(?:(?::(\w+)(?:\(((?:\\.|[^\\()])+)\))?|\(((?:\\.|[^\\()])+)\))([+*?])?|(\*))",
    re.ASCII,
)

# Capture groups inside a custom segment would shift the key numbering
_GROUP_ESCAPE_RE = re.compile(r"([=!:$/()])")

# Compiled form of a path that can never match
NEVER_MATCH = re.compile(r"(?!)")


@dataclass(frozen=True, slots=True)
class Token:
    """A parameter slot in a parsed pattern.

    ``name`` is a string for named segments and an int (0, 1, ...) for
    unnamed groups and asterisks, numbered in order of appearance.
    """

    name: str | int
    prefix: str
    delimiter: str
    optional: bool
    repeat: bool
    partial: bool
    asterisk: bool
    pattern: str


@dataclass(slots=True)
class CompiledPattern:
    """A matcher regex and its keys, one key per capture group."""

    regex: re.Pattern[str]
    keys: list[Token]


def _escape_group(group: str) -> str:
    return _GROUP_ESCAPE_RE.sub(r"\\\1", group)


def parse(pattern: str) -> list[str | Token]:
    """Split *pattern* into literal strings and parameter tokens.

    Examples::

        "/users"         -> ["/users"]
        "/users/:id"     -> ["/users", Token(name="id", prefix="/", ...)]
        "/:foo/(.*)"     -> [Token(name="foo", ...), Token(name=0, pattern=".*", ...)]
    """
    tokens: list[str | Token] = []
    key = 0
    index = 0
    path = ""

    for match in _TOKEN_RE.finditer(pattern):
        path += pattern[index : match.start()]
        index = match.end()

        escaped = match.group(1)
        if escaped:
            path += escaped[1]
            continue

        prefix, name, capture, group, modifier, asterisk = match.group(2, 3, 4, 5, 6, 7)
        next_char = pattern[index] if index < len(pattern) else None

        # Flush the literal collected so far
        if path:
            tokens.append(path)
            path = ""

        token_name: str | int
        if name:
            token_name = name
        else:
            token_name = key
            key += 1

        delimiter = prefix or DEFAULT_DELIMITER
        custom = capture or group
        if custom:
            segment_pattern = _escape_group(custom)
        elif asterisk:
            segment_pattern = ".*"
        else:
            segment_pattern = f"[^{re.escape(delimiter)}]+?"

        tokens.append(
            Token(
                name=token_name,
                prefix=prefix or "",
                delimiter=delimiter,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=prefix is not None and next_char is not None and next_char != prefix,
                asterisk=bool(asterisk),
                pattern=segment_pattern,
            )
        )

    path += pattern[index:]
    if path:
        tokens.append(path)

    return tokens


def _tokens_to_source(tokens: list[str | Token], keys: list[Token]) -> str:
    """Build the regex source for one pattern, appending its keys."""
    route = ""
    for token in tokens:
        if isinstance(token, str):
            route += re.escape(token)
            continue

        prefix = re.escape(token.prefix)
        capture = f"(?:{token.pattern})"
        keys.append(token)

        if token.repeat:
            capture += f"(?:{prefix}{capture})*"

        if token.optional:
            if token.partial:
                capture = f"{prefix}({capture})?"
            else:
                capture = f"(?:{prefix}({capture}))?"
        else:
            capture = f"{prefix}({capture})"

        route += capture

    # Trailing delimiter is optional
    delimiter = re.escape(DEFAULT_DELIMITER)
    if route.endswith(delimiter):
        route = route[: -len(delimiter)]
    return f"{route}(?:{delimiter}(?=\\Z))?\\Z"


def compile_pattern(path: str | Sequence[str]) -> CompiledPattern:
    """Compile a pattern, or ordered alternatives, into a matcher.

    Matching is case-insensitive and anchored at both ends. For a list
    of alternatives the keys of every alternative are concatenated, so
    a key name may appear more than once; groups belonging to an
    alternative that did not match capture ``None``.

    Raises ``PatternError`` if the resulting regex does not compile.
    """
    alternatives = [path] if isinstance(path, str) else list(path)
    keys: list[Token] = []
    sources = [_tokens_to_source(parse(alt), keys) for alt in alternatives]
    source = sources[0] if len(sources) == 1 else "|".join(f"(?:{s})" for s in sources)

    try:
        regex = re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise PatternError(" | ".join(alternatives), str(exc)) from exc

    return CompiledPattern(regex=regex, keys=keys)


def _lookup(params: BuildParams, name: str | int) -> object:
    value = params.get(name)
    if value is None and isinstance(name, int):
        value = params.get(str(name))
    return value


class PathBuilder:
    """Inverts one pattern into a literal path.

    Usage::

        build = compile_builder("/users/:id")
        build({"id": 42})  # "/users/42"

    Raises ``BuildError`` for a missing required parameter, a value that
    fails its segment constraint, or a list for a non-repeating segment.
    """

    __slots__ = ("_matchers", "_tokens", "pattern")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self._tokens = tuple(parse(pattern))
        try:
            self._matchers = {
                index: re.compile(f"(?:{token.pattern})", re.IGNORECASE)
                for index, token in enumerate(self._tokens)
                if isinstance(token, Token)
            }
        except re.error as exc:
            raise PatternError(pattern, str(exc)) from exc

    def __call__(self, params: BuildParams | None = None) -> str:
        data = params or {}
        path = ""

        for index, token in enumerate(self._tokens):
            if isinstance(token, str):
                path += token
                continue

            matcher = self._matchers[index]
            value = _lookup(data, token.name)

            if value is None:
                if token.optional:
                    # Partial segments keep their prefix ("/:a.:ext?" -> "/x.")
                    if token.partial:
                        path += token.prefix
                    continue
                raise BuildError(token.name, f'Expected "{token.name}" to be defined')

            if isinstance(value, (list, tuple)):
                if not token.repeat:
                    raise BuildError(
                        token.name,
                        f'Expected "{token.name}" to not repeat, but received {value!r}',
                    )
                if not value:
                    if token.optional:
                        continue
                    raise BuildError(token.name, f'Expected "{token.name}" to not be empty')
                for position, item in enumerate(value):
                    segment = encode_component(item)
                    if not matcher.fullmatch(segment):
                        raise BuildError(
                            token.name,
                            f'Expected all "{token.name}" to match "{token.pattern}", '
                            f'but received "{segment}"',
                        )
                    path += (token.prefix if position == 0 else token.delimiter) + segment
                continue

            segment = encode_asterisk(value) if token.asterisk else encode_component(value)
            if not matcher.fullmatch(segment):
                raise BuildError(
                    token.name,
                    f'Expected "{token.name}" to match "{token.pattern}", but received "{segment}"',
                )
            path += token.prefix + segment

        return path

    def __repr__(self) -> str:
        return f"PathBuilder({self.pattern!r})"


def compile_builder(pattern: str) -> PathBuilder:
    """Compile *pattern* into a ``PathBuilder``."""
    return PathBuilder(pattern)


class BuilderCache:
    """Compiled path builders keyed by the literal pattern string.

    Grows monotonically and never evicts. Lookups are lock-free; a miss
    compiles under the lock with double-checked insertion, so two
    threads racing on the same pattern end up sharing one builder.
    """

    __slots__ = ("_builders", "_lock")

    def __init__(self) -> None:
        self._builders: dict[str, PathBuilder] = {}
        self._lock = threading.Lock()

    def get(self, pattern: str) -> PathBuilder:
        """Return the builder for *pattern*, compiling it on first use."""
        builder = self._builders.get(pattern)
        if builder is not None:
            return builder
        with self._lock:
            builder = self._builders.get(pattern)
            if builder is None:
                builder = compile_builder(pattern)
                self._builders[pattern] = builder
        return builder

    def clear(self) -> None:
        with self._lock:
            self._builders.clear()

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._builders

    def __len__(self) -> int:
        return len(self._builders)
