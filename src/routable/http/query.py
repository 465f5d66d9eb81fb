"""Query string parsing and serialization.

``QueryCodec`` is the structural interface a router accepts through
``RouterConfig(query_codec=...)``. ``DefaultQueryCodec`` is used when
none is given.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable
from urllib.parse import parse_qsl

from routable._internal.types import QueryMapping
from routable.routing.params import encode_component


@runtime_checkable
class QueryCodec(Protocol):
    """Parse/stringify pair for the query portion of a URL.

    ``parse`` receives the text after ``?`` (without the fragment) and
    ``stringify`` must return it without a leading ``?``. An empty
    result from ``stringify`` means no query is appended.
    """

    def parse(self, query_string: str) -> QueryMapping: ...
    def stringify(self, query: Mapping[str, Any]) -> str: ...


def _encode_value(value: object) -> str:
    if value is None:
        return ""
    return encode_component(value)


class DefaultQueryCodec:
    """Canonical query codec.

    ``parse`` collapses repeated keys into a list in first-seen order and
    maps a key without ``=`` to ``""``. ``stringify`` sorts keys and
    repeats list values as ``key=v1&key=v2``::

        codec.stringify({"c": "42", "a": "bar", "b": ["1", "2"]})
        # "a=bar&b=1&b=2&c=42"
    """

    __slots__ = ()

    def parse(self, query_string: str) -> QueryMapping:
        result: QueryMapping = {}
        if not query_string:
            return result

        for key, value in parse_qsl(query_string, keep_blank_values=True):
            existing = result.get(key)
            if existing is None:
                result[key] = value
            elif isinstance(existing, list):
                existing.append(value)
            else:
                result[key] = [existing, value]
        return result

    def stringify(self, query: Mapping[str, Any]) -> str:
        if not query:
            return ""

        parts: list[str] = []
        for key in sorted(query, key=str):
            name = encode_component(key)
            value = query[key]
            if isinstance(value, (list, tuple)):
                parts.extend(f"{name}={_encode_value(item)}" for item in value)
            else:
                parts.append(f"{name}={_encode_value(value)}")
        return "&".join(parts)

    def __repr__(self) -> str:
        return "DefaultQueryCodec()"
