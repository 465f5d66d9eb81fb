"""Deep read-only views of route configuration.

Mappings become ``MappingProxyType`` over a frozen copy, lists and
tuples become tuples, sets become frozensets. Anything else (strings,
compiled regexes, callables) is already immutable or opaque and is
returned as-is.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


def deep_freeze(value: Any) -> Any:
    """Return a read-only equivalent of *value*.

    Writes to the result raise ``TypeError``. The input is not modified.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({k: deep_freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(deep_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(deep_freeze(v) for v in value)
    return value
