"""Shared type aliases used across routable modules."""

from collections.abc import Mapping
from typing import Any, TypeAlias

# A single query value, or the repeated values of one key
QueryValue: TypeAlias = str | list[str]

# Parsed query string
QueryMapping: TypeAlias = dict[str, QueryValue]

# A matched path parameter: repeated segments come back as a list, and
# segments that did not take part in the match as None
ParamValue: TypeAlias = str | list[str] | None

# Path parameters supplied to a builder; unnamed segments use int keys
BuildParams: TypeAlias = Mapping[str | int, Any]

# Route definition as supplied by the caller
RouteDefinition: TypeAlias = Mapping[str, Any]
