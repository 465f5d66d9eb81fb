"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, no
string-key option dicts.
"""

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from routable.http.query import QueryCodec
    from routable.routing.pattern import BuilderCache

#: Environment variable holding the runtime mode.
ENV_VAR = "ROUTABLE_ENV"


def is_production() -> bool:
    """Return True when ``ROUTABLE_ENV`` is set to ``production``.

    A missing or blank value means development.
    """
    return os.environ.get(ENV_VAR, "").strip().lower() == "production"


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(freeze=False, query_codec=MyCodec())
    """

    # Deep-freeze routes after construction. None follows ROUTABLE_ENV:
    # frozen everywhere except production.
    freeze: bool | None = None

    # Query string parse/stringify. None selects DefaultQueryCodec.
    query_codec: "QueryCodec | None" = None

    # Compiled path builders, keyed by pattern. None gives each router its own.
    builder_cache: "BuilderCache | None" = None

    def should_freeze(self) -> bool:
        """Resolve the effective freeze decision."""
        if self.freeze is not None:
            return self.freeze
        return not is_production()
