"""Percent-encoding of path parameters.

Builders encode values the way browsers encode a URI component;
matchers decode captured text back to the original value.
"""

from urllib.parse import quote, unquote

# Characters ``encodeURIComponent`` leaves alone, beyond quote()'s defaults
COMPONENT_SAFE = "!*'()"

# Characters ``encodeURI`` leaves alone; asterisk segments may span
# several path segments, so "/" survives
ASTERISK_SAFE = COMPONENT_SAFE + "/;,:@&=+$"


def encode_component(value: object) -> str:
    """Percent-encode *value* as a single URI component.

    Booleans render as ``true``/``false``; other non-strings via ``str``.
    """
    if isinstance(value, bool):
        value = "true" if value else "false"
    return quote(str(value), safe=COMPONENT_SAFE)


def encode_asterisk(value: object) -> str:
    """Percent-encode *value* for a wildcard segment, keeping slashes."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return quote(str(value), safe=ASTERISK_SAFE)


def decode_component(value: str | None) -> str | None:
    """Decode a captured segment. ``None`` (segment absent) passes through."""
    if value is None:
        return None
    return unquote(value)


def decode_repeated(value: str, delimiter: str) -> list[str]:
    """Split a repeated segment's capture on *delimiter*, then decode each part.

    Splitting first keeps an encoded delimiter (``%2F``) inside its part.
    """
    return [unquote(part) for part in value.split(delimiter)]
