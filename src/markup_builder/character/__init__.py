"""Character layer: escaping and unescaping of reserved markup characters."""

from .escaping import (
    ENTITY_NAMES,
    RESERVED_CHARACTERS,
    escape,
    needs_escaping,
    unescape,
)

__all__ = [
    "ENTITY_NAMES",
    "RESERVED_CHARACTERS",
    "escape",
    "needs_escaping",
    "unescape",
]
