"""Escaping of the five markup-reserved characters.

Both functions work in a single left-to-right pass. ``unescape`` is
deliberately lossy for ampersands that do not start one of the five known
entities: the ampersand survives, but everything consumed up to the next
``;`` (or the end of the text) is dropped.

    >>> escape('<a href="x">')
    '&lt;a href=&quot;x&quot;&gt;'
    >>> unescape("a&foo;b")
    'a&b'
"""

from typing import Dict

ENTITY_NAMES: Dict[str, str] = {
    '"': "quot",
    "'": "apos",
    "&": "amp",
    "<": "lt",
    ">": "gt",
}

RESERVED_CHARACTERS = frozenset(ENTITY_NAMES)

_ESCAPE_TABLE = {ord(char): f"&{name};" for char, name in ENTITY_NAMES.items()}
_ENTITY_CHARACTERS: Dict[str, str] = {
    name: char for char, name in ENTITY_NAMES.items()
}


def _require_text(text: str) -> None:
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")


def needs_escaping(text: str) -> bool:
    """Check whether ``text`` contains any reserved character."""
    _require_text(text)
    return any(char in RESERVED_CHARACTERS for char in text)


def escape(text: str) -> str:
    """Replace reserved characters with their named entities.

    Args:
        text: Literal text

    Returns:
        Text safe to place inside element content or a quoted attribute value
    """
    _require_text(text)
    # str.translate maps each input character once and never rescans output
    return text.translate(_ESCAPE_TABLE)


def unescape(text: str) -> str:
    """Convert the five named entities back into literal characters.

    Unknown or unterminated entities collapse to a bare ``&``.

    Args:
        text: Escaped text

    Returns:
        Literal text
    """
    _require_text(text)
    if "&" not in text:
        return text

    parts = []
    position = 0
    length = len(text)
    while position < length:
        amp = text.find("&", position)
        if amp == -1:
            parts.append(text[position:])
            break

        parts.append(text[position:amp])
        semicolon = text.find(";", amp + 1)
        if semicolon == -1:
            name = text[amp + 1:]
            position = length
        else:
            name = text[amp + 1:semicolon]
            position = semicolon + 1

        parts.append(_ENTITY_CHARACTERS.get(name, "&"))

    return "".join(parts)
