"""HTML escaping and value stringification.

Both escape functions run a single pass via ``str.translate()``.

``html_escape`` backs the built-in ``$escape`` inline helper used for
``{{ path }}`` output. ``escape_html`` is the broader general-purpose variant
that also encodes backslashes.
"""

from __future__ import annotations

from typing import Any

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
        "/": "&#x2f;",
    }
)

_ESCAPE_TABLE_FULL = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
        "/": "&#x2f;",
        "\\": "&#x5c;",
    }
)


def to_str(value: Any) -> str:
    """Convert a rendered value to text.

    ``None`` renders as the empty string, booleans use the template literal
    spelling (``true``/``false``) and lists/tuples are joined with commas.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(to_str(item) for item in value)
    return str(value)


def html_escape(value: Any) -> str:
    """Escape ``& < > " ' /`` for safe inclusion in HTML.

    Example:
        >>> html_escape("<a href='/x'>")
        '&lt;a href=&#39;&#x2f;x&#39;&gt;'
    """
    return to_str(value).translate(_ESCAPE_TABLE)


def escape_html(value: Any) -> str:
    """Escape like ``html_escape`` but also encode backslashes.

    Quotes use the hexadecimal reference ``&#x27;``.
    """
    return to_str(value).translate(_ESCAPE_TABLE_FULL)


def trim(value: Any) -> str:
    """Strip leading and trailing whitespace from the text of ``value``."""
    return to_str(value).strip()
