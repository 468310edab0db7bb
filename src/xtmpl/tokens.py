"""Lexical classification of marker arguments.

Marker bodies are split on whitespace. Each argument is a literal (quoted
string, number, ``true``, ``false``, ``null``), the ``this`` keyword, or a
variable path.
"""

from __future__ import annotations

import re

from xtmpl.nodes import Const

_STRING_RE = re.compile(r"""^(['"])(.*)\1$""", re.DOTALL)
_INT_RE = re.compile(r"^-?\d+$")
_TOKEN_RE = re.compile(r"""(?:"[^"]*"|'[^']*'|[^\s"']|["'])+""")
_FLOAT_RE = re.compile(r"^-?(?:\d+\.\d*|\.\d+)$")

_KEYWORDS: dict[str, Const] = {
    "true": Const(True),
    "false": Const(False),
    "null": Const(None),
}

# ./a  /a  ../../a.b  $value.name  list.0
PATH_RE = re.compile(r"^(?:\./|/|(?:\.\./)+)?[$\w]+(?:\.[$\w]+)*$")


def parse_literal(token: str) -> Const | None:
    """Return the literal ``token`` denotes, or None if it is not a literal.

    Example:
        >>> parse_literal("'a'")
        Const(value='a')
        >>> parse_literal("3.5")
        Const(value=3.5)
        >>> parse_literal("name") is None
        True
    """
    if token in _KEYWORDS:
        return _KEYWORDS[token]
    match = _STRING_RE.match(token)
    if match:
        return Const(match.group(2))
    if _INT_RE.match(token):
        return Const(int(token))
    if _FLOAT_RE.match(token):
        return Const(float(token))
    return None


def is_path(token: str) -> bool:
    return PATH_RE.match(token) is not None


def split_args(body: str) -> list[str]:
    """Split a marker body into whitespace-separated tokens.

    Quoted strings may contain whitespace.

    Example:
        >>> split_args("fmt 'a b' name")
        ['fmt', "'a b'", 'name']
    """
    return _TOKEN_RE.findall(body)
