"""Path resolution against the compile-time scope stack.

Path syntax:
    name.sub       relative to the current scope
    ./name         same as ``name``
    ../name        one scope up per ``../``
    /name          relative to the root data context
    this, a.this   the scope (or ``a``) itself
    $value.name    a helper-introduced local such as ``$key``/``$value``;
                   only the innermost value is visible, ``../$key`` is an error
    list.3         digit-only segments are index access

The first property of a relative path is what gets bound to a local; a
digit-only first property is bound under the placeholder ``$n<digits>`` since
a bare number cannot name a local.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from xtmpl.environment.exceptions import TemplateSyntaxError
from xtmpl.nodes import Ref

NUMERIC_PREFIX = "$n"


def _is_index(name: str) -> bool:
    return name.isascii() and name.isdigit()


def placeholder(name: str) -> str:
    """Local identifier for property ``name`` (``"3"`` -> ``"$n3"``)."""
    return NUMERIC_PREFIX + name if _is_index(name) else name


def unwrap_placeholder(identifier: str) -> str | int:
    """Property key behind a local identifier (``"$n3"`` -> ``3``)."""
    if identifier.startswith(NUMERIC_PREFIX) and _is_index(identifier[len(NUMERIC_PREFIX) :]):
        return int(identifier[len(NUMERIC_PREFIX) :])
    return identifier


def _segment(name: str) -> str | int:
    return int(name) if _is_index(name) else name


@dataclass(frozen=True, slots=True)
class ResolvedPath:
    """A path split into the scope it starts from and what follows.

    Attributes:
        base: Scope reference the path is read from.
        name: First property, to be bound as a local. None when the path
            refers to ``base`` itself or to a helper local.
        rest: Remaining segments accessed from the bound local.
    """

    base: Ref
    name: str | None
    rest: tuple[str | int, ...] = ()

    @property
    def identifier(self) -> str:
        assert self.name is not None
        return placeholder(self.name)

    @property
    def key(self) -> str | int:
        assert self.name is not None
        return unwrap_placeholder(self.identifier)

    def direct(self) -> Ref:
        """Reference for a path that needs no binding."""
        return self.base.child(*self.rest)


def resolve_path(path: str, scope_stack: Sequence[Ref]) -> ResolvedPath:
    """Resolve ``path`` against ``scope_stack`` (innermost scope last).

    Raises:
        TemplateSyntaxError: Empty segment, ``../`` above the root scope, or a
            helper local addressed through ``../`` or ``/``.

    Example:
        >>> stack = [Ref("$data"), Ref("b")]
        >>> resolve_path("../a.x", stack)
        ResolvedPath(base=Ref(root='$data', path=()), name='a', rest=('x',))
    """
    if path.startswith("./$"):
        path = path[2:]
    if path.startswith("$"):
        root, *rest = path.split(".")
        return ResolvedPath(Ref(root), None, tuple(_segment(s) for s in rest))

    if path.startswith("/"):
        base = scope_stack[0]
        remainder = path[1:]
    elif path.startswith("../"):
        remainder = path
        depth = 0
        while remainder.startswith("../"):
            depth += 1
            remainder = remainder[3:]
        if depth >= len(scope_stack):
            raise TemplateSyntaxError(
                f"Path {path!r} climbs {depth} scope(s) but only {len(scope_stack) - 1} enclose it"
            )
        base = scope_stack[-1 - depth]
    elif path.startswith("./"):
        base = scope_stack[-1]
        remainder = path[2:]
    else:
        base = scope_stack[-1]
        remainder = path

    segments = remainder.split(".") if remainder else []
    if segments and segments[0].startswith("$"):
        # Locals live in pass frames, not in the scopes ../ and / climb to.
        raise TemplateSyntaxError(
            f"Helper local {segments[0]!r} cannot be reached through {path!r}; "
            "use '../this' for an enclosing loop value"
        )
    if segments and segments[0] == "this":
        segments = segments[1:]
    if segments and segments[-1] == "this":
        segments.pop()
    if any(not segment for segment in segments):
        raise TemplateSyntaxError(f"Invalid path {path!r}")
    if not segments:
        return ResolvedPath(base, None)

    name, *rest = segments
    return ResolvedPath(base, name, tuple(_segment(s) for s in rest))
