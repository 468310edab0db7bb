"""Variable hoisting: one local binding per resolved property per scope.

Each scope level owns a dict of ``local identifier -> (source, key)``. A
reference reuses any visible local with the same origin; otherwise a Bind
node is emitted into the current scope. Identifiers are never reused for a
different origin along one scope chain, so a local never shadows one that an
enclosing scope reference depends on.
"""

from __future__ import annotations

from collections.abc import Sequence

from xtmpl.compiler.paths import resolve_path
from xtmpl.nodes import Bind, Ref

Origin = tuple[Ref, str | int]
BoundSet = dict[str, Origin]


class VariableBinder:
    """Turns referenced paths into Bind nodes and local references.

    Renamed identifiers come from a per-instance counter, so use one binder
    per compilation.
    """

    __slots__ = ("_counter",)

    def __init__(self) -> None:
        self._counter = 0

    def fresh(self, name: str) -> str:
        """Return an identifier derived from ``name`` that no path can spell."""
        self._counter += 1
        return f"{name}@{self._counter}"

    def bind(
        self,
        paths: Sequence[str],
        bound_stack: list[BoundSet],
        scope_stack: Sequence[Ref],
        *,
        lineno: int = 0,
        col_offset: int = 0,
        parent: int = -1,
    ) -> tuple[list[Bind], list[Ref]]:
        """Bind ``paths`` in the innermost scope.

        Returns:
            (binds, refs): Bind nodes to emit, in order, and one reference per
            input path for the code that uses it.
        """
        current = bound_stack[-1]
        binds: list[Bind] = []
        refs: list[Ref] = []
        for path in paths:
            resolved = resolve_path(path, scope_stack)
            if resolved.name is None:
                refs.append(resolved.direct())
                continue

            origin: Origin = (resolved.base, resolved.key)
            local = _visible_local(origin, bound_stack)
            if local is None:
                local = resolved.identifier
                if any(local in level for level in bound_stack):
                    local = self.fresh(local)
                current[local] = origin
                binds.append(Bind(lineno, col_offset, parent, local, resolved.base, resolved.key))
            refs.append(Ref(local, resolved.rest))
        return binds, refs


def _visible_local(origin: Origin, bound_stack: list[BoundSet]) -> str | None:
    for level in reversed(bound_stack):
        for local, seen in level.items():
            if seen == origin:
                return local
    return None
