"""Variable references and bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from xtmpl.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Ref:
    """Access path over render-time locals: ``root`` then ``path`` segments.

    Integer segments are index access, string segments are property access.

    Example:
        >>> str(Ref("list", (0, "name")))
        'list[0].name'
    """

    root: str
    path: tuple[str | int, ...] = ()

    def child(self, *segments: str | int) -> Ref:
        return Ref(self.root, self.path + segments)

    def __str__(self) -> str:
        parts = [self.root]
        for segment in self.path:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            else:
                parts.append(f".{segment}")
        return "".join(parts)


@dataclass(frozen=True, slots=True)
class Const:
    """Literal operand: string, number, boolean or null."""

    value: Any

    def __str__(self) -> str:
        if self.value is None:
            return "null"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, str):
            return '"' + self.value.replace("\\", "\\\\").replace('"', '\\"') + '"'
        return str(self.value)


Operand = Ref | Const


@dataclass(frozen=True, slots=True)
class Bind(Node):
    """Local binding: ``target = source[key]``, evaluated once per pass."""

    target: str
    source: Ref
    key: str | int
