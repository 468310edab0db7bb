"""Block node."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from xtmpl.nodes.base import Node
from xtmpl.nodes.variables import Operand, Ref

BlockRunner = Callable[[Sequence[Any]], Iterable[Mapping[str, Any]]]


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Block helper region: {{#helper arg ...}}...{{#else}}...{{/helper}}

    ``run`` receives the values of ``operands`` and yields one mapping of new
    locals per body pass. ``else_`` renders when ``run`` yields nothing.

    Attributes:
        helper: Block helper name.
        operands: Resolved references passed to ``run``.
        run: Render-time pass generator returned by the helper.
        scope: Scope the body resolves bare paths against.
        alias: Per-pass name the scope value is also stored under, so nested
            blocks can reach it after an inner block rebinds the same local.
        body: Child node indices.
        else_: Child node indices of the ``else`` branch.
    """

    helper: str
    operands: tuple[Operand, ...]
    run: BlockRunner
    scope: Ref
    alias: str | None = None
    body: tuple[int, ...] = ()
    else_: tuple[int, ...] | None = None
