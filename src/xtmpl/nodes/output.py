"""Output nodes."""

from __future__ import annotations

from dataclasses import dataclass

from xtmpl.nodes.base import Node
from xtmpl.nodes.variables import Operand


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Literal text between markers."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Interpolation: {{ path }} or {{= path }}"""

    expr: Operand
    escape: bool = True


@dataclass(frozen=True, slots=True)
class Call(Node):
    """Inline helper call: {{ helper arg ... }}

    The helper is looked up by name at render time.
    """

    helper: str
    args: tuple[Operand, ...]
    escape: bool = True
