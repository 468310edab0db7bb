"""Procedure nodes produced by the compiler and walked by Template.

All nodes are frozen dataclasses. A compiled template stores them in a single
tuple; Block children are indices into that tuple.
"""

from xtmpl.nodes.base import Node
from xtmpl.nodes.control_flow import Block, BlockRunner
from xtmpl.nodes.output import Call, Data, Output
from xtmpl.nodes.variables import Bind, Const, Operand, Ref

__all__ = [
    "Bind",
    "Block",
    "BlockRunner",
    "Call",
    "Const",
    "Data",
    "Node",
    "Operand",
    "Output",
    "Ref",
]
