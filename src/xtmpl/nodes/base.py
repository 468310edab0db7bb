"""Base node class for the xtmpl procedure representation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all procedure nodes.

    A compiled template keeps its nodes in one flat tuple. Containers refer to
    their children by index and every node points back at its enclosing block,
    so rendering can walk the tree iteratively.

    Attributes:
        lineno: 1-based source line of the marker that produced the node.
        col_offset: 0-based column of that marker.
        parent: Index of the enclosing Block, or -1 at top level.
    """

    lineno: int
    col_offset: int
    parent: int
