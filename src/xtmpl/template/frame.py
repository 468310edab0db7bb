"""Render-time frames and null-propagating value access.

Each block pass gets a Frame chained to the frame the block was entered
from. Locals set by Bind nodes and by block helpers live in the innermost
frame; lookups walk outward.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Sized
from typing import Any

from xtmpl.nodes import Const, Operand, Ref


def get_item(obj: Any, key: str | int) -> Any:
    """Read ``key`` from ``obj``; missing anything yields None.

    - Mappings: ``obj[key]`` (an integer key also tries its string form)
    - Sequences: integer keys index from 0
    - Other objects: public attributes
    - ``length`` falls back to ``len(obj)`` for sized values

    Example:
        >>> get_item({"a": [1, 2]}, "a")
        [1, 2]
        >>> get_item([1, 2], 5) is None
        True
        >>> get_item("abc", "length")
        3
    """
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        if key in obj:
            return obj[key]
        if isinstance(key, int):
            return obj.get(str(key))
        if key == "length":
            return len(obj)
        return None
    if isinstance(key, int):
        if isinstance(obj, Sequence) and 0 <= key < len(obj):
            return obj[key]
        return None
    if key.startswith("_"):
        return None
    value = getattr(obj, key, None)
    if value is None and key == "length" and isinstance(obj, Sized):
        return len(obj)
    return value


class Frame:
    """One level of render-time locals."""

    __slots__ = ("_locals", "_parent")

    def __init__(self, parent: Frame | None = None, values: Mapping[str, Any] | None = None):
        self._parent = parent
        self._locals: dict[str, Any] = dict(values) if values else {}

    def lookup(self, name: str) -> Any:
        frame: Frame | None = self
        while frame is not None:
            if name in frame._locals:
                return frame._locals[name]
            frame = frame._parent
        return None

    def set(self, name: str, value: Any) -> None:
        self._locals[name] = value

    def resolve(self, ref: Ref) -> Any:
        value = self.lookup(ref.root)
        for segment in ref.path:
            if value is None:
                return None
            value = get_item(value, segment)
        return value

    def evaluate(self, operand: Operand) -> Any:
        if isinstance(operand, Const):
            return operand.value
        return self.resolve(operand)
