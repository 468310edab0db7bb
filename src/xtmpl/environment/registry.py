"""Helper registry for xtmpl environments.

Two name -> function tables: block helpers (control structures that open a
scope and a body region) and inline helpers (single-value transformations).

Block helpers run at compile time and describe the block::

    def helper(scope: str, args: list[str]) -> BlockResult

Inline helpers run at render time with the resolved argument values::

    def helper(*values) -> Any

All mutations use copy-on-write: readers holding the previous dict are never
affected by a concurrent registration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from xtmpl.environment.exceptions import UnknownHelperError
from xtmpl.nodes import BlockRunner

logger = logging.getLogger(__name__)


def _single_pass(values: Sequence[Any]) -> list[dict[str, Any]]:
    return [{}]


@dataclass(frozen=True, slots=True)
class BlockResult:
    """What a block helper returns for one ``{{#name ...}}`` marker.

    Attributes:
        scope: Scope for the body. ``""`` keeps the current scope, a
            ``$``-prefixed name is a local yielded by ``run``, anything else
            is a path relative to the current scope.
        variables: Paths relative to the current scope; their values are
            passed to ``run`` in the same order.
        run: Called once per render of the block with the variable values;
            yields one mapping of new locals per body pass.
        no_function: Branch marker. Continues the enclosing block as its
            alternate body instead of opening a new block.
    """

    scope: str = ""
    variables: Sequence[str] = ()
    run: BlockRunner = _single_pass
    no_function: bool = False


BlockHelper = Callable[[str, list[str]], BlockResult]
InlineHelper = Callable[..., Any]


class HelperRegistry:
    """Block and inline helper tables.

    Example:
        >>> registry = HelperRegistry()
        >>> registry.register_inline_helper("upper", lambda s: str(s).upper())
        >>> registry.inline("upper")("hi")
        'HI'

    """

    __slots__ = ("_block", "_inline")

    def __init__(self) -> None:
        self._block: dict[str, BlockHelper] = {}
        self._inline: dict[str, InlineHelper] = {}

    def register_block_helper(self, name: str, fn: BlockHelper) -> None:
        """Register (or replace) a block helper."""
        _check_name(name, fn)
        new = self._block.copy()
        new[name] = fn
        self._block = new
        logger.debug(f"Registered block helper {name!r}")

    def register_inline_helper(self, name: str, fn: InlineHelper) -> None:
        """Register (or replace) an inline helper."""
        _check_name(name, fn)
        new = self._inline.copy()
        new[name] = fn
        self._inline = new
        logger.debug(f"Registered inline helper {name!r}")

    def unregister_block_helper(self, name: str) -> None:
        new = self._block.copy()
        del new[name]
        self._block = new

    def unregister_inline_helper(self, name: str) -> None:
        new = self._inline.copy()
        del new[name]
        self._inline = new

    def has_block(self, name: str) -> bool:
        return name in self._block

    def has_inline(self, name: str) -> bool:
        return name in self._inline

    def block(self, name: str) -> BlockHelper:
        """Look up a block helper.

        Raises:
            UnknownHelperError: No block helper with that name.
        """
        try:
            return self._block[name]
        except KeyError:
            raise UnknownHelperError(name, "block") from None

    def inline(self, name: str) -> InlineHelper:
        """Look up an inline helper.

        Raises:
            UnknownHelperError: No inline helper with that name.
        """
        try:
            return self._inline[name]
        except KeyError:
            raise UnknownHelperError(name, "inline") from None

    @property
    def block_helpers(self) -> Mapping[str, BlockHelper]:
        """Read-only view of the current block helper table."""
        return MappingProxyType(self._block)

    @property
    def inline_helpers(self) -> Mapping[str, InlineHelper]:
        """Read-only view of the current inline helper table."""
        return MappingProxyType(self._inline)

    def copy(self) -> HelperRegistry:
        """Return an independent registry with the same helpers."""
        new = HelperRegistry()
        new._block = self._block.copy()
        new._inline = self._inline.copy()
        return new


def _check_name(name: str, fn: Callable[..., Any]) -> None:
    if not isinstance(name, str) or not name or any(ch.isspace() for ch in name):
        raise ValueError(f"Helper name must be a non-empty string without whitespace, got {name!r}")
    if not callable(fn):
        raise TypeError(f"Helper {name!r} must be callable, got {type(fn).__name__}")
