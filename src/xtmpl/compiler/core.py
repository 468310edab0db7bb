"""xtmpl Compiler core.

The Compiler scans template source left to right, resolves each marker and
emits procedure nodes into one flat list.

Design Principles:
1. **No code generation**: the procedure is a node list walked by
   Template, never source text handed to ``exec()``
2. **Hoisted bindings**: each referenced property is read into a local once
   per scope (see ``VariableBinder``)
3. **Compile-time failure**: unknown helpers and unbalanced blocks abort
   compilation; no partial template is returned
4. **O(1) dispatch**: fragment type name -> handler dict

Three stacks are threaded through the scan:

    ```
    scope_stack   [$data, b, $value@2]          scope references
    bound_stack   [{a: ...}, {d: ...}, {}]       bindings per scope
    open blocks   [<with b>, <for d.items>]     pending Block nodes
    ```

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from xtmpl.compiler.binder import BoundSet, VariableBinder
from xtmpl.compiler.listing import render_listing
from xtmpl.compiler.resolver import (
    BranchFragment,
    CallFragment,
    CloseFragment,
    CodeResolver,
    OpenFragment,
    OutputFragment,
    Resolution,
)
from xtmpl.environment.exceptions import (
    TemplateSyntaxError,
    UnclosedMarkerError,
    UnmatchedBlockCloseError,
)
from xtmpl.nodes import Block, BlockRunner, Call, Data, Node, Operand, Output, Ref
from xtmpl.template import Template
from xtmpl.utils.constants import ROOT_NAME

if TYPE_CHECKING:
    from collections.abc import Callable

    from xtmpl.environment.config import Config
    from xtmpl.environment.registry import HelperRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _PendingBlock:
    """A Block whose children are still being compiled."""

    index: int
    lineno: int
    col_offset: int
    parent: int
    helper: str
    operands: tuple[Operand, ...]
    run: BlockRunner
    scope: Ref
    alias: str | None
    outer_scope: Ref
    body: list[int] = field(default_factory=list)
    else_: list[int] | None = None

    def freeze(self) -> Block:
        return Block(
            self.lineno,
            self.col_offset,
            self.parent,
            helper=self.helper,
            operands=self.operands,
            run=self.run,
            scope=self.scope,
            alias=self.alias,
            body=tuple(self.body),
            else_=tuple(self.else_) if self.else_ is not None else None,
        )


class Compiler:
    """Compile template source into a Template.

    A Compiler is single use: create one per ``compile()`` call. It reads the
    helper registry and a config snapshot; it mutates neither.

    Example:
        >>> from xtmpl.environment import Environment
        >>> env = Environment()
        >>> compiler = Compiler(env.helpers, env.settings)
        >>> compiler.compile("Hello, {{name}}!")({"name": "World"})
        'Hello, World!'

    """

    __slots__ = (
        "_binder",
        "_body",
        "_bound_stack",
        "_config",
        "_dispatch",
        "_helpers",
        "_name",
        "_nodes",
        "_open",
        "_resolver",
        "_scope_stack",
        "_source",
    )

    def __init__(self, helpers: HelperRegistry, config: Config):
        self._helpers = helpers
        self._config = config
        self._resolver = CodeResolver(helpers, config)
        self._binder = VariableBinder()
        self._name: str | None = None
        self._source = ""
        self._nodes: list[Node | None] = []
        self._body: list[int] = []
        self._scope_stack: list[Ref] = [Ref(ROOT_NAME)]
        self._bound_stack: list[BoundSet] = [{}]
        self._open: list[_PendingBlock] = []
        self._dispatch: dict[str, Callable[[Resolution, int, int], None]] = {
            "OpenFragment": self._compile_open,
            "CloseFragment": self._compile_close,
            "BranchFragment": self._compile_branch,
            "OutputFragment": self._compile_output,
            "CallFragment": self._compile_call,
        }

    def compile(self, source: str, name: str | None = None) -> Template:
        """Compile ``source`` (surrounding whitespace is stripped).

        Raises:
            UnknownHelperError: A marker names an unregistered helper.
            UnmatchedBlockCloseError: Close marker mismatch or unclosed block.
            UnclosedMarkerError: Start tag without end tag.
            TemplateSyntaxError: Any other malformed marker.
        """
        self._name = name
        self._source = source = source.strip()
        start_tag = self._config.start_tag
        end_tag = self._config.end_tag

        chunks = source.split(start_tag)
        self._emit_data(chunks[0], 0)
        offset = len(chunks[0])
        for chunk in chunks[1:]:
            lineno, col_offset = self._location(offset)
            body, found, trailing = chunk.partition(end_tag)
            if not found:
                raise UnclosedMarkerError(
                    f"Missing {end_tag!r} for marker opened with {start_tag!r}",
                    lineno=lineno,
                    name=name,
                    source=source,
                    col_offset=col_offset,
                )
            try:
                resolution = self._resolver.resolve(body, str(self._scope_stack[-1]))
                self._dispatch[type(resolution.fragment).__name__](resolution, lineno, col_offset)
            except TemplateSyntaxError as e:
                raise e.locate(lineno, col_offset, name, source) from None
            offset += len(start_tag) + len(body) + len(end_tag)
            self._emit_data(trailing, offset)
            offset += len(trailing)

        if self._open:
            pending = self._open[-1]
            raise UnmatchedBlockCloseError(
                f"Unclosed block '{pending.helper}'",
                expected=pending.helper,
                lineno=pending.lineno,
                name=name,
                source=source,
                col_offset=pending.col_offset,
            )

        nodes: tuple[Node, ...] = tuple(self._nodes)  # type: ignore[arg-type]
        body = tuple(self._body)
        logger.debug(f"Compiled template {name or '<template>'}: {len(nodes)} nodes")
        return Template(
            nodes,
            body,
            self._helpers,
            name=name,
            source=source,
            procedure=render_listing(nodes, body, self._config),
        )

    # =========================================================================
    # Fragment handlers
    # =========================================================================

    def _compile_open(self, resolution: Resolution, lineno: int, col_offset: int) -> None:
        fragment = resolution.fragment
        assert isinstance(fragment, OpenFragment)
        outer_scope = self._scope_stack[-1]

        # Scope: "" keeps the current one, anything else resolves like a
        # variable path ("$value" is a helper local and is not bound).
        scope_path = resolution.scope
        paths = list(resolution.variables)
        if scope_path:
            paths.append(scope_path)
        refs = self._bind(paths, lineno, col_offset)
        scope = refs.pop() if scope_path else outer_scope

        # Helper locals can be shadowed by a nested block of the same kind,
        # so paths climbing out of this scope go through a unique alias.
        alias = None
        if scope_path.startswith("$") and scope.root != ROOT_NAME:
            alias = self._binder.fresh(scope.root)

        index = self._reserve()
        pending = _PendingBlock(
            index=index,
            lineno=lineno,
            col_offset=col_offset,
            parent=self._parent(),
            helper=fragment.helper,
            operands=tuple(refs),
            run=fragment.run,
            scope=scope,
            alias=alias,
            outer_scope=outer_scope,
        )
        self._attach(index)
        self._open.append(pending)
        self._scope_stack.append(Ref(alias) if alias else scope)
        self._bound_stack.append({})
        if fragment.self_closing:
            self._close(fragment.helper)

    def _compile_close(self, resolution: Resolution, lineno: int, col_offset: int) -> None:
        fragment = resolution.fragment
        assert isinstance(fragment, CloseFragment)
        self._close(fragment.helper)

    def _compile_branch(self, resolution: Resolution, lineno: int, col_offset: int) -> None:
        fragment = resolution.fragment
        assert isinstance(fragment, BranchFragment)
        if not self._open:
            raise TemplateSyntaxError(f"'{fragment.helper}' outside of a block")
        pending = self._open[-1]
        if pending.else_ is not None:
            raise TemplateSyntaxError(f"Block '{pending.helper}' already has an '{fragment.helper}' branch")
        pending.else_ = []
        # The branch runs when the block made no pass: it sees the outer scope
        # and none of the body's bindings.
        self._scope_stack[-1] = pending.outer_scope
        self._bound_stack[-1] = {}

    def _compile_output(self, resolution: Resolution, lineno: int, col_offset: int) -> None:
        fragment = resolution.fragment
        assert isinstance(fragment, OutputFragment)
        if fragment.literal is not None:
            expr: Operand = fragment.literal
        else:
            expr = self._bind(resolution.variables, lineno, col_offset)[0]
        self._emit(Output(lineno, col_offset, self._parent(), expr=expr, escape=fragment.escape))

    def _compile_call(self, resolution: Resolution, lineno: int, col_offset: int) -> None:
        fragment = resolution.fragment
        assert isinstance(fragment, CallFragment)
        refs = self._bind(resolution.variables, lineno, col_offset)
        args = tuple(refs[arg] if isinstance(arg, int) else arg for arg in fragment.args)
        self._emit(
            Call(
                lineno,
                col_offset,
                self._parent(),
                helper=fragment.helper,
                args=args,
                escape=fragment.escape,
            )
        )

    # =========================================================================
    # Stacks and node list
    # =========================================================================

    def _close(self, helper: str) -> None:
        if not self._open:
            raise UnmatchedBlockCloseError(
                f"Close marker '/{helper}' without an open block", found=helper
            )
        pending = self._open[-1]
        if pending.helper != helper:
            raise UnmatchedBlockCloseError(
                f"Close marker '/{helper}' does not match open block '{pending.helper}'"
                f" (line {pending.lineno})",
                expected=pending.helper,
                found=helper,
            )
        self._open.pop()
        self._scope_stack.pop()
        self._bound_stack.pop()
        self._nodes[pending.index] = pending.freeze()

    def _bind(self, paths: tuple[str, ...] | list[str], lineno: int, col_offset: int) -> list[Ref]:
        binds, refs = self._binder.bind(
            paths,
            self._bound_stack,
            self._scope_stack,
            lineno=lineno,
            col_offset=col_offset,
            parent=self._parent(),
        )
        for bind in binds:
            self._emit(bind)
        return refs

    def _emit_data(self, text: str, offset: int) -> None:
        if text:
            lineno, col_offset = self._location(offset)
            self._emit(Data(lineno, col_offset, self._parent(), value=text))

    def _emit(self, node: Node) -> None:
        index = self._reserve()
        self._nodes[index] = node
        self._attach(index)

    def _reserve(self) -> int:
        self._nodes.append(None)
        return len(self._nodes) - 1

    def _attach(self, index: int) -> None:
        if not self._open:
            self._body.append(index)
            return
        pending = self._open[-1]
        if pending.else_ is not None:
            pending.else_.append(index)
        else:
            pending.body.append(index)

    def _parent(self) -> int:
        return self._open[-1].index if self._open else -1

    def _location(self, offset: int) -> tuple[int, int]:
        lineno = self._source.count("\n", 0, offset) + 1
        col_offset = offset - (self._source.rfind("\n", 0, offset) + 1)
        return lineno, col_offset
