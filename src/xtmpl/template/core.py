"""xtmpl Template: compiled template object ready for rendering.

Architecture:
    ```
    Template
    ├── _nodes: tuple[Node, ...]     # Flat procedure, children by index
    ├── _body: tuple[int, ...]       # Top-level node indices
    ├── _helpers: HelperRegistry     # Live registry (inline helpers by name)
    ├── _procedure: str              # Listing for inspection
    └── _name, _source               # For error messages
    ```

Rendering walks the node list with an explicit work stack, so nesting depth
is not limited by the Python recursion limit. Output is collected in a list
and joined once at the end.

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state (frames, buffer, work stack)
- Multiple threads can call ``render()`` concurrently, provided helpers
  are not being registered at the same time

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from xtmpl.environment.exceptions import TemplateRuntimeError
from xtmpl.nodes import Bind, Block, Call, Data, Node, Output
from xtmpl.template.frame import Frame, get_item
from xtmpl.utils.constants import ESCAPE_HELPER, ROOT_NAME
from xtmpl.utils.html import to_str

if TYPE_CHECKING:
    from xtmpl.environment.registry import HelperRegistry


class _Region:
    """Work item: remaining child indices of one body, in one frame."""

    __slots__ = ("children", "frame")

    def __init__(self, children: Iterator[int], frame: Frame):
        self.children = children
        self.frame = frame


class _Passes:
    """Work item: remaining passes of one block."""

    __slots__ = ("block", "entered", "frame", "passes")

    def __init__(self, block: Block, passes: Iterator[Mapping[str, Any]], frame: Frame):
        self.block = block
        self.passes = passes
        self.frame = frame
        self.entered = False


class Template:
    """Compiled template ready for rendering.

    Call it (or ``render()``) with a data context; the context may be any
    value, ``{{this}}`` renders it directly.

    Example:
            >>> import xtmpl
            >>> t = xtmpl.compile("Hello, {{name}}!")
            >>> t({"name": "World"})
            'Hello, World!'
            >>> t.render(name="World")
            'Hello, World!'

    """

    __slots__ = ("_body", "_escapes", "_helpers", "_name", "_nodes", "_procedure", "_source")

    def __init__(
        self,
        nodes: tuple[Node, ...],
        body: tuple[int, ...],
        helpers: HelperRegistry,
        *,
        name: str | None = None,
        source: str = "",
        procedure: str = "",
    ):
        self._nodes = nodes
        self._body = body
        self._helpers = helpers
        self._name = name
        self._source = source
        self._procedure = procedure
        self._escapes = any(isinstance(node, (Output, Call)) and node.escape for node in nodes)

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def source(self) -> str:
        """Template source as compiled (surrounding whitespace stripped)."""
        return self._source

    @property
    def procedure(self) -> str:
        """Listing of the compiled procedure, for debugging."""
        return self._procedure

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render template with given context.

        Args:
            *args: Optional single context value (any type)
            **kwargs: Context variables as keyword arguments, merged over a
                mapping context

        Returns:
            Rendered template as string
        """
        if len(args) > 1:
            raise TypeError(f"render() takes at most 1 positional argument ({len(args)} given)")
        if not args:
            context: Any = kwargs
        elif kwargs:
            if not isinstance(args[0], Mapping):
                raise TypeError("Keyword arguments require a mapping context")
            context = {**args[0], **kwargs}
        else:
            context = args[0]
        return self._render(context)

    def __call__(self, context: Any = None) -> str:
        return self._render({} if context is None else context)

    def _render(self, context: Any) -> str:
        nodes = self._nodes
        inline = self._helpers.inline_helpers
        escape = self._lookup_inline(inline, ESCAPE_HELPER, -1) if self._escapes else None

        buf: list[str] = []
        append = buf.append
        root = Frame(None, {ROOT_NAME: context})
        stack: list[_Region | _Passes] = [_Region(iter(self._body), root)]

        while stack:
            item = stack[-1]

            if isinstance(item, _Passes):
                block = item.block
                values = next(item.passes, None)
                if values is None:
                    stack.pop()
                    if not item.entered and block.else_ is not None:
                        stack.append(_Region(iter(block.else_), Frame(item.frame)))
                    continue
                item.entered = True
                frame = Frame(item.frame, values)
                if block.alias is not None:
                    frame.set(block.alias, frame.resolve(block.scope))
                stack.append(_Region(iter(block.body), frame))
                continue

            index = next(item.children, None)
            if index is None:
                stack.pop()
                continue
            node = nodes[index]
            frame = item.frame
            node_type = type(node)

            if node_type is Data:
                append(node.value)
            elif node_type is Bind:
                frame.set(node.target, get_item(frame.resolve(node.source), node.key))
            elif node_type is Output:
                value = frame.evaluate(node.expr)
                append(to_str(escape(value)) if node.escape else to_str(value))
            elif node_type is Call:
                helper = self._lookup_inline(inline, node.helper, index)
                value = helper(*[frame.evaluate(arg) for arg in node.args])
                append(to_str(escape(value)) if node.escape else to_str(value))
            elif node_type is Block:
                values = [frame.evaluate(operand) for operand in node.operands]
                stack.append(_Passes(node, iter(node.run(values)), frame))
            else:
                raise TypeError(f"Unexpected node {node_type.__name__}")

        return "".join(buf)

    def _lookup_inline(self, inline: Mapping[str, Any], name: str, index: int) -> Any:
        try:
            return inline[name]
        except KeyError:
            node = self._nodes[index] if index >= 0 else None
            raise TemplateRuntimeError(
                f"Inline helper '{name}' is not registered",
                template_name=self._name,
                lineno=node.lineno if node is not None else None,
                blocks=self.enclosing_blocks(index),
                suggestion=f"Register it with register_inline_helper({name!r}, fn) before rendering",
            ) from None

    def enclosing_blocks(self, index: int) -> list[str]:
        """Helper names of the blocks around node ``index``, outermost first."""
        names: list[str] = []
        parent = self._nodes[index].parent if index >= 0 else -1
        while parent >= 0:
            block = self._nodes[parent]
            assert isinstance(block, Block)
            names.append(f"#{block.helper} (line {block.lineno})")
            parent = block.parent
        names.reverse()
        return names

    def __str__(self) -> str:
        return self._procedure

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
