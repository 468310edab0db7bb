"""Procedure listing.

Renders a compiled node list as readable pseudo-code, one statement per
line. This is the inspection view of a Template (``template.procedure``);
rendering never reads it.

    ```
    var $html = "";
    var $escape = $helper["$escape"];
    var list = $data["list"];
    #for(list) {
        var $value@1 = $value;
        $html += $escape($value);
    }
    return $html;
    ```

"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from xtmpl.environment.config import Config
from xtmpl.nodes import Bind, Block, Call, Data, Node, Output

_INDENT = "    "


def quote(text: str) -> str:
    """Double-quoted literal with backslash, quote, tab, CR and LF escaped."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\t", "\\t")
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )
    return f'"{escaped}"'


def _key(key: str | int) -> str:
    return f"[{key}]" if isinstance(key, int) else f"[{quote(key)}]"


def _statements(node: Node, acc: str) -> list[str]:
    if isinstance(node, Data):
        return [f"{acc} += {quote(node.value)};"]
    if isinstance(node, Bind):
        return [f"var {node.target} = {node.source}{_key(node.key)};"]
    if isinstance(node, Output):
        value = str(node.expr)
        return [f"{acc} += {f'$escape({value})' if node.escape else value};"]
    if isinstance(node, Call):
        call = f'$helper[{quote(node.helper)}]({", ".join(str(arg) for arg in node.args)})'
        return [f"{acc} += {f'$escape({call})' if node.escape else call};"]
    raise TypeError(f"Unexpected node {type(node).__name__}")


def _block_items(node: Block, pad: str) -> list[int | str]:
    """Child indices followed by the closing lines, in output order."""
    items: list[int | str] = list(node.body)
    if node.else_ is not None:
        items.append(f"{pad}}} else {{")
        items.extend(node.else_)
    items.append(f"{pad}}}")
    return items


def render_listing(nodes: Sequence[Node], body: Sequence[int], config: Config) -> str:
    acc = config.result_var_name
    lines = [f'var {acc} = "";']
    if any(isinstance(node, (Output, Call)) and node.escape for node in nodes):
        lines.append('var $escape = $helper["$escape"];')

    stack: list[tuple[Iterator[int | str], int]] = [(iter(body), 0)]
    while stack:
        items, depth = stack[-1]
        item = next(items, None)
        if item is None:
            stack.pop()
            continue
        if isinstance(item, str):
            lines.append(item)
            continue
        node = nodes[item]
        pad = _INDENT * depth
        if not isinstance(node, Block):
            lines.extend(pad + line for line in _statements(node, acc))
            continue
        operands = ", ".join(str(op) for op in node.operands)
        lines.append(f"{pad}#{node.helper}({operands}) {{")
        if node.alias:
            lines.append(f"{pad}{_INDENT}var {node.alias} = {node.scope};")
        stack.append((iter(_block_items(node, pad)), depth + 1))

    lines.append(f"return {acc};")
    return "\n".join(lines) + "\n"
