"""Built-in helpers: if, else, with, for, forin, each and $escape.

Block helpers here are ordinary registrations; custom helpers use the same
``BlockResult`` interface.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any

from xtmpl.environment.exceptions import TemplateSyntaxError
from xtmpl.environment.registry import BlockResult, HelperRegistry
from xtmpl.nodes import Const
from xtmpl.tokens import is_path, parse_literal
from xtmpl.utils.constants import ESCAPE_HELPER
from xtmpl.utils.html import html_escape

KEY_NAME = "$key"
VALUE_NAME = "$value"

# =============================================================================
# Condition expressions for {{#if}}
# =============================================================================

_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "===": operator.eq,
    "!=": operator.ne,
    "!==": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}
_ORDERING = frozenset({"<", "<=", ">", ">="})

# (negate, literal or None, variable slot or -1)
_Operand = tuple[bool, Const | None, int]
_Term = tuple[_Operand, str | None, _Operand | None]


def _parse_operand(token: str, variables: list[str]) -> _Operand:
    negate = False
    while token.startswith("!") and token not in _COMPARISONS:
        negate = not negate
        token = token[1:]
    literal = parse_literal(token)
    if literal is not None:
        return (negate, literal, -1)
    if not is_path(token):
        raise TemplateSyntaxError(f"Invalid operand {token!r} in if condition")
    variables.append(token)
    return (negate, None, len(variables) - 1)


def parse_condition(args: Sequence[str]) -> tuple[list[list[_Term]], list[str]]:
    """Parse ``if`` arguments into OR-groups of AND-ed terms.

    Comparisons bind tighter than ``&&``, which binds tighter than ``||``.

    Returns:
        (groups, variables) where ``variables`` are the referenced paths in
        slot order.

    Raises:
        TemplateSyntaxError: Empty or malformed condition.
    """
    if not args:
        raise TemplateSyntaxError("if requires a condition")

    variables: list[str] = []
    groups: list[list[_Term]] = [[]]
    tokens = list(args)
    pos = 0
    while True:
        if pos >= len(tokens) or tokens[pos] in _COMPARISONS or tokens[pos] in ("&&", "||"):
            raise TemplateSyntaxError(f"Expected operand in if condition: {' '.join(args)!r}")
        left = _parse_operand(tokens[pos], variables)
        pos += 1
        op: str | None = None
        right: _Operand | None = None
        if pos < len(tokens) and tokens[pos] in _COMPARISONS:
            op = tokens[pos]
            pos += 1
            if pos >= len(tokens):
                raise TemplateSyntaxError(f"Missing right operand after {op!r} in if condition")
            right = _parse_operand(tokens[pos], variables)
            pos += 1
        groups[-1].append((left, op, right))

        if pos >= len(tokens):
            return groups, variables
        logic = tokens[pos]
        if logic == "||":
            groups.append([])
        elif logic != "&&":
            raise TemplateSyntaxError(f"Unexpected {logic!r} in if condition; expected && or ||")
        pos += 1


def _operand_value(operand: _Operand, values: Sequence[Any]) -> Any:
    negate, literal, slot = operand
    value = literal.value if literal is not None else values[slot]
    return (not value) if negate else value


def _term_value(term: _Term, values: Sequence[Any]) -> Any:
    left, op, right = term
    left_value = _operand_value(left, values)
    if op is None or right is None:
        return left_value
    right_value = _operand_value(right, values)
    if op not in _ORDERING:
        return _COMPARISONS[op](left_value, right_value)
    # Unordered pairs (None, mixed types) compare false.
    try:
        return _COMPARISONS[op](left_value, right_value)
    except TypeError:
        return False


def evaluate_condition(groups: list[list[_Term]], values: Sequence[Any]) -> bool:
    return any(all(_term_value(term, values) for term in group) for group in groups)


# =============================================================================
# Iteration
# =============================================================================


def iter_own_properties(value: Any) -> Iterable[tuple[Any, Any]]:
    """(key, value) pairs of a mapping, sequence or plain object.

    Mappings keep insertion order, sequences are keyed by index and other
    objects contribute their public instance attributes, read from
    ``__dict__`` or, for slotted classes, from the ``__slots__`` declared
    along the MRO. ``None`` and scalars have no properties.
    """
    if value is None:
        return ()
    if isinstance(value, Mapping):
        return value.items()
    if isinstance(value, Sequence):
        return enumerate(value)
    attrs = getattr(value, "__dict__", None)
    if attrs is not None:
        return ((k, v) for k, v in attrs.items() if not k.startswith("_"))
    return ((name, getattr(value, name)) for name in _slot_names(value))


def _slot_names(value: Any) -> list[str]:
    names: list[str] = []
    for cls in reversed(type(value).__mro__):
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            # Unset slots raise AttributeError on access.
            if not name.startswith("_") and name not in names and hasattr(value, name):
                names.append(name)
    return names


def _for_passes(values: Sequence[Any]) -> Iterator[dict[str, Any]]:
    items = values[0]
    if not isinstance(items, Sequence):
        return
    for index in range(len(items)):
        yield {KEY_NAME: index, VALUE_NAME: items[index]}


def _forin_passes(values: Sequence[Any]) -> Iterator[dict[str, Any]]:
    for key, value in iter_own_properties(values[0]):
        yield {KEY_NAME: key, VALUE_NAME: value}


def _single_arg(helper: str, args: list[str]) -> str:
    if len(args) != 1:
        raise TemplateSyntaxError(f"{helper} expects exactly one argument, got {len(args)}")
    return args[0]


# =============================================================================
# Block helpers
# =============================================================================


def helper_if(scope: str, args: list[str]) -> BlockResult:
    groups, variables = parse_condition(args)

    def run(values: Sequence[Any]) -> list[dict[str, Any]]:
        return [{}] if evaluate_condition(groups, values) else []

    return BlockResult(variables=variables, run=run)


def helper_else(scope: str, args: list[str]) -> BlockResult:
    if args:
        raise TemplateSyntaxError("else takes no arguments")
    return BlockResult(no_function=True)


def helper_with(scope: str, args: list[str]) -> BlockResult:
    arg = _single_arg("with", args)
    return BlockResult(scope=arg, variables=(arg,))


def helper_for(scope: str, args: list[str]) -> BlockResult:
    """Index loop over an array-like value, binding ``$key`` and ``$value``."""
    arg = _single_arg("for", args)
    return BlockResult(scope=VALUE_NAME, variables=(arg,), run=_for_passes)


def helper_forin(scope: str, args: list[str]) -> BlockResult:
    """Loop over own properties, binding ``$key`` and ``$value``."""
    arg = _single_arg("forin", args)
    return BlockResult(scope=VALUE_NAME, variables=(arg,), run=_forin_passes)


def helper_each(scope: str, args: list[str]) -> BlockResult:
    """Loop over a sequence or a mapping.

    Sequences are keyed by index in order and mappings by key, which is the
    same enumeration ``forin`` performs; kept as a separate name for
    templates written against it.
    """
    arg = _single_arg("each", args)
    return BlockResult(scope=VALUE_NAME, variables=(arg,), run=_forin_passes)


def register_builtins(registry: HelperRegistry) -> None:
    registry.register_block_helper("if", helper_if)
    registry.register_block_helper("else", helper_else)
    registry.register_block_helper("with", helper_with)
    registry.register_block_helper("for", helper_for)
    registry.register_block_helper("forin", helper_forin)
    registry.register_block_helper("each", helper_each)
    registry.register_inline_helper(ESCAPE_HELPER, html_escape)
