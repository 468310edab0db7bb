"""Marker classification.

``CodeResolver.resolve()`` interprets the text between one pair of
delimiters. Dispatch order, first match wins:

1. ``#name args``   block helper open (``#name args/`` opens and closes)
2. ``/name``        close, when ``name`` is a registered block helper
3. ``=...``         unescaped variant of 4/5
4. ``path``         interpolation
5. ``name args``    inline helper call

The result names the variables the marker references; the compiler binds
them before emitting the fragment.
"""

from __future__ import annotations

from dataclasses import dataclass

from xtmpl.environment.config import Config
from xtmpl.environment.exceptions import TemplateSyntaxError, UnknownHelperError
from xtmpl.environment.registry import BlockResult, HelperRegistry
from xtmpl.nodes import BlockRunner, Const
from xtmpl.tokens import is_path, parse_literal, split_args

CLOSE_SCOPE = ".."


@dataclass(frozen=True, slots=True)
class OpenFragment:
    helper: str
    run: BlockRunner
    self_closing: bool = False


@dataclass(frozen=True, slots=True)
class CloseFragment:
    helper: str


@dataclass(frozen=True, slots=True)
class BranchFragment:
    helper: str


@dataclass(frozen=True, slots=True)
class OutputFragment:
    """Interpolation. Without ``literal`` the value is variable 0."""

    escape: bool
    literal: Const | None = None


@dataclass(frozen=True, slots=True)
class CallFragment:
    """Inline helper call. Integer args index into the variables."""

    helper: str
    args: tuple[Const | int, ...]
    escape: bool


Fragment = OpenFragment | CloseFragment | BranchFragment | OutputFragment | CallFragment


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving one marker.

    Attributes:
        scope: ``CLOSE_SCOPE`` for a close marker; for an open marker the
            helper's scope (``""`` keeps the current one); otherwise ``""``.
        variables: Referenced paths, relative to the current scope.
        fragment: What to emit.
        no_function: Branch marker continuing the enclosing block.
    """

    scope: str
    variables: tuple[str, ...]
    fragment: Fragment
    no_function: bool = False


class CodeResolver:
    """Classify marker bodies using a helper registry and a config snapshot."""

    __slots__ = ("_config", "_helpers")

    def __init__(self, helpers: HelperRegistry, config: Config):
        self._helpers = helpers
        self._config = config

    def resolve(self, body: str, scope: str) -> Resolution:
        """Resolve one marker body.

        Args:
            body: Text between the start and end tags.
            scope: Current scope name, passed on to block helpers.

        Raises:
            UnknownHelperError: Block or inline helper is not registered.
            TemplateSyntaxError: Empty marker or malformed argument.
        """
        body = body.strip()
        flag = self._config.block_helper_flag
        if body.startswith(flag):
            return self._resolve_block(body[len(flag) :], scope)

        if body.startswith("/"):
            name = body[1:].strip()
            if self._helpers.has_block(name):
                return Resolution(CLOSE_SCOPE, (), CloseFragment(name))

        escape = True
        if body.startswith("="):
            body = body[1:]
            escape = False
        escape = escape and self._config.escape_html

        tokens = split_args(body)
        if not tokens:
            raise TemplateSyntaxError("Empty marker")
        if len(tokens) == 1:
            return self._resolve_output(tokens[0], escape)
        return self._resolve_inline(tokens, escape)

    def _resolve_block(self, text: str, scope: str) -> Resolution:
        text = text.strip()
        self_closing = text.endswith("/")
        if self_closing:
            text = text[:-1]
        tokens = split_args(text)
        if not tokens:
            raise TemplateSyntaxError("Block marker without a helper name")

        name, args = tokens[0], tokens[1:]
        helper = self._helpers.block(name)
        result = helper(scope, list(args))
        if not isinstance(result, BlockResult):
            raise TypeError(
                f"Block helper {name!r} must return BlockResult, got {type(result).__name__}"
            )

        if result.no_function:
            return Resolution("", (), BranchFragment(name), no_function=True)
        if result.scope == CLOSE_SCOPE:
            raise TemplateSyntaxError(f"Block helper {name!r} cannot open scope {CLOSE_SCOPE!r}")
        return Resolution(
            result.scope,
            tuple(result.variables),
            OpenFragment(name, result.run, self_closing),
        )

    def _resolve_output(self, token: str, escape: bool) -> Resolution:
        literal = parse_literal(token)
        if literal is not None and isinstance(literal.value, str):
            return Resolution("", (), OutputFragment(escape, literal))
        if not is_path(token):
            raise TemplateSyntaxError(f"Invalid variable path {token!r}")
        return Resolution("", (token,), OutputFragment(escape))

    def _resolve_inline(self, tokens: list[str], escape: bool) -> Resolution:
        name = tokens[0]
        if not self._helpers.has_inline(name):
            raise UnknownHelperError(name, "inline")

        variables: list[str] = []
        args: list[Const | int] = []
        for token in tokens[1:]:
            literal = parse_literal(token)
            if literal is not None:
                args.append(literal)
            elif is_path(token):
                variables.append(token)
                args.append(len(variables) - 1)
            else:
                raise TemplateSyntaxError(f"Invalid argument {token!r} to inline helper {name!r}")
        return Resolution("", tuple(variables), CallFragment(name, tuple(args), escape))
