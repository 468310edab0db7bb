"""xtmpl: micro-templating engine.

Compiles a template string with ``{{ ... }}`` markers into a reusable
renderer. Calling the renderer with a data context returns one string.

Quickstart:
    >>> import xtmpl
    >>> template = xtmpl.compile("Hello, {{name}}!")
    >>> template({"name": "World"})
    'Hello, World!'

Marker grammar:
    ```
    {{path}}                     escaped interpolation
    {{=path}}                    raw interpolation
    {{helper arg ...}}           inline helper call
    {{#helper arg ...}}...{{/helper}}   block helper
    {{#helper arg .../}}         self-closing block
    ```

Built-in block helpers: ``if`` (with ``else``), ``with``, ``for``,
``forin`` and ``each``.

Architecture:
Template Source → Compiler (CodeResolver, VariableBinder) → node list → Template

The compiler emits a flat tuple of immutable nodes; ``Template`` walks it
with an explicit stack. No Python source is generated and nothing is
passed to ``exec()``.

Engine state lives in an ``Environment``. The module-level functions below
use a process-wide default environment:

    >>> xtmpl.register_inline_helper("upper", lambda s: str(s).upper())
    >>> xtmpl.compile("{{upper name}}")({"name": "ada"})
    'ADA'

Create separate ``Environment`` objects for isolated configurations and
helper sets (tests, plugins).

"""

from collections.abc import Mapping
from typing import Any

from xtmpl.environment import (
    BlockHelper,
    BlockResult,
    Config,
    Environment,
    ErrorCode,
    HelperRegistry,
    InlineHelper,
    SourceSnippet,
    TemplateError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UnclosedMarkerError,
    UnknownHelperError,
    UnmatchedBlockCloseError,
    build_source_snippet,
)
from xtmpl.template import Template
from xtmpl.utils.constants import MISSING
from xtmpl.utils.html import escape_html, html_escape, trim

__version__ = "0.1.0"

_default_environment = Environment()


def get_default_environment() -> Environment:
    """Environment behind the module-level functions."""
    return _default_environment


def compile(source: str, name: str | None = None) -> Template:  # noqa: A001
    """Compile ``source`` with the default environment."""
    return _default_environment.compile(source, name)


def register_block_helper(name: str, fn: BlockHelper) -> None:
    _default_environment.register_block_helper(name, fn)


def register_inline_helper(name: str, fn: InlineHelper) -> None:
    _default_environment.register_inline_helper(name, fn)


def config(key: str | Mapping[str, Any], value: Any = MISSING) -> Config:
    """Change the default environment's configuration.

    Only templates compiled afterwards see the change.
    """
    return _default_environment.config(key, value)


__all__ = [
    "BlockHelper",
    "BlockResult",
    "Config",
    "Environment",
    "ErrorCode",
    "HelperRegistry",
    "InlineHelper",
    "SourceSnippet",
    "Template",
    "TemplateError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UnclosedMarkerError",
    "UnknownHelperError",
    "UnmatchedBlockCloseError",
    "__version__",
    "build_source_snippet",
    "compile",
    "config",
    "escape_html",
    "get_default_environment",
    "html_escape",
    "register_block_helper",
    "register_inline_helper",
    "trim",
]
