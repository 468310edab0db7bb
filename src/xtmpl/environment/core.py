"""Core Environment class for xtmpl.

The Environment is the one object that owns engine state:

- A ``Config`` snapshot (delimiters, escaping, block flag)
- A ``HelperRegistry`` with the built-in and custom helpers

Templates compiled by an Environment keep a reference to its registry, so
helpers registered later are visible when they render. Configuration is
read once per compile.

Thread-Safety:
    Configure first, then render. Registration is copy-on-write and never
    disturbs a render in progress, but the engine takes no locks.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from xtmpl.compiler import Compiler
from xtmpl.environment.config import DEFAULT_CONFIG, Config
from xtmpl.environment.helpers import register_builtins
from xtmpl.environment.registry import BlockHelper, HelperRegistry, InlineHelper
from xtmpl.template import Template
from xtmpl.utils.constants import MISSING

logger = logging.getLogger(__name__)


class Environment:
    """Engine instance: configuration plus helper registry.

    Example:
        >>> env = Environment(start_tag="<%", end_tag="%>")
        >>> env.register_inline_helper("upper", lambda s: str(s).upper())
        >>> env.compile("<% upper name %>")({"name": "ada"})
        'ADA'

    Args:
        helpers: Registry to use. Defaults to a new registry holding the
            built-in helpers; pass one to share helpers between environments.
        **options: Initial configuration (see ``Config``); camelCase names
            such as ``escapeHtml`` are accepted too.
    """

    __slots__ = ("_config", "_helpers")

    def __init__(self, *, helpers: HelperRegistry | None = None, **options: Any):
        if helpers is None:
            helpers = HelperRegistry()
            register_builtins(helpers)
        self._helpers = helpers
        self._config: Config = DEFAULT_CONFIG.updated(options) if options else DEFAULT_CONFIG

    @property
    def settings(self) -> Config:
        """Current configuration snapshot."""
        return self._config

    @property
    def helpers(self) -> HelperRegistry:
        return self._helpers

    def config(self, key: str | Mapping[str, Any], value: Any = MISSING) -> Config:
        """Change configuration for templates compiled from now on.

        Accepts ``config("startTag", "<%")`` or ``config({"startTag": "<%"})``.

        Returns:
            The new configuration snapshot.

        Raises:
            ValueError: Unknown option or invalid value; nothing is changed.
        """
        if isinstance(key, Mapping):
            if value is not MISSING:
                raise TypeError("config() takes a mapping or a key and a value, not both")
            options = dict(key)
        else:
            if value is MISSING:
                raise TypeError(f"config() missing value for option {key!r}")
            options = {key: value}
        self._config = self._config.updated(options)
        logger.debug(f"Config updated: {options!r}")
        return self._config

    def register_block_helper(self, name: str, fn: BlockHelper) -> None:
        self._helpers.register_block_helper(name, fn)

    def register_inline_helper(self, name: str, fn: InlineHelper) -> None:
        self._helpers.register_inline_helper(name, fn)

    def compile(self, source: str, name: str | None = None) -> Template:
        """Compile template source.

        Args:
            source: Template text
            name: Optional name used in error messages

        Raises:
            TemplateSyntaxError: The source does not compile; no template
                is returned.
        """
        return Compiler(self._helpers, self._config).compile(source, name)

    from_string = compile

    def __repr__(self) -> str:
        return (
            f"<Environment {self._config.start_tag} {self._config.end_tag}"
            f" block={len(self._helpers.block_helpers)} inline={len(self._helpers.inline_helpers)}>"
        )
