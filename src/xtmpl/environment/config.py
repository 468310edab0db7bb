"""Engine configuration.

``Config`` is a frozen snapshot. ``Environment.config()`` replaces it with
``dataclasses.replace()``; each compile reads the snapshot current at that
moment, so already compiled templates never observe later changes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

# Option names as accepted from callers -> Config field names
_KEY_ALIASES: dict[str, str] = {
    "escapeHtml": "escape_html",
    "startTag": "start_tag",
    "endTag": "end_tag",
    "blockHelperFlag": "block_helper_flag",
    "resultVarName": "result_var_name",
}


@dataclass(frozen=True, slots=True)
class Config:
    """Compile-time settings.

    Attributes:
        escape_html: HTML-escape ``{{ path }}`` output (``{{= path }}`` never is)
        start_tag: Marker start delimiter
        end_tag: Marker end delimiter
        block_helper_flag: Prefix that marks a block helper marker
        result_var_name: Accumulator name shown in the procedure listing
    """

    escape_html: bool = True
    start_tag: str = "{{"
    end_tag: str = "}}"
    block_helper_flag: str = "#"
    result_var_name: str = "$html"

    def __post_init__(self) -> None:
        for name in ("start_tag", "end_tag", "block_helper_flag", "result_var_name"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Config option {name!r} must be a non-empty string, got {value!r}")
        if not isinstance(self.escape_html, bool):
            raise ValueError(f"Config option 'escape_html' must be a bool, got {self.escape_html!r}")

    def updated(self, options: Mapping[str, Any]) -> Config:
        """Return a copy with ``options`` applied.

        Keys may use either the field names or their camelCase spelling
        (``escapeHtml``, ``startTag``, ...).

        Raises:
            ValueError: Unknown option name or invalid value.
        """
        known = {f.name for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in options.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown config option {key!r}")
            changes[name] = value
        return replace(self, **changes)


DEFAULT_CONFIG = Config()
