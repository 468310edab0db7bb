"""Exceptions for the xtmpl template engine.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError           # Compile-time error
│   ├── UnknownHelperError        # Block or inline helper not registered
│   ├── UnmatchedBlockCloseError  # Close marker without matching open block
│   └── UnclosedMarkerError       # Start tag without end tag
└── TemplateRuntimeError          # Render-time error

Compile-time errors carry the template name, the 1-based line of the
offending marker and a snippet of the source:

    ```
    Syntax Error: No block helper named 'loop'
      --> card.html:3:4
         |
    >  3 |     {{#loop items}}
         |     ^
         |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes.

    Format: X-{CATEGORY}-{NUMBER}
    Categories: PAR (compile), RUN (render)
    """

    SYNTAX_ERROR = "X-PAR-001"
    UNKNOWN_HELPER = "X-PAR-002"
    UNMATCHED_BLOCK = "X-PAR-003"
    UNCLOSED_MARKER = "X-PAR-004"

    RUNTIME_ERROR = "X-RUN-001"

    @property
    def category(self) -> str:
        """Error category (``compile`` or ``runtime``)."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "compile",
            "RUN": "runtime",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines around an error.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        parts: list[str] = ["     |"]
        for lineno, content in self.lines:
            marker = ">" if lineno == self.error_line else " "
            parts.append(f"{marker}{lineno:>3} | {content}")
            if lineno == self.error_line and self.column is not None:
                parts.append(f"     | {' ' * self.column}^")
        parts.append("     |")
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 1,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all xtmpl errors.

        >>> try:
        ...     xtmpl.compile(source)(data)
        ... except TemplateError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as ``CODE: message`` without traceback noise."""
        header = str(self).splitlines()[0] if str(self) else type(self).__name__
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateSyntaxError(TemplateError):
    """Compile-time error in template source.

    Errors raised while a marker is being resolved usually do not know where
    the marker is. The compiler fills the location in with ``locate()``
    before the error leaves ``compile()``.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        self.col_offset = col_offset
        super().__init__(self._format_message())

    def locate(
        self,
        lineno: int,
        col_offset: int | None = None,
        name: str | None = None,
        source: str | None = None,
    ) -> TemplateSyntaxError:
        """Attach a source location unless one is already set; returns self."""
        if self.lineno is None:
            self.lineno = lineno
            self.col_offset = col_offset
        if self.name is None:
            self.name = name
        if self.source is None:
            self.source = source
        self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"

        header = f"Syntax Error: {self.message}\n  --> {location}"
        if self.source and self.lineno:
            snippet = build_source_snippet(self.source, self.lineno, column=self.col_offset)
            return header + "\n" + snippet.format()
        return header

    def format_compact(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
        code_prefix = f"{self.code.value}: " if self.code else ""
        return f"{code_prefix}{self.message} ({location})"


class UnknownHelperError(TemplateSyntaxError):
    """A marker names a block or inline helper that is not registered.

    Example:
        >>> xtmpl.compile("{{#loop items}}{{/loop}}")
        UnknownHelperError: Syntax Error: No block helper named 'loop'

    """

    code: ErrorCode | None = ErrorCode.UNKNOWN_HELPER

    def __init__(self, helper: str, kind: str = "block", **kwargs: Any):
        self.helper = helper
        self.kind = kind
        super().__init__(f"No {kind} helper named '{helper}'", **kwargs)


class UnmatchedBlockCloseError(TemplateSyntaxError):
    """Block structure does not balance.

    Raised for a close marker whose name differs from the innermost open
    block, a close marker with no open block, and a block still open at the
    end of the source.
    """

    code: ErrorCode | None = ErrorCode.UNMATCHED_BLOCK

    def __init__(self, message: str, expected: str | None = None, found: str | None = None, **kwargs: Any):
        self.expected = expected
        self.found = found
        super().__init__(message, **kwargs)


class UnclosedMarkerError(TemplateSyntaxError):
    """A start tag has no matching end tag."""

    code: ErrorCode | None = ErrorCode.UNCLOSED_MARKER


class TemplateRuntimeError(TemplateError):
    """Render-time error with template context.

    Attributes:
        message: Error description
        template_name: Name of the template
        lineno: Line number in template source
        blocks: Enclosing block helpers, outermost first
        suggestion: Actionable fix suggestion
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        blocks: list[str] | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.blocks = blocks or []
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]

        if self.template_name or self.lineno:
            loc = self.template_name or "<template>"
            if self.lineno:
                loc += f":{self.lineno}"
            parts.append(f"  Location: {loc}")

        if self.blocks:
            parts.append(f"  Inside: {' > '.join(self.blocks)}")

        if self.suggestion:
            parts.append(f"  Suggestion: {self.suggestion}")

        return "\n".join(parts)
