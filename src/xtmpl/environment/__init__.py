"""Environment, configuration, helper registry and exceptions."""

from xtmpl.environment.config import DEFAULT_CONFIG, Config
from xtmpl.environment.core import Environment
from xtmpl.environment.exceptions import (
    ErrorCode,
    SourceSnippet,
    TemplateError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UnclosedMarkerError,
    UnknownHelperError,
    UnmatchedBlockCloseError,
    build_source_snippet,
)
from xtmpl.environment.registry import BlockHelper, BlockResult, HelperRegistry, InlineHelper

__all__ = [
    "DEFAULT_CONFIG",
    "BlockHelper",
    "BlockResult",
    "Config",
    "Environment",
    "ErrorCode",
    "HelperRegistry",
    "InlineHelper",
    "SourceSnippet",
    "TemplateError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UnclosedMarkerError",
    "UnknownHelperError",
    "UnmatchedBlockCloseError",
    "build_source_snippet",
]
