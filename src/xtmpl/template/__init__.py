"""Compiled template and render-time support."""

from xtmpl.template.core import Template
from xtmpl.template.frame import Frame, get_item

__all__ = ["Frame", "Template", "get_item"]
