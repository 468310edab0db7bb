"""xtmpl compiler: template source to a Template node procedure.

    ```
    Compiler ──► CodeResolver ──► HelperRegistry
        │
        └──► VariableBinder ──► resolve_path
    ```
"""

from xtmpl.compiler.binder import VariableBinder
from xtmpl.compiler.core import Compiler
from xtmpl.compiler.listing import render_listing
from xtmpl.compiler.paths import ResolvedPath, resolve_path
from xtmpl.compiler.resolver import CodeResolver, Resolution

__all__ = [
    "CodeResolver",
    "Compiler",
    "ResolvedPath",
    "Resolution",
    "VariableBinder",
    "render_listing",
    "resolve_path",
]
