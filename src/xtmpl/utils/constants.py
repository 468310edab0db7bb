"""Shared constants for xtmpl.

Names used by both the compiler and the template walker live here so the
two sides cannot drift apart.
"""

from __future__ import annotations

from typing import Any

# Local holding the render context; the root of every scope stack.
ROOT_NAME = "$data"

# Inline helper that escapes ``{{path}}`` output.
ESCAPE_HELPER = "$escape"

# Default for optional arguments where ``None`` is a meaningful value.
MISSING: Any = object()
