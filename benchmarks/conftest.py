from __future__ import annotations

import pytest
from jinja2 import Environment as Jinja2Environment

from xtmpl import Environment as XtmplEnvironment


@pytest.fixture
def xtmpl_env() -> XtmplEnvironment:
    env = XtmplEnvironment()
    env.register_inline_helper("upper", lambda value: str(value).upper())
    return env


@pytest.fixture
def jinja2_env() -> Jinja2Environment:
    return Jinja2Environment(autoescape=True)


@pytest.fixture
def small_context() -> dict[str, object]:
    return {"items": [{"name": f"item {i}"} for i in range(10)]}


@pytest.fixture
def medium_context() -> dict[str, object]:
    return {
        "user": {"name": "Ada", "admin": True},
        "posts": [
            {"title": f"Post {i}", "tags": ["a", "b", "c"], "draft": i % 2 == 0}
            for i in range(5)
        ],
    }


@pytest.fixture
def large_context() -> dict[str, object]:
    return {"rows": [{"id": i, "cells": list(range(10))} for i in range(100)]}
