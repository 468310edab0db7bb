"""Pytest configuration and fixtures for xtmpl tests."""

import dataclasses

import pytest

import xtmpl
from xtmpl import Environment


@pytest.fixture
def env():
    """Create a basic xtmpl Environment."""
    return Environment()


@pytest.fixture
def env_raw():
    """Create an Environment with HTML escaping disabled."""
    return Environment(escape_html=False)


@pytest.fixture
def data():
    """Nested context shared by the rendering tests."""
    return {
        "a": 0,
        "b": {
            "c": [1, 2, 3],
            "d": {"e": "string", "f": "/a/"},
            "g": [{"h": 1}, {"h": 2}, {"h": 3}],
        },
    }


@pytest.fixture
def default_env():
    """The module-level environment, restored after the test."""
    environment = xtmpl.get_default_environment()
    saved_config = environment.settings
    saved_block = dict(environment.helpers.block_helpers)
    saved_inline = dict(environment.helpers.inline_helpers)
    yield environment
    environment.config(dataclasses.asdict(saved_config))
    for name in set(environment.helpers.block_helpers) - set(saved_block):
        environment.helpers.unregister_block_helper(name)
    for name in set(environment.helpers.inline_helpers) - set(saved_inline):
        environment.helpers.unregister_inline_helper(name)
    for name, fn in saved_block.items():
        environment.helpers.register_block_helper(name, fn)
    for name, fn in saved_inline.items():
        environment.helpers.register_inline_helper(name, fn)

