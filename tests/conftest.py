"""Shared pytest fixtures for expression machine tests."""

from collections.abc import Iterator

import pytest

from expression_machine import Machine


@pytest.fixture
def machine() -> Iterator[Machine]:
    """Return a machine with no source that is disposed after the test."""
    m = Machine()
    yield m
    if not m.is_disposed:
        m.dispose()


@pytest.fixture
def anchor_machine() -> Iterator[Machine]:
    """Return a machine preloaded with UI anchor variables and a halving function."""
    m = Machine()
    m.set_variable("width", 800)
    m.set_variable("height", 600)
    m.set_function("half", lambda value: value * 0.5)
    yield m
    if not m.is_disposed:
        m.dispose()
