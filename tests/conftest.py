"""Shared pytest configuration for autofake tests."""

from collections.abc import Iterator

import pytest

from autofake import gateway


@pytest.fixture(autouse=True)
def clean_gateway() -> Iterator[None]:
    """Every test starts and ends with an empty gateway slot."""
    gateway.reset()
    yield
    gateway.reset()
