"""
Process-wide slot holding the active fake engine.

Helpers that run deep inside a test (custom assertions, builders of test
data) can reach the container of the running specification without having
it passed in. There is exactly one slot and the last controller constructed
wins. This only holds up because tests run one after another and each
creates a single controller; prefer passing the controller explicitly.
"""

import logging
from typing import Any

from autofake.engine import FakeEngine
from autofake.errors import NoActiveEngineError

logger = logging.getLogger(__name__)

_current: FakeEngine | None = None


def engine_is(engine: FakeEngine) -> None:
    """Make ``engine`` the active engine, replacing any previous one."""
    global _current
    _current = engine
    logger.debug("Gateway engine set to %r", engine)


def current_engine() -> FakeEngine:
    """
    Return the active engine.

    Raises:
        NoActiveEngineError: If no engine is registered
    """
    if _current is None:
        raise NoActiveEngineError()
    return _current


def has_engine() -> bool:
    """Check if an engine is registered."""
    return _current is not None


def fake(declared_type: type) -> Any:
    """Create a new fake through the active engine."""
    return current_engine().create_fake(declared_type)


def release(engine: FakeEngine) -> None:
    """Clear the slot, but only while it still holds ``engine``."""
    global _current
    if _current is engine:
        _current = None
        logger.debug("Gateway engine %r released", engine)


def reset() -> None:
    """Clear the slot unconditionally."""
    global _current
    _current = None
