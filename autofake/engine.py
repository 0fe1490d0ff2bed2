"""
Fake engines.

A fake engine turns a declared type (usually an ABC or a Protocol) into a
fresh stand-in object. The container only ever talks to engines through the
FakeEngine protocol, so any mocking library can be plugged in. The engines
shipped here are backed by unittest.mock:

- AutospecFakeEngine: create_autospec, signatures are enforced (default)
- MagicMockFakeEngine: MagicMock(spec=...), attribute names are enforced
"""

import builtins
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable
from unittest.mock import MagicMock, create_autospec

from autofake.errors import ConfigurationError, UnresolvableTypeError, type_name

logger = logging.getLogger(__name__)


def is_fakeable(declared_type: Any) -> bool:
    """Check whether a fake can be generated for ``declared_type``.

    Only classes qualify, and builtin value and container types (``int``,
    ``str``, ``list`` ...) are excluded: they need a literal, not a fake.
    """
    # typing.Any is a class from 3.11 on
    if declared_type is Any or not inspect.isclass(declared_type):
        return False
    return getattr(declared_type, "__module__", None) != builtins.__name__


# =============================================================================
# Engine Protocol
# =============================================================================


@runtime_checkable
class FakeEngine(Protocol):
    """
    Protocol for anything that can produce fakes.

    Implementations must return a new, distinct instance on every call.
    """

    def create_fake(self, declared_type: type) -> Any:
        """
        Create a fake implementing ``declared_type``.

        Raises:
            UnresolvableTypeError: If the type cannot be faked
        """
        ...


# =============================================================================
# Mock-backed Engines
# =============================================================================


class MockFakeEngine(ABC):
    """Abstract base for engines built on unittest.mock.

    Subclasses set ``name`` (the key used in ENGINES) and implement _build.
    """

    name: str

    def create_fake(self, declared_type: type) -> Any:
        """Create a new fake for ``declared_type``."""
        if not is_fakeable(declared_type):
            raise UnresolvableTypeError(declared_type)
        fake = self._build(declared_type)
        logger.debug("%s engine created fake for %s", self.name, type_name(declared_type))
        return fake

    @abstractmethod
    def _build(self, declared_type: type) -> Any:
        """Create the mock object for a type already known to be fakeable."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AutospecFakeEngine(MockFakeEngine):
    """Engine producing ``create_autospec`` instances.

    Methods keep the signatures of the declared type, so a subject calling
    a dependency with the wrong arguments fails inside the test.
    """

    name = "autospec"

    def _build(self, declared_type: type) -> Any:
        return create_autospec(declared_type, instance=True)


class MagicMockFakeEngine(MockFakeEngine):
    """Engine producing ``MagicMock(spec=...)`` instances."""

    name = "magicmock"

    def _build(self, declared_type: type) -> Any:
        return MagicMock(spec=declared_type)


ENGINES: dict[str, type[MockFakeEngine]] = {
    AutospecFakeEngine.name: AutospecFakeEngine,
    MagicMockFakeEngine.name: MagicMockFakeEngine,
}


def create_engine(name: str) -> FakeEngine:
    """
    Create a fake engine by name.

    Args:
        name: Engine name (autospec, magicmock)

    Returns:
        A new engine instance

    Raises:
        ConfigurationError: If no engine is registered under ``name``
    """
    if name not in ENGINES:
        available = ", ".join(ENGINES)
        msg = f"Unknown fake engine: {name}. Available: {available}"
        raise ConfigurationError(msg)
    return ENGINES[name]()
