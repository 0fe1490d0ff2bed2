"""
Per-test registry of fake bindings.

Maps each declared type to the single instance bound for it during one test.
Bindings are created on demand by the fake engine or installed manually as
overrides. Either way a type is bound at most once.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from autofake.engine import FakeEngine, is_fakeable
from autofake.errors import (
    BindingNotFoundError,
    ConfigurationError,
    DuplicateBindingError,
    UnresolvableTypeError,
    type_name,
)

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_SIZE = 3


class FakeRegistry:
    """Memoizing map from declared type to fake instance.

    The registry also satisfies the FakeEngine protocol itself: its
    ``create_fake`` hands out throwaway fakes that are never memoized.

    Example:
        >>> registry = FakeRegistry(AutospecFakeEngine())
        >>> store = registry.get_or_create(IStore)
        >>> registry.get_or_create(IStore) is store
        True
    """

    def __init__(
        self,
        engine: FakeEngine,
        collection_size: int = DEFAULT_COLLECTION_SIZE,
    ) -> None:
        """
        Initialize an empty registry.

        Args:
            engine: Engine used to generate fakes
            collection_size: Default number of fakes for create_collection()
        """
        if engine is None:
            raise ConfigurationError("A fake engine is required")
        self._engine = engine
        self._collection_size = collection_size
        self._bindings: dict[Any, Any] = {}
        self._overrides: dict[Any, Any] = {}

    @property
    def engine(self) -> FakeEngine:
        """The engine used to generate fakes."""
        return self._engine

    @property
    def overrides(self) -> Mapping[Any, Any]:
        """Read-only view of the manually injected bindings."""
        return MappingProxyType(self._overrides)

    def get_or_create(self, declared_type: Any) -> Any:
        """Return the binding for ``declared_type``, creating a fake if needed.

        Raises:
            UnresolvableTypeError: If nothing is bound and the type cannot be faked.
        """
        if declared_type in self._bindings:
            return self._bindings[declared_type]
        if not is_fakeable(declared_type):
            raise UnresolvableTypeError(declared_type)

        fake = self._engine.create_fake(declared_type)
        self._bindings[declared_type] = fake
        logger.debug("Bound auto fake for %s", type_name(declared_type))
        return fake

    def inject(self, declared_type: Any, instance: Any) -> None:
        """Install ``instance`` as the binding for ``declared_type``.

        Raises:
            ConfigurationError: If the type or the instance is None.
            DuplicateBindingError: If the type is already bound.
        """
        if declared_type is None:
            raise ConfigurationError("Cannot bind an instance to a None type")
        if instance is None:
            raise ConfigurationError(
                f"Cannot bind None as the instance for '{type_name(declared_type)}'"
            )
        if declared_type in self._bindings:
            raise DuplicateBindingError(declared_type)

        self._bindings[declared_type] = instance
        self._overrides[declared_type] = instance
        logger.debug("Injected override for %s", type_name(declared_type))

    def create_fake(self, declared_type: Any) -> Any:
        """Create a brand-new fake that is not tracked by the registry."""
        if not is_fakeable(declared_type):
            raise UnresolvableTypeError(declared_type)
        return self._engine.create_fake(declared_type)

    def create_collection(self, declared_type: Any, n: int | None = None) -> list[Any]:
        """Create ``n`` distinct fakes of ``declared_type``.

        The fakes are independent of the memoized binding returned by
        get_or_create().

        Args:
            declared_type: Type to fake
            n: Number of fakes, defaults to the registry's collection size

        Raises:
            ConfigurationError: If ``n`` is negative.
        """
        count = self._collection_size if n is None else n
        if count < 0:
            raise ConfigurationError(f"Collection size must not be negative, got {count}")
        return [self.create_fake(declared_type) for _ in range(count)]

    def resolve(self, declared_type: Any) -> Any:
        """Look up an existing binding without creating one.

        Raises:
            BindingNotFoundError: If nothing was bound for the type.
        """
        if declared_type not in self._bindings:
            raise BindingNotFoundError(declared_type)
        return self._bindings[declared_type]

    def has(self, declared_type: Any) -> bool:
        """Check if a binding exists for ``declared_type``."""
        return declared_type in self._bindings

    def bound_types(self) -> list[Any]:
        """List bound types in the order they were bound."""
        return list(self._bindings)

    def clear(self) -> None:
        """Drop all bindings and overrides."""
        self._bindings.clear()
        self._overrides.clear()

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, declared_type: Any) -> bool:
        return self.has(declared_type)

    def __repr__(self) -> str:
        return (
            f"FakeRegistry({len(self._bindings)} bindings, "
            f"{len(self._overrides)} overrides, engine={self._engine!r})"
        )
