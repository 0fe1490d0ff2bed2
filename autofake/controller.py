"""
SpecificationController - the public face of autofake.

One controller serves exactly one test. It owns the fake registry, builds
the subject under test on first access, hands out fakes and runs attached
behaviors' clean-ups when the test ends.

Usage:
    with SpecificationController(Widget) as spec:
        spec.the(IStore).load.return_value = {"id": 1}
        spec.subject.refresh()
        spec.the(ILogger).info.assert_called_once()
"""

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Any, Generic, TypeVar

from autofake import gateway
from autofake.behaviors import BehaviorConfig, BehaviorList
from autofake.config import FakesConfig
from autofake.container.builder import SubjectBuilder
from autofake.container.descriptors import TypeDescriptor
from autofake.container.registry import FakeRegistry
from autofake.engine import FakeEngine, create_engine
from autofake.errors import ConfigurationError, ControllerDisposedError, type_name

logger = logging.getLogger(__name__)

TSubject = TypeVar("TSubject")
T = TypeVar("T")
B = TypeVar("B", bound=BehaviorConfig)


class ControllerState(str, Enum):
    """Lifecycle of a controller."""

    CREATED = "created"
    SUBJECT_BOUND = "subject_bound"
    DISPOSED = "disposed"


# =============================================================================
# Subject State
# =============================================================================


@dataclass(frozen=True)
class Unbuilt:
    """The subject has not been built or assigned yet."""


@dataclass(frozen=True)
class Bound:
    """The subject is fixed; ``instance`` is returned verbatim from now on."""

    instance: Any


UNBUILT = Unbuilt()


# =============================================================================
# Accessor
# =============================================================================


class FakeAccessor:
    """The slice of a controller that behaviors may use to configure fakes."""

    def __init__(self, controller: "SpecificationController[Any]") -> None:
        self._controller = controller

    def use(self, declared_type: type[T], instance: T) -> T:
        """Inject ``instance`` wherever ``declared_type`` is required."""
        return self._controller.use(declared_type, instance)

    def a(self, declared_type: type[T]) -> T:
        """Create a new, untracked fake."""
        return self._controller.a(declared_type)

    an = a

    def the(self, declared_type: type[T]) -> T:
        """Return the memoized fake (or override) for ``declared_type``."""
        return self._controller.the(declared_type)


# =============================================================================
# Controller
# =============================================================================


class SpecificationController(Generic[TSubject]):
    """
    Fills a subject with fakes and manages everything a single test needs.

    Example:
        >>> spec = SpecificationController(Widget)
        >>> spec.use(IClock, FrozenClock())
        >>> spec.subject.render()
        >>> spec.the(IStore).save.assert_called_once()
        >>> spec.dispose()
    """

    def __init__(
        self,
        subject_type: type[TSubject],
        engine: FakeEngine | None = None,
        *,
        config: FakesConfig | None = None,
        descriptor: TypeDescriptor | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            subject_type: The type under test
            engine: Fake engine, defaults to the engine named in ``config``
            config: Controller settings, defaults to FakesConfig()
            descriptor: Constructor selection policy for the subject
        """
        if subject_type is None:
            raise ConfigurationError("A subject type is required")

        self.config = config or FakesConfig()
        self.subject_type = subject_type

        if engine is None:
            engine = create_engine(self.config.engine)
        self._registry = FakeRegistry(engine, collection_size=self.config.collection_size)
        self._builder = SubjectBuilder(descriptor)
        self._behaviors = BehaviorList()
        self._accessor = FakeAccessor(self)
        self._subject_state: Unbuilt | Bound = UNBUILT
        self._disposed = False

        if self.config.register_gateway:
            gateway.engine_is(self._registry)

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ControllerState:
        """Current lifecycle state."""
        if self._disposed:
            return ControllerState.DISPOSED
        if isinstance(self._subject_state, Bound):
            return ControllerState.SUBJECT_BOUND
        return ControllerState.CREATED

    @property
    def registry(self) -> FakeRegistry:
        """The registry holding this test's fakes."""
        return self._registry

    @property
    def behaviors(self) -> BehaviorList:
        """Behaviors attached so far."""
        return self._behaviors

    @property
    def accessor(self) -> FakeAccessor:
        """The accessor handed to behaviors."""
        return self._accessor

    # -------------------------------------------------------------------------
    # Subject
    # -------------------------------------------------------------------------

    @property
    def subject(self) -> TSubject:
        """
        The subject under test.

        Built on first access with every dependency faked. Assign an
        instance beforehand to skip building altogether.
        """
        self._ensure_active("subject")
        if isinstance(self._subject_state, Bound):
            return self._subject_state.instance

        instance = self._builder.build(
            self.subject_type, self._registry, self._registry.overrides
        )
        self._subject_state = Bound(instance)
        return instance

    @subject.setter
    def subject(self, instance: TSubject) -> None:
        self._ensure_active("subject")
        self._subject_state = Bound(instance)
        logger.debug("Subject %s assigned manually", type_name(self.subject_type))

    # -------------------------------------------------------------------------
    # Fakes
    # -------------------------------------------------------------------------

    def use(self, declared_type: type[T], instance: T) -> T:
        """
        Inject ``instance`` wherever ``declared_type`` is required.

        Must be called before the type is first resolved.

        Raises:
            ConfigurationError: If either argument is None
            DuplicateBindingError: If the type is already bound
        """
        self._ensure_active("use")
        self._registry.inject(declared_type, instance)
        return instance

    def with_(self, behavior: B | type[B]) -> B:
        """
        Attach a behavior and run its establish_context right away.

        Args:
            behavior: A behavior instance, or a behavior class to instantiate

        Returns:
            The attached behavior instance
        """
        self._ensure_active("with_")
        if inspect.isclass(behavior):
            behavior = behavior()
        self._behaviors.attach(behavior, self._accessor)
        return behavior

    def a(self, declared_type: type[T]) -> T:
        """Create a new fake that is not injected anywhere."""
        self._ensure_active("a")
        fake: T = self._registry.create_fake(declared_type)
        return fake

    an = a

    def the(self, declared_type: type[T]) -> T:
        """
        Return the fake bound to ``declared_type``, creating it on first use.

        This is the same instance the subject receives in its constructor,
        or the override registered with use().
        """
        self._ensure_active("the")
        fake: T = self._registry.get_or_create(declared_type)
        return fake

    def some(self, declared_type: type[T], count: int | None = None) -> list[T]:
        """Create ``count`` distinct fakes (config.collection_size by default)."""
        self._ensure_active("some")
        return self._registry.create_collection(declared_type, count)

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def dispose(self) -> None:
        """
        Run the clean-up of every attached behavior and retire the controller.

        The subject is passed as None if it was never built. Calling this
        again does nothing.
        """
        if self._disposed:
            return

        subject = (
            self._subject_state.instance if isinstance(self._subject_state, Bound) else None
        )
        try:
            self._behaviors.teardown(subject)
        finally:
            self._disposed = True
            gateway.release(self._registry)
            logger.debug("Disposed controller for %s", type_name(self.subject_type))

    def __enter__(self) -> "SpecificationController[TSubject]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.dispose()

    def _ensure_active(self, operation: str) -> None:
        if self._disposed:
            raise ControllerDisposedError(operation)

    def __repr__(self) -> str:
        return (
            f"SpecificationController({type_name(self.subject_type)}, "
            f"state={self.state.value}, {len(self._registry)} fakes, "
            f"{len(self._behaviors)} behaviors)"
        )
