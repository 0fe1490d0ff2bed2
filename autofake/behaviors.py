"""
Reusable setup/teardown units attached to a specification.

A behavior configures the container as soon as it is attached and gets a
chance to clean up once the test is over. Clean-ups run in the order the
behaviors were attached.
"""

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from autofake.errors import BehaviorCleanupError, ConfigurationError

if TYPE_CHECKING:
    from autofake.controller import FakeAccessor

logger = logging.getLogger(__name__)


@runtime_checkable
class BehaviorConfig(Protocol):
    """Protocol for attachable behaviors."""

    def establish_context(self, accessor: "FakeAccessor") -> None:
        """Configure the container; runs immediately on attach."""
        ...

    def clean_up(self, subject: Any) -> None:
        """Release whatever establish_context set up.

        ``subject`` is None when the test never built a subject.
        """
        ...


class Behavior:
    """
    Base class for behaviors.

    Subclass and override the hooks, or pass callables for a one-off
    behavior:

    Example:
        >>> clock = Behavior(
        ...     on_establish=lambda fakes: fakes.use(Clock, FrozenClock()),
        ...     on_cleanup=lambda subject: FrozenClock.reset(),
        ... )
        >>> controller.with_(clock)
    """

    def __init__(
        self,
        on_establish: Callable[["FakeAccessor"], None] | None = None,
        on_cleanup: Callable[[Any], None] | None = None,
    ) -> None:
        self.on_establish = on_establish
        self.on_cleanup = on_cleanup

    def establish_context(self, accessor: "FakeAccessor") -> None:
        if self.on_establish is not None:
            self.on_establish(accessor)

    def clean_up(self, subject: Any) -> None:
        if self.on_cleanup is not None:
            self.on_cleanup(subject)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class BehaviorList:
    """Ordered list of attached behaviors.

    Teardown runs every clean-up even when an earlier one fails. A single
    failure is re-raised as is; several are grouped in a
    BehaviorCleanupError, in attachment order.
    """

    def __init__(self) -> None:
        self._behaviors: list[BehaviorConfig] = []

    @property
    def behaviors(self) -> list[BehaviorConfig]:
        """Copy of the attached behaviors, in attachment order."""
        return list(self._behaviors)

    def attach(self, behavior: BehaviorConfig, accessor: "FakeAccessor") -> None:
        """
        Append ``behavior`` and run its establish_context.

        The behavior is recorded before establish_context runs, so its
        clean-up still happens at teardown if establishing fails.

        Raises:
            ConfigurationError: If ``behavior`` is None or lacks the behavior hooks
        """
        if behavior is None:
            raise ConfigurationError("Cannot attach a None behavior")
        if not isinstance(behavior, BehaviorConfig):
            raise ConfigurationError(
                f"{type(behavior).__qualname__} is not a behavior; "
                "it needs establish_context() and clean_up()"
            )

        self._behaviors.append(behavior)
        logger.debug("Attached behavior %r (%d total)", behavior, len(self._behaviors))
        behavior.establish_context(accessor)

    def teardown(self, subject: Any) -> None:
        """
        Run every clean-up in attachment order, then empty the list.

        Clean-ups that raise BaseException (``pytest.fail``, ``pytest.skip``,
        KeyboardInterrupt) do not stop the remaining clean-ups either.

        Raises:
            BaseException: The clean-up error, when exactly one behavior failed
            BehaviorCleanupError: When several behaviors failed with Exceptions
            BaseExceptionGroup: When several failed and one is not an Exception
        """
        pending, self._behaviors = self._behaviors, []
        errors: list[BaseException] = []

        for behavior in pending:
            try:
                behavior.clean_up(subject)
            except BaseException as exc:
                logger.warning("Clean-up of behavior %r failed: %s", behavior, exc)
                errors.append(exc)
            else:
                logger.debug("Cleaned up behavior %r", behavior)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            message = f"{len(errors)} of {len(pending)} behavior clean-ups failed"
            if all(isinstance(e, Exception) for e in errors):
                raise BehaviorCleanupError(message, errors)
            raise BaseExceptionGroup(message, errors)

    def __len__(self) -> int:
        return len(self._behaviors)

    def __iter__(self) -> Iterator[BehaviorConfig]:
        return iter(self.behaviors)

    def __repr__(self) -> str:
        return f"BehaviorList({len(self._behaviors)} behaviors)"
