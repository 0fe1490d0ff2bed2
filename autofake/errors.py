"""
Exception taxonomy for autofake.

Configuration errors signal a test-author mistake and are raised at the call
site. Resolution errors signal a lookup that cannot be satisfied. Neither is
ever retried or suppressed.
"""

from typing import Any


def type_name(declared_type: Any) -> str:
    """Readable name for a type (or any other key) used in messages."""
    return getattr(declared_type, "__qualname__", None) or repr(declared_type)


class AutofakeError(Exception):
    """Base class for all autofake errors."""


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AutofakeError, ValueError):
    """Raised when the container is configured incorrectly."""


class DuplicateBindingError(ConfigurationError):
    """Raised when a type that already has a binding is bound again."""

    def __init__(self, declared_type: Any) -> None:
        self.declared_type = declared_type
        super().__init__(
            f"Type '{type_name(declared_type)}' is already bound; "
            "register overrides before the type is first resolved"
        )


class UnresolvableDependencyError(ConfigurationError):
    """Raised when a constructor parameter cannot be satisfied by a fake."""

    def __init__(self, subject_type: Any, parameter: str, declared_type: Any) -> None:
        self.subject_type = subject_type
        self.parameter = parameter
        self.declared_type = declared_type
        if declared_type is None:
            detail = "has no type annotation"
        else:
            detail = f"of type '{type_name(declared_type)}' cannot be faked"
        super().__init__(
            f"Parameter '{parameter}' of '{type_name(subject_type)}' {detail}; "
            "supply an instance with use()"
        )


class ControllerDisposedError(ConfigurationError):
    """Raised when a disposed controller is used again."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot call '{operation}' on a disposed controller")


# =============================================================================
# Resolution Errors
# =============================================================================


class ResolutionError(AutofakeError, LookupError):
    """Raised when a requested binding cannot be found or produced."""


class BindingNotFoundError(ResolutionError, KeyError):
    """Raised when looking up a type that was never bound."""

    def __init__(self, declared_type: Any) -> None:
        self.declared_type = declared_type
        super().__init__(f"No binding registered for type '{type_name(declared_type)}'")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class UnresolvableTypeError(ResolutionError):
    """Raised when a fake is requested for a type the engine cannot fake."""

    def __init__(self, declared_type: Any) -> None:
        self.declared_type = declared_type
        super().__init__(
            f"Cannot create a fake for '{type_name(declared_type)}'; "
            "only non-builtin classes can be faked"
        )


class NoActiveEngineError(ResolutionError):
    """Raised when the gateway is queried while no container is registered."""

    def __init__(self) -> None:
        super().__init__("No fake engine is registered with the gateway")


# =============================================================================
# Teardown Errors
# =============================================================================


class BehaviorCleanupError(ExceptionGroup):
    """Raised when more than one behavior failed during clean-up."""

    def derive(self, excs):  # type: ignore[no-untyped-def]
        return BehaviorCleanupError(self.message, excs)
