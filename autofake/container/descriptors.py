"""
Type descriptors: how a subject type is constructed.

A descriptor inspects a subject type and returns a ConstructorPlan, the
callable to invoke plus its dependencies in declaration order. Two policies
are provided:

- SignatureDescriptor: the class itself is the constructor (``__init__``)
- FactoryDescriptor: the first existing classmethod from an ordered list
  of alternate constructor names
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from autofake.errors import ConfigurationError, type_name

# =============================================================================
# Plans
# =============================================================================


@dataclass(frozen=True)
class DependencySpec:
    """A single constructor parameter to be satisfied."""

    name: str
    declared_type: Any = None
    keyword_only: bool = False

    @property
    def is_annotated(self) -> bool:
        """Check if the parameter declares a type."""
        return self.declared_type is not None


@dataclass(frozen=True)
class ConstructorPlan:
    """Everything the builder needs to create a subject."""

    subject_type: type
    factory: Callable[..., Any]
    constructor_name: str = "__init__"
    dependencies: list[DependencySpec] = field(default_factory=list)

    @property
    def dependency_types(self) -> list[Any]:
        """Declared types of all dependencies, in order."""
        return [dep.declared_type for dep in self.dependencies]


class TypeDescriptor(Protocol):
    """Protocol for constructor selection policies."""

    def describe(self, subject_type: type) -> ConstructorPlan:
        """
        Build a construction plan for ``subject_type``.

        Raises:
            ConfigurationError: If the type cannot be constructed
        """
        ...


# =============================================================================
# Helpers
# =============================================================================


def _signature(subject_type: type, target: Callable[..., Any]) -> inspect.Signature:
    try:
        return inspect.signature(target, eval_str=True)
    except NameError as exc:
        msg = f"Cannot resolve constructor annotations of '{type_name(subject_type)}': {exc}"
        raise ConfigurationError(msg) from exc
    except ValueError as exc:
        msg = f"Cannot inspect constructor of '{type_name(subject_type)}': {exc}"
        raise ConfigurationError(msg) from exc


def _dependencies(signature: inspect.Signature) -> list[DependencySpec]:
    dependencies: list[DependencySpec] = []
    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        annotation = None if param.annotation is param.empty else param.annotation
        dependencies.append(
            DependencySpec(
                name=param.name,
                declared_type=annotation,
                keyword_only=param.kind is param.KEYWORD_ONLY,
            )
        )
    return dependencies


def _check_subject_type(subject_type: Any) -> None:
    if not inspect.isclass(subject_type):
        raise ConfigurationError(f"Subject must be a class, got {subject_type!r}")
    if inspect.isabstract(subject_type):
        raise ConfigurationError(
            f"Subject '{type_name(subject_type)}' is abstract and cannot be constructed"
        )


# =============================================================================
# Descriptors
# =============================================================================


class SignatureDescriptor:
    """Construct subjects by calling the class, using its ``__init__`` signature.

    Works for plain classes, dataclasses and pydantic models alike, since
    all of them expose their constructor parameters through
    ``inspect.signature``. String annotations are evaluated.
    """

    def describe(self, subject_type: type) -> ConstructorPlan:
        """Plan construction through the class call."""
        _check_subject_type(subject_type)
        signature = _signature(subject_type, subject_type)
        return ConstructorPlan(
            subject_type=subject_type,
            factory=subject_type,
            constructor_name="__init__",
            dependencies=_dependencies(signature),
        )

    def __repr__(self) -> str:
        return "SignatureDescriptor()"


class FactoryDescriptor:
    """Construct subjects through the first matching alternate constructor.

    Names are tried in the order given; the first attribute present on the
    subject type wins. There is no ranking by parameter count.

    Example:
        >>> descriptor = FactoryDescriptor("from_settings", "create")
        >>> plan = descriptor.describe(Widget)
        >>> plan.constructor_name
        'from_settings'
    """

    def __init__(self, *names: str, fallback: bool = False) -> None:
        """
        Initialize the descriptor.

        Args:
            names: Factory classmethod names in priority order
            fallback: Use ``__init__`` when none of the names exist
        """
        if not names:
            raise ConfigurationError("FactoryDescriptor needs at least one factory name")
        self.names = names
        self.fallback = fallback

    def describe(self, subject_type: type) -> ConstructorPlan:
        """Plan construction through the first available factory."""
        _check_subject_type(subject_type)
        for name in self.names:
            factory = getattr(subject_type, name, None)
            if factory is None:
                continue
            if not callable(factory):
                raise ConfigurationError(
                    f"'{type_name(subject_type)}.{name}' is not callable"
                )
            signature = _signature(subject_type, factory)
            return ConstructorPlan(
                subject_type=subject_type,
                factory=factory,
                constructor_name=name,
                dependencies=_dependencies(signature),
            )

        if self.fallback:
            return SignatureDescriptor().describe(subject_type)

        tried = ", ".join(self.names)
        msg = f"'{type_name(subject_type)}' has none of the factories: {tried}"
        raise ConfigurationError(msg)

    def __repr__(self) -> str:
        names = ", ".join(repr(n) for n in self.names)
        return f"FactoryDescriptor({names}, fallback={self.fallback})"
