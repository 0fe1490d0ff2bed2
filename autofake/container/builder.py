"""
Subject construction with automatic fake injection.
"""

import logging
from collections.abc import Mapping
from typing import Any

from autofake.container.descriptors import ConstructorPlan, SignatureDescriptor, TypeDescriptor
from autofake.container.registry import FakeRegistry
from autofake.engine import is_fakeable
from autofake.errors import UnresolvableDependencyError, type_name

logger = logging.getLogger(__name__)


class SubjectBuilder:
    """Builds a subject, filling every constructor parameter with a fake.

    Each parameter is resolved in declaration order: a manual override for
    the parameter's type wins, otherwise the registry supplies its memoized
    fake. Parameters that are unannotated or typed with something that
    cannot be faked (``int``, ``str``, unions ...) are a configuration error.

    Example:
        >>> builder = SubjectBuilder()
        >>> widget = builder.build(Widget, registry, registry.overrides)
    """

    def __init__(self, descriptor: TypeDescriptor | None = None) -> None:
        """
        Initialize the builder.

        Args:
            descriptor: Constructor selection policy, defaults to SignatureDescriptor
        """
        self.descriptor = descriptor or SignatureDescriptor()

    def plan(self, subject_type: type) -> ConstructorPlan:
        """Describe how ``subject_type`` would be constructed."""
        return self.descriptor.describe(subject_type)

    def build(
        self,
        subject_type: type,
        registry: FakeRegistry,
        manual_overrides: Mapping[Any, Any] | None = None,
    ) -> Any:
        """
        Create one instance of ``subject_type``.

        Args:
            subject_type: The type under test
            registry: Registry supplying memoized fakes
            manual_overrides: Instances to use instead of fakes, keyed by type

        Returns:
            The constructed subject

        Raises:
            ConfigurationError: If the type or one of its parameters cannot be resolved
        """
        overrides = manual_overrides or {}
        plan = self.plan(subject_type)

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for dependency in plan.dependencies:
            declared_type = dependency.declared_type
            if declared_type is not None and declared_type in overrides:
                value = overrides[declared_type]
                source = "override"
            elif is_fakeable(declared_type):
                value = registry.get_or_create(declared_type)
                source = "fake"
            else:
                raise UnresolvableDependencyError(subject_type, dependency.name, declared_type)

            logger.debug(
                "Resolved %s.%s (%s) from %s",
                type_name(subject_type),
                dependency.name,
                type_name(declared_type),
                source,
            )
            if dependency.keyword_only:
                kwargs[dependency.name] = value
            else:
                args.append(value)

        # Constructor errors belong to the code under test; let them through.
        subject = plan.factory(*args, **kwargs)
        logger.debug(
            "Built subject %s via %s with %d dependencies",
            type_name(subject_type),
            plan.constructor_name,
            len(plan.dependencies),
        )
        return subject
