"""
Tests for autofake.container.builder.

Covers dependency resolution order, override precedence, configuration
errors for unfakeable parameters and error propagation from constructors.
"""

from abc import ABC, abstractmethod
from typing import Any

import pytest

from autofake.container.builder import SubjectBuilder
from autofake.container.descriptors import FactoryDescriptor
from autofake.container.registry import FakeRegistry
from autofake.engine import AutospecFakeEngine
from autofake.errors import ConfigurationError, UnresolvableDependencyError


class IStore(ABC):
    @abstractmethod
    def load(self, key: str) -> dict: ...


class ILogger(ABC):
    @abstractmethod
    def info(self, message: str) -> None: ...


class Widget:
    def __init__(self, logger: ILogger, store: IStore) -> None:
        self.logger = logger
        self.store = store


class TwoStores:
    def __init__(self, primary: IStore, backup: IStore) -> None:
        self.primary = primary
        self.backup = backup


class KeywordOnly:
    def __init__(self, store: IStore, *, logger: ILogger) -> None:
        self.store = store
        self.logger = logger


class NeedsPort:
    def __init__(self, store: IStore, port: int) -> None:
        self.store = store
        self.port = port


class Untyped:
    def __init__(self, store) -> None:  # type: ignore[no-untyped-def]
        self.store = store


class Exploding:
    def __init__(self, store: IStore) -> None:
        raise RuntimeError("boom")


class Pooled:
    def __init__(self, stores: list[IStore]) -> None:
        self.stores = stores


class Factory:
    def __init__(self, store: IStore, source: str) -> None:
        self.store = store
        self.source = source

    @classmethod
    def create(cls, store: IStore) -> "Factory":
        return cls(store, "create")


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry(AutospecFakeEngine())


@pytest.fixture
def builder() -> SubjectBuilder:
    return SubjectBuilder()


# =============================================================================
# Resolution Tests
# =============================================================================


class TestSubjectBuilderResolution:
    """Tests for filling constructor parameters."""

    def test_builds_with_fakes(self, builder: SubjectBuilder, registry: FakeRegistry) -> None:
        widget = builder.build(Widget, registry)

        assert isinstance(widget, Widget)
        assert isinstance(widget.logger, ILogger)
        assert isinstance(widget.store, IStore)

    def test_fakes_are_registered(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        """The subject receives the registry's memoized fakes."""
        widget = builder.build(Widget, registry)

        assert registry.resolve(ILogger) is widget.logger
        assert registry.resolve(IStore) is widget.store

    def test_bindings_follow_declaration_order(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        builder.build(Widget, registry)
        assert registry.bound_types() == [ILogger, IStore]

    def test_repeated_type_shares_one_fake(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        subject = builder.build(TwoStores, registry)
        assert subject.primary is subject.backup

    def test_existing_binding_reused(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        store = registry.get_or_create(IStore)
        assert builder.build(Widget, registry).store is store

    def test_keyword_only_parameters(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        subject = builder.build(KeywordOnly, registry)
        assert subject.logger is registry.resolve(ILogger)

    def test_each_build_is_a_new_subject(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        """Memoizing the subject is the controller's job, not the builder's."""
        first = builder.build(Widget, registry)
        second = builder.build(Widget, registry)

        assert first is not second
        assert first.store is second.store


# =============================================================================
# Override Tests
# =============================================================================


class TestSubjectBuilderOverrides:
    """Tests for manual overrides taking precedence."""

    def test_override_used_instead_of_fake(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        store = object()
        widget = builder.build(Widget, registry, {IStore: store})

        assert widget.store is store
        assert not registry.has(IStore)

    def test_override_of_value_type(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        subject = builder.build(NeedsPort, registry, {int: 8080})
        assert subject.port == 8080

    def test_registry_overrides_view(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        logger: Any = object()
        registry.inject(ILogger, logger)

        widget = builder.build(Widget, registry, registry.overrides)

        assert widget.logger is logger


# =============================================================================
# Error Tests
# =============================================================================


class TestSubjectBuilderErrors:
    """Tests for configuration errors and error propagation."""

    def test_value_type_parameter_raises(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        with pytest.raises(UnresolvableDependencyError) as exc_info:
            builder.build(NeedsPort, registry)

        error = exc_info.value
        assert error.subject_type is NeedsPort
        assert error.parameter == "port"
        assert error.declared_type is int
        assert "port" in str(error)
        assert "use()" in str(error)

    def test_unannotated_parameter_raises(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        with pytest.raises(UnresolvableDependencyError) as exc_info:
            builder.build(Untyped, registry)

        assert exc_info.value.declared_type is None
        assert "no type annotation" in str(exc_info.value)

    def test_generic_alias_parameter_raises(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        with pytest.raises(UnresolvableDependencyError):
            builder.build(Pooled, registry)

    def test_unresolvable_is_configuration_error(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        with pytest.raises(ConfigurationError):
            builder.build(NeedsPort, registry)

    def test_constructor_error_propagates_unchanged(
        self, builder: SubjectBuilder, registry: FakeRegistry
    ) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            builder.build(Exploding, registry)


# =============================================================================
# Descriptor Integration Tests
# =============================================================================


class TestSubjectBuilderDescriptors:
    """Tests for builders configured with other descriptors."""

    def test_default_descriptor(self, builder: SubjectBuilder) -> None:
        assert builder.plan(Widget).constructor_name == "__init__"

    def test_factory_descriptor(self, registry: FakeRegistry) -> None:
        builder = SubjectBuilder(FactoryDescriptor("create"))
        subject = builder.build(Factory, registry)

        assert subject.source == "create"
        assert subject.store is registry.resolve(IStore)
