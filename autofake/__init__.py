"""
autofake - Auto-faking specification controller for Python tests.

Builds the subject under test with every constructor dependency replaced by
a fake, hands out those fakes, and runs reusable behaviors around a test.

Usage:
    from autofake import SpecificationController

    with SpecificationController(Widget) as spec:
        spec.subject.refresh()
        spec.the(IStore).load.assert_called_once()
"""

__version__ = "0.1.0"

from autofake.behaviors import Behavior, BehaviorConfig, BehaviorList
from autofake.config import FakesConfig, load_config
from autofake.container import (
    ConstructorPlan,
    DependencySpec,
    FactoryDescriptor,
    FakeRegistry,
    SignatureDescriptor,
    SubjectBuilder,
    TypeDescriptor,
)
from autofake.controller import (
    Bound,
    ControllerState,
    FakeAccessor,
    SpecificationController,
    Unbuilt,
)
from autofake.engine import (
    ENGINES,
    AutospecFakeEngine,
    FakeEngine,
    MagicMockFakeEngine,
    create_engine,
    is_fakeable,
)
from autofake.errors import (
    AutofakeError,
    BehaviorCleanupError,
    BindingNotFoundError,
    ConfigurationError,
    ControllerDisposedError,
    DuplicateBindingError,
    NoActiveEngineError,
    ResolutionError,
    UnresolvableDependencyError,
    UnresolvableTypeError,
)

__all__ = [
    # Controller
    "Bound",
    "ControllerState",
    "FakeAccessor",
    "SpecificationController",
    "Unbuilt",
    # Container
    "ConstructorPlan",
    "DependencySpec",
    "FactoryDescriptor",
    "FakeRegistry",
    "SignatureDescriptor",
    "SubjectBuilder",
    "TypeDescriptor",
    # Behaviors
    "Behavior",
    "BehaviorConfig",
    "BehaviorList",
    # Engines
    "ENGINES",
    "AutospecFakeEngine",
    "FakeEngine",
    "MagicMockFakeEngine",
    "create_engine",
    "is_fakeable",
    # Configuration
    "FakesConfig",
    "load_config",
    # Errors
    "AutofakeError",
    "BehaviorCleanupError",
    "BindingNotFoundError",
    "ConfigurationError",
    "ControllerDisposedError",
    "DuplicateBindingError",
    "NoActiveEngineError",
    "ResolutionError",
    "UnresolvableDependencyError",
    "UnresolvableTypeError",
]
