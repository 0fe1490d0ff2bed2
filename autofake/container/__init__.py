"""
Auto-fake dependency container.

Registry of per-test fake bindings, constructor descriptors and the
subject builder that ties them together.
"""

from autofake.container.builder import SubjectBuilder
from autofake.container.descriptors import (
    ConstructorPlan,
    DependencySpec,
    FactoryDescriptor,
    SignatureDescriptor,
    TypeDescriptor,
)
from autofake.container.registry import DEFAULT_COLLECTION_SIZE, FakeRegistry

__all__ = [
    # Registry
    "DEFAULT_COLLECTION_SIZE",
    "FakeRegistry",
    # Descriptors
    "ConstructorPlan",
    "DependencySpec",
    "FactoryDescriptor",
    "SignatureDescriptor",
    "TypeDescriptor",
    # Builder
    "SubjectBuilder",
]
