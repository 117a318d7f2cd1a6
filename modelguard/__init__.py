"""
modelguard

Reflection-driven validation of data classes and enums. Given a package,
modelguard discovers every model type and checks constructors, accessors,
repr, and the equality/hash contract without per-class tests.

Public API:
    BaseModelsTest: pytest base class for validating a package
    validate_models / assert_models_valid: Run a validation programmatically
    HarnessConfig / load_config: Run configuration
    ContractWarning: Equality contract relaxations
    PackageTypeCatalog / StaticTypeCatalog: Type discovery sources
    PrefabValues: Red/blue value synthesis
"""

from .base_test import BaseModelsTest
from .catalog import PackageTypeCatalog, StaticTypeCatalog, TypeCatalog
from .config import ConfigLoader, HarnessConfig, load_config
from .descriptors import describe
from .discovery import DiscoveryResult, discover
from .exceptions import (
    ConfigError,
    ConfigurationLockedError,
    DiscoveryError,
    ModelGuardError,
    ModelValidationError,
    ReflectiveInvocationError,
    ValueSynthesisError,
)
from .harness import (
    ModelValidator,
    assert_models_valid,
    check_data_class,
    validate_models,
)
from .models import (
    DEFAULT_EXCLUDED_SUFFIXES,
    DEFAULT_SUPPRESSIONS,
    ContractWarning,
    ExclusionSet,
    PropertyDescriptor,
    TypeDescriptor,
    TypeKind,
    ValidationReport,
    Violation,
    ViolationKind,
)
from .values import PrefabValues

__version__ = "0.1.0"

__all__ = [
    "BaseModelsTest",
    "ConfigError",
    "ConfigLoader",
    "ConfigurationLockedError",
    "ContractWarning",
    "DEFAULT_EXCLUDED_SUFFIXES",
    "DEFAULT_SUPPRESSIONS",
    "DiscoveryError",
    "DiscoveryResult",
    "ExclusionSet",
    "HarnessConfig",
    "ModelGuardError",
    "ModelValidationError",
    "ModelValidator",
    "PackageTypeCatalog",
    "PrefabValues",
    "PropertyDescriptor",
    "ReflectiveInvocationError",
    "StaticTypeCatalog",
    "TypeCatalog",
    "TypeDescriptor",
    "TypeKind",
    "ValidationReport",
    "ValueSynthesisError",
    "Violation",
    "ViolationKind",
    "assert_models_valid",
    "check_data_class",
    "describe",
    "discover",
    "load_config",
    "validate_models",
]
