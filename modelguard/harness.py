"""Validation harness.

Runs discovery, then the enum checker on every enumeration and the three
data class checks on every non-abstract data class, collecting violations
into one report.

Usage:
    ```python
    from modelguard import HarnessConfig, assert_models_valid

    assert_models_valid(HarnessConfig(namespace="myapp.models"))
    ```
"""

from typing import FrozenSet, List, Optional

import structlog

from .catalog import TypeCatalog
from .checks import (
    check_conventions,
    check_enum,
    check_equality_contract,
    check_hash_code,
)
from .config import HarnessConfig
from .discovery import discover
from .exceptions import DiscoveryError, ModelValidationError, ValueSynthesisError
from .models import (
    ContractWarning,
    TypeDescriptor,
    ValidationReport,
    Violation,
    ViolationKind,
)
from .values import PrefabValues

logger = structlog.get_logger(__name__)


class ModelValidator:
    """Validates every model under one namespace.

    Configuration is read once at construction; the run itself holds no
    state beyond the report it builds.
    """

    def __init__(
        self,
        config: HarnessConfig,
        catalog: Optional[TypeCatalog] = None,
        prefab: Optional[PrefabValues] = None,
    ) -> None:
        """Initialize the validator.

        Args:
            config: Run configuration; ``namespace`` must be set
            catalog: Type source; scans the package when None
            prefab: Value source for building instances
        """
        if not config.namespace:
            raise DiscoveryError("No namespace configured for validation")
        self.namespace = config.namespace
        self.exclusions = config.exclusion_set()
        self.suppressions: FrozenSet[ContractWarning] = config.suppression_set()
        self.catalog = catalog
        self.prefab = prefab or PrefabValues()

    def run(self) -> ValidationReport:
        """Discover and check every model.

        Returns:
            ValidationReport listing all violations

        Raises:
            DiscoveryError: If the namespace cannot be scanned
        """
        discovered = discover(self.namespace, self.exclusions, self.catalog)
        report = ValidationReport(
            namespace=self.namespace, excluded=list(discovered.excluded)
        )

        for descriptor in discovered.enums:
            report.enums_checked.append(descriptor.identity)
            self._record(report, descriptor, check_enum(descriptor))

        for descriptor in discovered.data_classes:
            if descriptor.is_abstract:
                logger.debug("Skipping abstract class", cls=descriptor.identity)
                report.abstract_skipped.append(descriptor.identity)
                continue
            report.data_classes_checked.append(descriptor.identity)
            self._record(
                report,
                descriptor,
                check_data_class(descriptor, self.suppressions, self.prefab),
            )

        logger.info(
            "Validation finished",
            namespace=self.namespace,
            enums=len(report.enums_checked),
            data_classes=len(report.data_classes_checked),
            violations=len(report.violations),
        )
        return report

    def _record(
        self,
        report: ValidationReport,
        descriptor: TypeDescriptor,
        violations: List[Violation],
    ) -> None:
        for violation in violations:
            logger.warning(
                "Model check failed",
                cls=descriptor.identity,
                kind=violation.kind.value,
                check=violation.check,
                member=violation.member,
                detail=violation.message,
            )
        report.violations.extend(violations)


def check_data_class(
    descriptor: TypeDescriptor,
    suppressions: FrozenSet[ContractWarning],
    prefab: PrefabValues,
) -> List[Violation]:
    """Run the convention, equality and hash checks on one data class.

    A field type without prefab values is reported once, as a single
    CONVENTION violation, instead of by each check. Abstract classes yield
    no violations.
    """
    if descriptor.is_abstract:
        return []
    try:
        prefab.values_for(descriptor, "red")
    except ValueSynthesisError as e:
        return [
            Violation(
                identity=descriptor.identity,
                kind=ViolationKind.CONVENTION,
                check="value_synthesis",
                message=str(e),
                error=e,
            )
        ]

    violations = check_conventions(descriptor, prefab)
    violations.extend(check_equality_contract(descriptor, suppressions, prefab))
    violations.extend(check_hash_code(descriptor, suppressions, prefab))
    return violations


def validate_models(
    config: HarnessConfig,
    catalog: Optional[TypeCatalog] = None,
    prefab: Optional[PrefabValues] = None,
) -> ValidationReport:
    """Validate every model under ``config.namespace`` and return the report."""
    return ModelValidator(config, catalog=catalog, prefab=prefab).run()


def assert_models_valid(
    config: HarnessConfig,
    catalog: Optional[TypeCatalog] = None,
    prefab: Optional[PrefabValues] = None,
) -> ValidationReport:
    """Validate every model and fail when any check failed.

    Raises:
        ModelValidationError: If any violation was found
        DiscoveryError: If the namespace cannot be scanned
    """
    report = validate_models(config, catalog=catalog, prefab=prefab)
    if report.has_violations:
        raise ModelValidationError(
            report.summary(),
            violations=report.violations,
            context={"namespace": report.namespace},
        )
    return report


__all__ = [
    "ModelValidator",
    "assert_models_valid",
    "check_data_class",
    "validate_models",
]
