"""Discovery of enums and data classes under a namespace.

Lists every type through a TypeCatalog, drops excluded identities and
suffixes, and partitions the survivors into enums and data classes.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import structlog

from .catalog import PackageTypeCatalog, TypeCatalog
from .models import ExclusionSet, TypeDescriptor

logger = structlog.get_logger(__name__)

TypeFilter = Callable[[TypeDescriptor], bool]


@dataclass
class DiscoveryResult:
    """Enums and data classes found under a namespace.

    Attributes:
        namespace: Namespace that was scanned
        enums: Enumeration types to check
        data_classes: Every other type to check
        excluded: Identities dropped by the exclusion filter
    """

    namespace: str
    enums: List[TypeDescriptor] = field(default_factory=list)
    data_classes: List[TypeDescriptor] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.enums) + len(self.data_classes)


def build_exclusion_filter(exclusions: ExclusionSet) -> TypeFilter:
    """Predicate that keeps a type unless the exclusion set matches it."""

    def include(descriptor: TypeDescriptor) -> bool:
        return not exclusions.excludes(descriptor.identity)

    return include


def discover(
    namespace: str,
    exclusions: ExclusionSet,
    catalog: Optional[TypeCatalog] = None,
) -> DiscoveryResult:
    """Discover the enums and data classes to validate.

    Args:
        namespace: Dotted package name to scan
        exclusions: Identities and suffixes to skip
        catalog: Type source; scans the package when None

    Returns:
        DiscoveryResult with disjoint enum and data class lists

    Raises:
        DiscoveryError: If the namespace cannot be resolved or scanned
    """
    catalog = catalog or PackageTypeCatalog()
    include = build_exclusion_filter(exclusions)
    result = DiscoveryResult(namespace=namespace)

    for descriptor in catalog.list_types(namespace):
        if not include(descriptor):
            result.excluded.append(descriptor.identity)
        elif descriptor.is_enum:
            result.enums.append(descriptor)
        else:
            result.data_classes.append(descriptor)

    logger.info(
        "Discovered model types",
        namespace=namespace,
        enums=len(result.enums),
        data_classes=len(result.data_classes),
        excluded=len(result.excluded),
    )
    return result


__all__ = ["DiscoveryResult", "TypeFilter", "build_exclusion_filter", "discover"]
