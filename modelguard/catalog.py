"""Type catalogs for discovering classes under a namespace.

A catalog lists every type defined under a dotted namespace. The package
catalog scans importable packages; the static catalog serves an explicit
registration list.
"""

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Union

import structlog

from .descriptors import describe
from .exceptions import DiscoveryError
from .models import PropertyDescriptor, TypeDescriptor, type_identity

logger = structlog.get_logger(__name__)


class TypeCatalog(Protocol):
    """Anything that can list the types defined under a namespace."""

    def list_types(self, namespace: str) -> List[TypeDescriptor]:
        ...


class PackageTypeCatalog:
    """Lists classes defined in a package and all of its submodules.

    Only classes whose ``__module__`` is the module being scanned are
    listed, so classes imported from elsewhere are not picked up twice.
    Nested classes are included.
    """

    def __init__(self, include_nested: bool = True):
        """Initialize the catalog.

        Args:
            include_nested: Also list classes defined inside other classes
        """
        self.include_nested = include_nested

    def list_types(self, namespace: str) -> List[TypeDescriptor]:
        """List every class defined under a namespace.

        Args:
            namespace: Dotted package or module name

        Returns:
            Type descriptors sorted by identity

        Raises:
            DiscoveryError: If the namespace cannot be imported or scanned
        """
        _require_namespace(namespace)
        classes: Dict[str, type] = {}

        for module in self._import_modules(namespace):
            for _name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module.__name__:
                    continue
                for cls in self._with_nested(obj):
                    classes.setdefault(type_identity(cls), cls)

        logger.debug(
            "Listed classes", namespace=namespace, count=len(classes)
        )
        return [describe(classes[identity]) for identity in sorted(classes)]

    def _import_modules(self, namespace: str) -> List[ModuleType]:
        try:
            root = importlib.import_module(namespace)
        except Exception as e:
            raise DiscoveryError(
                f"Cannot import namespace {namespace}: {e}",
                namespace=namespace,
                cause=e,
            ) from e

        modules = [root]
        package_path = getattr(root, "__path__", None)
        if package_path is None:
            return modules

        def on_error(module_name: str) -> None:
            raise DiscoveryError(
                f"Cannot scan package {module_name}",
                namespace=namespace,
                context={"module": module_name},
            )

        try:
            for info in pkgutil.walk_packages(
                package_path, prefix=f"{namespace}.", onerror=on_error
            ):
                modules.append(importlib.import_module(info.name))
        except DiscoveryError:
            raise
        except Exception as e:
            raise DiscoveryError(
                f"Cannot import module under {namespace}: {e}",
                namespace=namespace,
                cause=e,
            ) from e

        logger.debug("Imported modules", namespace=namespace, count=len(modules))
        return modules

    def _with_nested(self, cls: type) -> Iterator[type]:
        yield cls
        if not self.include_nested:
            return
        prefix = f"{cls.__qualname__}."
        for attribute in vars(cls).values():
            if (
                inspect.isclass(attribute)
                and attribute.__module__ == cls.__module__
                and attribute.__qualname__.startswith(prefix)
            ):
                yield from self._with_nested(attribute)


class StaticTypeCatalog:
    """Catalog over an explicit registration list.

    Entries may be classes (described automatically) or prebuilt
    descriptors carrying their own property lists.
    """

    def __init__(self, entries: Iterable[Union[type, TypeDescriptor]] = ()):
        self._entries: Dict[str, TypeDescriptor] = {}
        for entry in entries:
            self.register(entry)

    def register(
        self,
        entry: Union[type, TypeDescriptor],
        properties: Optional[Iterable[PropertyDescriptor]] = None,
    ) -> TypeDescriptor:
        """Register a class or descriptor.

        Args:
            entry: Class or TypeDescriptor
            properties: Explicit property list for a class entry

        Returns:
            The registered descriptor
        """
        if isinstance(entry, TypeDescriptor):
            descriptor = entry
        else:
            descriptor = describe(entry, properties=properties)
        self._entries[descriptor.identity] = descriptor
        return descriptor

    def list_types(self, namespace: str) -> List[TypeDescriptor]:
        """Registered descriptors whose identity lies under the namespace.

        Raises:
            DiscoveryError: If nothing is registered under the namespace
        """
        _require_namespace(namespace)
        prefix = f"{namespace}."
        found = [
            self._entries[identity]
            for identity in sorted(self._entries)
            if identity.startswith(prefix)
        ]
        if not found:
            raise DiscoveryError(
                f"No types registered under {namespace}", namespace=namespace
            )
        return found


def _require_namespace(namespace: str) -> None:
    if not namespace or not namespace.strip():
        raise DiscoveryError("Namespace must be a non-empty package name")


__all__ = ["PackageTypeCatalog", "StaticTypeCatalog", "TypeCatalog"]
