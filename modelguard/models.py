"""Data models for model validation.

This module defines the core data structures shared by discovery, the
checkers and the harness.

Philosophy:
- Immutable dataclasses for descriptors and violations
- Clear type hints for self-documentation
- Simple enums for classification
"""

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple


class TypeKind(Enum):
    """Classification of a discovered type."""

    ENUM = "enum"
    DATA_CLASS = "data_class"


class ViolationKind(Enum):
    """Which checker reported a violation."""

    CONVENTION = "convention"
    EQUALITY_CONTRACT = "equality_contract"
    HASH_CODE = "hash_code"
    ENUM_ACCESSOR = "enum_accessor"
    INVOCATION_ERROR = "invocation_error"


class ContractWarning(str, Enum):
    """Relaxations of the equality contract check.

    Suppressing a warning disables the check it names for every data class
    in a run.
    """

    ALL_FIELDS_SHOULD_BE_USED = "ALL_FIELDS_SHOULD_BE_USED"
    INHERITED_DIRECTLY_FROM_OBJECT = "INHERITED_DIRECTLY_FROM_OBJECT"
    NONFINAL_FIELDS = "NONFINAL_FIELDS"
    STRICT_INHERITANCE = "STRICT_INHERITANCE"
    NULL_FIELDS = "NULL_FIELDS"
    STRICT_HASHCODE = "STRICT_HASHCODE"
    UNHASHABLE = "UNHASHABLE"


DEFAULT_SUPPRESSIONS: FrozenSet[ContractWarning] = frozenset(
    {
        ContractWarning.ALL_FIELDS_SHOULD_BE_USED,
        ContractWarning.INHERITED_DIRECTLY_FROM_OBJECT,
        ContractWarning.NONFINAL_FIELDS,
        ContractWarning.STRICT_INHERITANCE,
    }
)

DEFAULT_EXCLUDED_SUFFIXES: FrozenSet[str] = frozenset({"Builder", "Test", "IT"})


def type_identity(cls: type) -> str:
    """Fully-qualified identity of a class, e.g. ``pkg.models.Account``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def has_own_constructor(cls: type) -> bool:
    """True when the class defines ``__init__`` or ``__new__`` beyond object's."""
    return cls.__init__ is not object.__init__ or cls.__new__ is not object.__new__


@dataclass(frozen=True)
class PropertyDescriptor:
    """One property of a data class.

    Attributes:
        name: Attribute name read by the getter
        getter: Reads the property from an instance
        setter: Writes the property on an instance, None when read-only
        annotation: Declared type, used to synthesize values
        in_init: Whether the constructor accepts the property
        in_repr: Whether repr() is expected to show the property
        init_name: Constructor keyword when it differs from ``name``
        positional: Whether the constructor only accepts it by position
    """

    name: str
    getter: Callable[[Any], Any]
    setter: Optional[Callable[[Any, Any], None]] = None
    annotation: Any = Any
    in_init: bool = True
    in_repr: bool = True
    init_name: Optional[str] = None
    positional: bool = False

    @property
    def settable(self) -> bool:
        return self.setter is not None

    @property
    def keyword(self) -> str:
        return self.init_name or self.name


@dataclass(frozen=True)
class TypeDescriptor:
    """A discovered type plus the explicit property list the checkers use."""

    cls: type
    kind: TypeKind
    properties: Tuple[PropertyDescriptor, ...] = ()
    factory: Optional[Callable[..., Any]] = None

    @property
    def identity(self) -> str:
        return type_identity(self.cls)

    @property
    def name(self) -> str:
        return self.cls.__name__

    @property
    def is_enum(self) -> bool:
        return self.kind is TypeKind.ENUM

    @property
    def is_abstract(self) -> bool:
        """Abstract classes and protocols cannot be instantiated for checking."""
        return inspect.isabstract(self.cls) or bool(
            getattr(self.cls, "_is_protocol", False)
        )

    def construct(self, values: Mapping[str, Any]) -> Any:
        """Build an instance from property values keyed by property name.

        Positional-only properties are passed by position in declaration
        order. Properties the constructor does not accept are assigned
        through their setters afterwards.
        """
        passed = [
            prop for prop in self.properties if prop.in_init and prop.name in values
        ]
        args = [values[prop.name] for prop in passed if prop.positional]
        kwargs = {
            prop.keyword: values[prop.name] for prop in passed if not prop.positional
        }
        instance = (self.factory or self.cls)(*args, **kwargs)
        for prop in self.properties:
            if not prop.in_init and prop.settable and prop.name in values:
                prop.setter(instance, values[prop.name])
        return instance


@dataclass(frozen=True)
class ExclusionSet:
    """Identities and name suffixes that discovery skips."""

    identities: FrozenSet[str] = frozenset()
    suffixes: FrozenSet[str] = DEFAULT_EXCLUDED_SUFFIXES

    def excludes(self, identity: str) -> bool:
        return identity in self.identities or any(
            identity.endswith(suffix) for suffix in self.suffixes
        )


@dataclass(frozen=True)
class Violation:
    """A single failed check.

    Attributes:
        identity: Identity of the offending type
        kind: Checker that reported the failure
        check: Short name of the failed check (e.g. "getter", "symmetry")
        message: Human-readable explanation
        member: Property, method or field the failure is about
        error: Underlying exception, when the failure is an exception
    """

    identity: str
    kind: ViolationKind
    check: str
    message: str
    member: Optional[str] = None
    error: Optional[BaseException] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"{self.identity} [{self.kind.value}:{self.check}] {self.message}"


@dataclass
class ValidationReport:
    """Result of one validation run."""

    namespace: str
    enums_checked: List[str] = field(default_factory=list)
    data_classes_checked: List[str] = field(default_factory=list)
    abstract_skipped: List[str] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)
    violations: List[Violation] = field(default_factory=list)

    @property
    def has_violations(self) -> bool:
        """Check if any check failed."""
        return len(self.violations) > 0

    @property
    def failed_types(self) -> List[str]:
        return sorted({violation.identity for violation in self.violations})

    def violations_for(self, identity: str) -> List[Violation]:
        return [v for v in self.violations if v.identity == identity]

    def counts_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for violation in self.violations:
            counts[violation.kind.value] = counts.get(violation.kind.value, 0) + 1
        return counts

    def summary(self) -> str:
        """Multi-line summary listing every violation."""
        lines = [
            f"Validated namespace {self.namespace}: "
            f"{len(self.enums_checked)} enums, "
            f"{len(self.data_classes_checked)} data classes, "
            f"{len(self.abstract_skipped)} abstract skipped, "
            f"{len(self.excluded)} excluded, "
            f"{len(self.violations)} violations"
        ]
        lines.extend(f"  - {violation}" for violation in self.violations)
        return "\n".join(lines)


__all__ = [
    "ContractWarning",
    "DEFAULT_EXCLUDED_SUFFIXES",
    "DEFAULT_SUPPRESSIONS",
    "ExclusionSet",
    "PropertyDescriptor",
    "TypeDescriptor",
    "TypeKind",
    "ValidationReport",
    "Violation",
    "ViolationKind",
    "has_own_constructor",
    "type_identity",
]
