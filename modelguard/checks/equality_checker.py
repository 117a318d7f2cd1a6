"""Equality and hash contract checks.

Builds instances from red/blue prefab values and verifies the equals/hash
laws: reflexivity, symmetry, transitivity, consistency, inequality to None,
hash consistency and field significance, plus the subclass and null-field
edge cases. Each relaxation is controlled by a ContractWarning.
"""

import dataclasses
import operator
import types
import typing
from typing import Any, Callable, Dict, FrozenSet, List, Optional

import structlog

from ..exceptions import ValueSynthesisError
from ..models import (
    ContractWarning,
    PropertyDescriptor,
    TypeDescriptor,
    Violation,
    ViolationKind,
)
from ..values import PrefabValues

logger = structlog.get_logger(__name__)

CONSISTENCY_ROUNDS = 3


class _Unrelated:
    """Instance of a type no model should consider equal to itself."""

    def __repr__(self) -> str:
        return "<unrelated>"


def check_equality_contract(
    descriptor: TypeDescriptor,
    suppressions: FrozenSet[ContractWarning],
    prefab: PrefabValues,
) -> List[Violation]:
    """Verify the equality and hash contract of a data class.

    Args:
        descriptor: Descriptor of a non-abstract data class
        suppressions: Contract warnings to ignore
        prefab: Value source for building instances

    Returns:
        List of EQUALITY_CONTRACT violations
    """
    return _EqualityContract(descriptor, suppressions, prefab).run()


def check_hash_code(
    descriptor: TypeDescriptor,
    suppressions: FrozenSet[ContractWarning],
    prefab: PrefabValues,
) -> List[Violation]:
    """Check that a populated instance does not hash to 0.

    Unhashable classes are left to the equality contract check.
    """
    if descriptor.cls.__hash__ is None:
        return []

    def violation(message: str, error: Optional[BaseException] = None) -> Violation:
        return Violation(
            identity=descriptor.identity,
            kind=ViolationKind.HASH_CODE,
            check="non_zero",
            message=message,
            error=error,
        )

    try:
        instance = descriptor.construct(prefab.values_for(descriptor, "red"))
        value = hash(instance)
    except ValueSynthesisError as e:
        return [violation(str(e), e)]
    except Exception as e:
        return [violation(f"hash() of {descriptor.name} raised {type(e).__name__}: {e}", e)]

    if value == 0:
        return [
            violation(
                f"hash() of a populated {descriptor.name} is 0; "
                "__hash__ does not appear to derive from field values"
            )
        ]
    return []


class _EqualityContract:
    """One equality contract verification for one class."""

    def __init__(
        self,
        descriptor: TypeDescriptor,
        suppressions: FrozenSet[ContractWarning],
        prefab: PrefabValues,
    ):
        self.descriptor = descriptor
        self.suppressions = suppressions
        self.prefab = prefab
        self.violations: List[Violation] = []

    def suppressed(self, warning: ContractWarning) -> bool:
        return warning in self.suppressions

    def violation(
        self,
        check: str,
        message: str,
        member: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.violations.append(
            Violation(
                identity=self.descriptor.identity,
                kind=ViolationKind.EQUALITY_CONTRACT,
                check=check,
                message=message,
                member=member,
                error=error,
            )
        )

    def attempt(self, check: str, action: str, func: Callable[[], Any]) -> Any:
        """Run user code, turning an exception into a violation.

        Returns the result, or ``_FAILED`` when the call raised.
        """
        try:
            return func()
        except Exception as e:
            self.violation(
                check,
                f"{action} raised {type(e).__name__}: {e}",
                error=e,
            )
            return _FAILED

    def run(self) -> List[Violation]:
        cls = self.descriptor.cls
        name = self.descriptor.name

        try:
            reds = self.prefab.values_for(self.descriptor, "red")
            blues = self.prefab.values_for(self.descriptor, "blue")
        except ValueSynthesisError as e:
            self.violation("value_synthesis", str(e), error=e)
            return self.violations

        if cls.__eq__ is object.__eq__:
            if not self.suppressed(ContractWarning.INHERITED_DIRECTLY_FROM_OBJECT):
                self.violation(
                    "inherited_from_object",
                    f"{name} inherits __eq__ directly from object; "
                    "instances compare by identity",
                )
            return self.violations

        instances = self.attempt(
            "instantiation",
            f"Constructing {name}",
            lambda: [self.descriptor.construct(reds) for _ in range(3)],
        )
        if instances is _FAILED:
            return self.violations
        a, b, c = instances

        hashable = cls.__hash__ is not None
        if not hashable and not self.suppressed(ContractWarning.UNHASHABLE):
            self.violation(
                "hashable",
                f"{name} defines __eq__ but is unhashable (__hash__ is None)",
            )

        self._check_laws(a, b, c, hashable)
        significant = self._check_significance(a, reds, blues, hashable)

        if (
            hashable
            and not self.suppressed(ContractWarning.NONFINAL_FIELDS)
            and any(prop.settable for prop in significant)
        ):
            mutable = ", ".join(prop.name for prop in significant if prop.settable)
            self.violation(
                "nonfinal_fields",
                f"Mutability: {name} is hashable but equality relies on "
                f"mutable fields: {mutable}",
            )

        self._check_subclass(a, reds)
        if self._null_fields_checked():
            self._check_null_fields(a, reds, hashable)

        logger.debug(
            "Equality contract check finished",
            cls=self.descriptor.identity,
            violations=len(self.violations),
        )
        return self.violations

    def _check_laws(self, a: Any, b: Any, c: Any, hashable: bool) -> None:
        name = self.descriptor.name

        reflexive = self.attempt("reflexivity", "a == a", lambda: a == a)
        if reflexive is not _FAILED and not reflexive:
            self.violation("reflexivity", f"Reflexivity: {name} does not equal itself")

        ab = self.attempt("identical_copy", "a == b", lambda: a == b)
        if ab is _FAILED:
            return
        if not ab:
            self.violation(
                "identical_copy",
                f"Reflexivity: {name} does not equal an identical copy of itself",
            )

        ba = self.attempt("symmetry", "b == a", lambda: b == a)
        if ba is not _FAILED and bool(ab) != bool(ba):
            self.violation("symmetry", f"Symmetry: a == b is {ab} but b == a is {ba}")

        bc = self.attempt("transitivity", "b == c", lambda: b == c)
        ac = self.attempt("transitivity", "a == c", lambda: a == c)
        if ab and bc and bc is not _FAILED and ac is not _FAILED and not ac:
            self.violation(
                "transitivity",
                "Transitivity: a == b and b == c but a != c",
            )

        rounds = [
            self.attempt("consistency", "a == b", lambda: bool(a == b))
            for _ in range(CONSISTENCY_ROUNDS)
        ]
        if _FAILED not in rounds and len(set(rounds)) > 1:
            self.violation(
                "consistency",
                f"Consistency: repeated a == b returned {rounds}",
            )

        to_none = self.attempt("non_nullity", "a == None", lambda: operator.eq(a, None))
        if to_none is not _FAILED and to_none:
            self.violation("non_nullity", f"Non-nullity: {name} equals None")

        other = _Unrelated()
        to_other = self.attempt(
            "unrelated_type", "a == <unrelated>", lambda: a == other
        )
        if to_other is not _FAILED and to_other:
            self.violation(
                "unrelated_type", f"{name} equals an instance of an unrelated type"
            )

        if hashable and ab:
            hashes = self.attempt(
                "hash_consistency", "hash()", lambda: (hash(a), hash(b))
            )
            if hashes is not _FAILED and hashes[0] != hashes[1]:
                self.violation(
                    "hash_consistency",
                    f"hashCode: equal instances have different hashes "
                    f"{hashes[0]} and {hashes[1]}",
                )

    def _check_significance(
        self,
        a: Any,
        reds: Dict[str, Any],
        blues: Dict[str, Any],
        hashable: bool,
    ) -> List[PropertyDescriptor]:
        """Vary one field at a time; return the fields equality relies on."""
        significant: List[PropertyDescriptor] = []

        for prop in self.descriptor.properties:
            if prop.name not in reds or reds[prop.name] == blues[prop.name]:
                continue

            values = dict(reds)
            values[prop.name] = blues[prop.name]
            variant = self.attempt(
                "significant_fields",
                f"Constructing with {prop.name}={blues[prop.name]!r}",
                lambda: self.descriptor.construct(values),
            )
            if variant is _FAILED:
                continue

            equal = self.attempt(
                "significant_fields", f"comparing on {prop.name}", lambda: a == variant
            )
            if equal is _FAILED:
                continue
            if not equal:
                significant.append(prop)

            if hashable:
                hashes = self.attempt(
                    "significant_fields",
                    f"hash() with {prop.name} changed",
                    lambda: (hash(a), hash(variant)),
                )
                if hashes is _FAILED:
                    continue
                same_hash = hashes[0] == hashes[1]
                if equal and not same_hash:
                    self.violation(
                        "significant_fields",
                        f"Significant fields: hash relies on {prop.name}, "
                        "but __eq__ does not",
                        member=prop.name,
                    )
                elif (
                    not equal
                    and same_hash
                    and not self.suppressed(ContractWarning.STRICT_HASHCODE)
                ):
                    self.violation(
                        "significant_fields",
                        f"Significant fields: __eq__ relies on {prop.name}, "
                        "but hash does not",
                        member=prop.name,
                    )

            if equal and not self.suppressed(
                ContractWarning.ALL_FIELDS_SHOULD_BE_USED
            ):
                self.violation(
                    "significant_fields",
                    f"Significant fields: __eq__ does not use {prop.name}, "
                    "or it is stateless",
                    member=prop.name,
                )

        return significant

    def _check_subclass(self, a: Any, reds: Dict[str, Any]) -> None:
        cls = self.descriptor.cls
        name = self.descriptor.name
        final = bool(getattr(cls, "__final__", False))

        if not final and not self.suppressed(ContractWarning.STRICT_INHERITANCE):
            self.violation(
                "strict_inheritance",
                f"Subclass: {name} is not marked @final; a subclass could "
                "break the symmetry of __eq__",
            )
        if final:
            return

        try:
            subclass = type(f"{name}Subclass", (cls,), {"__module__": cls.__module__})
        except TypeError as e:
            logger.debug(
                "Class refuses subclassing, skipping subclass symmetry",
                cls=self.descriptor.identity,
                error=str(e),
            )
            return

        sub_descriptor = dataclasses.replace(self.descriptor, factory=subclass)
        sub = self.attempt(
            "subclass",
            f"Constructing a subclass of {name}",
            lambda: sub_descriptor.construct(reds),
        )
        if sub is _FAILED:
            return
        forward = self.attempt("subclass", "a == subclass instance", lambda: a == sub)
        backward = self.attempt("subclass", "subclass instance == a", lambda: sub == a)
        if _FAILED not in (forward, backward) and bool(forward) != bool(backward):
            self.violation(
                "subclass",
                f"Symmetry: {name} and a subclass instance disagree on equality "
                f"({forward} vs {backward})",
            )

    def _null_fields_checked(self) -> bool:
        return not self.suppressed(ContractWarning.NULL_FIELDS)

    def _check_null_fields(
        self, a: Any, reds: Dict[str, Any], hashable: bool
    ) -> None:
        for prop in self.descriptor.properties:
            if prop.name not in reds or not admits_none(prop.annotation):
                continue

            values = dict(reds)
            values[prop.name] = None
            action = f"with {prop.name}=None"
            x = self.attempt(
                "null_fields",
                f"Constructing {action}",
                lambda: self.descriptor.construct(values),
            )
            if x is _FAILED:
                continue
            self.attempt("null_fields", f"x == x {action}", lambda: x == x)
            self.attempt("null_fields", f"a == x {action}", lambda: a == x)
            self.attempt("null_fields", f"x == a {action}", lambda: x == a)
            if hashable:
                self.attempt("null_fields", f"hash(x) {action}", lambda: hash(x))


def admits_none(annotation: Any) -> bool:
    """True for Optional[...] and unions that include None."""
    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return admits_none(typing.get_args(annotation)[0])
    if origin is typing.Union or origin is types.UnionType:
        return type(None) in typing.get_args(annotation)
    return False


class _Failed:
    def __repr__(self) -> str:
        return "<failed>"


_FAILED = _Failed()


__all__ = ["admits_none", "check_equality_contract", "check_hash_code"]
