"""Data class convention checks.

Verifies construction, getters, setters and repr for a data class using
synthesized red/blue property values.

Checks:
- constructor: an instance can be built from red values
- getter: every constructor property reads back the value passed in
- setter: every writable property stores a blue value that reads back
- repr: __repr__ is overridden and shows every repr'd property value
"""

from typing import Any, Dict, List, Optional

import structlog

from ..exceptions import ValueSynthesisError
from ..models import PropertyDescriptor, TypeDescriptor, Violation, ViolationKind
from ..values import PrefabValues

logger = structlog.get_logger(__name__)


def check_conventions(
    descriptor: TypeDescriptor, prefab: PrefabValues
) -> List[Violation]:
    """Check accessor, mutator, repr and constructor conventions.

    Args:
        descriptor: Descriptor of a non-abstract data class
        prefab: Value source for building instances

    Returns:
        List of CONVENTION violations
    """
    violations: List[Violation] = []

    def violation(
        check: str,
        message: str,
        member: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        violations.append(
            Violation(
                identity=descriptor.identity,
                kind=ViolationKind.CONVENTION,
                check=check,
                message=message,
                member=member,
                error=error,
            )
        )

    try:
        reds = prefab.values_for(descriptor, "red")
        blues = prefab.values_for(descriptor, "blue")
    except ValueSynthesisError as e:
        violation("value_synthesis", str(e), error=e)
        return violations

    try:
        instance = descriptor.construct(reds)
    except Exception as e:
        violation(
            "constructor",
            f"Constructor of {descriptor.name} failed: {type(e).__name__}: {e}",
            error=e,
        )
        return violations

    for prop in descriptor.properties:
        if prop.in_init:
            _check_getter(prop, instance, reds[prop.name], violation)

    _check_repr(descriptor, instance, reds, violation)

    for prop in descriptor.properties:
        if prop.settable:
            try:
                target = descriptor.construct(reds)
            except Exception as e:
                violation(
                    "constructor",
                    f"Constructor of {descriptor.name} failed: {e}",
                    member=prop.name,
                    error=e,
                )
                continue
            _check_setter(prop, target, blues[prop.name], violation)

    logger.debug(
        "Convention check finished",
        cls=descriptor.identity,
        violations=len(violations),
    )
    return violations


def _check_getter(
    prop: PropertyDescriptor, instance: Any, expected: Any, violation
) -> None:
    try:
        actual = prop.getter(instance)
    except Exception as e:
        violation(
            "getter",
            f"Getter for {prop.name} raised {type(e).__name__}: {e}",
            member=prop.name,
            error=e,
        )
        return
    if actual != expected:
        violation(
            "getter",
            f"Getter for {prop.name} returned {actual!r}, expected {expected!r}",
            member=prop.name,
        )


def _check_setter(
    prop: PropertyDescriptor, instance: Any, value: Any, violation
) -> None:
    try:
        prop.setter(instance, value)
        actual = prop.getter(instance)
    except Exception as e:
        violation(
            "setter",
            f"Setter for {prop.name} raised {type(e).__name__}: {e}",
            member=prop.name,
            error=e,
        )
        return
    if actual != value:
        violation(
            "setter",
            f"Setter for {prop.name} stored {actual!r}, expected {value!r}",
            member=prop.name,
        )


def _check_repr(
    descriptor: TypeDescriptor, instance: Any, values: Dict[str, Any], violation
) -> None:
    if type(instance).__repr__ is object.__repr__:
        violation("repr", f"{descriptor.name} does not implement __repr__")
        return
    try:
        text = repr(instance)
    except Exception as e:
        violation("repr", f"repr() raised {type(e).__name__}: {e}", error=e)
        return
    for prop in descriptor.properties:
        if not prop.in_repr or prop.name not in values:
            continue
        value = values[prop.name]
        if repr(value) not in text and str(value) not in text:
            violation(
                "repr",
                f"repr() does not include {prop.name}={value!r}: {text}",
                member=prop.name,
            )


__all__ = ["check_conventions"]
