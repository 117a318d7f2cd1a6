"""Enum accessor checks.

Invokes every zero-argument accessor declared on an enumeration against every
constant and reports any accessor that yields None.

Philosophy:
- Only members declared on the enum itself are examined
- One invocation per (member, constant) pair
- Exceptions from examined members are wrapped, never swallowed
"""

import functools
import inspect
from typing import Any, Callable, Iterator, List, Optional, Tuple

import structlog

from ..exceptions import wrap_invocation_exception
from ..models import TypeDescriptor, Violation, ViolationKind

logger = structlog.get_logger(__name__)

# Naming convention for accessor and mutator methods
ACCESSOR_PREFIXES: Tuple[str, ...] = ("get_", "set_")

# Enum machinery that is never treated as an accessor
ENUM_MACHINERY = frozenset({"name", "value", "values", "value_of", "mro"})


def check_enum(descriptor: TypeDescriptor) -> List[Violation]:
    """Check that no accessor of an enum returns None for any constant.

    Args:
        descriptor: Descriptor of an enumeration type

    Returns:
        List of violations, empty when every accessor yields a value
    """
    enum_class = descriptor.cls
    constants = list(enum_class)
    violations: List[Violation] = []

    for member_name in accessor_names(enum_class):
        for constant in constants:
            label = f"{enum_class.__name__}.{constant.name}"
            try:
                accessor = _bind(constant, member_name)
                if accessor is None:
                    continue
                result = accessor()
            except Exception as e:
                error = wrap_invocation_exception(e, member_name, label)
                logger.warning(
                    "Enum accessor raised",
                    enum=descriptor.identity,
                    member=member_name,
                    constant=label,
                    error=repr(e),
                )
                violations.append(
                    Violation(
                        identity=descriptor.identity,
                        kind=ViolationKind.INVOCATION_ERROR,
                        check="invocation",
                        message=str(error),
                        member=member_name,
                        error=error,
                    )
                )
                continue

            if result is None:
                violations.append(
                    Violation(
                        identity=descriptor.identity,
                        kind=ViolationKind.ENUM_ACCESSOR,
                        check="non_null",
                        message=f"Method {member_name} returned None for {label}",
                        member=member_name,
                    )
                )

    return violations


def accessor_names(enum_class: type) -> Iterator[str]:
    """Names of accessor-like members declared directly on an enum class."""
    members = set(enum_class.__members__)
    for name, attribute in sorted(vars(enum_class).items()):
        if name.startswith("_") or name in members or name in ENUM_MACHINERY:
            continue
        if isinstance(attribute, (property, functools.cached_property)):
            yield name
        elif _is_callable_member(attribute) and name.startswith(ACCESSOR_PREFIXES):
            yield name


def _is_callable_member(attribute: Any) -> bool:
    return isinstance(attribute, (staticmethod, classmethod)) or inspect.isfunction(
        attribute
    )


def _bind(constant: Any, member_name: str) -> Optional[Callable[[], Any]]:
    """Zero-argument callable reading ``member_name`` from a constant.

    Returns None for methods that need arguments beyond ``self``.
    """
    static = inspect.getattr_static(type(constant), member_name)
    if isinstance(static, (property, functools.cached_property)):
        return functools.partial(getattr, constant, member_name)

    bound = getattr(constant, member_name)
    try:
        inspect.signature(bound).bind()
    except TypeError:
        logger.debug(
            "Skipping enum method that takes arguments",
            enum=type(constant).__qualname__,
            member=member_name,
        )
        return None
    return bound


__all__ = ["ACCESSOR_PREFIXES", "accessor_names", "check_enum"]
