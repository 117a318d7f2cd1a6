"""Prefab value synthesis.

Produces two distinct, deterministic values ("red" and "blue") for an
annotated type so the checkers can build instances that are equal (all red)
or differ in exactly one property (one blue).

Philosophy:
- Deterministic values, no randomness
- Recursive construction for nested models
- Explicit registration for anything unknown
"""

import dataclasses
import enum
import types
import typing
from collections import abc
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from fractions import Fraction
from pathlib import Path, PurePath
from typing import Any, Callable, Dict, Mapping, Optional, Set, Tuple
from uuid import UUID

import structlog
from pydantic import BaseModel

from .exceptions import ValueSynthesisError
from .models import PropertyDescriptor, TypeDescriptor, has_own_constructor

logger = structlog.get_logger(__name__)

ValuePair = Tuple[Any, Any]

_BUILTIN_VALUES: Dict[Any, ValuePair] = {
    int: (1, 2),
    float: (0.5, 1.5),
    complex: (1j, 2j),
    bool: (True, False),
    str: ("red", "blue"),
    bytes: (b"red", b"blue"),
    bytearray: (bytearray(b"red"), bytearray(b"blue")),
    Decimal: (Decimal("1.5"), Decimal("2.5")),
    Fraction: (Fraction(1, 3), Fraction(2, 3)),
    date: (date(2020, 1, 1), date(2021, 6, 15)),
    datetime: (datetime(2020, 1, 1, 12, 0), datetime(2021, 6, 15, 8, 30)),
    time: (time(9, 0), time(17, 30)),
    timedelta: (timedelta(seconds=1), timedelta(days=1)),
    UUID: (
        UUID("00000000-0000-0000-0000-000000000001"),
        UUID("00000000-0000-0000-0000-000000000002"),
    ),
    Path: (Path("red"), Path("blue")),
    PurePath: (PurePath("red"), PurePath("blue")),
    object: ("red", "blue"),
    Any: ("red", "blue"),
    type(None): (None, None),
}

_SEQUENCE_ORIGINS = {list, abc.Sequence, abc.MutableSequence, abc.Iterable, abc.Collection}
_SET_ORIGINS = {set, abc.Set, abc.MutableSet}
_MAPPING_ORIGINS = {dict, abc.Mapping, abc.MutableMapping}


class PrefabValues:
    """Red/blue value pairs per type.

    Built-in scalar types, containers, enums and nested models are handled
    automatically; anything else must be registered.
    """

    def __init__(self, registrations: Optional[Mapping[Any, ValuePair]] = None):
        """Initialize with optional extra registrations.

        Args:
            registrations: Mapping of type to (red, blue) values
        """
        self._values: Dict[Any, ValuePair] = dict(_BUILTIN_VALUES)
        self._building: Set[type] = set()
        for value_type, (red, blue) in (registrations or {}).items():
            self.register(value_type, red, blue)

    def register(self, value_type: Any, red: Any, blue: Any) -> None:
        """Register values for a type. Red and blue must not be equal.

        Raises:
            ValueSynthesisError: If red equals blue
        """
        if red == blue:
            raise ValueSynthesisError(
                "Prefab red and blue values must differ", value_type=value_type
            )
        self._values[value_type] = (red, blue)

    def is_registered(self, value_type: Any) -> bool:
        return value_type in self._values

    def red(self, value_type: Any) -> Any:
        return self.pair(value_type)[0]

    def blue(self, value_type: Any) -> Any:
        return self.pair(value_type)[1]

    def pair(self, value_type: Any) -> ValuePair:
        """Return (red, blue) for a type annotation.

        Raises:
            ValueSynthesisError: If the type is unknown or recursive
        """
        if _hashable(value_type) and value_type in self._values:
            return self._values[value_type]

        origin = typing.get_origin(value_type)
        args = typing.get_args(value_type)

        if origin is typing.Annotated:
            return self.pair(args[0])
        if origin is typing.Union or origin is types.UnionType:
            candidates = [arg for arg in args if arg is not type(None)]
            if not candidates:
                return (None, None)
            return self.pair(candidates[0])
        if origin is typing.Literal:
            return (args[0], args[1] if len(args) > 1 else args[0])
        if origin is typing.ClassVar or origin is typing.Final:
            return self.pair(args[0]) if args else self.pair(Any)
        if origin is not None:
            return self._container_pair(value_type, origin, args)
        if isinstance(value_type, typing.TypeVar):
            return self.pair(Any)
        if isinstance(value_type, (str, typing.ForwardRef)):
            raise ValueSynthesisError(
                f"Unresolved forward reference {value_type!r}", value_type=value_type
            )
        if isinstance(value_type, type):
            return self._class_pair(value_type)

        raise ValueSynthesisError(
            f"No prefab values for {value_type!r}", value_type=value_type
        )

    def values_for(
        self, descriptor: TypeDescriptor, color: str = "red"
    ) -> Dict[str, Any]:
        """Property values for every property of a descriptor, all one color."""
        index = 0 if color == "red" else 1
        return {
            prop.name: self.pair(prop.annotation)[index]
            for prop in descriptor.properties
            if _populated(prop)
        }

    def _container_pair(self, value_type: Any, origin: Any, args: Tuple) -> ValuePair:
        if origin in _SEQUENCE_ORIGINS:
            red, blue = self.pair(args[0] if args else Any)
            return ([red], [blue])
        if origin in _SET_ORIGINS:
            red, blue = self.pair(args[0] if args else Any)
            return _keyed(value_type, lambda: ({red}, {blue}))
        if origin is frozenset:
            red, blue = self.pair(args[0] if args else Any)
            return _keyed(
                value_type, lambda: (frozenset({red}), frozenset({blue}))
            )
        if origin is tuple:
            if not args:
                return (("red",), ("blue",))
            if len(args) == 2 and args[1] is Ellipsis:
                red, blue = self.pair(args[0])
                return ((red,), (blue,))
            pairs = [self.pair(arg) for arg in args]
            return (tuple(p[0] for p in pairs), tuple(p[1] for p in pairs))
        if origin in _MAPPING_ORIGINS:
            key_type, value_type_arg = args if args else (Any, Any)
            red_key, blue_key = self.pair(key_type)
            red_value, blue_value = self.pair(value_type_arg)
            return _keyed(
                value_type,
                lambda: ({red_key: red_value}, {blue_key: blue_value}),
            )
        if origin is type:
            return (int, str)
        if isinstance(origin, type):
            # Parameterized user generics, e.g. Box[int]
            return self._class_pair(origin)
        raise ValueSynthesisError(
            f"No prefab values for {value_type!r}", value_type=value_type
        )

    def _class_pair(self, cls: type) -> ValuePair:
        if cls in (list, set, frozenset, tuple, dict):
            return self._container_pair(cls, cls, ())
        if issubclass(cls, enum.Enum):
            members = list(cls)
            if not members:
                raise ValueSynthesisError(
                    f"Enum {cls.__qualname__} has no members", value_type=cls
                )
            return (members[0], members[1] if len(members) > 1 else members[0])
        if cls in self._building:
            raise ValueSynthesisError(
                f"Recursive data structure: {cls.__qualname__} contains itself",
                value_type=cls,
            )
        if not _buildable(cls):
            raise ValueSynthesisError(
                f"No prefab values for {cls.__qualname__}", value_type=cls
            )

        from .descriptors import describe

        descriptor = describe(cls)
        self._building.add(cls)
        try:
            red = descriptor.construct(self.values_for(descriptor, "red"))
            blue = descriptor.construct(self.values_for(descriptor, "blue"))
        except ValueSynthesisError:
            raise
        except Exception as e:
            raise ValueSynthesisError(
                f"Could not construct {cls.__qualname__}: {e}",
                value_type=cls,
                cause=e,
            ) from e
        finally:
            self._building.discard(cls)

        logger.debug("Built nested prefab values", value_type=cls.__qualname__)
        self._values[cls] = (red, blue)
        return (red, blue)


def _populated(prop: PropertyDescriptor) -> bool:
    return prop.in_init or prop.settable


def _keyed(value_type: Any, build: Callable[[], ValuePair]) -> ValuePair:
    """Build a set or mapping pair; element values must be hashable."""
    try:
        return build()
    except TypeError as e:
        raise ValueSynthesisError(
            f"Cannot build {value_type!r} from unhashable prefab values: {e}",
            value_type=value_type,
            cause=e,
        ) from e


def _buildable(cls: type) -> bool:
    if dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel):
        return True
    # Plain classes only when they declare their own constructor
    return has_own_constructor(cls) and cls.__module__ != "builtins"


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


__all__ = ["PrefabValues", "ValuePair"]
