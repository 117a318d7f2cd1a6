"""Type descriptors for discovered classes.

Builds the explicit (name, getter, setter) property list the checkers work
from, so no checker has to guess accessors from method names.

Supports:
- dataclasses (fields, frozen, init/repr flags)
- pydantic models (model_fields, frozen config, aliases)
- named tuples (_fields, read-only)
- plain classes whose ``__init__`` or ``__new__`` parameters map to
  attributes or properties
"""

import dataclasses
import enum
import inspect
import operator
import typing
from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog
from pydantic import BaseModel

from .models import (
    PropertyDescriptor,
    TypeDescriptor,
    TypeKind,
    has_own_constructor,
)

logger = structlog.get_logger(__name__)


def describe(
    cls: type,
    properties: Optional[Iterable[PropertyDescriptor]] = None,
    factory: Optional[Callable[..., Any]] = None,
) -> TypeDescriptor:
    """Build a TypeDescriptor for a class.

    Args:
        cls: Class to describe
        properties: Explicit property list; derived from the class when None
        factory: Constructor to use instead of the class itself

    Returns:
        TypeDescriptor classified as ENUM or DATA_CLASS
    """
    if issubclass(cls, enum.Enum):
        return TypeDescriptor(cls=cls, kind=TypeKind.ENUM)
    if properties is None:
        properties = describe_properties(cls)
    return TypeDescriptor(
        cls=cls,
        kind=TypeKind.DATA_CLASS,
        properties=tuple(properties),
        factory=factory,
    )


def describe_properties(cls: type) -> List[PropertyDescriptor]:
    """Derive the property list of a data class."""
    if dataclasses.is_dataclass(cls):
        return _dataclass_properties(cls)
    if issubclass(cls, BaseModel):
        return _pydantic_properties(cls)
    if is_namedtuple(cls):
        return _namedtuple_properties(cls)
    return _plain_class_properties(cls)


def is_namedtuple(cls: type) -> bool:
    """True for ``typing.NamedTuple`` and ``collections.namedtuple`` classes."""
    return issubclass(cls, tuple) and isinstance(getattr(cls, "_fields", None), tuple)


def attribute_setter(name: str) -> Callable[[Any, Any], None]:
    """Setter that assigns an attribute (or runs a property setter)."""

    def setter(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    setter.__name__ = f"set_{name}"
    return setter


def resolve_type_hints(obj: Any) -> Dict[str, Any]:
    """Resolve annotations, falling back to the raw ones on unresolvable names."""
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except (NameError, TypeError, AttributeError) as e:
        logger.debug(
            "Could not resolve type hints, using raw annotations",
            target=getattr(obj, "__qualname__", repr(obj)),
            error=str(e),
        )
        return dict(getattr(obj, "__annotations__", {}))


def _dataclass_properties(cls: type) -> List[PropertyDescriptor]:
    hints = resolve_type_hints(cls)
    frozen = cls.__dataclass_params__.frozen
    properties = []
    for f in dataclasses.fields(cls):
        properties.append(
            PropertyDescriptor(
                name=f.name,
                getter=operator.attrgetter(f.name),
                setter=None if frozen else attribute_setter(f.name),
                annotation=hints.get(f.name, _concrete(f.type)),
                in_init=f.init,
                in_repr=f.repr,
            )
        )
    return properties


def _pydantic_properties(cls: type) -> List[PropertyDescriptor]:
    frozen_model = bool(cls.model_config.get("frozen", False))
    properties = []
    for name, info in cls.model_fields.items():
        frozen = frozen_model or bool(info.frozen)
        alias = info.validation_alias if isinstance(info.validation_alias, str) else None
        properties.append(
            PropertyDescriptor(
                name=name,
                getter=operator.attrgetter(name),
                setter=None if frozen else attribute_setter(name),
                annotation=info.annotation if info.annotation is not None else Any,
                in_init=True,
                in_repr=bool(info.repr),
                init_name=alias or info.alias,
            )
        )
    return properties


def _namedtuple_properties(cls: type) -> List[PropertyDescriptor]:
    hints = resolve_type_hints(cls)
    return [
        PropertyDescriptor(
            name=name,
            getter=operator.attrgetter(name),
            annotation=hints.get(name, Any),
        )
        for name in cls._fields
    ]


def _plain_class_properties(cls: type) -> List[PropertyDescriptor]:
    properties: List[PropertyDescriptor] = []
    seen = set()

    if has_own_constructor(cls):
        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError) as e:
            logger.debug(
                "No constructor signature available",
                cls=cls.__qualname__,
                error=str(e),
            )
            signature = None
        if cls.__init__ is not object.__init__:
            hints = resolve_type_hints(cls.__init__)
        else:
            hints = resolve_type_hints(cls.__new__)

        for param in signature.parameters.values() if signature else ():
            if param.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
            ):
                continue
            static = inspect.getattr_static(cls, param.name, None)
            if isinstance(static, property):
                setter = attribute_setter(param.name) if static.fset else None
            else:
                setter = attribute_setter(param.name)
            properties.append(
                PropertyDescriptor(
                    name=param.name,
                    getter=operator.attrgetter(param.name),
                    setter=setter,
                    annotation=hints.get(param.name, _concrete(param.annotation)),
                    positional=param.kind is inspect.Parameter.POSITIONAL_ONLY,
                )
            )
            seen.add(param.name)

    # Writable properties the constructor does not take
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, member in sorted(vars(klass).items()):
            if name in seen or name.startswith("_"):
                continue
            if isinstance(member, property) and member.fset is not None:
                hints = resolve_type_hints(member.fget) if member.fget else {}
                properties.append(
                    PropertyDescriptor(
                        name=name,
                        getter=operator.attrgetter(name),
                        setter=attribute_setter(name),
                        annotation=hints.get("return", Any),
                        in_init=False,
                    )
                )
                seen.add(name)
    return properties


def _concrete(annotation: Any) -> Any:
    """Raw annotation, or Any where none (or only an unresolved string) exists."""
    if annotation is inspect.Parameter.empty or annotation is dataclasses.MISSING:
        return Any
    if isinstance(annotation, str):
        return Any
    return annotation


__all__ = [
    "attribute_setter",
    "describe",
    "describe_properties",
    "is_namedtuple",
    "resolve_type_hints",
]
