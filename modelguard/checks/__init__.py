"""Checkers for discovered enums and data classes.

Each checker is a plain function of (descriptor, configuration) returning a
list of violations; none keeps state between classes.

Public API (the "studs"):
    check_enum: Enum accessors never return None
    check_conventions: Constructor, getters, setters and repr
    check_equality_contract: Equality and hash laws
    check_hash_code: Populated instances do not hash to 0
"""

from .convention_checker import check_conventions
from .enum_checker import ACCESSOR_PREFIXES, accessor_names, check_enum
from .equality_checker import admits_none, check_equality_contract, check_hash_code

__all__ = [
    "ACCESSOR_PREFIXES",
    "accessor_names",
    "admits_none",
    "check_conventions",
    "check_enum",
    "check_equality_contract",
    "check_hash_code",
]
