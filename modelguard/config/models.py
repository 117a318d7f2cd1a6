"""
Configuration models for validation runs.

Provides type-safe configuration using pydantic with validation,
defaults, and schema enforcement.
"""

from typing import Any, FrozenSet, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import (
    DEFAULT_EXCLUDED_SUFFIXES,
    DEFAULT_SUPPRESSIONS,
    ContractWarning,
    ExclusionSet,
)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class HarnessConfig(BaseModel):
    """Configuration of one validation run."""

    namespace: Optional[str] = Field(
        default=None,
        description="Dotted package name to scan for models",
    )
    excluded_classes: Set[str] = Field(
        default_factory=set,
        description="Fully-qualified class identities to skip",
    )
    excluded_suffixes: Set[str] = Field(
        default_factory=lambda: set(DEFAULT_EXCLUDED_SUFFIXES),
        description="Class name suffixes to skip",
    )
    suppressed_warnings: Set[ContractWarning] = Field(
        default_factory=lambda: set(DEFAULT_SUPPRESSIONS),
        description="Equality contract checks to relax",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for the harness loggers",
    )

    model_config = ConfigDict(extra="forbid")  # Reject unknown fields

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: Optional[str]) -> Optional[str]:
        """Reject blank namespaces."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("namespace cannot be blank")
        return v

    @field_validator("suppressed_warnings", mode="before")
    @classmethod
    def normalize_warnings(cls, v: Any) -> Any:
        """Accept warning names in any case."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple, set, frozenset)):
            return {
                item.strip().upper() if isinstance(item, str) else item for item in v
            }
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a stdlib level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(_LOG_LEVELS)}, got {v!r}"
            )
        return level

    def exclusion_set(self) -> ExclusionSet:
        return ExclusionSet(
            identities=frozenset(self.excluded_classes),
            suffixes=frozenset(self.excluded_suffixes),
        )

    def suppression_set(self) -> FrozenSet[ContractWarning]:
        return frozenset(self.suppressed_warnings)


__all__ = ["HarnessConfig"]
