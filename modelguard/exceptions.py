"""
Custom Exception Hierarchy for modelguard

This module provides the exception hierarchy used across the harness. Every
error carries structured context so the test runner output points straight
at the offending model, member or constant.
"""

from typing import Any, Dict, List, Optional


class ModelGuardError(Exception):
    """
    Base exception class for all modelguard errors.

    Provides structured error information including context, error codes,
    and optional recovery suggestions.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause!r})"
        if self.recovery_suggestion:
            result += f" (suggestion: {self.recovery_suggestion})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": repr(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


class DiscoveryError(ModelGuardError):
    """Raised when a namespace cannot be resolved or scanned."""

    def __init__(
        self, message: str, namespace: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if namespace is not None:
            context["namespace"] = namespace
        kwargs["context"] = context
        kwargs.setdefault("error_code", "DISCOVERY_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Check that the package is importable and its modules import cleanly",
        )
        super().__init__(message, **kwargs)


class ReflectiveInvocationError(ModelGuardError):
    """Raised when an examined member throws while being invoked."""

    def __init__(
        self,
        message: str,
        member: Optional[str] = None,
        constant: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if member:
            context["member"] = member
        if constant:
            context["constant"] = constant
        kwargs["context"] = context
        kwargs.setdefault("error_code", "REFLECTIVE_INVOCATION_FAILED")
        super().__init__(message, **kwargs)
        self.member = member
        self.constant = constant


class ValueSynthesisError(ModelGuardError):
    """Raised when no prefab value can be produced for a type."""

    def __init__(
        self, message: str, value_type: Optional[Any] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if value_type is not None:
            context["value_type"] = _type_name(value_type)
        kwargs["context"] = context
        kwargs.setdefault("error_code", "VALUE_SYNTHESIS_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Register red/blue values for this type with register_prefab_values()",
        )
        super().__init__(message, **kwargs)


# Configuration-related exceptions
class ConfigurationError(ModelGuardError):
    """Base class for configuration errors."""

    pass


class ConfigError(ConfigurationError):
    """Configuration loading or validation error."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "INVALID_CONFIG")
        super().__init__(message, **kwargs)


class ConfigurationLockedError(ConfigurationError):
    """Raised when configuration is changed after a validation run started."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "CONFIG_LOCKED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Call configuration hooks from configure(), before the run starts",
        )
        super().__init__(message, **kwargs)


class ModelValidationError(ModelGuardError, AssertionError):
    """Raised at the end of a run when any model violated a convention or contract.

    Subclasses AssertionError so test runners report it as a plain failure.
    """

    def __init__(
        self,
        message: str,
        violations: Optional[List[Any]] = None,
        **kwargs: Any,
    ) -> None:
        violations = list(violations or [])
        context = kwargs.get("context", {})
        context["violation_count"] = len(violations)
        kwargs["context"] = context
        kwargs.setdefault("error_code", "MODEL_VALIDATION_FAILED")
        super().__init__(message, **kwargs)
        self.violations = violations


def wrap_invocation_exception(
    exc: BaseException, member: str, constant: Any
) -> ReflectiveInvocationError:
    """
    Wrap an exception thrown by an examined member.

    Args:
        exc: The original exception
        member: Name of the member that was invoked
        constant: The object the member was invoked on

    Returns:
        ReflectiveInvocationError: Wrapped exception identifying member and constant
    """
    error = ReflectiveInvocationError(
        f"Invoking {member} on {constant} raised {type(exc).__name__}: {exc}",
        member=member,
        constant=str(constant),
        cause=exc,
    )
    error.__cause__ = exc
    return error


def _type_name(value_type: Any) -> str:
    return getattr(value_type, "__qualname__", None) or repr(value_type)
