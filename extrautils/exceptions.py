"""
Unified exception hierarchy for extrautils.

All library errors derive from ExtraUtilsError so callers can catch every
failure raised by reflection, injection, tracing or configuration with a
single except clause.
"""

from typing import Any


class ExtraUtilsError(Exception):
    """
    Base exception for all extrautils errors.

    Example:
        try:
            inject(Patch)
        except ExtraUtilsError as e:
            lg.error("patch failed", extra={"exception": e})
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ReflectionError(ExtraUtilsError):
    """
    Class introspection errors.

    Examples:
        - Asking for the parent of ``object``
        - Passing something that is neither a class nor an instance handle
    """

    pass


class ConstructionError(ReflectionError):
    """
    Raised when a default (zero-argument) instance cannot be built.

    The exception raised by the constructor is chained as
    ``__cause__``.
    """

    pass


class InjectionError(ExtraUtilsError):
    """
    Trait injection errors.

    Examples:
        - Destination is a built-in type or an instance of one
        - Destination rejects attribute assignment (frozen, slotted)
    """

    pass


class SerializationError(ExtraUtilsError):
    """Raised by a strict serializer when a value cannot be rendered."""

    pass


class ConfigError(ExtraUtilsError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found
        - Invalid YAML syntax
        - Unresolvable ${...} reference
    """

    pass


class ValidationError(ExtraUtilsError):
    """Configuration failed schema validation."""

    pass
