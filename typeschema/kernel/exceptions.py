"""Core exception hierarchy for typeschema.

This module provides a centralized exception hierarchy so that callers can
handle every typeschema failure through a single base class. All typeschema
exceptions inherit from TypeSchemaError.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class TypeSchemaError(Exception):
    """Base exception for all typeschema errors.

    Catch this to handle all typeschema errors.
    """

    __slots__ = ()


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(TypeSchemaError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("simple_type_mappings", "entry must define 'type'")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the component with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(TypeSchemaError):
    """Raised when data validation fails.

    Examples
    --------
    Example usage::

        raise ValidationError("format", "must be one of dict, json, yaml", value="xml")
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


class ResolveError(TypeSchemaError):
    """Raised when an import path cannot be resolved."""

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"Cannot resolve '{kind}': {reason}")


# ============================================================================
# Schema Generation Errors
# ============================================================================


class SchemaGenerationError(TypeSchemaError):
    """Base exception for failures that abort a schema build."""

    __slots__ = ()


class UnsupportedAnnotationValueError(SchemaGenerationError):
    """Raised when custom annotation metadata cannot be represented in a schema.

    Nested annotation values, array elements that do not coerce to a JSON
    value and unknown value shapes all end up here. The build is aborted
    rather than silently dropping author-intended contract information.

    Examples
    --------
    Example usage::

        raise UnsupportedAnnotationValueError(
            "app.models.User", "app.meta.Audit", "owner", "nested annotations"
        )
    """

    def __init__(self, element: str, annotation: str, attribute: str, reason: str) -> None:
        """Initialize unsupported annotation value error.

        Args
        ----
            element: Type or member the annotation is attached to
            annotation: Name of the custom annotation
            attribute: Attribute holding the offending value
            reason: What is unsupported about the value
        """
        super().__init__(
            f"Unsupported value for '{annotation}.{attribute}' on '{element}': {reason}"
        )
        self.element = element
        self.annotation = annotation
        self.attribute = attribute
        self.reason = reason


__all__ = [
    "ConfigurationError",
    "ResolveError",
    "SchemaGenerationError",
    "TypeSchemaError",
    "UnsupportedAnnotationValueError",
    "ValidationError",
]
