"""
Basic exception classes for l10n-catalog.

This module contains the exception hierarchy used throughout the catalog,
resolution and storage packages without creating import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    VALIDATION = "validation"
    PARSE = "parse"
    CONFIGURATION = "configuration"
    LIFECYCLE = "lifecycle"
    UNKNOWN = "unknown"


class L10nCatalogError(Exception):
    """Base exception class for l10n-catalog specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class CatalogValidationError(L10nCatalogError):
    """Malformed catalog input (empty unit id, variant without a language)."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class DuplicateUnitError(CatalogValidationError):
    """Two units in one document share an id."""

    def __init__(self, unit_id: str, context: object | None = None) -> None:
        super().__init__(
            f"Duplicate unit id in document: {unit_id!r}",
            context=context,
        )
        self.unit_id: str = unit_id


class CatalogParseError(L10nCatalogError):
    """Bytes could not be decoded into a catalog document."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PARSE,
            severity=ErrorSeverity.MEDIUM,
            recoverable=True,
            user_message=user_message,
            context=context,
        )


class ConfigurationError(L10nCatalogError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class ManagerUnavailableError(L10nCatalogError):
    """A lookup was routed to an application with no usable manager."""

    def __init__(
        self,
        message: str,
        app_id: str | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.LIFECYCLE,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=app_id,
        )
        self.app_id: str | None = app_id


class ManagerDisposedError(ManagerUnavailableError):
    """The manager was disposed, or no managers are loaded at all."""


class ManagerNotFoundError(ManagerUnavailableError):
    """No manager was ever registered for the application id."""
