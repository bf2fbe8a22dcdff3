"""Structured exception hierarchy for errors that cross the route boundary.

Missing resources and request validation are answered directly by the route
handlers. The exceptions here cover what is raised from dependencies and
surfaced by the global handlers: authentication, authorization and content
negotiation failures.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **CityInfoError**: Base exception with context and fingerprinting
- **Specialized exceptions**: Unauthorized, forbidden and not acceptable
"""

import hashlib
import traceback
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for the CityInfo application."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """The caller presented no valid bearer token."""

    FORBIDDEN = "FORBIDDEN"
    """The caller is authenticated but fails an authorization policy."""

    NOT_ACCEPTABLE = "NOT_ACCEPTABLE"
    """None of the representations named in the Accept header is supported."""


class Severity(Enum):
    """Severity levels used to pick log levels and alerting."""

    LOW = "LOW"
    """Expected errors caused by client input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single request but not the service."""

    HIGH = "HIGH"
    """Security relevant errors or failures of critical functionality."""

    CRITICAL = "CRITICAL"
    """Unexpected failures that need immediate attention."""


class CityInfoError(Exception):
    """Base exception class for all CityInfo application exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause
        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Hash the error type and raising location so log entries group together.

        Returns:
            str: A 16 character hex digest
        """
        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in traceback.extract_stack()[-6:-2]:
            if "site-packages" not in frame.filename and "cityinfo" in frame.filename:
                fingerprint_data += f":{frame.filename}:{frame.lineno}"
        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class UnauthorizedError(CityInfoError):
    """Raised when a request carries no bearer token or an invalid one.

    Missing, malformed, expired, wrongly signed tokens and tokens issued for
    another issuer or audience all end up here.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.UNAUTHORIZED,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.HIGH, context, cause)


class ForbiddenError(CityInfoError):
    """Raised when an authenticated caller fails an authorization policy."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.FORBIDDEN,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.MEDIUM, context, cause)


class NotAcceptableError(CityInfoError):
    """Raised when the Accept header names no representation we can produce."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.NOT_ACCEPTABLE,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)
