# =============================================================================
# MIPARQUEO BACKEND - CORE EXCEPTIONS MODULE
# =============================================================================
# File: core/exceptions.py
# Description: Custom exception hierarchy for the persistence layer
#              Provides granular error handling with HTTP status code mapping
# =============================================================================

from typing import Optional, Dict, Any
from fastapi import HTTPException, status


class ParkingSystemException(Exception):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    BASE EXCEPTION CLASS                                  │
    │  All custom exceptions inherit from this base class                      │
    │  Provides consistent error structure across the application             │
    └─────────────────────────────────────────────────────────────────────────┘

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        status_code: HTTP status code for API responses
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: str = "PARKING_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException for API responses."""
        return HTTPException(
            status_code=self.status_code,
            detail=self.to_dict()
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(ParkingSystemException):
    """
    Raised when connection parameters are missing or malformed.

    Fatal for the attempt that hit it; retrying without changing the
    environment produces the same error.
    """

    def __init__(
        self,
        message: str = "Database configuration is invalid",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details
        )


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================

class DatabaseError(ParkingSystemException):
    """Base class for database-related errors."""

    def __init__(
        self,
        message: str = "Database error",
        error_code: str = "DATABASE_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status_code,
            details=details
        )


class DatabaseConnectionError(DatabaseError):
    """
    Raised when the backend is unreachable while it is being constructed.

    A later request may retry construction.
    """

    def __init__(
        self,
        message: str = "Failed to connect to database",
        error_code: str = "DATABASE_CONNECTION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details
        )


class SchemaError(DatabaseConnectionError):
    """Raised when applying the table DDL fails."""

    def __init__(
        self,
        message: str = "Failed to create database tables",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="DATABASE_SCHEMA_ERROR",
            details=details
        )


class QueryError(DatabaseError):
    """Raised when a single statement fails."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Database query failed",
            error_code="DATABASE_QUERY_ERROR",
            details=details
        )


class InitTimeoutError(DatabaseError):
    """Raised when a waiter gives up on an initialization still in progress."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        message = "Timed out waiting for database initialization"
        if timeout is not None:
            message = f"{message} after {timeout:g}s"
        super().__init__(
            message=message,
            error_code="DATABASE_INIT_TIMEOUT",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details
        )


# =============================================================================
# RESOURCE EXCEPTIONS
# =============================================================================

class NotFoundError(ParkingSystemException):
    """Raised when a requested row does not exist."""

    def __init__(
        self,
        resource: str = "Resource",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"{resource} not found",
            error_code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details=details
        )
