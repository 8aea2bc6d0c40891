# =============================================================================
# CORE MODULE INITIALIZATION
# =============================================================================
# File: core/__init__.py
# Description: Core module exports for centralized access
# =============================================================================

from miparqueo.core.config import settings, get_settings, Settings
from miparqueo.core.exceptions import (
    # Base
    ParkingSystemException,

    # Configuration
    ConfigurationError,

    # Database
    DatabaseError,
    DatabaseConnectionError,
    SchemaError,
    QueryError,
    InitTimeoutError,

    # Resources
    NotFoundError,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    "Settings",

    # Exceptions
    "ParkingSystemException",
    "ConfigurationError",
    "DatabaseError",
    "DatabaseConnectionError",
    "SchemaError",
    "QueryError",
    "InitTimeoutError",
    "NotFoundError",
]
