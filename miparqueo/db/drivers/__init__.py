# =============================================================================
# BACKEND DRIVERS INITIALIZATION
# =============================================================================
# File: db/drivers/__init__.py
# Description: Drivers module exports
# =============================================================================

from miparqueo.db.drivers.sqlite_driver import SQLiteDriver
from miparqueo.db.drivers.postgres_driver import (
    PostgresDriver,
    resolve_postgres_url,
    insecure_ssl_context,
)

__all__ = [
    "SQLiteDriver",
    "PostgresDriver",
    "resolve_postgres_url",
    "insecure_ssl_context",
]
