# =============================================================================
# DATABASE MODULE INITIALIZATION
# =============================================================================
# File: db/__init__.py
# Description: Database module exports
# =============================================================================

from miparqueo.db.base import BackendDriver, BaseDriver, DatabaseType
from miparqueo.db.translator import translate_placeholders, count_placeholders
from miparqueo.db.database import Database
from miparqueo.db.drivers import SQLiteDriver, PostgresDriver
from miparqueo.db.factory import (
    create_driver,
    build_database,
    database_initializer,
)
from miparqueo.db.gate import InitializationGate, GateState
from miparqueo.db.schema import TABLES

__all__ = [
    # Base
    "BackendDriver",
    "BaseDriver",
    "DatabaseType",

    # Translator
    "translate_placeholders",
    "count_placeholders",

    # Adapter
    "Database",

    # Drivers
    "SQLiteDriver",
    "PostgresDriver",

    # Factory
    "create_driver",
    "build_database",
    "database_initializer",

    # Gate
    "InitializationGate",
    "GateState",

    # Schema
    "TABLES",
]
