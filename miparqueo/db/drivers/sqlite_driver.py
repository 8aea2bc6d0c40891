# =============================================================================
# MIPARQUEO BACKEND - SQLITE DRIVER
# =============================================================================
# File: db/drivers/sqlite_driver.py
# Description: Embedded single-file backend
#              Uses aiosqlite for async operations with SQLAlchemy
# =============================================================================

import logging
import re
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncEngine

from miparqueo.core.config import Settings, settings as default_settings
from miparqueo.core.exceptions import SchemaError
from miparqueo.db.base import BaseDriver, DatabaseType
from miparqueo.db.schema import SQLITE_SCHEMA


logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

# Whitespace and comments ahead of the first keyword
_LEADING_NOISE = re.compile(r"^(?:\s+|--[^\n]*(?:\n|$)|/\*.*?\*/)*", re.DOTALL)

# INSERT / REPLACE, optionally behind a WITH clause
_INSERT_PATTERN = re.compile(
    r"^(?:INSERT|REPLACE)\b"
    r"|^WITH\b.*\b(?:INSERT|REPLACE)\s+(?:OR\s+\w+\s+)?INTO\b",
    re.IGNORECASE | re.DOTALL,
)


def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
    """
    Apply per-connection pragmas.

    Foreign keys are deliberately left off: the embedded schema only
    declares them informally.
    """
    cursor = dbapi_connection.cursor()
    # Write-Ahead Logging lets readers proceed during a write
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.close()


class SQLiteDriver(BaseDriver):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    SQLITE BACKEND DRIVER                                 │
    │  Async SQLite implementation on a single local data file                │
    │  Uses aiosqlite driver with SQLAlchemy async engine                     │
    └─────────────────────────────────────────────────────────────────────────┘

    Features:
        - Zero-configuration setup
        - Data file and its directory created on first connect
        - In-memory option for testing
        - Schema applied as one batched script

    Usage:
        driver = SQLiteDriver(settings)
        await driver.connect()
        await driver.apply_schema()
        rows = await driver.exec_read("SELECT * FROM parking_lots")
        await driver.disconnect()
    """

    dialect = DatabaseType.SQLITE

    def __init__(
        self,
        settings: Optional[Settings] = None,
        database_path: Optional[str] = None,
        **kwargs: Any
    ):
        """
        Initialize SQLite driver.

        Args:
            settings: Application settings (defaults to the global instance)
            database_path: Override for ``settings.sqlite_path``
            **kwargs: Additional engine options
        """
        settings = settings or default_settings
        self._database_path = database_path or settings.sqlite_path

        default_options = {
            "echo": settings.debug,
            "connect_args": {
                "check_same_thread": False,
                "timeout": 30,
            },
        }
        default_options.update(kwargs)

        super().__init__(
            f"sqlite+aiosqlite:///{self._database_path}",
            **default_options
        )

    def _before_connect(self) -> None:
        # Ensure database directory exists for file-based SQLite
        if self._database_path != MEMORY_PATH:
            Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)

    def _on_engine_created(self, engine: AsyncEngine) -> None:
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)

    def _generated_id(self, sql: str, result: CursorResult) -> Optional[int]:
        # lastrowid is only meaningful right after an INSERT/REPLACE that
        # actually wrote a row; an ignored insert leaves a stale value
        statement = _LEADING_NOISE.sub("", sql, count=1)
        if _INSERT_PATTERN.match(statement) and result.rowcount != 0:
            return result.lastrowid
        return None

    async def apply_schema(self) -> None:
        """
        Create all tables with a single ``executescript`` batch.
        """
        try:
            async with self.engine.connect() as conn:
                raw = await conn.get_raw_connection()
                await raw.driver_connection.executescript(SQLITE_SCHEMA)
        except Exception as e:
            logger.error(f"Error creating SQLite tables: {e}")
            raise SchemaError(
                details={"backend": self.dialect.value, "cause": str(e)}
            ) from e

        logger.info("SQLite tables created/verified")

    @property
    def database_path(self) -> str:
        """Path of the data file (or ``:memory:``)."""
        return self._database_path

    @classmethod
    def create_for_testing(cls, database_path: str = MEMORY_PATH) -> "SQLiteDriver":
        """
        Create a SQLite driver for tests.

        Note:
            In-memory databases are ephemeral - data is lost when the
            last connection closes. Use a temporary file when the test
            needs data to survive across pooled connections.
        """
        return cls(database_path=database_path, echo=False)
