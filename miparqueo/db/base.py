# =============================================================================
# MIPARQUEO BACKEND - DATABASE BASE MODULE
# =============================================================================
# File: db/base.py
# Description: Backend driver interface and the engine handling shared by
#              the SQLite and PostgreSQL variants
# =============================================================================

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy.engine import URL, CursorResult, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from miparqueo.core.exceptions import DatabaseConnectionError


logger = logging.getLogger(__name__)


# =============================================================================
# TYPE DEFINITIONS
# =============================================================================

class DatabaseType(str, Enum):
    """Supported database backends (also used as the SQL dialect tag)."""
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


Params = Optional[Sequence[Any]]
Row = Dict[str, Any]


def driver_params(params: Params) -> Optional[Tuple[Any, ...]]:
    """Pass positional parameters through untouched, as a DBAPI tuple."""
    if not params:
        return None
    return tuple(params)


# =============================================================================
# ABSTRACT BACKEND DRIVER INTERFACE
# =============================================================================

class BackendDriver(ABC):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    ABSTRACT BACKEND DRIVER INTERFACE                     │
    │  Defines the contract that both SQL backends must follow                │
    │  The variant is picked once from configuration, never per call          │
    └─────────────────────────────────────────────────────────────────────────┘

    Each driver owns exactly one connection resource (a SQLAlchemy async
    engine and its pool). The resource is never handed to callers; they go
    through ``exec_read`` / ``exec_write`` instead.

    Methods:
        connect()       - Build the engine and verify reachability
        apply_schema()  - Create the four tables if they are missing
        exec_read()     - Run a statement and return its rows
        exec_write()    - Run a statement in its own transaction
        disconnect()    - Dispose of the engine
    """

    dialect: DatabaseType

    @abstractmethod
    async def connect(self) -> AsyncEngine:
        """
        Establish the connection resource.

        Raises:
            DatabaseConnectionError: If the backend is unreachable
        """
        pass

    @abstractmethod
    async def apply_schema(self) -> None:
        """
        Create all tables. Safe to call repeatedly.

        Raises:
            SchemaError: If any DDL statement fails
        """
        pass

    @abstractmethod
    async def exec_read(self, sql: str, params: Params = None) -> List[Row]:
        """Execute a statement already in this driver's dialect and return rows."""
        pass

    @abstractmethod
    async def exec_write(self, sql: str, params: Params = None) -> Row:
        """
        Execute a data-modifying statement already in this driver's dialect.

        Returns:
            The first returned row when the statement has RETURNING,
            otherwise ``{"id": ..., "changes": ...}``
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the connection resource."""
        pass


# =============================================================================
# BASE DRIVER IMPLEMENTATION
# =============================================================================

class BaseDriver(BackendDriver):
    """
    Base implementation of the driver with common engine handling.
    Concrete drivers (SQLite, PostgreSQL) extend this class.
    """

    def __init__(self, database_url: Union[str, URL], **engine_options: Any):
        """
        Initialize base driver with database URL.

        Args:
            database_url: Async-compatible database URL
            **engine_options: Additional SQLAlchemy engine options
        """
        self._database_url = database_url
        self._engine_options = engine_options
        self._engine: Optional[AsyncEngine] = None

    async def connect(self) -> AsyncEngine:
        """
        Create the async engine and check out one connection to prove the
        backend is reachable. The connection goes straight back to the pool.

        On failure the engine is disposed before the error is raised, so a
        failed attempt never leaks pooled connections.
        """
        if self._engine is not None:
            return self._engine

        logger.info(f"Connecting to {self.dialect.value} at {self.safe_url}")

        engine: Optional[AsyncEngine] = None
        try:
            self._before_connect()
            engine = create_async_engine(
                self._database_url,
                **self._engine_options
            )
            self._on_engine_created(engine)

            async with engine.connect() as conn:
                await conn.exec_driver_sql("SELECT 1")
        except Exception as e:
            if engine is not None:
                await engine.dispose()
            logger.error(f"Error connecting to {self.dialect.value}: {e}")
            raise DatabaseConnectionError(
                details={"backend": self.dialect.value, "cause": str(e)}
            ) from e
        except BaseException:
            if engine is not None:
                await engine.dispose()
            raise

        self._engine = engine
        logger.info(f"Connection to {self.dialect.value} established")
        return engine

    async def disconnect(self) -> None:
        """
        Dispose of engine and cleanup connections.
        """
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            logger.info(f"Disconnected from {self.dialect.value}")

    async def exec_read(self, sql: str, params: Params = None) -> List[Row]:
        """
        Run a statement on a short-lived pooled connection and return
        every row as a plain dict.
        """
        async with self.engine.connect() as conn:
            result = await conn.exec_driver_sql(sql, driver_params(params))
            return [dict(row) for row in result.mappings().all()]

    async def exec_write(self, sql: str, params: Params = None) -> Row:
        """
        Run a statement inside its own transaction (commit on success,
        rollback on error).
        """
        async with self.engine.begin() as conn:
            result = await conn.exec_driver_sql(sql, driver_params(params))
            if result.returns_rows:
                rows = result.mappings().all()
                return dict(rows[0]) if rows else {"id": None}
            return {
                "id": self._generated_id(sql, result),
                "changes": result.rowcount,
            }

    # -------------------------------------------------------------------------
    # HOOKS
    # -------------------------------------------------------------------------

    def _before_connect(self) -> None:
        """Prepare anything the engine needs before it is created."""

    def _on_engine_created(self, engine: AsyncEngine) -> None:
        """Attach engine-level event listeners."""

    def _generated_id(self, sql: str, result: CursorResult) -> Optional[int]:
        """Identifier produced by a write without RETURNING."""
        return None

    # -------------------------------------------------------------------------
    # PROPERTIES
    # -------------------------------------------------------------------------

    @property
    def engine(self) -> AsyncEngine:
        """
        Get the SQLAlchemy engine.

        Raises:
            DatabaseConnectionError: If not connected (or already disconnected)
        """
        if not self._engine:
            raise DatabaseConnectionError(
                message="Database not connected. Call connect() first.",
                details={"backend": self.dialect.value},
            )
        return self._engine

    @property
    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self._engine is not None

    @property
    def engine_options(self) -> Dict[str, Any]:
        """Engine options this driver will pass to SQLAlchemy."""
        return dict(self._engine_options)

    @property
    def safe_url(self) -> str:
        """Database URL with the password masked, for logging."""
        return make_url(self._database_url).render_as_string(hide_password=True)
