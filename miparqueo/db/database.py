# =============================================================================
# MIPARQUEO BACKEND - DATABASE ADAPTER
# =============================================================================
# File: db/database.py
# Description: The one query interface every caller uses, whatever backend
#              is active underneath
# =============================================================================

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from miparqueo.core.exceptions import DatabaseConnectionError, QueryError
from miparqueo.db.base import BackendDriver, DatabaseType, Params, Row
from miparqueo.db.translator import translate_placeholders


logger = logging.getLogger(__name__)


class Database:
    """
    Uniform ``query`` / ``run`` interface over a connected backend driver.

    Callers write SQL with ``?`` markers; the adapter translates it once per
    call for the active dialect and passes parameters through unchanged.
    No retries, no other rewriting.

    The adapter is built by the initialization gate and then shared
    read-only by every request handler.

    Usage:
        lots = await db.query("SELECT * FROM parking_lots WHERE id = ?", [lot_id])
        result = await db.run("DELETE FROM parking_lots WHERE id = ?", [lot_id])
    """

    def __init__(self, driver: BackendDriver):
        self._driver = driver

    @property
    def driver(self) -> BackendDriver:
        return self._driver

    @property
    def dialect(self) -> DatabaseType:
        return self._driver.dialect

    async def query(self, sql: str, params: Params = None) -> List[Row]:
        """
        Run a read statement.

        Returns:
            List of rows as dicts; empty when nothing matches

        Raises:
            QueryError: If the statement fails (original cause chained)
        """
        statement = translate_placeholders(sql, self.dialect)
        try:
            return await self._driver.exec_read(statement, params)
        except (SQLAlchemyError, OSError, DatabaseConnectionError) as e:
            logger.error(f"Database query error: {e}")
            raise QueryError(details={"cause": str(e)}) from e

    async def run(self, sql: str, params: Params = None) -> Row:
        """
        Run a data-modifying statement in its own transaction.

        Returns:
            The first returned row for statements with RETURNING; otherwise
            ``{"id": ..., "changes": ...}`` where ``id`` is the SQLite row id
            of an insert, or None when the backend does not track one

        Raises:
            QueryError: If the statement fails (original cause chained)
        """
        statement = translate_placeholders(sql, self.dialect)
        try:
            return await self._driver.exec_write(statement, params)
        except (SQLAlchemyError, OSError, DatabaseConnectionError) as e:
            logger.error(f"Database run error: {e}")
            raise QueryError(details={"cause": str(e)}) from e

    async def close(self) -> None:
        """Release the underlying connection resource."""
        await self._driver.disconnect()
