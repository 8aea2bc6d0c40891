# =============================================================================
# MIPARQUEO BACKEND - DATABASE FACTORY
# =============================================================================
# File: db/factory.py
# Description: Picks the backend driver from configuration and runs the
#              connect + schema sequence that produces a ready Database
# =============================================================================

import logging
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from miparqueo.core.config import Settings, settings as default_settings
from miparqueo.core.exceptions import ConfigurationError
from miparqueo.db.base import BaseDriver, DatabaseType
from miparqueo.db.database import Database
from miparqueo.db.drivers import PostgresDriver, SQLiteDriver


logger = logging.getLogger(__name__)


DRIVERS: Dict[DatabaseType, Type[BaseDriver]] = {
    DatabaseType.SQLITE: SQLiteDriver,
    DatabaseType.POSTGRESQL: PostgresDriver,
}


def create_driver(settings: Optional[Settings] = None, **kwargs: Any) -> BaseDriver:
    """
    Instantiate the driver selected by ``settings.db_type``.

    The choice is made once here; nothing downstream branches on the
    backend type again.

    Args:
        settings: Application settings (defaults to the global instance)
        **kwargs: Engine options passed to the driver

    Raises:
        ConfigurationError: If the type is unsupported or its connection
            parameters are incomplete
    """
    settings = settings or default_settings

    try:
        db_type = DatabaseType(settings.db_type)
    except ValueError as e:
        raise ConfigurationError(
            f"Unsupported database type: {settings.db_type}. "
            f"Supported types: {[t.value for t in DatabaseType]}"
        ) from e

    return DRIVERS[db_type](settings, **kwargs)


async def build_database(settings: Optional[Settings] = None) -> Database:
    """
    Construct the active backend: select, connect, apply schema.

    Runs exactly once per successful gate initialization. If the schema
    step fails or is cancelled the driver is disconnected before the error
    propagates.

    Raises:
        ConfigurationError: Missing or malformed connection parameters
        DatabaseConnectionError: Backend unreachable
        SchemaError: DDL failed
    """
    settings = settings or default_settings
    driver = create_driver(settings)

    logger.info(f"Connecting to {driver.dialect.value}...")
    await driver.connect()

    try:
        await driver.apply_schema()
    except BaseException:
        await driver.disconnect()
        raise

    return Database(driver)


def database_initializer(
    settings: Optional[Settings] = None,
) -> Callable[[], Awaitable[Database]]:
    """Zero-argument coroutine factory suitable for ``InitializationGate``."""
    return partial(build_database, settings or default_settings)
