# =============================================================================
# MIPARQUEO BACKEND - POSTGRESQL DRIVER
# =============================================================================
# File: db/drivers/postgres_driver.py
# Description: Networked backend with a bounded connection pool
#              Uses asyncpg for high-performance async operations
# =============================================================================

import logging
import ssl
from typing import Any, Dict, Optional, Union

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from miparqueo.core.config import Settings, settings as default_settings
from miparqueo.core.exceptions import ConfigurationError, SchemaError
from miparqueo.db.base import BaseDriver, DatabaseType
from miparqueo.db.schema import POSTGRES_SCHEMA


logger = logging.getLogger(__name__)

ASYNC_DRIVERNAME = "postgresql+asyncpg"

_POSTGRES_BACKENDS = {"postgres", "postgresql"}


# =============================================================================
# CONNECTION PARAMETERS
# =============================================================================

def resolve_postgres_url(settings: Settings) -> URL:
    """
    Build the asyncpg connection URL from configuration.

    ``DATABASE_URL`` wins when set (hosted providers hand out a single
    connection string); otherwise every discrete ``PG_*`` field except the
    port is required.

    Raises:
        ConfigurationError: If the parameters are missing or malformed
    """
    if settings.database_url:
        try:
            url = make_url(settings.database_url)
        except ArgumentError as e:
            raise ConfigurationError(
                "DATABASE_URL is not a valid connection string"
            ) from e

        if url.get_backend_name() not in _POSTGRES_BACKENDS:
            raise ConfigurationError(
                "DATABASE_URL must point to a PostgreSQL server",
                details={"backend": url.get_backend_name()},
            )
        return url.set(drivername=ASYNC_DRIVERNAME)

    fields = {
        "PG_HOST": settings.pg_host,
        "PG_USER": settings.pg_user,
        "PG_PASSWORD": settings.pg_password,
        "PG_DATABASE": settings.pg_database,
    }
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ConfigurationError(
            "DATABASE_URL or PostgreSQL credentials are not configured",
            details={"missing": missing},
        )

    return URL.create(
        ASYNC_DRIVERNAME,
        username=settings.pg_user,
        password=settings.pg_password,
        host=settings.pg_host,
        port=settings.pg_port,
        database=settings.pg_database,
    )


def insecure_ssl_context() -> ssl.SSLContext:
    """
    TLS context that encrypts but skips certificate validation.

    Hosted PostgreSQL poolers commonly present certificates that do not
    chain to the system trust store.
    """
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


# =============================================================================
# DRIVER
# =============================================================================

class PostgresDriver(BaseDriver):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    POSTGRESQL BACKEND DRIVER                             │
    │  Async PostgreSQL implementation with a bounded connection pool         │
    │  Uses asyncpg driver with SQLAlchemy async engine                       │
    └─────────────────────────────────────────────────────────────────────────┘

    Connection Pool Configuration:
        - pool_size:     Pool ceiling (settings.db_pool_size, no overflow)
        - pool_timeout:  Wait for a free connection (settings.db_connect_timeout)
        - pool_recycle:  Connection lifetime (settings.db_idle_timeout)
        - timeout:       asyncpg connection establishment timeout

    In production the connection uses TLS without certificate validation.

    Usage:
        driver = PostgresDriver(settings)
        await driver.connect()
        await driver.apply_schema()
        rows = await driver.exec_read("SELECT * FROM parking_lots WHERE id = $1", [1])
        await driver.disconnect()
    """

    dialect = DatabaseType.POSTGRESQL

    def __init__(
        self,
        settings: Optional[Settings] = None,
        **kwargs: Any
    ):
        """
        Initialize PostgreSQL driver with connection pool options.

        Args:
            settings: Application settings (defaults to the global instance)
            **kwargs: Additional engine options overriding defaults

        Raises:
            ConfigurationError: If connection parameters are missing
        """
        settings = settings or default_settings
        url = resolve_postgres_url(settings)

        connect_args: Dict[str, Any] = {
            "timeout": settings.db_connect_timeout,
        }

        # libpq's sslmode is not an asyncpg keyword; forward it as ``ssl``
        sslmode = url.query.get("sslmode")
        if sslmode:
            url = url.difference_update_query(["sslmode"])
            if isinstance(sslmode, tuple):
                sslmode = sslmode[-1]
            connect_args["ssl"] = sslmode

        ssl_option: Union[ssl.SSLContext, str, None] = connect_args.get("ssl")
        if settings.is_production and ssl_option != "disable":
            connect_args["ssl"] = insecure_ssl_context()

        default_options = {
            "pool_size": settings.db_pool_size,
            "max_overflow": 0,
            "pool_timeout": settings.db_connect_timeout,
            "pool_recycle": settings.db_idle_timeout,
            "pool_pre_ping": True,

            # Query logging (disabled in production)
            "echo": settings.debug and not settings.is_production,

            "connect_args": connect_args,
        }
        default_options.update(kwargs)

        super().__init__(url, **default_options)

    async def apply_schema(self) -> None:
        """
        Create all tables, one statement each, inside a single transaction.
        """
        try:
            async with self.engine.begin() as conn:
                for ddl in POSTGRES_SCHEMA:
                    await conn.exec_driver_sql(ddl)
        except Exception as e:
            logger.error(f"Error creating PostgreSQL tables: {e}")
            raise SchemaError(
                details={"backend": self.dialect.value, "cause": str(e)}
            ) from e

        logger.info("PostgreSQL tables created/verified")

    async def get_pool_status(self) -> Dict[str, int]:
        """
        Get current connection pool statistics.

        Returns:
            Dict with pool status:
                - size: Configured pool size
                - checked_in: Available connections
                - checked_out: In-use connections
        """
        if not self._engine:
            return {"size": 0, "checked_in": 0, "checked_out": 0}

        pool = self._engine.pool
        return {
            "size": pool.size(),
            "checked_in": pool.checkedin(),
            "checked_out": pool.checkedout(),
        }
