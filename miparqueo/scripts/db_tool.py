# =============================================================================
# MIPARQUEO BACKEND - DATABASE TOOL
# =============================================================================
# File: scripts/db_tool.py
# Description: Non-interactive database checks and sample data loading
#
# Usage:
#   python -m miparqueo.scripts.db_tool check
#   python -m miparqueo.scripts.db_tool seed
# =============================================================================

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from argon2 import PasswordHasher

from miparqueo.core.config import Settings, get_settings
from miparqueo.core.exceptions import ParkingSystemException
from miparqueo.db.base import DatabaseType
from miparqueo.db.database import Database
from miparqueo.db.factory import database_initializer
from miparqueo.db.gate import InitializationGate
from miparqueo.db.schema import TABLES


logger = logging.getLogger(__name__)


# (email, password, name, role); passwords are stored as Argon2id hashes
SAMPLE_USERS: Tuple[Tuple[str, str, str, str], ...] = (
    ("admin@miparqueo.com", "admin123", "Administrador", "admin"),
    ("usuario@miparqueo.com", "usuario123", "Usuario Prueba", "user"),
    ("test@example.com", "test123", "Test User", "user"),
)

# (name, location, total_spaces, available_spaces, price_per_hour)
SAMPLE_LOTS: Tuple[Tuple[str, str, int, int, float], ...] = (
    ("Parqueadero Centro", "Calle 50 #15-20", 150, 120, 5000.0),
    ("Parqueadero Norte", "Carrera 7 #100-50", 200, 85, 4000.0),
    ("Parqueadero Mall", "Avenida Boyacá #120-10", 500, 350, 3500.0),
)


# =============================================================================
# COMMANDS
# =============================================================================

async def check(settings: Settings) -> int:
    """
    Build the configured backend, then print the dialect and row counts.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    gate = InitializationGate(
        database_initializer(settings),
        timeout=settings.db_init_timeout,
    )
    try:
        db = await gate.get()
        print(f"Backend: {db.dialect.value}")
        for table in TABLES:
            rows = await db.query(f"SELECT COUNT(*) AS total FROM {table}")
            print(f"  {table}: {rows[0]['total']}")

        if db.dialect is DatabaseType.POSTGRESQL:
            pool = await db.driver.get_pool_status()
            print(
                f"Pool: size={pool['size']} "
                f"checked_in={pool['checked_in']} checked_out={pool['checked_out']}"
            )
    except ParkingSystemException as e:
        print(f"Database check failed: {e.message}", file=sys.stderr)
        if e.details:
            print(f"  {e.details}", file=sys.stderr)
        return 1
    finally:
        await gate.close()

    return 0


async def insert_sample_users(
    db: Database,
    hasher: Optional[PasswordHasher] = None,
) -> List[str]:
    """Insert the sample users whose emails are not registered yet."""
    hasher = hasher or PasswordHasher()
    existing = {
        row["email"] for row in await db.query("SELECT email FROM users")
    }

    inserted = []
    for email, password, name, role in SAMPLE_USERS:
        if email in existing:
            continue
        await db.run(
            "INSERT INTO users (email, password, name, role) VALUES (?, ?, ?, ?)",
            [email, hasher.hash(password), name, role],
        )
        inserted.append(email)
    return inserted


async def insert_sample_lots(db: Database) -> List[str]:
    """Insert the sample lots whose names are not taken yet."""
    existing = {
        row["name"] for row in await db.query("SELECT name FROM parking_lots")
    }

    inserted = []
    for lot in SAMPLE_LOTS:
        if lot[0] in existing:
            continue
        await db.run(
            """
            INSERT INTO parking_lots (name, location, total_spaces, available_spaces, price_per_hour)
            VALUES (?, ?, ?, ?, ?)
            """,
            list(lot),
        )
        inserted.append(lot[0])
    return inserted


async def seed(settings: Settings) -> int:
    """
    Load the sample users and parking lots.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    gate = InitializationGate(
        database_initializer(settings),
        timeout=settings.db_init_timeout,
    )
    try:
        db = await gate.get()
        inserted = await insert_sample_users(db)
        inserted += await insert_sample_lots(db)
    except ParkingSystemException as e:
        print(f"Seeding failed: {e.message}", file=sys.stderr)
        return 1
    finally:
        await gate.close()

    if inserted:
        for name in inserted:
            print(f"Inserted: {name}")
    else:
        print("Sample data already present")
    return 0


# =============================================================================
# ENTRYPOINT
# =============================================================================

COMMANDS = {
    "check": check,
    "seed": seed,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="MiParqueo database tool")
    ap.add_argument("command", choices=sorted(COMMANDS), help="Operation to run")
    ap.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL")
    args = ap.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, (args.log_level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return asyncio.run(COMMANDS[args.command](settings))


if __name__ == "__main__":
    sys.exit(main())
