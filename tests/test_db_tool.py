# =============================================================================
# MIPARQUEO BACKEND - DATABASE TOOL TESTS
# =============================================================================

import pytest
from argon2 import PasswordHasher

from miparqueo.scripts.db_tool import (
    SAMPLE_LOTS,
    SAMPLE_USERS,
    check,
    insert_sample_lots,
    insert_sample_users,
    seed,
)


class TestSeed:

    @pytest.mark.asyncio
    async def test_inserts_sample_lots_once(self, database):
        inserted = await insert_sample_lots(database)
        assert inserted == [lot[0] for lot in SAMPLE_LOTS]

        assert await insert_sample_lots(database) == []

        rows = await database.query("SELECT name, available_spaces FROM parking_lots ORDER BY id")
        assert rows == [
            {"name": "Parqueadero Centro", "available_spaces": 120},
            {"name": "Parqueadero Norte", "available_spaces": 85},
            {"name": "Parqueadero Mall", "available_spaces": 350},
        ]

    @pytest.mark.asyncio
    async def test_inserts_sample_users_once(self, database):
        inserted = await insert_sample_users(database)
        assert inserted == [user[0] for user in SAMPLE_USERS]

        assert await insert_sample_users(database) == []

        rows = await database.query("SELECT email, name, role FROM users ORDER BY id")
        assert rows == [
            {"email": "admin@miparqueo.com", "name": "Administrador", "role": "admin"},
            {"email": "usuario@miparqueo.com", "name": "Usuario Prueba", "role": "user"},
            {"email": "test@example.com", "name": "Test User", "role": "user"},
        ]

    @pytest.mark.asyncio
    async def test_user_passwords_are_hashed(self, database):
        await insert_sample_users(database)

        rows = await database.query(
            "SELECT password FROM users WHERE email = ?", ["admin@miparqueo.com"]
        )
        stored = rows[0]["password"]

        assert stored != "admin123"
        assert stored.startswith("$argon2id$")
        assert PasswordHasher().verify(stored, "admin123")

    @pytest.mark.asyncio
    async def test_existing_email_is_skipped(self, database):
        await database.run(
            "INSERT INTO users (email, password, name) VALUES (?, ?, ?)",
            ["test@example.com", "hash", "Otra Persona"],
        )

        inserted = await insert_sample_users(database)

        assert "test@example.com" not in inserted
        rows = await database.query("SELECT name FROM users WHERE email = ?", ["test@example.com"])
        assert rows == [{"name": "Otra Persona"}]

    @pytest.mark.asyncio
    async def test_seed_command(self, sqlite_settings, capsys):
        assert await seed(sqlite_settings) == 0
        out = capsys.readouterr().out
        assert "Inserted: admin@miparqueo.com" in out
        assert "Inserted: Parqueadero Mall" in out

        assert await seed(sqlite_settings) == 0
        assert "already present" in capsys.readouterr().out


class TestCheck:

    @pytest.mark.asyncio
    async def test_reports_table_counts(self, sqlite_settings, capsys):
        await seed(sqlite_settings)
        capsys.readouterr()

        assert await check(sqlite_settings) == 0

        out = capsys.readouterr().out
        assert "Backend: sqlite" in out
        assert "parking_lots: 3" in out
        assert "users: 3" in out
        assert "reservations: 0" in out

    @pytest.mark.asyncio
    async def test_failure_exit_code(self, settings_factory, capsys):
        assert await check(settings_factory(db_type="postgresql")) == 1
        assert "Database check failed" in capsys.readouterr().err
