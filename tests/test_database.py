# =============================================================================
# MIPARQUEO BACKEND - DATABASE ADAPTER TESTS
# =============================================================================

from typing import List, Tuple

import pytest
from sqlalchemy.exc import OperationalError

from miparqueo.core.exceptions import DatabaseConnectionError, QueryError
from miparqueo.db.base import BackendDriver, DatabaseType, Params, Row
from miparqueo.db.database import Database


class RecordingPostgresDriver(BackendDriver):
    """Stands in for a PostgreSQL connection and records what it receives."""

    dialect = DatabaseType.POSTGRESQL

    def __init__(self, fail: bool = False):
        self.calls: List[Tuple[str, str, Params]] = []
        self.fail = fail

    async def connect(self):
        return None

    async def apply_schema(self) -> None:
        pass

    async def exec_read(self, sql: str, params: Params = None) -> List[Row]:
        self.calls.append(("read", sql, params))
        if self.fail:
            raise OperationalError(sql, params, Exception("connection reset"))
        return [{"id": 1}]

    async def exec_write(self, sql: str, params: Params = None) -> Row:
        self.calls.append(("write", sql, params))
        return {"id": None, "changes": 1}

    async def disconnect(self) -> None:
        pass


class TestParkingLotScenario:

    @pytest.mark.asyncio
    async def test_insert_then_read_back(self, database):
        result = await database.run(
            """
            INSERT INTO parking_lots (name, location, total_spaces, available_spaces, price_per_hour)
            VALUES (?, ?, ?, ?, ?)
            """,
            ["Parqueadero Centro", "Calle 50 #15-20", 150, 120, 5000],
        )
        assert result["id"] >= 1
        assert result["changes"] == 1

        rows = await database.query(
            "SELECT available_spaces FROM parking_lots WHERE id = ?",
            [result["id"]],
        )
        assert rows == [{"available_spaces": 120}]

    @pytest.mark.asyncio
    async def test_round_trip_preserves_columns(self, database):
        result = await database.run(
            "INSERT INTO parking_lots (name, location, total_spaces, available_spaces, price_per_hour) "
            "VALUES (?, ?, ?, ?, ?) RETURNING id",
            ["Parqueadero Norte", "Carrera 7 #100-50", 200, 85, 4000],
        )

        rows = await database.query("SELECT * FROM parking_lots WHERE id = ?", [result["id"]])

        assert len(rows) == 1
        lot = rows[0]
        assert lot["name"] == "Parqueadero Norte"
        assert lot["location"] == "Carrera 7 #100-50"
        assert lot["total_spaces"] == 200
        assert lot["available_spaces"] == 85
        assert lot["price_per_hour"] == 4000
        assert lot["created_at"] is not None

    @pytest.mark.asyncio
    async def test_query_without_matches(self, database):
        assert await database.query("SELECT * FROM parking_lots WHERE id = ?", [42]) == []


class TestRun:

    @pytest.mark.asyncio
    async def test_update_reports_changes_without_id(self, database):
        inserted = await database.run(
            "INSERT INTO users (email, password, name) VALUES (?, ?, ?)",
            ["luis@example.com", "hash", "Luis"],
        )

        result = await database.run(
            "UPDATE users SET role = ? WHERE id = ?",
            ["admin", inserted["id"]],
        )
        assert result == {"id": None, "changes": 1}

    @pytest.mark.asyncio
    async def test_delete_missing_row(self, database):
        result = await database.run("DELETE FROM parking_lots WHERE id = ?", [12345])
        assert result["changes"] == 0

    @pytest.mark.asyncio
    async def test_failed_write_rolls_back(self, database):
        await database.run(
            "INSERT INTO vehicles (user_id, plate, model) VALUES (?, ?, ?)",
            [1, "XYZ987", "Renault 4"],
        )

        with pytest.raises(QueryError):
            await database.run(
                "INSERT INTO vehicles (user_id, plate, model) VALUES (?, ?, ?)",
                [1, "XYZ987", "Renault 4"],
            )

        rows = await database.query("SELECT COUNT(*) AS total FROM vehicles")
        assert rows[0]["total"] == 1


    @pytest.mark.asyncio
    async def test_insert_after_leading_comment_reports_id(self, database):
        result = await database.run(
            "-- seed row\n/* lot */ INSERT INTO parking_lots "
            "(name, location, total_spaces, available_spaces, price_per_hour) "
            "VALUES (?, ?, ?, ?, ?)",
            ["Parqueadero Sur", "Autopista Sur #60-10", 80, 80, 3000],
        )
        assert result["id"] >= 1

    @pytest.mark.asyncio
    async def test_insert_behind_with_clause_reports_id(self, database):
        result = await database.run(
            "WITH source(name) AS (SELECT ?) "
            "INSERT INTO parking_lots (name, location, total_spaces, available_spaces, price_per_hour) "
            "SELECT name, ?, ?, ?, ? FROM source",
            ["Parqueadero Chapinero", "Calle 60 #9-30", 60, 60, 4500],
        )

        rows = await database.query(
            "SELECT id FROM parking_lots WHERE name = ?", ["Parqueadero Chapinero"]
        )
        assert result["id"] == rows[0]["id"]

    @pytest.mark.asyncio
    async def test_ignored_insert_reports_no_id(self, database):
        sql = "INSERT OR IGNORE INTO users (email, password, name) VALUES (?, ?, ?)"
        first = await database.run(sql, ["eva@example.com", "hash", "Eva"])
        assert first["id"] >= 1

        second = await database.run(sql, ["eva@example.com", "hash", "Eva"])
        assert second == {"id": None, "changes": 0}


class TestQueryErrors:

    @pytest.mark.asyncio
    async def test_bad_sql_raises_query_error(self, database):
        with pytest.raises(QueryError) as exc_info:
            await database.query("SELECT * FROM missing_table")

        error = exc_info.value
        assert error.error_code == "DATABASE_QUERY_ERROR"
        assert error.status_code == 500
        assert error.__cause__ is not None
        assert "missing_table" in error.details["cause"]

    @pytest.mark.asyncio
    async def test_query_after_disconnect_raises_query_error(self, database):
        await database.close()

        with pytest.raises(QueryError) as exc_info:
            await database.query("SELECT * FROM parking_lots")
        assert isinstance(exc_info.value.__cause__, DatabaseConnectionError)

        with pytest.raises(QueryError):
            await database.run("DELETE FROM parking_lots")

    @pytest.mark.asyncio
    async def test_driver_failure_is_wrapped(self):
        db = Database(RecordingPostgresDriver(fail=True))

        with pytest.raises(QueryError) as exc_info:
            await db.query("SELECT 1")

        assert isinstance(exc_info.value.__cause__, OperationalError)


class TestDialectRouting:

    @pytest.mark.asyncio
    async def test_postgres_receives_translated_sql(self):
        driver = RecordingPostgresDriver()
        db = Database(driver)

        await db.query("SELECT * FROM parking_lots WHERE id = ? AND name = ?", [3, "Mall"])
        await db.run("DELETE FROM parking_lots WHERE id = ?", [3])

        assert driver.calls == [
            ("read", "SELECT * FROM parking_lots WHERE id = $1 AND name = $2", [3, "Mall"]),
            ("write", "DELETE FROM parking_lots WHERE id = $1", [3]),
        ]

    @pytest.mark.asyncio
    async def test_dialect_comes_from_driver(self, database):
        assert database.dialect is DatabaseType.SQLITE
        assert Database(RecordingPostgresDriver()).dialect is DatabaseType.POSTGRESQL
