"""Tests for the database catalogs.

PostgresCatalog is tested against a mocked psycopg AsyncConnection;
EngineCatalog against a mocked AsyncEngine.  reflect_table() and
normalize_type_name() run against real SQLAlchemy objects (in-memory SQLite).
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import Column, Integer, MetaData, Numeric, String, Table, create_engine
from sqlalchemy.dialects import mysql, postgresql
from sqlalchemy.types import NullType

from schema_drift.catalog.engine import EngineCatalog, normalize_type_name, reflect_table
from schema_drift.catalog.postgres import PostgresCatalog
from schema_drift.schema.models import DatabaseColumn, TableDef
from schema_drift.schema.syntax import Syntax, are_equivalent_types, get_pairs


def _make_connection(fetchone=None, fetchall=None) -> tuple[MagicMock, MagicMock]:
    """psycopg-like async connection whose cursor returns canned rows."""
    cursor = MagicMock()
    cursor.__aenter__ = AsyncMock(return_value=cursor)
    cursor.__aexit__ = AsyncMock(return_value=False)
    cursor.execute = AsyncMock()
    cursor.fetchone = AsyncMock(side_effect=fetchone or [])
    cursor.fetchall = AsyncMock(return_value=fetchall or [])

    conn = MagicMock()
    conn.cursor.return_value = cursor
    conn.close = AsyncMock()
    return conn, cursor


# ============================================================================
# Test: PostgresCatalog
# ============================================================================


class TestPostgresCatalogInit:
    """Connection URL handling."""

    def test_appends_connect_timeout(self) -> None:
        catalog = PostgresCatalog("postgresql://u:p@localhost/app")
        assert catalog._database_url == "postgresql://u:p@localhost/app?connect_timeout=10"

    def test_appends_timeout_to_existing_query(self) -> None:
        catalog = PostgresCatalog(
            "postgresql://u:p@localhost/app?sslmode=require", connect_timeout=3
        )
        assert catalog._database_url.endswith("?sslmode=require&connect_timeout=3")

    def test_keeps_existing_timeout(self) -> None:
        url = "postgresql://u:p@localhost/app?connect_timeout=30"
        assert PostgresCatalog(url)._database_url == url

    def test_strips_driver_suffix(self) -> None:
        catalog = PostgresCatalog("postgresql+asyncpg://u:p@localhost/app")
        assert catalog._database_url.startswith("postgresql://u:p@localhost/app")

    def test_syntax_is_postgres(self) -> None:
        assert PostgresCatalog("postgresql://localhost/app").syntax is Syntax.POSTGRES


class TestPostgresCatalogLookup:
    """find_table() against a mocked connection."""

    @pytest.mark.asyncio
    async def test_requires_async_with(self) -> None:
        catalog = PostgresCatalog("postgresql://localhost/app")
        with pytest.raises(RuntimeError, match="not connected"):
            await catalog.find_table("public", "users")

    @pytest.mark.asyncio
    async def test_find_existing_table(self) -> None:
        conn, cursor = _make_connection(
            fetchone=[(1,)],
            fetchall=[
                ("id", "int4", "NO"),
                ("tags", "_text", "YES"),
                ("created_at", "timestamptz", "YES"),
            ],
        )

        with patch("psycopg.AsyncConnection.connect", new=AsyncMock(return_value=conn)):
            async with PostgresCatalog("postgresql://localhost/app") as catalog:
                table = await catalog.find_table("public", "users")

        assert table == TableDef(
            namespace="public",
            name="users",
            columns=[
                DatabaseColumn(name="id", data_type="INT4", is_nullable=False),
                DatabaseColumn(name="tags", data_type="ARRAY", is_nullable=True),
                DatabaseColumn(name="created_at", data_type="TIMESTAMPTZ", is_nullable=True),
            ],
        )
        params = cursor.execute.await_args_list[-1].args[1]
        assert params == ("public", "users")
        conn.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_table_returns_none(self) -> None:
        conn, cursor = _make_connection(fetchone=[None])

        with patch("psycopg.AsyncConnection.connect", new=AsyncMock(return_value=conn)):
            async with PostgresCatalog("postgresql://localhost/app") as catalog:
                table = await catalog.find_table("public", "nope")

        assert table is None
        cursor.fetchall.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_none_namespace_uses_current_schema(self) -> None:
        conn, cursor = _make_connection(fetchone=[("tenant_a",), (1,)], fetchall=[])

        with patch("psycopg.AsyncConnection.connect", new=AsyncMock(return_value=conn)):
            async with PostgresCatalog("postgresql://localhost/app") as catalog:
                table = await catalog.find_table(None, "users")

        assert table is not None
        assert table.namespace == "tenant_a"
        assert cursor.execute.await_args_list[0].args[0] == "SELECT current_schema()"

    @pytest.mark.asyncio
    async def test_driver_errors_propagate(self) -> None:
        conn, cursor = _make_connection()
        cursor.execute = AsyncMock(side_effect=RuntimeError("permission denied"))

        with patch("psycopg.AsyncConnection.connect", new=AsyncMock(return_value=conn)):
            async with PostgresCatalog("postgresql://localhost/app") as catalog:
                with pytest.raises(RuntimeError, match="permission denied"):
                    await catalog.find_table("public", "users")

    def test_normalize_data_type(self) -> None:
        catalog = PostgresCatalog("postgresql://localhost/app")
        assert catalog._normalize_data_type("varchar") == "VARCHAR"
        assert catalog._normalize_data_type("_int4") == "ARRAY"
        assert catalog._normalize_data_type("_text") == "ARRAY"


# ============================================================================
# Test: normalize_type_name / reflect_table
# ============================================================================


class TestNormalizeTypeName:
    """Compiled type names lose length, precision, collation and modifiers."""

    def test_strips_length(self) -> None:
        assert normalize_type_name(String(50)) == "VARCHAR"

    def test_strips_precision(self) -> None:
        assert normalize_type_name(Numeric(10, 2)) == "NUMERIC"

    def test_strips_collation(self) -> None:
        assert normalize_type_name(String(50, collation="C")) == "VARCHAR"

    def test_multi_word_type(self) -> None:
        name = normalize_type_name(postgresql.DOUBLE_PRECISION(), postgresql.dialect())
        assert name == "DOUBLE PRECISION"

    def test_uncompilable_type_falls_back_to_class_name(self) -> None:
        assert normalize_type_name(NullType()) == "NULLTYPE"

    def test_strips_unsigned(self) -> None:
        name = normalize_type_name(mysql.BIGINT(unsigned=True), mysql.dialect())
        assert name == "BIGINT"
        assert are_equivalent_types(get_pairs(Syntax.MYSQL), name, "int")

    def test_strips_zerofill(self) -> None:
        column_type = mysql.INTEGER(unsigned=True, zerofill=True)
        assert normalize_type_name(column_type, mysql.dialect()) == "INTEGER"

    def test_strips_character_set(self) -> None:
        name = normalize_type_name(mysql.VARCHAR(50, charset="latin1"), mysql.dialect())
        assert name == "VARCHAR"
        assert are_equivalent_types(get_pairs(Syntax.MYSQL), name, "str")

    def test_strips_character_set_and_collation(self) -> None:
        column_type = mysql.VARCHAR(50, charset="utf8mb4", collation="utf8mb4_bin")
        assert normalize_type_name(column_type, mysql.dialect()) == "VARCHAR"

    def test_arrays_collapse_to_one_name(self) -> None:
        """Arrays of any element type share one name, equivalent to list."""
        for element in (Integer(), String(20)):
            name = normalize_type_name(postgresql.ARRAY(element), postgresql.dialect())
            assert name == "ARRAY"
            assert are_equivalent_types(get_pairs(Syntax.POSTGRES), name, "list")


class TestReflectTable:
    """reflect_table() on an in-memory SQLite database."""

    def test_reflects_columns_in_order(self) -> None:
        metadata = MetaData()
        Table(
            "items",
            metadata,
            Column("id", Integer, primary_key=True),
            Column("label", String(30), nullable=False),
            Column("price", Numeric(8, 2)),
        )
        engine = create_engine("sqlite://")
        metadata.create_all(engine)

        with engine.connect() as conn:
            table = reflect_table(conn, None, "items")

        assert table == TableDef(
            namespace=None,
            name="items",
            columns=[
                DatabaseColumn(name="id", data_type="INTEGER", is_nullable=False),
                DatabaseColumn(name="label", data_type="VARCHAR", is_nullable=False),
                DatabaseColumn(name="price", data_type="NUMERIC", is_nullable=True),
            ],
        )

    def test_absent_table_returns_none(self) -> None:
        engine = create_engine("sqlite://")
        with engine.connect() as conn:
            assert reflect_table(conn, None, "missing") is None


# ============================================================================
# Test: EngineCatalog
# ============================================================================


def _make_engine(result: TableDef | None) -> tuple[MagicMock, MagicMock]:
    conn = MagicMock()
    conn.run_sync = AsyncMock(return_value=result)

    connect_cm = MagicMock()
    connect_cm.__aenter__ = AsyncMock(return_value=conn)
    connect_cm.__aexit__ = AsyncMock(return_value=False)

    engine = MagicMock()
    engine.connect.return_value = connect_cm
    engine.dispose = AsyncMock()
    return engine, conn


class TestEngineCatalog:
    """EngineCatalog delegates lookups to reflect_table()."""

    @pytest.mark.asyncio
    async def test_find_table_runs_reflection(self) -> None:
        expected = TableDef(namespace=None, name="users", columns=[])
        engine, conn = _make_engine(expected)

        async with EngineCatalog(engine=engine, syntax=Syntax.MYSQL) as catalog:
            table = await catalog.find_table(None, "users")

        assert table is expected
        conn.run_sync.assert_awaited_once_with(reflect_table, None, "users")
        engine.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_table(self) -> None:
        engine, _ = _make_engine(None)
        catalog = EngineCatalog(engine=engine, syntax=Syntax.MSSQL)

        assert await catalog.find_table("dbo", "users") is None
        assert catalog.syntax is Syntax.MSSQL

    @pytest.mark.asyncio
    async def test_errors_propagate(self) -> None:
        engine, conn = _make_engine(None)
        conn.run_sync = AsyncMock(side_effect=OSError("connection refused"))
        catalog = EngineCatalog(engine=engine, syntax=Syntax.SQLITE)

        with pytest.raises(OSError, match="connection refused"):
            await catalog.find_table(None, "users")

    def test_requires_url_or_engine(self) -> None:
        with pytest.raises(ValueError, match="database_url or an engine"):
            EngineCatalog()

    @pytest.mark.asyncio
    async def test_postgres_url_uses_asyncpg(self) -> None:
        catalog = EngineCatalog("postgres://u:p@localhost:5432/app")

        assert catalog._engine.url.drivername == "postgresql+asyncpg"
        assert catalog.syntax is Syntax.POSTGRES
        await catalog.close()
