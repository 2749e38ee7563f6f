"""PostgreSQL catalog via information_schema.

Looks up tables and their columns (name, type, nullability) in a live
PostgreSQL database.  Column types are reported as upper-cased ``udt_name``
values (``INT4``, ``VARCHAR``, ``TIMESTAMPTZ``).

Uses psycopg (v3) async connections.

Usage:
    from schema_drift.catalog.postgres import PostgresCatalog

    async with PostgresCatalog(database_url) as catalog:
        table = await catalog.find_table("public", "users")
"""

import logging

import psycopg
from psycopg import AsyncConnection

from schema_drift.schema.models import DatabaseColumn, TableDef
from schema_drift.schema.syntax import ARRAY_TYPE, Syntax

logger = logging.getLogger(__name__)


class PostgresCatalog:
    """``TableCatalog`` for PostgreSQL.

    Works with any PostgreSQL database (RDS, Supabase, local).  Holds one
    ``psycopg.AsyncConnection`` for the lifetime of the ``async with`` block.

    Usage:
        async with PostgresCatalog(database_url) as catalog:
            table = await catalog.find_table("public", "users")
            columns = table.columns if table else []
    """

    syntax = Syntax.POSTGRES

    def __init__(self, database_url: str, connect_timeout: int = 10) -> None:
        """Initialize with database connection URL.

        Args:
            database_url: PostgreSQL connection URL.  ``postgresql+driver://``
                schemes are accepted and reduced to ``postgresql://``.
            connect_timeout: Seconds, appended to the URL if it has none.
        """
        url = database_url
        if url.startswith("postgresql+"):
            url = "postgresql://" + url.split("://", 1)[1]

        # Append connect_timeout if not already in URL
        if "connect_timeout" not in url:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}connect_timeout={connect_timeout}"

        self._database_url = url
        self._conn: AsyncConnection | None = None

    async def __aenter__(self) -> "PostgresCatalog":
        """Async context manager entry - opens connection."""
        self._conn = await psycopg.AsyncConnection.connect(self._database_url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - closes connection."""
        await self.close()

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _connection(self) -> AsyncConnection:
        if not self._conn:
            raise RuntimeError("Catalog not connected. Use async with statement.")
        return self._conn

    async def find_table(
        self, namespace: str | None, table_name: str
    ) -> TableDef | None:
        """Look up *table_name* in *namespace* (``current_schema()`` if None)."""
        conn = self._connection()

        if namespace is None:
            async with conn.cursor() as cur:
                await cur.execute("SELECT current_schema()")
                row = await cur.fetchone()
                namespace = row[0]

        if not await self._table_exists(namespace, table_name):
            logger.debug(f"No table {namespace}.{table_name}")
            return None

        columns = await self._get_columns(namespace, table_name)
        return TableDef(namespace=namespace, name=table_name, columns=columns)

    async def _table_exists(self, schema_name: str, table_name: str) -> bool:
        """Check information_schema.tables for a base table or view."""
        query = """
            SELECT 1
            FROM information_schema.tables
            WHERE table_schema = %s
              AND table_name = %s
        """
        async with self._connection().cursor() as cur:
            await cur.execute(query, (schema_name, table_name))
            return await cur.fetchone() is not None

    async def _get_columns(
        self, schema_name: str, table_name: str
    ) -> list[DatabaseColumn]:
        """Get columns for a table in ordinal order."""
        query = """
            SELECT
                column_name,
                udt_name,
                is_nullable
            FROM information_schema.columns
            WHERE table_schema = %s
              AND table_name = %s
            ORDER BY ordinal_position
        """
        async with self._connection().cursor() as cur:
            await cur.execute(query, (schema_name, table_name))
            return [
                DatabaseColumn(
                    name=col_name,
                    data_type=self._normalize_data_type(udt_name),
                    is_nullable=(is_nullable == "YES"),
                )
                for col_name, udt_name, is_nullable in await cur.fetchall()
            ]

    def _normalize_data_type(self, udt_name: str) -> str:
        """Upper-case a ``udt_name``.  Array types (``_int4``) all become ``ARRAY``."""
        if udt_name.startswith("_"):
            return ARRAY_TYPE
        return udt_name.upper()
