"""Table catalog protocol definition.

Defines the ``TableCatalog`` Protocol that all catalogs must implement.
Lookups are ``async def`` -- the library is async-first.

Usage:
    from schema_drift.catalog.base import TableCatalog

    async def show(catalog: TableCatalog) -> None:
        table = await catalog.find_table("public", "users")
        if table is None:
            print("users does not exist")
        await catalog.close()
"""

from typing import Protocol

from schema_drift.schema.models import TableDef
from schema_drift.schema.syntax import Syntax


class TableCatalog(Protocol):
    """Catalog interface that all database catalogs must implement.

    ``syntax`` names the SQL dialect of the database the catalog reads.  It
    decides the default namespace and the type equivalence groups used when
    auditing models against this catalog.
    """

    syntax: Syntax

    async def find_table(
        self, namespace: str | None, table_name: str
    ) -> TableDef | None:
        """Look up one table and its columns.

        Args:
            namespace: Schema/owner the table lives in.  ``None`` means the
                connection's current database or schema.
            table_name: Table name, matched exactly.

        Returns:
            ``TableDef`` with columns in ordinal order, or ``None`` if the
            table does not exist.

        Raises:
            Exception: Driver errors for operational failures (connection
                lost, permission denied).  A missing table is not an error.

        Example:
            table = await catalog.find_table("public", "users")
        """
        ...

    async def close(self) -> None:
        """Release connections held by the catalog."""
        ...
