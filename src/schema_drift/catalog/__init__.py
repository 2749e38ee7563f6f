"""Database catalogs package.

Provides the ``TableCatalog`` Protocol and concrete async catalogs:
``PostgresCatalog`` (psycopg, information_schema) and ``EngineCatalog``
(SQLAlchemy reflection for any supported dialect).

Usage:
    from schema_drift.catalog import EngineCatalog, PostgresCatalog, TableCatalog
"""

from schema_drift.catalog.base import TableCatalog
from schema_drift.catalog.engine import EngineCatalog
from schema_drift.catalog.postgres import PostgresCatalog

__all__ = [
    "TableCatalog",
    "EngineCatalog",
    "PostgresCatalog",
]
