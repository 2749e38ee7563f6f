"""schema-drift: detect drift between model definitions and live tables.

Compares the columns a model declares against the columns of its table in a
live database (PostgreSQL, MySQL, SQLite, MSSQL) and reports missing tables,
columns on only one side, and type or nullability changes.

Usage:
    from schema_drift import audit_schema, PostgresCatalog, SqlAlchemyModel
    from schema_drift import check_profile, format_issue
"""

__version__ = "0.1.0"

# Core
from schema_drift.schema.auditor import audit_models, audit_schema
from schema_drift.schema.model import ModelSchema, SqlAlchemyModel, TableModel
from schema_drift.schema.models import (
    ColumnAddedInModel,
    ColumnChanged,
    ColumnMissingInModel,
    DatabaseColumn,
    Diff,
    DriftReport,
    Issue,
    MissingTable,
    ModelColumn,
    TableDef,
    format_issue,
)
from schema_drift.schema.syntax import Syntax

# Catalogs
from schema_drift.catalog.base import TableCatalog
from schema_drift.catalog.engine import EngineCatalog
from schema_drift.catalog.postgres import PostgresCatalog

# Config
from schema_drift.config.loader import load_config
from schema_drift.config.models import DatabaseProfile, DriftConfig

# Factory
from schema_drift.factory import (
    CheckResult,
    ProfileNotFoundError,
    check_profile,
    get_catalog,
    resolve_url,
)

__all__ = [
    # Core
    "audit_schema",
    "audit_models",
    "ModelSchema",
    "TableModel",
    "SqlAlchemyModel",
    "DatabaseColumn",
    "ModelColumn",
    "TableDef",
    "Diff",
    "Issue",
    "MissingTable",
    "ColumnAddedInModel",
    "ColumnMissingInModel",
    "ColumnChanged",
    "DriftReport",
    "format_issue",
    "Syntax",
    # Catalogs
    "TableCatalog",
    "EngineCatalog",
    "PostgresCatalog",
    # Config
    "load_config",
    "DatabaseProfile",
    "DriftConfig",
    # Factory
    "check_profile",
    "get_catalog",
    "resolve_url",
    "CheckResult",
    "ProfileNotFoundError",
]
