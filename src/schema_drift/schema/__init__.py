"""Schema drift detection core.

Provides the type equivalence resolver (``Syntax``, ``get_pairs``,
``are_equivalent_types``), the column matcher (``match_columns``), the
auditor (``audit_schema``, ``audit_models``), model schemas
(``ModelSchema``, ``TableModel``, ``SqlAlchemyModel``) and the drift models.

Usage:
    from schema_drift.schema import audit_schema, TableModel
    from schema_drift.schema import Issue, format_issue
"""

from schema_drift.schema.auditor import audit_models, audit_schema, split_identifier
from schema_drift.schema.matcher import ColumnMatch, build_diffs, match_columns
from schema_drift.schema.model import ModelSchema, SqlAlchemyModel, TableModel
from schema_drift.schema.models import (
    ColumnAddedInModel,
    ColumnChanged,
    ColumnMissingInModel,
    DatabaseColumn,
    Diff,
    DriftReport,
    Issue,
    IssueList,
    MissingTable,
    ModelColumn,
    TableAudit,
    TableDef,
    format_issue,
)
from schema_drift.schema.syntax import (
    Syntax,
    are_equivalent_types,
    default_namespace,
    get_pairs,
)

__all__ = [
    "audit_schema",
    "audit_models",
    "split_identifier",
    "match_columns",
    "build_diffs",
    "ColumnMatch",
    "ModelSchema",
    "TableModel",
    "SqlAlchemyModel",
    "DatabaseColumn",
    "ModelColumn",
    "TableDef",
    "Diff",
    "Issue",
    "IssueList",
    "MissingTable",
    "ColumnAddedInModel",
    "ColumnMissingInModel",
    "ColumnChanged",
    "TableAudit",
    "DriftReport",
    "format_issue",
    "Syntax",
    "get_pairs",
    "are_equivalent_types",
    "default_namespace",
]
