"""Pydantic models for schema drift detection.

This module contains schema-domain models:
- Column models: DatabaseColumn, ModelColumn, TableDef
- Drift models: Diff and the four Issue variants (MissingTable,
  ColumnAddedInModel, ColumnMissingInModel, ColumnChanged)
- Report models: TableAudit, DriftReport

``Issue`` is a tagged union discriminated by ``kind``.  The variants share no
base class; consumers branch on ``issue.kind``.

Configuration models (DatabaseProfile, DriftConfig) live in
schema_drift.config.models.
"""

from typing import Annotated, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter


# ============================================================================
# Column Models
# ============================================================================


class DatabaseColumn(BaseModel):
    """A column as introspected from the live database.

    Example:
        >>> col = DatabaseColumn(name="id", data_type="INT4", is_nullable=False)
        >>> col.data_type
        'INT4'
    """

    model_config = ConfigDict(frozen=True)

    name: str
    data_type: str
    is_nullable: bool = True


class ModelColumn(BaseModel):
    """A column as the model declares it.

    The declared type is also accepted under the key ``type``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    declared_type: str = Field(
        validation_alias=AliasChoices("declared_type", "type"),
    )
    nullable: bool = True


class TableDef(BaseModel):
    """A table found by a catalog lookup.  Columns are in ordinal order."""

    model_config = ConfigDict(frozen=True)

    namespace: str | None = None
    name: str
    columns: list[DatabaseColumn] = Field(default_factory=list)


# ============================================================================
# Drift Models
# ============================================================================


class Diff(BaseModel):
    """A name-matched column whose type or nullability differ.

    ``type_changed`` is False when only nullability differs.
    """

    model_config = ConfigDict(frozen=True)

    column: str
    db_type: str
    db_nullable: bool
    model_type: str
    model_nullable: bool
    type_changed: bool

    @property
    def nullable_changed(self) -> bool:
        return self.db_nullable != self.model_nullable


class MissingTable(BaseModel):
    """The table the model maps to does not exist."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["missing_table"] = "missing_table"
    namespace: str | None = None
    table: str


class ColumnAddedInModel(BaseModel):
    """The model declares a column the table does not have."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["column_added_in_model"] = "column_added_in_model"
    namespace: str | None = None
    table: str
    column: ModelColumn


class ColumnMissingInModel(BaseModel):
    """The table has a column the model does not map."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["column_missing_in_model"] = "column_missing_in_model"
    namespace: str | None = None
    table: str
    column: DatabaseColumn


class ColumnChanged(BaseModel):
    """A column exists on both sides but its type or nullability differ."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["column_changed"] = "column_changed"
    namespace: str | None = None
    table: str
    diff: Diff


Issue = Annotated[
    Union[MissingTable, ColumnAddedInModel, ColumnMissingInModel, ColumnChanged],
    Field(discriminator="kind"),
]

# Validates and serializes plain lists of issues (e.g. to/from JSON)
IssueList = TypeAdapter(list[Issue])


# ============================================================================
# Report Models
# ============================================================================


def qualified_name(namespace: str | None, table: str) -> str:
    """Return ``namespace.table``, or just ``table`` without a namespace."""
    return f"{namespace}.{table}" if namespace else table


def _nullability(nullable: bool) -> str:
    return "NULL" if nullable else "NOT NULL"


def format_issue(issue: Issue, qualified: bool = True) -> str:
    """Render one issue as a single line.

    Args:
        issue: Any Issue variant.
        qualified: Prefix the line with ``namespace.table:``.

    Example:
        >>> issue = MissingTable(namespace="public", table="users")
        >>> format_issue(issue)
        'public.users: table does not exist'
    """
    if issue.kind == "missing_table":
        text = "table does not exist"
    elif issue.kind == "column_added_in_model":
        text = (
            f"column '{issue.column.name}' ({issue.column.declared_type}) "
            f"declared in model but missing from table"
        )
    elif issue.kind == "column_missing_in_model":
        text = (
            f"column '{issue.column.name}' ({issue.column.data_type}) "
            f"exists in table but is not mapped by the model"
        )
    elif issue.kind == "column_changed":
        diff = issue.diff
        changes: list[str] = []
        if diff.type_changed:
            changes.append(f"type {diff.db_type} in database, {diff.model_type} in model")
        if diff.nullable_changed:
            changes.append(
                f"{_nullability(diff.db_nullable)} in database, "
                f"{_nullability(diff.model_nullable)} in model"
            )
        text = f"column '{diff.column}' changed: {'; '.join(changes)}"
    else:
        raise ValueError(f"Unknown issue kind: {issue.kind}")

    if qualified:
        return f"{qualified_name(issue.namespace, issue.table)}: {text}"
    return text


class TableAudit(BaseModel):
    """Issues found while auditing one model against its table."""

    namespace: str | None = None
    table: str
    issues: list[Issue] = Field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return qualified_name(self.namespace, self.table)


class DriftReport(BaseModel):
    """Result of auditing a set of models.

    Example:
        >>> report = DriftReport()
        >>> report.has_drift
        False
        >>> report.format_report()
        'No schema drift detected'
    """

    audits: list[TableAudit] = Field(default_factory=list)

    @property
    def issues(self) -> list[Issue]:
        """All issues, in audit order."""
        return [issue for audit in self.audits for issue in audit.issues]

    @property
    def issue_count(self) -> int:
        return sum(len(audit.issues) for audit in self.audits)

    @property
    def has_drift(self) -> bool:
        return self.issue_count > 0

    def format_report(self) -> str:
        """Format the report as human-readable text."""
        if not self.has_drift:
            return "No schema drift detected"

        lines = [f"Schema drift detected ({self.issue_count} issues):"]
        for audit in self.audits:
            if not audit.issues:
                continue
            lines.append(f"\n  {audit.qualified_name}:")
            for issue in audit.issues:
                lines.append(f"    - {format_issue(issue, qualified=False)}")

        return "\n".join(lines)
