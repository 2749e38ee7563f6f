"""Schema auditor: compare a model against its live table.

Usage:
    from schema_drift.catalog.postgres import PostgresCatalog
    from schema_drift.schema.auditor import audit_schema
    from schema_drift.schema.models import format_issue

    async with PostgresCatalog(database_url) as catalog:
        issues = await audit_schema(users_model, catalog)

    for issue in issues:
        print(format_issue(issue))

A table that does not exist is reported as a ``MissingTable`` issue.
Failures to query the catalog at all (connection, permission) are raised
unchanged; no partial result is returned.
"""

import asyncio
import logging
from collections.abc import Sequence

from schema_drift.catalog.base import TableCatalog
from schema_drift.schema.matcher import match_columns
from schema_drift.schema.model import ModelSchema
from schema_drift.schema.models import (
    ColumnAddedInModel,
    ColumnChanged,
    ColumnMissingInModel,
    DriftReport,
    Issue,
    MissingTable,
    TableAudit,
    qualified_name,
)
from schema_drift.schema.syntax import Syntax, default_namespace, get_pairs

logger = logging.getLogger(__name__)


def split_identifier(
    identifier: Sequence[str], syntax: Syntax
) -> tuple[str | None, str]:
    """Split a model identifier into ``(namespace, table)``.

    The last segment is the table name and the one before it, if any, the
    namespace.  A missing namespace is replaced by the dialect's default.

    Raises:
        ValueError: If *identifier* is empty.
    """
    if not identifier:
        raise ValueError("Model identifier must contain at least a table name")

    parts = list(reversed(identifier))
    table = parts[0]
    namespace = parts[1] if len(parts) > 1 else None
    if namespace is None:
        namespace = default_namespace(syntax)
    return namespace, table


async def audit_schema(model: ModelSchema, catalog: TableCatalog) -> list[Issue]:
    """Return the differences between *model* and its table in *catalog*.

    Issues are ordered: columns added in the model, then changed columns,
    then columns missing from the model.  An empty list means no drift.

    Args:
        model: Anything implementing ``identifier()`` and ``columns()``.
        catalog: Catalog for the database to check.  Its ``syntax`` selects
            the default namespace and the type equivalence groups.

    Returns:
        List of issues.  ``[MissingTable]`` alone if the table does not exist.
    """
    syntax = catalog.syntax
    namespace, table = split_identifier(model.identifier(), syntax)

    tabledef = await catalog.find_table(namespace, table)
    if tabledef is None:
        logger.debug(f"Table {qualified_name(namespace, table)} not found")
        return [MissingTable(namespace=namespace, table=table)]

    match = match_columns(get_pairs(syntax), tabledef.columns, model.columns())

    problems: list[Issue] = []
    problems.extend(
        ColumnAddedInModel(namespace=namespace, table=table, column=column)
        for column in match.added_in_model
    )
    problems.extend(
        ColumnChanged(namespace=namespace, table=table, diff=diff)
        for diff in match.changed
    )
    problems.extend(
        ColumnMissingInModel(namespace=namespace, table=table, column=column)
        for column in match.missing_in_model
    )

    logger.debug(f"Audited {qualified_name(namespace, table)}: {len(problems)} issues")
    return problems


async def _audit_one(model: ModelSchema, catalog: TableCatalog) -> TableAudit:
    namespace, table = split_identifier(model.identifier(), catalog.syntax)
    issues = await audit_schema(model, catalog)
    return TableAudit(namespace=namespace, table=table, issues=issues)


async def audit_models(
    models: Sequence[ModelSchema], catalog: TableCatalog
) -> DriftReport:
    """Audit several models concurrently against one catalog.

    Audits appear in the report in the order of *models*.  The first
    catalog failure is raised.
    """
    audits = await asyncio.gather(*(_audit_one(m, catalog) for m in models))
    return DriftReport(audits=list(audits))
