"""Column matching between a live table and a model.

Pairs database columns and model columns by exact name and classifies them
into three disjoint outcomes: columns only the model declares, columns only
the table has, and name-matched columns whose type or nullability differ.

Pure logic -- no I/O, no database connections.

Usage:
    from schema_drift.schema.matcher import match_columns
    from schema_drift.schema.syntax import Syntax, get_pairs

    match = match_columns(get_pairs(Syntax.POSTGRES), table.columns, model.columns())
    match.added_in_model     # list[ModelColumn]
    match.changed            # list[Diff]
    match.missing_in_model   # list[DatabaseColumn]
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from schema_drift.schema.models import DatabaseColumn, Diff, ModelColumn
from schema_drift.schema.syntax import TypeGroup, are_equivalent_types

_C = TypeVar("_C", DatabaseColumn, ModelColumn)


@dataclass(frozen=True)
class ColumnMatch:
    """Outcome of matching one table's columns against one model."""

    added_in_model: list[ModelColumn] = field(default_factory=list)
    changed: list[Diff] = field(default_factory=list)
    missing_in_model: list[DatabaseColumn] = field(default_factory=list)


def _index_by_name(columns: Sequence[_C]) -> dict[str, _C]:
    """Map column name to column.  The first column with a name wins."""
    index: dict[str, _C] = {}
    for column in columns:
        index.setdefault(column.name, column)
    return index


def columns_added_in_model(
    db_columns: Sequence[DatabaseColumn],
    model_columns: Sequence[ModelColumn],
) -> list[ModelColumn]:
    """Model columns with no database column of the same name, in model order."""
    table_has = {c.name for c in db_columns}
    return [mc for mc in model_columns if mc.name not in table_has]


def columns_missing_in_model(
    db_columns: Sequence[DatabaseColumn],
    model_columns: Sequence[ModelColumn],
) -> list[DatabaseColumn]:
    """Database columns with no model column of the same name, in table order."""
    model_has = {c.name for c in model_columns}
    return [dc for dc in db_columns if dc.name not in model_has]


def build_diff(
    pairs: Sequence[TypeGroup],
    db_column: DatabaseColumn,
    model_column: ModelColumn,
) -> Diff | None:
    """Return a Diff if the two columns do not line up, else None."""
    type_changed = not are_equivalent_types(
        pairs, db_column.data_type, model_column.declared_type
    )
    nullable_changed = db_column.is_nullable != model_column.nullable

    if type_changed or nullable_changed:
        return Diff(
            column=db_column.name,
            db_type=db_column.data_type,
            db_nullable=db_column.is_nullable,
            model_type=model_column.declared_type,
            model_nullable=model_column.nullable,
            type_changed=type_changed,
        )
    return None


def build_diffs(
    pairs: Sequence[TypeGroup],
    db_columns: Sequence[DatabaseColumn],
    model_columns: Sequence[ModelColumn],
) -> list[Diff]:
    """Compare every name-matched column pair, in table order.

    A name repeated on either side is only compared once, using the first
    column with that name on each side.
    """
    model_index = _index_by_name(model_columns)
    diffs: list[Diff] = []
    seen: set[str] = set()

    for db_column in db_columns:
        if db_column.name in seen:
            continue
        seen.add(db_column.name)

        model_column = model_index.get(db_column.name)
        if model_column is None:
            continue

        diff = build_diff(pairs, db_column, model_column)
        if diff is not None:
            diffs.append(diff)

    return diffs


def match_columns(
    pairs: Sequence[TypeGroup],
    db_columns: Sequence[DatabaseColumn],
    model_columns: Sequence[ModelColumn],
) -> ColumnMatch:
    """Classify *db_columns* against *model_columns*.

    Examples:
        >>> pairs = (frozenset({"INT4", "i32"}),)
        >>> match = match_columns(
        ...     pairs,
        ...     [DatabaseColumn(name="id", data_type="INT4", is_nullable=False)],
        ...     [ModelColumn(name="id", declared_type="i32", nullable=False)],
        ... )
        >>> match.changed
        []
    """
    return ColumnMatch(
        added_in_model=columns_added_in_model(db_columns, model_columns),
        changed=build_diffs(pairs, db_columns, model_columns),
        missing_in_model=columns_missing_in_model(db_columns, model_columns),
    )
