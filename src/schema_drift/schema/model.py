"""Model schema definitions.

Defines the ``ModelSchema`` Protocol the auditor reads a model through, plus
two implementations:

- ``TableModel``: a declarative pydantic model, as written in the TOML config.
- ``SqlAlchemyModel``: wraps a SQLAlchemy ``Table`` (Core or declarative ORM
  class) and reports each column's Python type name as its declared type.

Usage:
    from schema_drift.schema.model import SqlAlchemyModel, TableModel

    users = TableModel(
        identifier=["public", "users"],
        columns=[{"name": "id", "type": "int", "nullable": False}],
    )
    orders = SqlAlchemyModel(Order)          # declarative class
    every_table = SqlAlchemyModel.from_metadata(Base.metadata)
"""

from collections.abc import Sequence
from typing import Any, Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from sqlalchemy import MetaData, Table
from sqlalchemy.types import TypeEngine

from schema_drift.schema.models import ModelColumn


class ModelSchema(Protocol):
    """What the auditor needs to know about a model."""

    def identifier(self) -> Sequence[str]:
        """Namespace/table path, most specific last (e.g. ``["public", "users"]``)."""
        ...

    def columns(self) -> Sequence[ModelColumn]:
        """Columns in declaration order."""
        ...


class TableModel(BaseModel):
    """A model declared as data.

    Accepts ``identifier``/``columns`` keys (the TOML spelling) and each
    column's type under ``type`` or ``declared_type``.

    Example:
        >>> model = TableModel(identifier=["users"], columns=[{"name": "id", "type": "int"}])
        >>> model.identifier()
        ['users']
        >>> model.columns()[0].declared_type
        'int'
    """

    model_config = ConfigDict(frozen=True)

    path: list[str] = Field(
        validation_alias=AliasChoices("identifier", "path"),
        min_length=1,
    )
    column_defs: list[ModelColumn] = Field(
        default_factory=list,
        validation_alias=AliasChoices("columns", "column_defs"),
    )

    def identifier(self) -> list[str]:
        return list(self.path)

    def columns(self) -> list[ModelColumn]:
        return list(self.column_defs)


def python_type_name(column_type: TypeEngine) -> str:
    """Name of the Python type a SQLAlchemy column type maps to.

    Types without a Python equivalent fall back to their upper-cased class
    name (e.g. ``NullType`` -> ``NULLTYPE``).
    """
    try:
        return column_type.python_type.__name__
    except NotImplementedError:
        return type(column_type).__name__.upper()


class SqlAlchemyModel:
    """``ModelSchema`` over a SQLAlchemy table.

    Args:
        table: A ``Table``, or a declarative ORM class with ``__table__``.

    Example:
        model = SqlAlchemyModel(users_table)
        model.identifier()   # ["public", "users"] or ["users"]
    """

    def __init__(self, table: Table | Any) -> None:
        if not isinstance(table, Table):
            table = getattr(table, "__table__", None)
            if not isinstance(table, Table):
                raise TypeError(
                    "SqlAlchemyModel needs a Table or a mapped class with __table__"
                )
        self._table: Table = table

    @classmethod
    def from_metadata(cls, metadata: MetaData) -> list["SqlAlchemyModel"]:
        """Wrap every table in *metadata*, sorted by key."""
        return [cls(metadata.tables[key]) for key in sorted(metadata.tables)]

    @property
    def table(self) -> Table:
        return self._table

    def identifier(self) -> list[str]:
        if self._table.schema:
            return [self._table.schema, self._table.name]
        return [self._table.name]

    def columns(self) -> list[ModelColumn]:
        return [
            ModelColumn(
                name=column.name,
                declared_type=python_type_name(column.type),
                nullable=bool(column.nullable),
            )
            for column in self._table.columns
        ]

    def __repr__(self) -> str:
        return f"SqlAlchemyModel({'.'.join(self.identifier())})"
