"""SQL dialects, default namespaces, and type equivalence.

Each supported dialect exposes an ordered tuple of equivalence groups.  A
group is a frozenset of type names that are interchangeable for drift
detection: database type names as the catalogs report them (upper-case) and
the Python type names models declare.

Usage:
    from schema_drift.schema.syntax import Syntax, are_equivalent_types, get_pairs

    pairs = get_pairs(Syntax.POSTGRES)
    are_equivalent_types(pairs, "INT4", "int")      # True
    are_equivalent_types(pairs, "INT4", "str")      # False
"""

from collections.abc import Sequence
from enum import Enum

from sqlalchemy.engine import make_url


class Syntax(str, Enum):
    """SQL engine family a catalog talks to."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    MSSQL = "mssql"

    @classmethod
    def from_url(cls, database_url: str) -> "Syntax":
        """Infer the dialect from a database URL.

        Driver suffixes are ignored (``postgresql+asyncpg://`` is POSTGRES).

        Raises:
            ValueError: If the URL names an unsupported backend.
        """
        url = database_url
        # SQLAlchemy does not accept the postgres:// alias
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]

        backend = make_url(url).get_backend_name()
        syntax = _BACKENDS.get(backend)
        if syntax is None:
            raise ValueError(f"Unsupported database backend: {backend}")
        return syntax


_BACKENDS: dict[str, Syntax] = {
    "postgresql": Syntax.POSTGRES,
    "mysql": Syntax.MYSQL,
    "mariadb": Syntax.MYSQL,
    "sqlite": Syntax.SQLITE,
    "mssql": Syntax.MSSQL,
}


# ============================================================================
# Default namespaces
# ============================================================================

# MySQL and SQLite scope tables by the connection's selected database
DEFAULT_NAMESPACES: dict[Syntax, str | None] = {
    Syntax.MSSQL: "dbo",
    Syntax.POSTGRES: "public",
    Syntax.MYSQL: None,
    Syntax.SQLITE: None,
}


def default_namespace(syntax: Syntax) -> str | None:
    """Namespace assumed for a model that does not declare one."""
    return DEFAULT_NAMESPACES[syntax]


# ============================================================================
# Type equivalence groups
# ============================================================================

TypeGroup = frozenset[str]

# Catalogs report every array column under this name, whatever its element type
ARRAY_TYPE = "ARRAY"


def _groups(*groups: tuple[str, ...]) -> tuple[TypeGroup, ...]:
    return tuple(frozenset(g) for g in groups)


_POSTGRES_PAIRS = _groups(
    ("INT2", "SMALLINT", "int"),
    ("INT4", "INTEGER", "int"),
    ("INT8", "BIGINT", "int"),
    ("FLOAT4", "REAL", "float"),
    ("FLOAT8", "DOUBLE PRECISION", "float"),
    ("NUMERIC", "Decimal"),
    ("BOOL", "BOOLEAN", "bool"),
    ("TEXT", "VARCHAR", "BPCHAR", "CHAR", "NAME", "CITEXT", "str"),
    ("UUID", "str"),
    ("TIMESTAMP", "TIMESTAMP WITHOUT TIME ZONE", "datetime"),
    ("TIMESTAMPTZ", "TIMESTAMP WITH TIME ZONE", "datetime"),
    ("DATE", "date"),
    ("TIME", "TIMETZ", "TIME WITHOUT TIME ZONE", "TIME WITH TIME ZONE", "time"),
    ("INTERVAL", "timedelta"),
    ("BYTEA", "bytes"),
    ("JSON", "JSONB", "dict"),
    ("JSON", "JSONB", "list"),
    (ARRAY_TYPE, "list"),
)

_MYSQL_PAIRS = _groups(
    ("TINYINT", "BOOLEAN", "bool"),
    ("TINYINT", "int"),
    ("SMALLINT", "int"),
    ("MEDIUMINT", "int"),
    ("INT", "INTEGER", "int"),
    ("BIGINT", "int"),
    ("FLOAT", "float"),
    ("DOUBLE", "REAL", "float"),
    ("DECIMAL", "NUMERIC", "Decimal"),
    ("TEXT", "VARCHAR", "CHAR", "MEDIUMTEXT", "LONGTEXT", "TINYTEXT", "str"),
    ("ENUM", "str"),
    ("DATETIME", "TIMESTAMP", "datetime"),
    ("DATE", "date"),
    ("TIME", "timedelta"),
    ("BLOB", "VARBINARY", "BINARY", "LONGBLOB", "MEDIUMBLOB", "bytes"),
    ("JSON", "dict"),
    ("JSON", "list"),
)

_SQLITE_PAIRS = _groups(
    ("INTEGER", "INT", "BIGINT", "SMALLINT", "int"),
    ("BOOLEAN", "bool"),
    ("INTEGER", "bool"),
    ("REAL", "FLOAT", "DOUBLE", "float"),
    ("NUMERIC", "DECIMAL", "Decimal"),
    ("TEXT", "VARCHAR", "CHAR", "CLOB", "str"),
    ("DATETIME", "TIMESTAMP", "datetime"),
    ("DATE", "date"),
    ("TIME", "time"),
    ("BLOB", "bytes"),
    ("JSON", "dict"),
    ("JSON", "list"),
)

_MSSQL_PAIRS = _groups(
    ("BIT", "bool"),
    ("TINYINT", "int"),
    ("SMALLINT", "int"),
    ("INT", "INTEGER", "int"),
    ("BIGINT", "int"),
    ("REAL", "float"),
    ("FLOAT", "float"),
    ("DECIMAL", "NUMERIC", "MONEY", "Decimal"),
    ("NVARCHAR", "VARCHAR", "NCHAR", "CHAR", "NTEXT", "TEXT", "str"),
    ("UNIQUEIDENTIFIER", "UUID"),
    ("UNIQUEIDENTIFIER", "str"),
    ("DATETIME", "DATETIME2", "SMALLDATETIME", "DATETIMEOFFSET", "datetime"),
    ("DATE", "date"),
    ("TIME", "time"),
    ("VARBINARY", "BINARY", "IMAGE", "bytes"),
)

_PAIRS: dict[Syntax, tuple[TypeGroup, ...]] = {
    Syntax.POSTGRES: _POSTGRES_PAIRS,
    Syntax.MYSQL: _MYSQL_PAIRS,
    Syntax.SQLITE: _SQLITE_PAIRS,
    Syntax.MSSQL: _MSSQL_PAIRS,
}


def get_pairs(syntax: Syntax) -> tuple[TypeGroup, ...]:
    """Return the equivalence groups used for *syntax*."""
    return _PAIRS[syntax]


def are_equivalent_types(pairs: Sequence[TypeGroup], a: str, b: str) -> bool:
    """Return True if type names *a* and *b* are interchangeable.

    Identical names are always equivalent.  Otherwise some group in *pairs*
    must contain both.  Comparison is case-sensitive.

    Examples:
        >>> pairs = (frozenset({"INT4", "i32"}),)
        >>> are_equivalent_types(pairs, "INT4", "i32")
        True
        >>> are_equivalent_types(pairs, "i32", "INT4")
        True
        >>> are_equivalent_types(pairs, "INT4", "int4")
        False
    """
    if a == b:
        return True
    return any(a in group and b in group for group in pairs)
