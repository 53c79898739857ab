"""Generic database metadata interface and its SQLAlchemy implementation.

Readers consume metadata as result sets of rows labelled like the JDBC
``DatabaseMetaData`` columns (``TABLE_NAME``, ``COLUMN_NAME``, ``DATA_TYPE`` ...),
so dialect readers can be written and tested independently of a live backend.
"""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING, Any, Protocol

from sqlalchemy import inspect, types
from sqlalchemy.exc import CompileError, UnsupportedCompilationError

from ddl_toolkit.model.types import TypeCode

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping, Sequence
    from types import TracebackType

    from sqlalchemy import Connection
    from sqlalchemy.engine.interfaces import ReflectedColumn

logger = getLogger(__name__)

Row = dict[str, Any]

# JDBC DatabaseMetaData rule codes
IMPORTED_KEY_CASCADE = 0
IMPORTED_KEY_RESTRICT = 1
IMPORTED_KEY_SET_NULL = 2
IMPORTED_KEY_NO_ACTION = 3
IMPORTED_KEY_SET_DEFAULT = 4

COLUMN_NO_NULLS = 0
COLUMN_NULLABLE = 1

_RULE_CODES = {
    "CASCADE": IMPORTED_KEY_CASCADE,
    "RESTRICT": IMPORTED_KEY_RESTRICT,
    "SET NULL": IMPORTED_KEY_SET_NULL,
    "NO ACTION": IMPORTED_KEY_NO_ACTION,
    "SET DEFAULT": IMPORTED_KEY_SET_DEFAULT,
}

# Checked in order: specific SQL types before their generic parents
_JDBC_CODES: list[tuple[type[types.TypeEngine[Any]], TypeCode]] = [
    (types.Boolean, TypeCode.BOOLEAN),
    (types.BigInteger, TypeCode.BIGINT),
    (types.SmallInteger, TypeCode.SMALLINT),
    (types.Integer, TypeCode.INTEGER),
    (types.REAL, TypeCode.REAL),
    (types.Double, TypeCode.DOUBLE),
    (types.Float, TypeCode.FLOAT),
    (types.NUMERIC, TypeCode.NUMERIC),
    (types.Numeric, TypeCode.DECIMAL),
    (types.DateTime, TypeCode.TIMESTAMP),
    (types.Date, TypeCode.DATE),
    (types.Time, TypeCode.TIME),
    (types.CLOB, TypeCode.CLOB),
    (types.Text, TypeCode.LONGVARCHAR),
    (types.CHAR, TypeCode.CHAR),
    (types.String, TypeCode.VARCHAR),
    (types.BINARY, TypeCode.BINARY),
    (types.VARBINARY, TypeCode.VARBINARY),
    (types.LargeBinary, TypeCode.BLOB),
    (types.NullType, TypeCode.OTHER),
]


def jdbc_code(sql_type: types.TypeEngine[Any]) -> TypeCode:
    """Return the JDBC type code matching a SQLAlchemy type."""
    for sql_class, type_code in _JDBC_CODES:
        if isinstance(sql_type, sql_class):
            return type_code
    return TypeCode.OTHER


def rule_code(action: str | None) -> int:
    """Return the JDBC rule code of a referential action such as ``SET NULL``."""
    if not action:
        return IMPORTED_KEY_NO_ACTION
    return _RULE_CODES.get(" ".join(action.upper().split()), IMPORTED_KEY_NO_ACTION)


def like_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a SQL LIKE pattern (``%`` and ``_``) into a regular expression."""
    parts = [
        ".*" if char == "%" else "." if char == "_" else re.escape(char)
        for char in pattern
    ]
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE)


class ResultSet:
    """Rows returned by one metadata call.

    Result sets hold backend resources in general and must be closed; use them
    as context managers.
    """

    def __init__(self, rows: Iterable[Row]) -> None:
        """Initialize with the rows to hand out."""
        self._rows = list(rows)
        self.closed = False

    def __iter__(self) -> Iterator[Row]:
        """Iterate over the rows."""
        if self.closed:
            msg = "Result set is closed"
            raise RuntimeError(msg)
        return iter(self._rows)

    def close(self) -> None:
        """Release the rows."""
        self.closed = True
        self._rows = []

    def __enter__(self) -> ResultSet:
        """Return the open result set."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Close the result set."""
        self.close()


class DatabaseMetaData(Protocol):
    """Metadata calls a model reader relies on."""

    def get_tables(
        self,
        catalog: str | None,
        schema_pattern: str | None,
        table_pattern: str | None,
        table_types: Sequence[str] | None,
    ) -> ResultSet:
        """Rows: TABLE_CAT, TABLE_SCHEM, TABLE_NAME, TABLE_TYPE, REMARKS."""
        ...

    def get_columns(
        self,
        catalog: str | None,
        schema_pattern: str | None,
        table_name: str,
    ) -> ResultSet:
        """Rows: COLUMN_NAME, DATA_TYPE, TYPE_NAME, COLUMN_SIZE, DECIMAL_DIGITS,
        NULLABLE, COLUMN_DEF, IS_AUTOINCREMENT, ORDINAL_POSITION, REMARKS.
        """  # noqa: D205
        ...

    def get_primary_keys(
        self,
        catalog: str | None,
        schema: str | None,
        table_name: str,
    ) -> ResultSet:
        """Rows: COLUMN_NAME, KEY_SEQ, PK_NAME."""
        ...

    def get_imported_keys(
        self,
        catalog: str | None,
        schema: str | None,
        table_name: str,
    ) -> ResultSet:
        """Rows: PKTABLE_NAME, PKCOLUMN_NAME, FKCOLUMN_NAME, KEY_SEQ, UPDATE_RULE,
        DELETE_RULE, FK_NAME.
        """  # noqa: D205
        ...

    def get_index_info(
        self,
        catalog: str | None,
        schema: str | None,
        table_name: str,
        *,
        unique: bool = False,
    ) -> ResultSet:
        """Rows: INDEX_NAME, NON_UNIQUE, COLUMN_NAME, ORDINAL_POSITION."""
        ...

    def get_type_info(self) -> ResultSet:
        """Rows: TYPE_NAME, DATA_TYPE."""
        ...


class InspectorMetaData:
    """:class:`DatabaseMetaData` over a SQLAlchemy connection's inspector."""

    def __init__(self, connection: Connection) -> None:
        """Initialize from a caller-owned connection."""
        self._connection = connection
        self._dialect = connection.dialect
        self._inspector = inspect(connection)

    def type_name(self, sql_type: types.TypeEngine[Any]) -> str:
        """Return the dialect spelling of a reflected type."""
        try:
            return sql_type.compile(dialect=self._dialect)
        except (CompileError, UnsupportedCompilationError):
            return type(sql_type).__name__.upper()

    def get_tables(
        self,
        catalog: str | None,  # noqa: ARG002
        schema_pattern: str | None,
        table_pattern: str | None,
        table_types: Sequence[str] | None,
    ) -> ResultSet:
        """List tables (and views when asked for) of a schema."""
        wanted = {table_type.upper() for table_type in table_types or ("TABLE",)}
        matcher = like_to_regex(table_pattern) if table_pattern else None
        rows: list[Row] = []
        names: list[tuple[str, str]] = []
        if "TABLE" in wanted:
            names.extend(
                (name, "TABLE")
                for name in self._inspector.get_table_names(schema=schema_pattern)
            )
        if "VIEW" in wanted:
            names.extend(
                (name, "VIEW")
                for name in self._inspector.get_view_names(schema=schema_pattern)
            )
        for name, table_type in names:
            if matcher is not None and not matcher.match(name):
                continue
            rows.append(
                {
                    "TABLE_CAT": None,
                    "TABLE_SCHEM": schema_pattern,
                    "TABLE_NAME": name,
                    "TABLE_TYPE": table_type,
                    "REMARKS": self._table_comment(name, schema_pattern)
                    if table_type == "TABLE"
                    else None,
                },
            )
        return ResultSet(rows)

    def _table_comment(self, table_name: str, schema: str | None) -> str | None:
        try:
            comment = self._inspector.get_table_comment(table_name, schema=schema)
        except NotImplementedError:
            return None
        return comment.get("text")

    def _sqlite_autoincrement(self, table_name: str) -> bool:
        """Whether a SQLite table was declared with AUTOINCREMENT."""
        result = self._connection.exec_driver_sql(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table_name,),
        )
        sql = result.scalar()
        return bool(sql) and "AUTOINCREMENT" in str(sql).upper()

    def _is_autoincrement(
        self,
        column: ReflectedColumn,
        *,
        sqlite_autoincrement: bool,
        primary_key: list[str],
    ) -> bool:
        if "identity" in column or column.get("autoincrement") is True:
            return True
        return (
            sqlite_autoincrement
            and primary_key == [column["name"]]
            and isinstance(column["type"], types.Integer)
        )

    def get_columns(
        self,
        catalog: str | None,  # noqa: ARG002
        schema_pattern: str | None,
        table_name: str,
    ) -> ResultSet:
        """Describe the columns of a table."""
        columns = self._inspector.get_columns(table_name, schema=schema_pattern)
        primary_key = self._inspector.get_pk_constraint(
            table_name,
            schema=schema_pattern,
        ).get("constrained_columns", [])
        sqlite_autoincrement = self._dialect.name == "sqlite" and self._sqlite_autoincrement(
            table_name,
        )
        rows: list[Row] = []
        for position, column in enumerate(columns, start=1):
            sql_type = column["type"]
            size = getattr(sql_type, "length", None)
            if size is None and isinstance(sql_type, types.Numeric) and not isinstance(
                sql_type,
                types.Float,
            ):
                size = sql_type.precision
            autoincrement = self._is_autoincrement(
                column,
                sqlite_autoincrement=sqlite_autoincrement,
                primary_key=primary_key,
            )
            rows.append(
                {
                    "COLUMN_NAME": column["name"],
                    "DATA_TYPE": int(jdbc_code(sql_type)),
                    "TYPE_NAME": self.type_name(sql_type),
                    "COLUMN_SIZE": size,
                    "DECIMAL_DIGITS": getattr(sql_type, "scale", None),
                    "NULLABLE": COLUMN_NULLABLE if column["nullable"] else COLUMN_NO_NULLS,
                    "COLUMN_DEF": column.get("default"),
                    "IS_AUTOINCREMENT": "YES" if autoincrement else "NO",
                    "ORDINAL_POSITION": position,
                    "REMARKS": column.get("comment"),
                },
            )
        return ResultSet(rows)

    def get_primary_keys(
        self,
        catalog: str | None,  # noqa: ARG002
        schema: str | None,
        table_name: str,
    ) -> ResultSet:
        """List the primary key columns of a table."""
        constraint = self._inspector.get_pk_constraint(table_name, schema=schema)
        return ResultSet(
            {"COLUMN_NAME": name, "KEY_SEQ": sequence, "PK_NAME": constraint.get("name")}
            for sequence, name in enumerate(
                constraint.get("constrained_columns", []),
                start=1,
            )
        )

    def get_imported_keys(
        self,
        catalog: str | None,  # noqa: ARG002
        schema: str | None,
        table_name: str,
    ) -> ResultSet:
        """List the foreign key columns of a table, one row per column pair."""
        rows: list[Row] = []
        for foreign_key in self._inspector.get_foreign_keys(table_name, schema=schema):
            options: Mapping[str, Any] = foreign_key.get("options", {})
            for sequence, (local, foreign) in enumerate(
                zip(
                    foreign_key["constrained_columns"],
                    foreign_key["referred_columns"],
                    strict=True,
                ),
                start=1,
            ):
                rows.append(
                    {
                        "PKTABLE_NAME": foreign_key["referred_table"],
                        "PKCOLUMN_NAME": foreign,
                        "FKCOLUMN_NAME": local,
                        "KEY_SEQ": sequence,
                        "UPDATE_RULE": rule_code(options.get("onupdate")),
                        "DELETE_RULE": rule_code(options.get("ondelete")),
                        "FK_NAME": foreign_key.get("name"),
                    },
                )
        return ResultSet(rows)

    def get_index_info(
        self,
        catalog: str | None,  # noqa: ARG002
        schema: str | None,
        table_name: str,
        *,
        unique: bool = False,
    ) -> ResultSet:
        """List index columns of a table, including unique constraints."""
        indexes: list[tuple[str | None, bool, list[str | None]]] = [
            (index["name"], bool(index["unique"]), list(index["column_names"]))
            for index in self._inspector.get_indexes(table_name, schema=schema)
        ]
        try:
            constraints = self._inspector.get_unique_constraints(table_name, schema=schema)
        except NotImplementedError:
            constraints = []
        known = {name for name, _, _ in indexes}
        indexes.extend(
            (constraint["name"], True, list(constraint["column_names"]))
            for constraint in constraints
            if constraint["name"] not in known or constraint["name"] is None
        )
        rows: list[Row] = []
        for name, is_unique, column_names in indexes:
            if unique and not is_unique:
                continue
            rows.extend(
                {
                    "INDEX_NAME": name,
                    "NON_UNIQUE": not is_unique,
                    "COLUMN_NAME": column_name,
                    "ORDINAL_POSITION": position,
                }
                for position, column_name in enumerate(column_names, start=1)
                if column_name is not None
            )
        return ResultSet(rows)

    def get_type_info(self) -> ResultSet:
        """List the native type names the dialect reflects."""
        names: Mapping[str, type[types.TypeEngine[Any]]] = getattr(
            self._dialect,
            "ischema_names",
            {},
        )
        rows: list[Row] = []
        for name, sql_class in sorted(names.items()):
            try:
                code = jdbc_code(sql_class())
            except TypeError:
                logger.debug("Skipping type %s that needs arguments", name)
                continue
            rows.append({"TYPE_NAME": name.upper(), "DATA_TYPE": int(code)})
        return ResultSet(rows)
