"""PostgreSQL: serial pseudo-types for identity columns and lower-case folding."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import SQL_RESERVED_WORDS, CaseFold, PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Column
    from ddl_toolkit.model.table import Table
    from ddl_toolkit.platform.metadata import Row

POSTGRESQL_RESERVED_WORDS = SQL_RESERVED_WORDS | {
    "ANALYSE", "ANALYZE", "ARRAY", "LIMIT", "OFFSET", "ONLY", "PLACING",
    "RETURNING", "SYMMETRIC",
}  # fmt: skip

SERIAL_TYPES = {
    TypeCode.BIGINT: "BIGSERIAL",
    TypeCode.SMALLINT: "SMALLSERIAL",
    TypeCode.TINYINT: "SMALLSERIAL",
}


class PostgreSqlBuilder(SqlBuilder):
    """Emits PostgreSQL DDL."""

    def primary_key_name(self, table: Table) -> str:
        """Return the name PostgreSQL gives an embedded primary key."""
        return self.identifiers.shorten(f"{table.name}_pkey")

    def write_column_type(self, table: Table, column: Column) -> None:
        """Write the serial pseudo-type for identity columns."""
        if column.auto_increment:
            self.print(SERIAL_TYPES.get(column.type_code, "SERIAL"))
            return
        super().write_column_type(table, column)

    def write_column_auto_increment(self, table: Table, column: Column) -> None:
        """Write nothing; the serial type creates the sequence."""

    def write_alter_column_stmt(self, table: Table, column: Column) -> None:
        """Change type, nullability and default with one statement each."""
        prefix = (
            f"ALTER TABLE {self.identifiers.write(table.name)} "
            f"ALTER COLUMN {self.identifiers.write(column.name)}"
        )
        self.print(f"{prefix} TYPE {self.get_native_type(column)}")
        self.print_end_of_statement()
        self.print(f"{prefix} {'SET' if column.required else 'DROP'} NOT NULL")
        self.print_end_of_statement()
        default = None if column.auto_increment else self.get_default_value(table, column)
        if default is None:
            self.print(f"{prefix} DROP DEFAULT")
        else:
            self.print(f"{prefix} SET DEFAULT {default}")
        self.print_end_of_statement()

    def sequence_name(self, table: Table, column: Column) -> str:
        """Return the name of the sequence created by a serial column."""
        return f"{table.name}_{column.name}_seq".lower()

    def select_last_identity_values(self, table: Table) -> str:
        """Read the current value of every serial sequence of the table."""
        values = ", ".join(
            f"currval('{self.sequence_name(table, column)}')"
            for column in table.auto_increment_columns
        )
        return f"SELECT {values}"


class PostgreSqlReader(ModelReader):
    """Reads PostgreSQL metadata from the public schema."""

    default_schema_pattern = "public"

    def read_column(self, row: Row) -> Column:
        """Read a column, treating ``nextval(...)`` defaults as identity columns."""
        column = super().read_column(row)
        default = str(row.get("COLUMN_DEF") or "")
        if default.lower().startswith("nextval("):
            column.auto_increment = True
            column.default_value = None
        return column


class PostgreSqlPlatform(Platform):
    """The PostgreSQL platform."""

    name = "PostgreSql"
    builder_class = PostgreSqlBuilder
    reader_class = PostgreSqlReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return PostgreSQL's capabilities."""
        return PlatformInfo(
            name=cls.name,
            max_identifier_length=63,
            identifier_case_fold=CaseFold.LOWER,
            reserved_words=POSTGRESQL_RESERVED_WORDS,
            last_identity_value_readable=True,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return PostgreSQL's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.BIT, "BOOLEAN", reverse=False)
        type_map.register(TypeCode.TINYINT, "SMALLINT", reverse=False)
        type_map.register(TypeCode.DOUBLE, "DOUBLE PRECISION")
        type_map.register(TypeCode.FLOAT, "DOUBLE PRECISION", reverse=False)
        type_map.register(TypeCode.LONGVARCHAR, "TEXT")
        type_map.register(TypeCode.CLOB, "TEXT", reverse=False)
        type_map.register(TypeCode.LONGVARBINARY, "BYTEA")
        type_map.register(TypeCode.BINARY, "BYTEA", reverse=False)
        type_map.register(TypeCode.VARBINARY, "BYTEA", reverse=False)
        type_map.register(TypeCode.BLOB, "BYTEA", reverse=False)
        for native, type_code in (
            ("INT", TypeCode.INTEGER),
            ("INT2", TypeCode.SMALLINT),
            ("INT4", TypeCode.INTEGER),
            ("INT8", TypeCode.BIGINT),
            ("FLOAT4", TypeCode.REAL),
            ("FLOAT8", TypeCode.DOUBLE),
            ("BOOL", TypeCode.BOOLEAN),
            ("BPCHAR", TypeCode.CHAR),
            ("CHARACTER", TypeCode.CHAR),
            ("CHARACTER VARYING", TypeCode.VARCHAR),
            ("TIMESTAMP WITHOUT TIME ZONE", TypeCode.TIMESTAMP),
            ("TIME WITHOUT TIME ZONE", TypeCode.TIME),
            ("SERIAL", TypeCode.INTEGER),
            ("BIGSERIAL", TypeCode.BIGINT),
            ("SMALLSERIAL", TypeCode.SMALLINT),
        ):
            type_map.register_native(native, type_code)
        return type_map
