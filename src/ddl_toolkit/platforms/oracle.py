"""Oracle: sequences and triggers for identity columns, NUMBER based types."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.elements import CascadeAction
from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import SQL_RESERVED_WORDS, PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Column
    from ddl_toolkit.model.table import Table

ORACLE_RESERVED_WORDS = SQL_RESERVED_WORDS | {
    "ACCESS", "AUDIT", "COMMENT", "FILE", "LEVEL", "MODE", "NUMBER", "RAW",
    "ROW", "ROWID", "ROWNUM", "SESSION", "SIZE", "SYNONYM", "SYSDATE", "UID",
}  # fmt: skip


class OracleBuilder(SqlBuilder):
    """Emits Oracle DDL."""

    def get_drop_table_stmt(self, table: Table) -> str:
        """Return DROP TABLE ... CASCADE CONSTRAINTS."""
        return f"DROP TABLE {self.identifiers.write(table.name)} CASCADE CONSTRAINTS"

    def write_column_auto_increment(self, table: Table, column: Column) -> None:
        """Write nothing; a trigger fills the column from a sequence."""

    def write_alter_column_stmt(self, table: Table, column: Column) -> None:
        """Write ALTER TABLE ... MODIFY (definition)."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" MODIFY (")
        self.write_column(table, column)
        self.print(")")
        self.print_end_of_statement()

    def create_column_auxiliary_objects(self, table: Table, column: Column) -> None:
        """Write the sequence and the BEFORE INSERT trigger feeding the column."""
        sequence = self.identifiers.write(self.sequence_name(table, column))
        column_name = self.identifiers.write(column.name)

        self.print(f"CREATE SEQUENCE {sequence}")
        self.print_end_of_statement()

        self.print("CREATE OR REPLACE TRIGGER ")
        self.print_identifier(self.trigger_name(table, column))
        self.print(" BEFORE INSERT ON ")
        self.print_identifier(table.name)
        self.println(" FOR EACH ROW")
        self.println(f"WHEN (new.{column_name} IS NULL)")
        self.println("BEGIN")
        self.println(f"SELECT {sequence}.nextval INTO :new.{column_name} FROM dual;")
        self.print("END")
        self.print_end_of_statement()

    def drop_column_auxiliary_objects(self, table: Table, column: Column) -> None:
        """Drop the trigger, then the sequence."""
        self.print("DROP TRIGGER ")
        self.print_identifier(self.trigger_name(table, column))
        self.print_end_of_statement()
        self.print("DROP SEQUENCE ")
        self.print_identifier(self.sequence_name(table, column))
        self.print_end_of_statement()

    def select_last_identity_values(self, table: Table) -> str:
        """Read the current value of every identity sequence of the table."""
        values = ", ".join(
            f"{self.identifiers.write(self.sequence_name(table, column))}.currval"
            for column in table.auto_increment_columns
        )
        return f"SELECT {values} FROM dual"


class OraclePlatform(Platform):
    """The Oracle platform."""

    name = "Oracle"
    builder_class = OracleBuilder
    reader_class = ModelReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return Oracle's capabilities."""
        return PlatformInfo(
            name=cls.name,
            max_identifier_length=30,
            reserved_words=ORACLE_RESERVED_WORDS,
            add_column_clause="ADD",
            boolean_literals=("1", "0"),
            last_identity_value_readable=True,
            on_delete_actions=frozenset(
                {CascadeAction.NONE, CascadeAction.CASCADE, CascadeAction.SET_NULL},
            ),
            on_update_actions=frozenset({CascadeAction.NONE}),
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return Oracle's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.BOOLEAN, "NUMBER(1)")
        type_map.register(TypeCode.BIT, "NUMBER(1)", reverse=False)
        type_map.register(TypeCode.TINYINT, "NUMBER(3)")
        type_map.register(TypeCode.SMALLINT, "NUMBER(5)")
        type_map.register(TypeCode.BIGINT, "NUMBER(38)")
        type_map.register(TypeCode.DECIMAL, "NUMBER({size},{scale})")
        type_map.register(TypeCode.NUMERIC, "NUMBER({size},{scale})", reverse=False)
        type_map.register(TypeCode.DOUBLE, "DOUBLE PRECISION")
        type_map.register(TypeCode.VARCHAR, "VARCHAR2({size})")
        type_map.register(TypeCode.LONGVARCHAR, "CLOB", reverse=False)
        type_map.register(TypeCode.BINARY, "RAW({size})")
        type_map.register(TypeCode.VARBINARY, "RAW({size})", reverse=False)
        type_map.register(TypeCode.LONGVARBINARY, "BLOB", reverse=False)
        type_map.register(TypeCode.TIME, "DATE", reverse=False)
        type_map.register_native("NVARCHAR2", TypeCode.VARCHAR)
        type_map.register_native("NCHAR", TypeCode.CHAR)
        type_map.register_native("NCLOB", TypeCode.CLOB)
        type_map.register_native("LONG", TypeCode.LONGVARCHAR)
        type_map.register_native("LONG RAW", TypeCode.LONGVARBINARY)
        return type_map
