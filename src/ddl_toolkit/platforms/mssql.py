"""Microsoft SQL Server."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.elements import CascadeAction
from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import ALL_ACTIONS, SQL_RESERVED_WORDS, CaseFold, PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap
from ddl_toolkit.platform.values import quote_string

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ddl_toolkit.model.elements import Column, Index
    from ddl_toolkit.model.table import Table

MSSQL_RESERVED_WORDS = SQL_RESERVED_WORDS | {
    "BACKUP", "BROWSE", "CLUSTERED", "DATABASE", "FILE", "IDENTITY", "PERCENT",
    "PLAN", "PROC", "PROCEDURE", "READ", "RULE", "TOP", "TRAN", "TRANSACTION",
}  # fmt: skip


class MsSqlBuilder(SqlBuilder):
    """Emits Transact-SQL DDL."""

    def write_column_auto_increment(self, table: Table, column: Column) -> None:  # noqa: ARG002
        """Write IDENTITY (1,1)."""
        self.print(" IDENTITY (1,1)")

    def write_external_index_drop_stmt(self, table: Table, index: Index) -> None:
        """Write DROP INDEX table.index."""
        self.print("DROP INDEX ")
        self.print_identifier(table.name)
        self.print(".")
        self.print_identifier(self.index_name(table, index))
        self.print_end_of_statement()

    def write_alter_column_stmt(self, table: Table, column: Column) -> None:
        """Write ALTER TABLE ... ALTER COLUMN with type and nullability."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" ALTER COLUMN ")
        self.print_identifier(column.name)
        self.print(" ")
        self.write_column_type(table, column)
        self.print(" NOT NULL" if column.required else " NULL")
        self.print_end_of_statement()

    def write_rename_table_stmt(self, old_name: str, new_name: str) -> None:
        """Rename a table with sp_rename."""
        self.print(
            f"EXEC sp_rename {quote_string(self.identifiers.shorten(old_name))}, "
            f"{quote_string(self.identifiers.shorten(new_name))}",
        )
        self.print_end_of_statement()

    def write_copy_data_stmt(
        self,
        source: str,
        target: Table,
        columns: Sequence[tuple[str, str]],
        *,
        target_name: str | None = None,
    ) -> None:
        """Copy rows, allowing explicit values for the target's identity column."""
        identity = bool(columns) and any(
            column.auto_increment for column in target.columns
        )
        name = self.identifiers.write(target_name or target.name)
        if identity:
            self.print(f"SET IDENTITY_INSERT {name} ON")
            self.print_end_of_statement()
        super().write_copy_data_stmt(source, target, columns, target_name=target_name)
        if identity:
            self.print(f"SET IDENTITY_INSERT {name} OFF")
            self.print_end_of_statement()

    def select_last_identity_values(self, table: Table) -> str:  # noqa: ARG002
        """Read the identity value generated by the last insert."""
        return "SELECT @@IDENTITY"


class MsSqlPlatform(Platform):
    """The Microsoft SQL Server platform."""

    name = "MsSql"
    builder_class = MsSqlBuilder
    reader_class = ModelReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return SQL Server's capabilities."""
        actions = ALL_ACTIONS - {CascadeAction.RESTRICT}
        return PlatformInfo(
            name=cls.name,
            max_identifier_length=128,
            identifier_quote_char="[",
            identifier_case_fold=CaseFold.PRESERVE,
            reserved_words=MSSQL_RESERVED_WORDS,
            add_column_clause="ADD",
            explicit_null_required=True,
            boolean_literals=("1", "0"),
            max_identity_columns=1,
            last_identity_value_readable=True,
            on_delete_actions=actions,
            on_update_actions=actions,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return SQL Server's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.TIMESTAMP, "DATETIME")
        type_map.register(TypeCode.DATE, "DATETIME", reverse=False)
        type_map.register(TypeCode.TIME, "DATETIME", reverse=False)
        type_map.register(TypeCode.BOOLEAN, "BIT", reverse=False)
        type_map.register(TypeCode.DOUBLE, "FLOAT")
        type_map.register(TypeCode.LONGVARCHAR, "TEXT")
        type_map.register(TypeCode.CLOB, "TEXT", reverse=False)
        type_map.register(TypeCode.LONGVARBINARY, "IMAGE")
        type_map.register(TypeCode.BLOB, "IMAGE", reverse=False)
        for native, type_code in (
            ("INT", TypeCode.INTEGER),
            ("NCHAR", TypeCode.CHAR),
            ("NVARCHAR", TypeCode.VARCHAR),
            ("NTEXT", TypeCode.LONGVARCHAR),
            ("DATETIME2", TypeCode.TIMESTAMP),
            ("SMALLDATETIME", TypeCode.TIMESTAMP),
        ):
            type_map.register_native(native, type_code)
        return type_map
