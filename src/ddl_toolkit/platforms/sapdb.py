"""SAP DB, later MaxDB."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.elements import CascadeAction
from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Column, ForeignKey
    from ddl_toolkit.model.table import Table


class SapDbBuilder(SqlBuilder):
    """Emits SAP DB DDL."""

    names_primary_key = False

    def write_column_auto_increment(self, table: Table, column: Column) -> None:  # noqa: ARG002
        """Write DEFAULT SERIAL(1)."""
        self.print(" DEFAULT SERIAL(1)")

    def write_external_foreign_key_drop_stmt(
        self,
        table: Table,
        foreign_key: ForeignKey,
    ) -> None:
        """Write ALTER TABLE ... DROP FOREIGN KEY."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" DROP FOREIGN KEY ")
        self.print_identifier(self.foreign_key_name(table, foreign_key))
        self.print_end_of_statement()

    def write_primary_key_drop_stmt(self, table: Table) -> None:
        """Write ALTER TABLE ... DROP PRIMARY KEY."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" DROP PRIMARY KEY")
        self.print_end_of_statement()

    def write_rename_table_stmt(self, old_name: str, new_name: str) -> None:
        """Write RENAME TABLE."""
        self.print("RENAME TABLE ")
        self.print_identifier(old_name)
        self.print(" TO ")
        self.print_identifier(new_name)
        self.print_end_of_statement()


class SapDbPlatform(Platform):
    """The SAP DB platform."""

    name = "SapDB"
    builder_class = SapDbBuilder
    reader_class = ModelReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return SAP DB's capabilities."""
        return PlatformInfo(
            name=cls.name,
            max_identifier_length=32,
            supports_alter_column=False,
            add_column_clause="ADD",
            drop_column_clause="DROP",
            default_values_for_long_types=False,
            on_update_actions=frozenset({CascadeAction.NONE}),
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return SAP DB's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.BIGINT, "FIXED(38,0)")
        type_map.register(TypeCode.BINARY, "CHAR({size}) BYTE")
        type_map.register(TypeCode.BIT, "BOOLEAN", reverse=False)
        type_map.register(TypeCode.DOUBLE, "DOUBLE PRECISION")
        type_map.register(TypeCode.LONGVARBINARY, "LONG BYTE")
        type_map.register(TypeCode.BLOB, "LONG BYTE", reverse=False)
        type_map.register(TypeCode.LONGVARCHAR, "LONG VARCHAR")
        type_map.register(TypeCode.CLOB, "LONG VARCHAR", reverse=False)
        type_map.register(TypeCode.TINYINT, "SMALLINT", reverse=False)
        type_map.register(TypeCode.VARBINARY, "VARCHAR({size}) BYTE")
        type_map.register_native("FIXED", TypeCode.DECIMAL)
        type_map.register_native("LONG", TypeCode.LONGVARCHAR)
        return type_map
