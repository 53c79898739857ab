"""Sybase Adaptive Server Enterprise, the ancestor of SQL Server's dialect."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ddl_toolkit.model.elements import CascadeAction
from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platforms.mssql import MsSqlBuilder, MsSqlPlatform

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Column
    from ddl_toolkit.model.table import Table
    from ddl_toolkit.platform.info import PlatformInfo
    from ddl_toolkit.platform.type_map import TypeMap


class SybaseBuilder(MsSqlBuilder):
    """Emits Sybase DDL."""

    def write_alter_column_stmt(self, table: Table, column: Column) -> None:
        """Write ALTER TABLE ... MODIFY with type and nullability."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" MODIFY ")
        self.print_identifier(column.name)
        self.print(" ")
        self.write_column_type(table, column)
        self.print(" NOT NULL" if column.required else " NULL")
        self.print_end_of_statement()


class SybasePlatform(MsSqlPlatform):
    """The Sybase platform."""

    name = "Sybase"
    builder_class = SybaseBuilder

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return Sybase's capabilities."""
        return replace(
            super().default_info(),
            max_identifier_length=30,
            identifier_quote_char='"',
            default_values_for_long_types=False,
            on_delete_actions=frozenset({CascadeAction.NONE}),
            on_update_actions=frozenset({CascadeAction.NONE}),
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return Sybase's type spellings."""
        type_map = super().default_type_map()
        type_map.register(TypeCode.BIGINT, "DECIMAL(19,0)")
        return type_map
