"""Axion: a small embedded Java database with limited ALTER TABLE support."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Column
    from ddl_toolkit.model.table import Table


class AxionBuilder(SqlBuilder):
    """Emits Axion DDL."""

    def get_drop_table_stmt(self, table: Table) -> str:
        """Return DROP TABLE IF EXISTS."""
        return f"DROP TABLE IF EXISTS {self.identifiers.write(table.name)}"

    def write_column_auto_increment(self, table: Table, column: Column) -> None:  # noqa: ARG002
        """Write IDENTITY."""
        self.print(" IDENTITY")


class AxionPlatform(Platform):
    """The Axion platform."""

    name = "Axion"
    builder_class = AxionBuilder
    reader_class = ModelReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return Axion's capabilities."""
        return PlatformInfo(
            name=cls.name,
            supports_alter_for_drop=False,
            supports_alter_column=False,
            supports_rename_table=False,
            max_identity_columns=1,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return Axion's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.BIT, "BOOLEAN", reverse=False)
        type_map.register(TypeCode.TINYINT, "SMALLINT", reverse=False)
        type_map.register(TypeCode.LONGVARCHAR, "CLOB", reverse=False)
        type_map.register(TypeCode.LONGVARBINARY, "BLOB", reverse=False)
        return type_map
