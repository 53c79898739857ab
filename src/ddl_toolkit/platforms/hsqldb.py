"""HSQLDB: embedded Java database with SYS_ prefixed internal indices."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Column, ForeignKey, Index
    from ddl_toolkit.model.table import Table


class HsqlDbBuilder(SqlBuilder):
    """Emits HSQLDB DDL."""

    def get_drop_table_stmt(self, table: Table) -> str:
        """Return DROP TABLE ... IF EXISTS."""
        return f"DROP TABLE {self.identifiers.write(table.name)} IF EXISTS"

    def write_column_auto_increment(self, table: Table, column: Column) -> None:  # noqa: ARG002
        """Write the identity clause."""
        self.print(" GENERATED BY DEFAULT AS IDENTITY (START WITH 1)")

    def select_last_identity_values(self, table: Table) -> str:  # noqa: ARG002
        """Read the identity value generated by the last insert."""
        return "CALL IDENTITY()"


class HsqlDbReader(ModelReader):
    """Reads HSQLDB metadata without catalog or schema restrictions."""

    def is_internal_primary_key_index(self, table: Table, index: Index) -> bool:  # noqa: ARG002
        """Whether the index is the SYS_PK_ index of the primary key."""
        return (index.name or "").startswith("SYS_PK_")

    def is_internal_foreign_key_index(
        self,
        table: Table,  # noqa: ARG002
        foreign_key: ForeignKey,  # noqa: ARG002
        index: Index,
    ) -> bool:
        """Whether the index is a SYS_IDX_ index created for a foreign key."""
        return (index.name or "").startswith("SYS_IDX_")


class HsqlDbPlatform(Platform):
    """The HSQLDB platform."""

    name = "HsqlDb"
    builder_class = HsqlDbBuilder
    reader_class = HsqlDbReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return HSQLDB's capabilities."""
        return PlatformInfo(
            name=cls.name,
            max_identity_columns=1,
            last_identity_value_readable=True,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return HSQLDB's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.BLOB, "LONGVARBINARY", reverse=False)
        type_map.register(TypeCode.CLOB, "LONGVARCHAR", reverse=False)
        type_map.register_native("VARCHAR_IGNORECASE", TypeCode.VARCHAR)
        type_map.register_native("INT", TypeCode.INTEGER)
        return type_map
