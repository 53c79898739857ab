"""IBM DB2 and the DDL idiom it shares with Cloudscape and Derby."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import SQL_RESERVED_WORDS, PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Index
    from ddl_toolkit.model.table import Table

DB2_RESERVED_WORDS = SQL_RESERVED_WORDS | {
    "COUNT", "DATA", "IDENTITY", "LONG", "MODE", "RENAME", "SYSTEM",
}  # fmt: skip


def register_db2_types(type_map: TypeMap) -> TypeMap:
    """Register the spellings of the DB2 family on a type map."""
    type_map.register(TypeCode.BINARY, "CHAR({size}) FOR BIT DATA")
    type_map.register(TypeCode.BIT, "SMALLINT", reverse=False)
    type_map.register(TypeCode.BOOLEAN, "SMALLINT", reverse=False)
    type_map.register(TypeCode.FLOAT, "DOUBLE", reverse=False)
    type_map.register(TypeCode.LONGVARBINARY, "LONG VARCHAR FOR BIT DATA")
    type_map.register(TypeCode.LONGVARCHAR, "LONG VARCHAR")
    type_map.register(TypeCode.TINYINT, "SMALLINT", reverse=False)
    type_map.register(TypeCode.VARBINARY, "VARCHAR({size}) FOR BIT DATA")
    type_map.register_native("INT", TypeCode.INTEGER)
    type_map.register_native("CHARACTER", TypeCode.CHAR)
    return type_map


class Db2Builder(SqlBuilder):
    """Emits DDL for the DB2 family."""

    names_primary_key = False

    def write_rename_table_stmt(self, old_name: str, new_name: str) -> None:
        """Write RENAME TABLE."""
        self.print("RENAME TABLE ")
        self.print_identifier(old_name)
        self.print(" TO ")
        self.print_identifier(new_name)
        self.print_end_of_statement()

    def write_primary_key_drop_stmt(self, table: Table) -> None:
        """Write ALTER TABLE ... DROP PRIMARY KEY."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" DROP PRIMARY KEY")
        self.print_end_of_statement()

    def select_last_identity_values(self, table: Table) -> str:  # noqa: ARG002
        """Read the identity value generated by the last insert."""
        return "VALUES IDENTITY_VAL_LOCAL()"


class Db2Reader(ModelReader):
    """Reads DB2 metadata from the current schema."""

    def is_internal_primary_key_index(self, table: Table, index: Index) -> bool:
        """Whether the index is the system-named index of the primary key."""
        return super().is_internal_primary_key_index(table, index) and (
            index.name or ""
        ).upper().startswith("SQL")


class Db2Platform(Platform):
    """The DB2 platform."""

    name = "DB2"
    builder_class = Db2Builder
    reader_class = Db2Reader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return DB2's capabilities."""
        return PlatformInfo(
            name=cls.name,
            max_identifier_length=18,
            reserved_words=DB2_RESERVED_WORDS,
            supports_alter_for_drop=False,
            supports_alter_column=False,
            max_identity_columns=1,
            last_identity_value_readable=True,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return DB2's type spellings."""
        return register_db2_types(TypeMap())
