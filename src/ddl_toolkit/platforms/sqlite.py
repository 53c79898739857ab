"""SQLite: embedded foreign keys and table rebuilds for most alterations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import CaseFold, PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ddl_toolkit.model.elements import Column, Index
    from ddl_toolkit.model.table import Table


def is_rowid_alias(table: Table, column: Column) -> bool:
    """Whether the column is the table's single-column integer primary key."""
    primary_key = table.primary_key_columns
    return column.auto_increment and len(primary_key) == 1 and primary_key[0] is column


class SqliteBuilder(SqlBuilder):
    """Emits SQLite DDL."""

    names_primary_key = False

    def get_drop_table_stmt(self, table: Table) -> str:
        """Return DROP TABLE IF EXISTS."""
        return f"DROP TABLE IF EXISTS {self.identifiers.write(table.name)}"

    def should_write_primary_key(self, table: Table) -> bool:
        """Skip the table constraint when the key is declared on the column."""
        return super().should_write_primary_key(table) and not any(
            is_rowid_alias(table, column) for column in table.columns
        )

    def write_column_type(self, table: Table, column: Column) -> None:
        """Write INTEGER for rowid aliases, the mapped type otherwise."""
        if is_rowid_alias(table, column):
            self.print("INTEGER")
            return
        super().write_column_type(table, column)

    def write_column_auto_increment(self, table: Table, column: Column) -> None:
        """Declare the column as the AUTOINCREMENT primary key."""
        if is_rowid_alias(table, column):
            self.print(" PRIMARY KEY AUTOINCREMENT")
            return
        self.unsupported(
            f"Auto-increment of {table.name}.{column.name} skipped: SQLite only "
            "supports it on a single-column primary key",
        )

    def select_last_identity_values(self, table: Table) -> str:  # noqa: ARG002
        """Read the rowid generated by the last insert."""
        return "SELECT last_insert_rowid()"


class SqliteReader(ModelReader):
    """Reads SQLite metadata, skipping the automatic sqlite_autoindex indices."""

    def is_internal_primary_key_index(self, table: Table, index: Index) -> bool:
        """Whether the index is an automatic index or mirrors the primary key."""
        return (index.name or "").startswith("sqlite_autoindex_") or (
            super().is_internal_primary_key_index(table, index)
        )


class SqlitePlatform(Platform):
    """The SQLite platform."""

    name = "SQLite"
    builder_class = SqliteBuilder
    reader_class = SqliteReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return SQLite's capabilities."""
        return PlatformInfo(
            name=cls.name,
            identifier_case_fold=CaseFold.PRESERVE,
            foreign_keys_embedded=True,
            foreign_key_forward_references=True,
            supports_alter_for_drop=False,
            supports_alter_column=False,
            supports_alter_constraints=False,
            boolean_literals=("1", "0"),
            max_identity_columns=1,
            last_identity_value_readable=True,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return SQLite's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.BIT, "BOOLEAN", reverse=False)
        type_map.register(TypeCode.TINYINT, "SMALLINT", reverse=False)
        type_map.register(TypeCode.LONGVARCHAR, "TEXT")
        type_map.register(TypeCode.CLOB, "TEXT", reverse=False)
        type_map.register(TypeCode.LONGVARBINARY, "BLOB", reverse=False)
        type_map.register(TypeCode.BINARY, "BLOB", reverse=False)
        type_map.register(TypeCode.VARBINARY, "BLOB", reverse=False)
        type_map.register_native("INT", TypeCode.INTEGER)
        type_map.register_native("DATETIME", TypeCode.TIMESTAMP)
        return type_map

    def create_database(
        self,
        driver: str | None,
        url: str,
        username: str | None = None,
        password: str | None = None,
        parameters: Mapping[str, str | None] | None = None,  # noqa: ARG002
    ) -> None:
        """Create the database file by opening a connection to it."""
        self.open_and_close(driver, url, username, password)
