"""MySQL and MariaDB."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.elements import CascadeAction
from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import ALL_ACTIONS, SQL_RESERVED_WORDS, CaseFold, PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Column, ForeignKey, Index
    from ddl_toolkit.model.table import Table

MYSQL_RESERVED_WORDS = SQL_RESERVED_WORDS | {
    "CHANGE", "DATABASE", "DIV", "INTERVAL", "KEYS", "LIMIT", "LOCK", "MODIFY",
    "RANGE", "READ", "RENAME", "REPLACE", "SHOW", "STATUS", "WRITE",
}  # fmt: skip


class MySqlBuilder(SqlBuilder):
    """Emits MySQL DDL for InnoDB tables."""

    names_primary_key = False

    def write_table_options(self, table: Table) -> None:  # noqa: ARG002
        """Create InnoDB tables so foreign keys are enforced."""
        self.print(" ENGINE = InnoDB")

    def get_drop_table_stmt(self, table: Table) -> str:
        """Return DROP TABLE IF EXISTS."""
        return f"DROP TABLE IF EXISTS {self.identifiers.write(table.name)}"

    def write_column_auto_increment(self, table: Table, column: Column) -> None:  # noqa: ARG002
        """Write AUTO_INCREMENT."""
        self.print(" AUTO_INCREMENT")

    def write_index_columns(self, index: Index) -> None:
        """Write the index columns, with prefix lengths where given."""
        self.print("(")
        self.print(
            ", ".join(
                self.identifiers.write(column.name)
                + (f"({column.size})" if column.size is not None else "")
                for column in index.columns
            ),
        )
        self.print(")")

    def write_external_index_drop_stmt(self, table: Table, index: Index) -> None:
        """Write DROP INDEX ... ON ..."""
        self.print("DROP INDEX ")
        self.print_identifier(self.index_name(table, index))
        self.print(" ON ")
        self.print_identifier(table.name)
        self.print_end_of_statement()

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

    def write_alter_column_stmt(self, table: Table, column: Column) -> None:
        """Write ALTER TABLE ... MODIFY COLUMN with the full definition."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" MODIFY COLUMN ")
        self.write_column(table, column)
        self.print_end_of_statement()

    def write_rename_table_stmt(self, old_name: str, new_name: str) -> None:
        """Write RENAME TABLE."""
        self.print("RENAME TABLE ")
        self.print_identifier(old_name)
        self.print(" TO ")
        self.print_identifier(new_name)
        self.print_end_of_statement()

    def select_last_identity_values(self, table: Table) -> str:  # noqa: ARG002
        """Read the identity value generated by the last insert."""
        return "SELECT LAST_INSERT_ID()"


class MySqlReader(ModelReader):
    """Reads MySQL metadata, skipping the indices InnoDB adds for foreign keys."""

    def is_internal_foreign_key_index(
        self,
        table: Table,  # noqa: ARG002
        foreign_key: ForeignKey,
        index: Index,
    ) -> bool:
        """Whether the index carries the name of the foreign key it backs."""
        return foreign_key.name is not None and index.name == foreign_key.name


class MySqlPlatform(Platform):
    """The MySQL platform."""

    name = "MySQL"
    builder_class = MySqlBuilder
    reader_class = MySqlReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return MySQL's capabilities."""
        actions = ALL_ACTIONS - {CascadeAction.SET_DEFAULT}
        return PlatformInfo(
            name=cls.name,
            max_identifier_length=64,
            identifier_quote_char="`",
            identifier_case_fold=CaseFold.PRESERVE,
            reserved_words=MYSQL_RESERVED_WORDS,
            default_values_for_long_types=False,
            boolean_literals=("1", "0"),
            max_identity_columns=1,
            last_identity_value_readable=True,
            on_delete_actions=actions,
            on_update_actions=actions,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return MySQL's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.BOOLEAN, "TINYINT(1)")
        type_map.register(TypeCode.BIT, "TINYINT(1)", reverse=False)
        type_map.register(TypeCode.BLOB, "LONGBLOB")
        type_map.register(TypeCode.CLOB, "LONGTEXT")
        type_map.register(TypeCode.FLOAT, "DOUBLE", reverse=False)
        type_map.register(TypeCode.LONGVARBINARY, "MEDIUMBLOB")
        type_map.register(TypeCode.LONGVARCHAR, "MEDIUMTEXT")
        type_map.register(TypeCode.NUMERIC, "DECIMAL({size},{scale})", reverse=False)
        type_map.register(TypeCode.REAL, "FLOAT")
        type_map.register(TypeCode.TIMESTAMP, "DATETIME")
        type_map.register_native("INT", TypeCode.INTEGER)
        type_map.register_native("MEDIUMINT", TypeCode.INTEGER)
        type_map.register_native("TEXT", TypeCode.LONGVARCHAR)
        type_map.register_native("TINYTEXT", TypeCode.VARCHAR)
        type_map.register_native("TINYBLOB", TypeCode.VARBINARY)
        type_map.register_native("TIMESTAMP", TypeCode.TIMESTAMP)
        return type_map
