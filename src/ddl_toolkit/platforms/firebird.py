"""Firebird: transactional DDL with generators and triggers for identity columns."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ddl_toolkit.model.types import TypeCode
from ddl_toolkit.platform.base import Platform
from ddl_toolkit.platform.builder import SqlBuilder
from ddl_toolkit.platform.info import SQL_RESERVED_WORDS, PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from ddl_toolkit.model.elements import Column, ForeignKey, Index
    from ddl_toolkit.model.table import Table

FIREBIRD_RESERVED_WORDS = SQL_RESERVED_WORDS | {
    "ACTIVE", "BLOB", "GENERATOR", "GEN_ID", "POSITION", "TRIGGER", "VALUE",
}  # fmt: skip


class FirebirdBuilder(SqlBuilder):
    """Emits Firebird DDL; identity values come from a generator and a trigger."""

    def write_column_auto_increment(self, table: Table, column: Column) -> None:
        """Leave the column alone; the trigger fills it in."""

    def create_column_auxiliary_objects(self, table: Table, column: Column) -> None:
        """Write the generator and the BEFORE INSERT trigger feeding the column."""
        generator = self.identifiers.write(self.generator_name(table, column))
        column_name = self.identifiers.write(column.name)

        self.print("CREATE GENERATOR ")
        self.print(generator)
        self.print_end_of_statement()

        self.print("CREATE TRIGGER ")
        self.print_identifier(self.trigger_name(table, column))
        self.print(" FOR ")
        self.print_identifier(table.name)
        self.println()
        self.println("ACTIVE BEFORE INSERT POSITION 0")
        self.println("AS")
        self.println("BEGIN")
        self.println(f"IF (NEW.{column_name} IS NULL) THEN")
        self.println(f"NEW.{column_name} = GEN_ID({generator}, 1);")
        self.print("END")
        self.print_end_of_statement()

    def drop_column_auxiliary_objects(self, table: Table, column: Column) -> None:
        """Drop the trigger, then the generator."""
        self.print("DROP TRIGGER ")
        self.print_identifier(self.trigger_name(table, column))
        self.print_end_of_statement()
        self.print("DROP GENERATOR ")
        self.print_identifier(self.generator_name(table, column))
        self.print_end_of_statement()

    def select_last_identity_values(self, table: Table) -> str:
        """Read the current value of every identity generator of the table."""
        values = ", ".join(
            f"GEN_ID({self.identifiers.write(self.generator_name(table, column))}, 0)"
            for column in table.auto_increment_columns
        )
        return f"SELECT {values} FROM RDB$DATABASE"


class FirebirdReader(ModelReader):
    """Reads Firebird metadata, skipping the RDB$ indices backing constraints."""

    def normalize_default(self, raw: str | None, column: Column) -> str | None:
        """Strip the DEFAULT keyword Firebird keeps in the column source."""
        if raw is not None and raw.strip().upper().startswith("DEFAULT "):
            raw = raw.strip()[len("DEFAULT ") :]
        return super().normalize_default(raw, column)

    def is_internal_primary_key_index(self, table: Table, index: Index) -> bool:
        """Whether the index is an RDB$PRIMARY index or mirrors the primary key."""
        name = (index.name or "").upper()
        return name.startswith("RDB$PRIMARY") or super().is_internal_primary_key_index(
            table,
            index,
        )

    def is_internal_foreign_key_index(
        self,
        table: Table,  # noqa: ARG002
        foreign_key: ForeignKey,  # noqa: ARG002
        index: Index,
    ) -> bool:
        """Whether the index is an RDB$FOREIGN index."""
        return (index.name or "").upper().startswith("RDB$FOREIGN")


class FirebirdPlatform(Platform):
    """The Firebird platform."""

    name = "Firebird"
    builder_class = FirebirdBuilder
    reader_class = FirebirdReader

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return Firebird's capabilities."""
        return PlatformInfo(
            name=cls.name,
            max_identifier_length=31,
            reserved_words=FIREBIRD_RESERVED_WORDS,
            comment_prefix="/*",
            comment_suffix="*/",
            auto_commit_ddl=False,
            supports_alter_column=False,
            supports_rename_table=False,
            add_column_clause="ADD",
            drop_column_clause="DROP",
            boolean_literals=("1", "0"),
            last_identity_value_readable=True,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return Firebird's type spellings."""
        type_map = TypeMap()
        type_map.register(TypeCode.BIGINT, "DECIMAL(18,0)")
        type_map.register(TypeCode.BINARY, "BLOB", reverse=False)
        type_map.register(TypeCode.BIT, "DECIMAL(1,0)", reverse=False)
        type_map.register(TypeCode.BOOLEAN, "DECIMAL(1,0)", reverse=False)
        type_map.register(TypeCode.CLOB, "BLOB SUB_TYPE TEXT", reverse=False)
        type_map.register(TypeCode.DOUBLE, "DOUBLE PRECISION")
        type_map.register(TypeCode.LONGVARBINARY, "BLOB", reverse=False)
        type_map.register(TypeCode.LONGVARCHAR, "BLOB SUB_TYPE TEXT")
        type_map.register(TypeCode.REAL, "FLOAT")
        type_map.register(TypeCode.TINYINT, "SMALLINT", reverse=False)
        type_map.register(TypeCode.VARBINARY, "BLOB", reverse=False)
        type_map.register_native("BLOB SUB_TYPE 1", TypeCode.LONGVARCHAR)
        type_map.register_native("BLOB SUB_TYPE 0", TypeCode.BLOB)
        type_map.register_native("INT64", TypeCode.BIGINT)
        return type_map
