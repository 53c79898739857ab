"""Serialisation of schema models to dialect-specific DDL."""

from __future__ import annotations

import io
import re
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from ddl_toolkit.errors import ModelInvariantViolation, UnsupportedDialectFeature
from ddl_toolkit.model.database import Database
from ddl_toolkit.model.elements import CascadeAction
from ddl_toolkit.model.table import Table
from ddl_toolkit.platform.alter import (
    AddColumn,
    AddForeignKey,
    AddIndex,
    AddPrimaryKey,
    AddTable,
    Change,
    ModelComparator,
    ModifyColumn,
    RebuildTable,
    RemoveColumn,
    RemoveForeignKey,
    RemoveIndex,
    RemovePrimaryKey,
    RemoveTable,
)
from ddl_toolkit.platform.identifiers import IdentifierWriter
from ddl_toolkit.platform.ordering import plan_creation
from ddl_toolkit.platform.values import is_null, render_default

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from typing import TextIO

    from ddl_toolkit.model.elements import Column, ForeignKey, Index
    from ddl_toolkit.platform.info import PlatformInfo
    from ddl_toolkit.platform.type_map import TypeMap

logger = getLogger(__name__)

INDENT = "    "
COMMENT_RULE = "-" * 71


def normalize_statement(statement: str) -> str:
    """Collapse whitespace so statements compare independent of layout."""
    collapsed = " ".join(statement.split())
    return re.sub(r"\s+\)", ")", re.sub(r"\(\s+", "(", collapsed))


class SqlScript:
    """The statements, text and warnings produced by one builder run."""

    def __init__(self, output: TextIO | None = None) -> None:
        """Initialize an empty script, optionally mirroring text to ``output``."""
        self.statements: list[str] = []
        self.warnings: list[str] = []
        self._text = io.StringIO()
        self._output = output

    def write_text(self, text: str) -> None:
        """Append raw text (comments, statements) to the script text."""
        self._text.write(text)
        if self._output is not None:
            self._output.write(text)

    def add_statement(self, statement: str, terminator: str) -> None:
        """Record a finished statement and append it to the text."""
        self.statements.append(statement)
        self.write_text(f"{statement}{terminator}\n")

    @property
    def text(self) -> str:
        """Return the full script text, comments included."""
        return self._text.getvalue()

    def normalized(self) -> list[str]:
        """Return the statements with whitespace collapsed."""
        return [normalize_statement(statement) for statement in self.statements]

    def __iter__(self) -> Iterator[str]:
        """Iterate over the statements."""
        return iter(self.statements)

    def __len__(self) -> int:
        """Return the number of statements."""
        return len(self.statements)

    def __str__(self) -> str:
        """Return the script text."""
        return self.text


class SqlBuilder:
    """Writes DDL for one dialect into a :class:`SqlScript`.

    A builder is created per emission run. Dialects subclass it and override the
    ``write_*`` seams; everything else follows from :class:`PlatformInfo`.
    """

    # Embedded primary keys get a constraint name so they can be dropped by it
    names_primary_key = True

    def __init__(
        self,
        info: PlatformInfo,
        type_map: TypeMap,
        script: SqlScript | None = None,
    ) -> None:
        """Initialize the builder for a dialect."""
        self.info = info
        self.type_map = type_map
        self.script = script if script is not None else SqlScript()
        self.identifiers = IdentifierWriter(info, self.warn)
        self._buffer: list[str] = []

    # Output primitives

    def warn(self, message: str) -> None:
        """Record a warning on the script."""
        logger.warning("%s", message)
        self.script.warnings.append(message)

    def unsupported(self, message: str) -> None:
        """Reject a construct in strict mode, otherwise record a warning."""
        if self.info.strict:
            raise UnsupportedDialectFeature(message)
        self.warn(message)

    def print(self, text: str) -> None:
        """Append text to the current statement."""
        self._buffer.append(text)

    def println(self, text: str = "") -> None:
        """Append text and a line break to the current statement."""
        self._buffer.append(f"{text}\n")

    def print_identifier(self, name: str) -> None:
        """Append an identifier in its dialect-safe form."""
        self.print(self.identifiers.write(name))

    def print_identifiers(self, names: Iterable[str]) -> None:
        """Append a comma separated identifier list."""
        self.print(", ".join(self.identifiers.write(name) for name in names))

    def print_end_of_statement(self) -> None:
        """Finish the current statement and hand it to the script."""
        statement = "".join(self._buffer).strip()
        self._buffer.clear()
        if not statement:
            return
        logger.debug("Generated statement: %s", statement)
        self.script.add_statement(statement, self.info.statement_terminator)

    def print_comment(self, text: str) -> None:
        """Write a comment line if the dialect emits comments."""
        if not self.info.sql_comments_enabled:
            return
        suffix = f" {self.info.comment_suffix}" if self.info.comment_suffix else ""
        self.script.write_text(f"{self.info.comment_prefix} {text}{suffix}\n")

    # Names

    def foreign_key_name(self, table: Table, foreign_key: ForeignKey) -> str:
        """Return the declared or generated name of a foreign key."""
        if foreign_key.name:
            return foreign_key.name
        return self.identifiers.generated("FK", table.name, *foreign_key.local_columns)

    def index_name(self, table: Table, index: Index) -> str:
        """Return the declared or generated name of an index."""
        if index.name:
            return index.name
        prefix = "UQ" if index.unique else "IDX"
        return self.identifiers.generated(prefix, table.name, *index.column_names)

    def primary_key_name(self, table: Table) -> str:
        """Return the name of the primary key constraint."""
        return self.identifiers.generated("PK", table.name)

    def generator_name(self, table: Table, column: Column) -> str:
        """Return the generator name of an auto-increment column."""
        return self.identifiers.generated("gen", table.name, column.name)

    def trigger_name(self, table: Table, column: Column) -> str:
        """Return the trigger name of an auto-increment column."""
        return self.identifiers.generated("trg", table.name, column.name)

    def sequence_name(self, table: Table, column: Column) -> str:
        """Return the sequence name of an auto-increment column."""
        return self.identifiers.generated("seq", table.name, column.name)

    def temporary_table_name(self, table: Table) -> str:
        """Return the name of the scratch table used when rebuilding a table."""
        return self.identifiers.shorten(f"{table.name}_")

    # Validation

    def validate(self, database: Database) -> None:
        """Check the model and the dialect limits before emitting anything."""
        problems = database.violations(case_sensitive=self.info.case_sensitive)
        limit = self.info.max_identity_columns
        if limit is not None:
            problems.extend(
                f"Table '{table.name}' has {len(table.auto_increment_columns)} "
                f"auto-increment columns but {self.info.name} allows {limit}"
                for table in database.tables
                if len(table.auto_increment_columns) > limit
            )
        if problems:
            raise ModelInvariantViolation(problems)

    def _find_column(self, table: Table, name: str) -> Column | None:
        return table.find_column(name, case_sensitive=self.info.case_sensitive)

    def _external_foreign_keys(self, database: Database) -> list[tuple[Table, ForeignKey]]:
        """Return the foreign keys written as separate statements, in creation order."""
        plan = plan_creation(
            database,
            case_sensitive=self.info.case_sensitive,
            forward_references=self.info.foreign_key_forward_references,
        )
        if not self.info.foreign_keys_embedded:
            return [
                (table, foreign_key)
                for table in plan.tables
                for foreign_key in table.foreign_keys
            ]
        return plan.deferred

    # Whole-database operations

    def create_tables(self, database: Database, *, drop_first: bool = False) -> None:
        """Write the DDL creating every table of the database.

        Tables come in foreign-key dependency order. Foreign keys that close a
        cycle, or all of them when the dialect does not embed foreign keys, are
        added by trailing ALTER statements. Auxiliary objects such as generators
        and triggers come last.
        """
        self.validate(database)
        if drop_first:
            self.drop_tables(database)

        plan = plan_creation(
            database,
            case_sensitive=self.info.case_sensitive,
            forward_references=self.info.foreign_key_forward_references,
        )
        for table in plan.tables:
            embedded = (
                [
                    foreign_key
                    for foreign_key in table.foreign_keys
                    if not plan.is_deferred(table, foreign_key)
                ]
                if self.info.foreign_keys_embedded
                else []
            )
            self.write_table_comment(table)
            self.write_create_table(table, foreign_keys=embedded)
        self.write_commit()

        for table, foreign_key in self._external_foreign_keys(database):
            self.write_external_foreign_key_create_stmt(table, foreign_key)
            self.write_commit()

        for table in plan.tables:
            self.create_auxiliary_objects(table)

    def drop_tables(self, database: Database) -> None:
        """Write the DDL dropping every table of the database."""
        plan = plan_creation(
            database,
            case_sensitive=self.info.case_sensitive,
            forward_references=self.info.foreign_key_forward_references,
        )
        for table, foreign_key in reversed(self._external_foreign_keys(database)):
            self.write_external_foreign_key_drop_stmt(table, foreign_key)
        for table in reversed(plan.tables):
            self.write_table_comment(table)
            self.drop_auxiliary_objects(table)
            self.write_drop_table(table)
        self.write_commit()

    def create_table(self, table: Table, database: Database | None = None) -> None:
        """Write the DDL creating a single table.

        Foreign keys are embedded when the dialect embeds them, otherwise added
        right after the table; pass the database when the table references others.
        """
        if database is None:
            database = Database(table.name, [table])
        self.validate(database)
        self.write_table_comment(table)
        embedded = table.foreign_keys if self.info.foreign_keys_embedded else []
        self.write_create_table(table, foreign_keys=embedded)
        if not self.info.foreign_keys_embedded:
            for foreign_key in table.foreign_keys:
                self.write_external_foreign_key_create_stmt(table, foreign_key)
        self.create_auxiliary_objects(table)
        self.write_commit()

    def drop_table(self, table: Table, database: Database | None = None) -> None:
        """Write the DDL dropping a single table and its auxiliary objects.

        With a database, foreign keys of other tables pointing at this table are
        dropped first where the dialect can drop constraints.
        """
        self.write_table_comment(table)
        if database is not None and self.info.supports_alter_constraints:
            for other in database.tables:
                if other is table:
                    continue
                for foreign_key in other.references_to(
                    table.name,
                    case_sensitive=self.info.case_sensitive,
                ):
                    self.write_external_foreign_key_drop_stmt(other, foreign_key)
        if not self.info.foreign_keys_embedded:
            for foreign_key in table.foreign_keys:
                self.write_external_foreign_key_drop_stmt(table, foreign_key)
        self.drop_auxiliary_objects(table)
        self.write_drop_table(table)
        self.write_commit()

    def alter_database(self, current: Database, desired: Database) -> None:
        """Write the DDL turning the current schema into the desired one."""
        self.validate(desired)
        changes = ModelComparator(self.info, self.type_map).compare(current, desired)
        for change in changes:
            self.process_change(change)
        if changes:
            self.write_commit()

    def process_change(self, change: Change) -> None:
        """Write the statements of one change record."""
        match change:
            case RemoveForeignKey(table=table, foreign_key=foreign_key):
                self.write_external_foreign_key_drop_stmt(table, foreign_key)
            case RemoveIndex(table=table, index=index):
                self.write_external_index_drop_stmt(table, index)
            case RemovePrimaryKey(table=table):
                self.write_primary_key_drop_stmt(table)
            case RemoveColumn(table=table, column=column):
                if column.auto_increment:
                    self.drop_column_auxiliary_objects(table, column)
                self.write_drop_column_stmt(table, column)
            case RebuildTable(current=current, desired=desired, foreign_keys=keys):
                self.rebuild_table(current, desired, keys)
            case AddColumn(table=table, column=column):
                self.write_add_column_stmt(table, column)
                if column.auto_increment:
                    self.create_column_auxiliary_objects(table, column)
            case ModifyColumn(table=table, desired=column):
                self.write_alter_column_stmt(table, column)
            case AddPrimaryKey(table=table):
                self.write_external_primary_keys_create_stmt(table)
            case AddIndex(table=table, index=index):
                self.write_external_index_create_stmt(table, index)
            case AddForeignKey(table=table, foreign_key=foreign_key):
                self.write_external_foreign_key_create_stmt(table, foreign_key)
            case RemoveTable(table=table):
                self.drop_auxiliary_objects(table)
                self.write_drop_table(table)
            case AddTable(table=table, foreign_keys=keys):
                self.write_table_comment(table)
                self.write_create_table(table, foreign_keys=keys)
                self.create_auxiliary_objects(table)

    # Tables

    def write_table_comment(self, table: Table) -> None:
        """Write the comment block that introduces a table."""
        if not self.info.sql_comments_enabled:
            return
        self.script.write_text("\n")
        self.print_comment(COMMENT_RULE)
        self.print_comment(table.name)
        self.print_comment(COMMENT_RULE)
        self.script.write_text("\n")

    def write_create_table(
        self,
        table: Table,
        *,
        name: str | None = None,
        foreign_keys: Sequence[ForeignKey] = (),
        with_indices: bool = True,
    ) -> None:
        """Write CREATE TABLE followed by its external primary key and indices."""
        self.print("CREATE TABLE ")
        self.print_identifier(name or table.name)
        self.println()
        self.println("(")
        first = True
        for column in table.columns:
            self.print("" if first else ",\n")
            self.print(INDENT)
            self.write_column(table, column)
            first = False
        if self.info.primary_key_embedded and self.should_write_primary_key(table):
            self.print(",\n" + INDENT)
            self.write_embedded_primary_keys_stmt(table)
        if self.info.indices_embedded and with_indices:
            for index in table.indices:
                if self.accepts_index(table, index):
                    self.print(",\n" + INDENT)
                    self.write_embedded_index_stmt(table, index)
        for foreign_key in foreign_keys:
            self.print(",\n" + INDENT)
            self.write_embedded_foreign_keys_stmt(table, foreign_key)
        self.println()
        self.print(")")
        self.write_table_options(table)
        self.print_end_of_statement()

        if not self.info.primary_key_embedded and self.should_write_primary_key(table):
            self.write_external_primary_keys_create_stmt(table, name=name)
        if not self.info.indices_embedded and with_indices:
            for index in table.indices:
                self.write_external_index_create_stmt(table, index, table_name=name)

    def write_table_options(self, table: Table) -> None:
        """Write dialect-specific options after the column list."""

    def should_write_primary_key(self, table: Table) -> bool:
        """Whether the table needs an explicit primary key clause."""
        return bool(table.primary_key_columns)

    def get_drop_table_stmt(self, table: Table) -> str:
        """Return the statement dropping the table."""
        return f"DROP TABLE {self.identifiers.write(table.name)}"

    def write_drop_table(self, table: Table) -> None:
        """Write the DROP TABLE statement."""
        self.print(self.get_drop_table_stmt(table))
        self.print_end_of_statement()

    def write_commit(self) -> None:
        """Write COMMIT when DDL is not committed implicitly."""
        if self.info.auto_commit_ddl:
            return
        self.print("COMMIT")
        self.print_end_of_statement()

    # Columns

    def write_column(self, table: Table, column: Column) -> None:
        """Write a column definition: name, type, default, identity and nullability."""
        self.print_identifier(column.name)
        self.print(" ")
        self.write_column_type(table, column)
        if column.default_value is not None and not column.auto_increment:
            self.write_column_default(table, column)
        if column.auto_increment:
            self.write_column_auto_increment(table, column)
        if column.required:
            self.print(" NOT NULL")
        elif self.info.explicit_null_required:
            self.print(" NULL")

    def get_native_type(self, column: Column) -> str:
        """Return the native spelling of the column type."""
        return self.type_map.to_native(
            column.type_code,
            column.size,
            column.scale,
            self.info.default_size_for(column.type_code),
        )

    def write_column_type(self, table: Table, column: Column) -> None:  # noqa: ARG002
        """Write the native column type."""
        self.print(self.get_native_type(column))

    def get_default_value(self, table: Table, column: Column) -> str | None:
        """Return the rendered default, or None when it must be left out."""
        raw = column.default_value
        if raw is None:
            return None
        where = f"{table.name}.{column.name}"
        if column.type_code.is_long and not self.info.default_values_for_long_types:
            self.unsupported(
                f"Default value of {where} skipped: {self.info.name} does not "
                f"support defaults on {column.type_code.name} columns",
            )
            return None
        if is_null(raw) and not self.info.null_as_default_allowed:
            return None
        try:
            return render_default(raw, column.type_code, self.info)
        except ValueError as error:
            msg = f"Invalid default value for {where}: {error}"
            raise ModelInvariantViolation([msg]) from error

    def write_column_default(self, table: Table, column: Column) -> None:
        """Write the DEFAULT clause of a column."""
        if (value := self.get_default_value(table, column)) is not None:
            self.print(f" DEFAULT {value}")

    def write_column_auto_increment(self, table: Table, column: Column) -> None:  # noqa: ARG002
        """Write the inline identity clause of an auto-increment column."""
        self.print(" GENERATED BY DEFAULT AS IDENTITY")

    # Primary keys

    def write_embedded_primary_keys_stmt(self, table: Table) -> None:
        """Write the PRIMARY KEY clause inside CREATE TABLE."""
        if self.names_primary_key:
            self.print("CONSTRAINT ")
            self.print_identifier(self.primary_key_name(table))
            self.print(" ")
        self.print("PRIMARY KEY (")
        self.print_identifiers(column.name for column in table.primary_key_columns)
        self.print(")")

    def write_external_primary_keys_create_stmt(
        self,
        table: Table,
        *,
        name: str | None = None,
    ) -> None:
        """Write ALTER TABLE ... ADD CONSTRAINT ... PRIMARY KEY."""
        columns = table.primary_key_columns
        if not columns:
            return
        self.print("ALTER TABLE ")
        self.print_identifier(name or table.name)
        self.print(" ADD CONSTRAINT ")
        self.print_identifier(self.primary_key_name(table))
        self.print(" PRIMARY KEY (")
        self.print_identifiers(column.name for column in columns)
        self.print(")")
        self.print_end_of_statement()

    def write_primary_key_drop_stmt(self, table: Table) -> None:
        """Write the statement dropping the primary key."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" DROP CONSTRAINT ")
        self.print_identifier(self.primary_key_name(table))
        self.print_end_of_statement()

    # Foreign keys

    def write_foreign_key_actions(self, table: Table, foreign_key: ForeignKey) -> None:
        """Write ON DELETE / ON UPDATE for the actions the dialect supports."""
        name = self.foreign_key_name(table, foreign_key)
        for label, action, supported in (
            ("ON DELETE", foreign_key.on_delete, self.info.on_delete_actions),
            ("ON UPDATE", foreign_key.on_update, self.info.on_update_actions),
        ):
            if action is CascadeAction.NONE:
                continue
            if action not in supported:
                self.unsupported(
                    f"{label} {action.sql} of foreign key {name} skipped: "
                    f"not supported by {self.info.name}",
                )
                continue
            self.print(f" {label} {action.sql}")

    def write_foreign_key_body(self, table: Table, foreign_key: ForeignKey) -> None:
        """Write FOREIGN KEY (...) REFERENCES ... (...) with its actions."""
        self.print("FOREIGN KEY (")
        self.print_identifiers(foreign_key.local_columns)
        self.print(") REFERENCES ")
        self.print_identifier(foreign_key.foreign_table)
        self.print(" (")
        self.print_identifiers(foreign_key.foreign_columns)
        self.print(")")
        self.write_foreign_key_actions(table, foreign_key)

    def write_embedded_foreign_keys_stmt(self, table: Table, foreign_key: ForeignKey) -> None:
        """Write a foreign key constraint inside CREATE TABLE."""
        self.print("CONSTRAINT ")
        self.print_identifier(self.foreign_key_name(table, foreign_key))
        self.print(" ")
        self.write_foreign_key_body(table, foreign_key)

    def write_external_foreign_key_create_stmt(
        self,
        table: Table,
        foreign_key: ForeignKey,
    ) -> None:
        """Write ALTER TABLE ... ADD CONSTRAINT ... FOREIGN KEY."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" ADD CONSTRAINT ")
        self.print_identifier(self.foreign_key_name(table, foreign_key))
        self.print(" ")
        self.write_foreign_key_body(table, foreign_key)
        self.print_end_of_statement()

    def write_external_foreign_key_drop_stmt(
        self,
        table: Table,
        foreign_key: ForeignKey,
    ) -> None:
        """Write the statement dropping a foreign key."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" DROP CONSTRAINT ")
        self.print_identifier(self.foreign_key_name(table, foreign_key))
        self.print_end_of_statement()

    # Indices

    def accepts_index(self, table: Table, index: Index) -> bool:
        """Whether the index can be written; warns or raises otherwise."""
        if index.unique or self.info.supports_non_unique_indices:
            return True
        self.unsupported(
            f"Non-unique index {self.index_name(table, index)} on {table.name} "
            f"skipped: not supported by {self.info.name}",
        )
        return False

    def write_index_columns(self, index: Index) -> None:
        """Write the parenthesised column list of an index."""
        self.print("(")
        self.print_identifiers(index.column_names)
        self.print(")")

    def write_embedded_index_stmt(self, table: Table, index: Index) -> None:
        """Write an index or unique constraint inside CREATE TABLE."""
        if index.unique:
            self.print("CONSTRAINT ")
            self.print_identifier(self.index_name(table, index))
            self.print(" UNIQUE ")
        else:
            self.print("INDEX ")
            self.print_identifier(self.index_name(table, index))
            self.print(" ")
        self.write_index_columns(index)

    def write_external_index_create_stmt(
        self,
        table: Table,
        index: Index,
        *,
        table_name: str | None = None,
    ) -> None:
        """Write CREATE [UNIQUE] INDEX."""
        if not self.accepts_index(table, index):
            return
        self.print("CREATE UNIQUE INDEX " if index.unique else "CREATE INDEX ")
        self.print_identifier(self.index_name(table, index))
        self.print(" ON ")
        self.print_identifier(table_name or table.name)
        self.print(" ")
        self.write_index_columns(index)
        self.print_end_of_statement()

    def write_external_index_drop_stmt(self, table: Table, index: Index) -> None:  # noqa: ARG002
        """Write DROP INDEX."""
        self.print("DROP INDEX ")
        self.print_identifier(self.index_name(table, index))
        self.print_end_of_statement()

    # Alteration

    def write_add_column_stmt(self, table: Table, column: Column) -> None:
        """Write ALTER TABLE ... ADD COLUMN."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(f" {self.info.add_column_clause} ")
        self.write_column(table, column)
        self.print_end_of_statement()

    def write_drop_column_stmt(self, table: Table, column: Column) -> None:
        """Write ALTER TABLE ... DROP COLUMN."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(f" {self.info.drop_column_clause} ")
        self.print_identifier(column.name)
        self.print_end_of_statement()

    def write_alter_column_stmt(self, table: Table, column: Column) -> None:
        """Write the statement changing a column definition in place."""
        self.print("ALTER TABLE ")
        self.print_identifier(table.name)
        self.print(" ALTER COLUMN ")
        self.write_column(table, column)
        self.print_end_of_statement()

    def write_rename_table_stmt(self, old_name: str, new_name: str) -> None:
        """Write the statement renaming a table."""
        self.print("ALTER TABLE ")
        self.print_identifier(old_name)
        self.print(" RENAME TO ")
        self.print_identifier(new_name)
        self.print_end_of_statement()

    def write_copy_data_stmt(
        self,
        source: str,
        target: Table,
        columns: Sequence[tuple[str, str]],
        *,
        target_name: str | None = None,
    ) -> None:
        """Write INSERT ... SELECT copying ``(source, target)`` column pairs."""
        if not columns:
            return
        self.print("INSERT INTO ")
        self.print_identifier(target_name or target.name)
        self.print(" (")
        self.print_identifiers(target_column for _, target_column in columns)
        self.print(") SELECT ")
        self.print_identifiers(source_column for source_column, _ in columns)
        self.print(" FROM ")
        self.print_identifier(source)
        self.print_end_of_statement()

    def common_columns(self, current: Table, desired: Table) -> list[tuple[str, str]]:
        """Return the ``(current, desired)`` names of columns present in both tables."""
        pairs: list[tuple[str, str]] = []
        for column in desired.columns:
            if (existing := self._find_column(current, column.name)) is not None:
                pairs.append((existing.name, column.name))
        return pairs

    def rebuild_table(
        self,
        current: Table,
        desired: Table,
        foreign_keys: Sequence[ForeignKey],
    ) -> None:
        """Recreate a table with a new structure, keeping the rows of common columns.

        With table renames the new structure is created under a scratch name,
        filled, and renamed over the dropped original. Otherwise the rows are
        parked in a scratch copy while the table is dropped and recreated.
        """
        temporary = self.temporary_table_name(desired)
        columns = self.common_columns(current, desired)
        self.drop_auxiliary_objects(current)

        if self.info.supports_rename_table:
            if self.names_primary_key and current.primary_key_columns:
                # The scratch table takes over the constraint name
                self.write_primary_key_drop_stmt(current)
            self.write_create_table(
                desired,
                name=temporary,
                foreign_keys=foreign_keys,
                with_indices=False,
            )
            self.write_copy_data_stmt(current.name, desired, columns, target_name=temporary)
            self.write_drop_table(current)
            self.write_rename_table_stmt(temporary, desired.name)
            for index in desired.indices:
                self.write_external_index_create_stmt(desired, index)
        else:
            scratch = Table(
                temporary,
                [
                    replace(
                        column,
                        required=False,
                        primary_key=False,
                        auto_increment=False,
                        default_value=None,
                    )
                    for column in current.columns
                ],
            )
            current_names = [(name, name) for name, _ in columns]
            self.write_create_table(scratch)
            self.write_copy_data_stmt(current.name, scratch, current_names)
            self.write_drop_table(current)
            self.write_create_table(desired, foreign_keys=foreign_keys)
            self.write_copy_data_stmt(temporary, desired, columns)
            self.write_drop_table(scratch)

        self.create_auxiliary_objects(desired)

    # Auto-increment support objects

    def create_auxiliary_objects(self, table: Table) -> None:
        """Write the objects backing the table's auto-increment columns."""
        for column in table.auto_increment_columns:
            self.create_column_auxiliary_objects(table, column)

    def drop_auxiliary_objects(self, table: Table) -> None:
        """Write the inverse of :meth:`create_auxiliary_objects`."""
        for column in reversed(table.auto_increment_columns):
            self.drop_column_auxiliary_objects(table, column)

    def create_column_auxiliary_objects(self, table: Table, column: Column) -> None:
        """Write the generator, sequence or trigger of one column, if the dialect needs any."""

    def drop_column_auxiliary_objects(self, table: Table, column: Column) -> None:
        """Drop what :meth:`create_column_auxiliary_objects` created."""

    def select_last_identity_values(self, table: Table) -> str:
        """Return the query reading the last generated identity values of a table."""
        msg = f"{self.info.name} cannot report generated identity values of {table.name}"
        raise UnsupportedDialectFeature(msg)

