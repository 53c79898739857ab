"""Structural comparison of two models into an ordered list of changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from ddl_toolkit.model.database import Database
from ddl_toolkit.model.elements import CascadeAction, fold
from ddl_toolkit.platform.ordering import plan_creation
from ddl_toolkit.platform.values import defaults_equal

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ddl_toolkit.model.elements import Column, ForeignKey, Index
    from ddl_toolkit.model.table import Table
    from ddl_toolkit.platform.info import PlatformInfo
    from ddl_toolkit.platform.type_map import NativeType, TypeMap

logger = getLogger(__name__)


@dataclass(frozen=True)
class RemoveForeignKey:
    """Drop a foreign key of an existing table."""

    table: Table
    foreign_key: ForeignKey


@dataclass(frozen=True)
class RemoveIndex:
    """Drop an index of an existing table."""

    table: Table
    index: Index


@dataclass(frozen=True)
class RemovePrimaryKey:
    """Drop the primary key of an existing table."""

    table: Table


@dataclass(frozen=True)
class RemoveColumn:
    """Drop a column of an existing table."""

    table: Table
    column: Column


@dataclass(frozen=True)
class RebuildTable:
    """Recreate a table whose changes cannot be expressed by ALTER."""

    current: Table
    desired: Table
    foreign_keys: list[ForeignKey] = field(default_factory=list)


@dataclass(frozen=True)
class AddColumn:
    """Add a column to an existing table."""

    table: Table
    column: Column


@dataclass(frozen=True)
class ModifyColumn:
    """Change the definition of an existing column."""

    table: Table
    current: Column
    desired: Column


@dataclass(frozen=True)
class AddPrimaryKey:
    """Add the primary key of the desired table."""

    table: Table


@dataclass(frozen=True)
class AddIndex:
    """Create an index on an existing table."""

    table: Table
    index: Index


@dataclass(frozen=True)
class AddForeignKey:
    """Add a foreign key by ALTER TABLE."""

    table: Table
    foreign_key: ForeignKey


@dataclass(frozen=True)
class RemoveTable:
    """Drop a table that is no longer wanted."""

    table: Table


@dataclass(frozen=True)
class AddTable:
    """Create a new table, embedding the given foreign keys."""

    table: Table
    foreign_keys: list[ForeignKey] = field(default_factory=list)


Change = (
    RemoveForeignKey
    | RemoveIndex
    | RemovePrimaryKey
    | RemoveColumn
    | RebuildTable
    | AddColumn
    | ModifyColumn
    | AddPrimaryKey
    | AddIndex
    | AddForeignKey
    | RemoveTable
    | AddTable
)


@dataclass
class TableDiff:
    """Differences between the current and desired version of one table."""

    current: Table
    desired: Table
    removed_foreign_keys: list[ForeignKey] = field(default_factory=list)
    added_foreign_keys: list[ForeignKey] = field(default_factory=list)
    removed_indices: list[Index] = field(default_factory=list)
    added_indices: list[Index] = field(default_factory=list)
    removed_columns: list[Column] = field(default_factory=list)
    added_columns: list[Column] = field(default_factory=list)
    modified_columns: list[tuple[Column, Column]] = field(default_factory=list)
    primary_key_changed: bool = False

    @property
    def is_empty(self) -> bool:
        """Whether the table is unchanged."""
        return not (
            self.removed_foreign_keys
            or self.added_foreign_keys
            or self.removed_indices
            or self.added_indices
            or self.removed_columns
            or self.added_columns
            or self.modified_columns
            or self.primary_key_changed
        )


ForeignKeySignature = tuple[str, tuple[tuple[str, str], ...], CascadeAction, CascadeAction]
IndexSignature = tuple[bool, tuple[str, ...]]


class ModelComparator:
    """Computes the changes turning a current model into a desired one."""

    def __init__(self, info: PlatformInfo, type_map: TypeMap) -> None:
        """Initialize with the dialect the changes will be written for."""
        self.info = info
        self.type_map = type_map

    def _key(self, name: str) -> str:
        return fold(name, case_sensitive=self.info.case_sensitive)

    # Signatures

    def foreign_key_signature(self, foreign_key: ForeignKey) -> ForeignKeySignature:
        """Return what makes two foreign keys equivalent, ignoring their names."""
        on_delete = foreign_key.on_delete
        if on_delete not in self.info.on_delete_actions:
            on_delete = CascadeAction.NONE
        on_update = foreign_key.on_update
        if on_update not in self.info.on_update_actions:
            on_update = CascadeAction.NONE
        return (
            self._key(foreign_key.foreign_table),
            tuple(
                (self._key(reference.local_column), self._key(reference.foreign_column))
                for reference in foreign_key.references
            ),
            on_delete,
            on_update,
        )

    def index_signature(self, index: Index) -> IndexSignature:
        """Return what makes two indices equivalent, ignoring their names."""
        return (index.unique, tuple(self._key(name) for name in index.column_names))

    def written_type(self, column: Column) -> NativeType:
        """Return the type, size and scale a column reads back with once written."""
        return self.type_map.canonical(
            column.type_code,
            column.size,
            column.scale,
            self.info.default_size_for(column.type_code),
        )

    def columns_differ(self, current: Column, desired: Column) -> bool:
        """Whether a column's type, size, nullability, identity or default changed."""
        current_type = self.written_type(current)
        desired_type = self.written_type(desired)
        if current_type.type_code != desired_type.type_code:
            return True
        if current_type.size != desired_type.size:
            return True
        if (current_type.scale or 0) != (desired_type.scale or 0):
            return True
        if current.required != desired.required:
            return True
        if current.auto_increment != desired.auto_increment:
            return True
        if desired.auto_increment:
            return False
        return not defaults_equal(
            current.default_value,
            desired.default_value,
            desired.type_code,
        )

    # Per-table comparison

    def diff_table(self, current: Table, desired: Table) -> TableDiff:
        """Compare two versions of a table."""
        diff = TableDiff(current, desired)
        case_sensitive = self.info.case_sensitive

        current_keys = [self.foreign_key_signature(fk) for fk in current.foreign_keys]
        desired_keys = [self.foreign_key_signature(fk) for fk in desired.foreign_keys]
        diff.removed_foreign_keys = [
            fk
            for fk, signature in zip(current.foreign_keys, current_keys, strict=True)
            if signature not in desired_keys
        ]
        diff.added_foreign_keys = [
            fk
            for fk, signature in zip(desired.foreign_keys, desired_keys, strict=True)
            if signature not in current_keys
        ]

        current_indices = [self.index_signature(index) for index in current.indices]
        desired_indices = [self.index_signature(index) for index in desired.indices]
        diff.removed_indices = [
            index
            for index, signature in zip(current.indices, current_indices, strict=True)
            if signature not in desired_indices
        ]
        diff.added_indices = [
            index
            for index, signature in zip(desired.indices, desired_indices, strict=True)
            if signature not in current_indices
        ]

        for column in current.columns:
            if desired.find_column(column.name, case_sensitive=case_sensitive) is None:
                diff.removed_columns.append(column)
        for column in desired.columns:
            existing = current.find_column(column.name, case_sensitive=case_sensitive)
            if existing is None:
                diff.added_columns.append(column)
            elif self.columns_differ(existing, column):
                diff.modified_columns.append((existing, column))

        diff.primary_key_changed = [
            self._key(column.name) for column in current.primary_key_columns
        ] != [self._key(column.name) for column in desired.primary_key_columns]
        return diff

    def needs_rebuild(self, diff: TableDiff) -> bool:
        """Whether the table changes can only be applied by recreating the table."""
        info = self.info
        if diff.removed_columns and not info.supports_alter_for_drop:
            return True
        if diff.modified_columns and not info.supports_alter_column:
            return True
        if any(
            current.auto_increment != desired.auto_increment
            for current, desired in diff.modified_columns
        ):
            return True
        if not info.supports_add_column_default and any(
            column.default_value is not None for column in diff.added_columns
        ):
            return True
        if not info.supports_alter_constraints and (
            diff.primary_key_changed
            or diff.removed_foreign_keys
            or diff.added_foreign_keys
            or any(column.primary_key or column.auto_increment for column in diff.added_columns)
        ):
            return True
        return False

    # Whole-model comparison

    def _sorted(self, changes: Iterable[tuple[Table, str, Change]]) -> list[Change]:
        """Order changes of one step by table name, then entity name."""
        return [
            change
            for _, _, change in sorted(
                changes,
                key=lambda item: (self._key(item[0].name), self._key(item[1])),
            )
        ]

    @staticmethod
    def _foreign_key_label(foreign_key: ForeignKey) -> str:
        return foreign_key.name or "_".join(foreign_key.local_columns)

    @staticmethod
    def _index_label(index: Index) -> str:
        return index.name or "_".join(index.column_names)

    def compare(self, current: Database, desired: Database) -> list[Change]:
        """Return the ordered changes turning ``current`` into ``desired``.

        Foreign keys and indices are dropped first and added last, removed
        tables go in reverse dependency order and new tables in dependency order.
        An empty list means the models are structurally equal.
        """
        case_sensitive = self.info.case_sensitive
        alter_constraints = self.info.supports_alter_constraints

        removed_tables = [
            table
            for table in current.tables
            if desired.find_table(table.name, case_sensitive=case_sensitive) is None
        ]
        added_tables = [
            table
            for table in desired.tables
            if current.find_table(table.name, case_sensitive=case_sensitive) is None
        ]
        new_names = {self._key(table.name) for table in added_tables}

        diffs: list[TableDiff] = []
        for table in desired.tables:
            existing = current.find_table(table.name, case_sensitive=case_sensitive)
            if existing is not None:
                diffs.append(self.diff_table(existing, table))
        rebuilt = [diff for diff in diffs if not diff.is_empty and self.needs_rebuild(diff)]
        rebuilt_names = {self._key(diff.desired.name) for diff in rebuilt}
        altered = [
            diff
            for diff in diffs
            if self._key(diff.desired.name) not in rebuilt_names
        ]

        def embeddable(foreign_key: ForeignKey) -> bool:
            return self.info.foreign_keys_embedded and (
                self.info.foreign_key_forward_references
                or self._key(foreign_key.foreign_table) not in new_names
            )

        remove_foreign_keys: list[tuple[Table, str, Change]] = []
        add_foreign_keys: list[tuple[Table, str, Change]] = []
        late_foreign_keys: list[tuple[Table, str, Change]] = []

        def add_later(table: Table, foreign_key: ForeignKey) -> None:
            label = self._foreign_key_label(foreign_key)
            entry = (table, label, AddForeignKey(table, foreign_key))
            if self._key(foreign_key.foreign_table) in new_names:
                late_foreign_keys.append(entry)
            else:
                add_foreign_keys.append(entry)

        for diff in altered:
            removed = list(diff.removed_foreign_keys)
            added = list(diff.added_foreign_keys)
            if alter_constraints:
                for foreign_key in diff.current.foreign_keys:
                    if (
                        self._key(foreign_key.foreign_table) in rebuilt_names
                        and foreign_key not in removed
                    ):
                        removed.append(foreign_key)
                        signature = self.foreign_key_signature(foreign_key)
                        added.extend(
                            candidate
                            for candidate in diff.desired.foreign_keys
                            if self.foreign_key_signature(candidate) == signature
                            and candidate not in added
                        )
            remove_foreign_keys.extend(
                (diff.current, self._foreign_key_label(fk), RemoveForeignKey(diff.current, fk))
                for fk in removed
            )
            for foreign_key in added:
                add_later(diff.desired, foreign_key)

        if alter_constraints:
            remove_foreign_keys.extend(
                (table, self._foreign_key_label(fk), RemoveForeignKey(table, fk))
                for table in removed_tables
                for fk in table.foreign_keys
            )

        rebuild_changes: list[tuple[Table, str, Change]] = []
        for diff in rebuilt:
            embedded = [fk for fk in diff.desired.foreign_keys if embeddable(fk)]
            for foreign_key in diff.desired.foreign_keys:
                if foreign_key not in embedded:
                    add_later(diff.desired, foreign_key)
            rebuild_changes.append(
                (
                    diff.desired,
                    diff.desired.name,
                    RebuildTable(diff.current, diff.desired, embedded),
                ),
            )

        changes: list[Change] = []
        changes += self._sorted(remove_foreign_keys)
        changes += self._sorted(
            (diff.current, self._index_label(index), RemoveIndex(diff.current, index))
            for diff in altered
            for index in diff.removed_indices
        )
        changes += self._sorted(
            (diff.current, "", RemovePrimaryKey(diff.current))
            for diff in altered
            if diff.primary_key_changed and diff.current.primary_key_columns
        )
        changes += self._sorted(
            (diff.current, column.name, RemoveColumn(diff.current, column))
            for diff in altered
            for column in diff.removed_columns
        )
        changes += self._sorted(rebuild_changes)
        changes += self._sorted(
            (diff.desired, column.name, AddColumn(diff.desired, column))
            for diff in altered
            for column in diff.added_columns
        )
        changes += self._sorted(
            (diff.desired, desired.name, ModifyColumn(diff.desired, current, desired))
            for diff in altered
            for current, desired in diff.modified_columns
        )
        changes += self._sorted(
            (diff.desired, "", AddPrimaryKey(diff.desired))
            for diff in altered
            if diff.primary_key_changed and diff.desired.primary_key_columns
        )
        changes += self._sorted(
            (diff.desired, self._index_label(index), AddIndex(diff.desired, index))
            for diff in altered
            for index in diff.added_indices
        )
        changes += self._sorted(add_foreign_keys)

        removal_order = plan_creation(
            Database(current.name, removed_tables),
            case_sensitive=case_sensitive,
        )
        changes += [RemoveTable(table) for table in reversed(removal_order.tables)]

        creation_order = plan_creation(
            Database(desired.name, added_tables),
            case_sensitive=case_sensitive,
            forward_references=self.info.foreign_key_forward_references,
        )
        for table in creation_order.tables:
            embedded = [
                fk
                for fk in table.foreign_keys
                if embeddable(fk) and not creation_order.is_deferred(table, fk)
            ]
            changes.append(AddTable(table, embedded))
            for foreign_key in table.foreign_keys:
                if foreign_key not in embedded:
                    label = self._foreign_key_label(foreign_key)
                    late_foreign_keys.append((table, label, AddForeignKey(table, foreign_key)))
        changes += self._sorted(late_foreign_keys)

        logger.debug("Computed %d schema changes", len(changes))
        return changes
